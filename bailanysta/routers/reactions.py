from __future__ import annotations

from fastapi import APIRouter, Request

from bailanysta.schemas import ToggleReactionRequest
from bailanysta.services.reaction_service import ReactionService
from bailanysta.services.session_service import current_user

router = APIRouter(prefix="/reactions", tags=["reactions"])


def _get_reaction_service(request: Request) -> ReactionService:
    svc = getattr(getattr(request.app, "state", None), "reaction_service", None)
    if not svc:
        raise RuntimeError("ReactionService not configured")
    return svc


@router.post("/toggle")
def toggle_reaction(body: ToggleReactionRequest, request: Request):
    user = current_user(request)
    return _get_reaction_service(request).toggle_reaction(body.post_id, user.id).to_dict()


@router.get("/{post_id}")
def post_reactions(post_id: str, request: Request):
    return [reaction.to_document() for reaction in _get_reaction_service(request).get_post_reactions(post_id)]


@router.get("/{post_id}/mine")
def my_reaction(post_id: str, request: Request):
    reaction = _get_reaction_service(request).get_user_reaction(post_id, current_user(request).id)
    return reaction.to_document() if reaction else None


@router.get("/{post_id}/has-reacted")
def has_reacted(post_id: str, request: Request):
    return _get_reaction_service(request).has_user_reacted(post_id, current_user(request).id)
