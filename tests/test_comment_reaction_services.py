from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bailanysta.repositories.json_storage import JsonStorage, StorageError  # noqa: E402
from bailanysta.services.comment_service import CommentService  # noqa: E402
from bailanysta.services.errors import BadRequestError, ForbiddenError, NotFoundError  # noqa: E402
from bailanysta.services.reaction_service import ReactionService  # noqa: E402


@pytest.fixture()
def storage(tmp_path):
    return JsonStorage(tmp_path / "bailanysta.json", tmp_path / "bailanysta.backup.json")


@pytest.fixture()
def post(storage):
    return storage.create_post("discuss #this", "u1", "Alice")


def test_create_and_list_comments(storage, post):
    svc = CommentService(storage)
    first = svc.create_comment(post.id, "first!", "u2", "Bob")
    second = svc.create_comment(post.id, "second", "u3", "Carol")

    assert [c.id for c in svc.list_comments(post.id)] == [first.id, second.id]
    assert storage.get_post_by_id(post.id).comment_count == 2


@pytest.mark.parametrize("content", ["", "  ", "x" * 141])
def test_create_comment_rejects_bad_content(storage, post, content):
    with pytest.raises(BadRequestError):
        CommentService(storage).create_comment(post.id, content, "u2", "Bob")


def test_comment_on_missing_post(storage):
    svc = CommentService(storage)
    with pytest.raises(NotFoundError):
        svc.create_comment("missing", "hello", "u2", "Bob")
    with pytest.raises(NotFoundError):
        svc.list_comments("missing")
    with pytest.raises(BadRequestError):
        svc.create_comment("", "hello", "u2", "Bob")


def test_only_comment_author_can_delete(storage, post):
    svc = CommentService(storage)
    comment = svc.create_comment(post.id, "mine", "u2", "Bob")

    with pytest.raises(ForbiddenError):
        svc.delete_comment(comment.id, "u1")
    assert svc.delete_comment(comment.id, "u2") is True
    assert storage.get_post_by_id(post.id).comment_count == 0
    with pytest.raises(NotFoundError):
        svc.delete_comment(comment.id, "u2")


def test_toggle_reaction(storage, post):
    svc = ReactionService(storage)

    result = svc.toggle_reaction(post.id, "u2")
    assert result.to_dict() == {"isLiked": True, "reactionCount": 1}
    assert svc.has_user_reacted(post.id, "u2") is True
    assert svc.get_user_reaction(post.id, "u2").type == "heart"
    assert len(svc.get_post_reactions(post.id)) == 1

    result = svc.toggle_reaction(post.id, "u2")
    assert (result.is_liked, result.reaction_count) == (False, 0)
    assert svc.has_user_reacted(post.id, "u2") is False


def test_reaction_on_missing_post(storage):
    svc = ReactionService(storage)
    with pytest.raises(NotFoundError):
        svc.toggle_reaction("missing", "u2")
    with pytest.raises(NotFoundError):
        svc.get_post_reactions("missing")
    with pytest.raises(BadRequestError):
        svc.toggle_reaction("", "u2")


def test_has_user_reacted_is_false_when_lookup_fails(storage, post, monkeypatch):
    svc = ReactionService(storage)
    svc.toggle_reaction(post.id, "u2")

    def broken(*args, **kwargs):
        raise StorageError("unreadable", "STORAGE_CORRUPTED_DATA")

    monkeypatch.setattr(storage, "get_user_reaction", broken)
    assert svc.has_user_reacted(post.id, "u2") is False
