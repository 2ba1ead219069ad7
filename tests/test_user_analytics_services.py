from __future__ import annotations

import logging
import re
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bailanysta.repositories.json_storage import JsonStorage  # noqa: E402
from bailanysta.services.analytics_service import AnalyticsService  # noqa: E402
from bailanysta.services.errors import BadRequestError, NotFoundError  # noqa: E402
from bailanysta.services.user_service import UserService  # noqa: E402


@pytest.fixture()
def storage(tmp_path):
    return JsonStorage(tmp_path / "bailanysta.json", tmp_path / "bailanysta.backup.json")


def test_ensure_user_creates_once(storage):
    svc = UserService(storage)
    created = svc.ensure_user("mock-user-id", "Test User")
    again = svc.ensure_user("mock-user-id", "Someone Else")

    assert again.id == created.id
    assert again.name == "Test User"
    assert len(storage.list_users()) == 1


def test_profile_counts_posts(storage):
    svc = UserService(storage)
    svc.ensure_user("u1", "Alice")
    storage.create_post("one", "u1", "Alice")
    storage.create_post("two", "u1", "Alice")
    storage.create_post("other", "u2", "Bob")

    profile = svc.get_user_profile("u1")
    assert profile["postCount"] == 2
    assert profile["preferences"] == {"theme": "system", "language": "en"}
    assert len(svc.get_user_posts("u1", limit=1)) == 1

    with pytest.raises(NotFoundError):
        svc.get_user_profile("ghost")
    with pytest.raises(NotFoundError):
        svc.get_user_posts("ghost")


def test_update_user_merges_preferences(storage):
    svc = UserService(storage)
    svc.ensure_user("u1", "Alice")

    updated = svc.update_user("u1", {"bio": "hello", "preferences": {"theme": "dark"}})
    assert updated.bio == "hello"
    assert updated.preferences.theme == "dark"
    assert updated.preferences.language == "en"

    updated = svc.update_user("u1", {"preferences": {"language": "ru"}})
    assert updated.preferences.theme == "dark"
    assert updated.preferences.language == "ru"


def test_update_user_validation(storage):
    svc = UserService(storage)
    svc.ensure_user("u1", "Alice")

    with pytest.raises(BadRequestError):
        svc.update_user("u1", {"name": "  "})
    with pytest.raises(BadRequestError):
        svc.update_user("u1", {"bio": "x" * 201})
    with pytest.raises(BadRequestError):
        svc.update_user("u1", {"email": "not-an-email"})
    with pytest.raises(NotFoundError):
        svc.update_user("ghost", {"name": "Ghost"})


def test_record_event(caplog):
    svc = AnalyticsService()
    with caplog.at_level(logging.INFO, logger="bailanysta.services.analytics_service"):
        result = svc.record_event("page_view", '{"path": "/feed"}', session_id="s1")

    assert re.fullmatch(r"evt_\d+_[a-z0-9]{9}", result["eventId"])
    assert result["timestamp"]
    assert "page_view" in caplog.text
    assert '"path": "/feed"' in caplog.text


def test_record_event_keeps_given_timestamp():
    result = AnalyticsService().record_event("click", "plain text", timestamp="2024-01-01T00:00:00Z")
    assert result["timestamp"] == "2024-01-01T00:00:00Z"


@pytest.mark.parametrize("name, data", [(None, "x"), ("", "x"), ("click", None), ("click", "")])
def test_record_event_requires_name_and_data(name, data):
    with pytest.raises(BadRequestError):
        AnalyticsService().record_event(name, data)
