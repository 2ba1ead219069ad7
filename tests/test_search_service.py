from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bailanysta.domain.models import Post  # noqa: E402
from bailanysta.domain.search import rank_posts, score_post, suggest  # noqa: E402
from bailanysta.repositories.json_storage import JsonStorage  # noqa: E402
from bailanysta.services.search_service import SearchService  # noqa: E402

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _post(post_id: str, content: str, author: str = "Alice", hashtags=None) -> Post:
    return Post(
        id=post_id,
        content=content,
        author_id=f"id-{author}",
        author_name=author,
        created_at=NOW,
        updated_at=NOW,
        hashtags=hashtags or [],
    )


@pytest.fixture()
def storage(tmp_path):
    return JsonStorage(tmp_path / "bailanysta.json", tmp_path / "bailanysta.backup.json")


def test_score_post_content_match():
    post = _post("p1", "python is great")
    # 10 match + 5 word boundary + 8 prefix + 20 phrase + 5 recency
    assert score_post(post, ["python"], "python", NOW) == 48.0
    assert score_post(post, ["java"], "java", NOW) == 0.0
    assert score_post(post, [], "", NOW) == 0.0


def test_rank_posts_prefers_content_over_author():
    by_content = _post("content", "I love python", author="Bob")
    by_author = _post("author", "hello world", author="python")
    unrelated = _post("none", "nothing here", author="Carol")

    ranked = rank_posts([by_author, unrelated, by_content], "python", NOW)

    assert [p.id for p in ranked] == ["content", "author"]


def test_suggest_lists_hashtags_before_authors():
    posts = [
        _post("p1", "#python", author="Pyotr", hashtags=["python"]),
        _post("p2", "#pytest", author="Alice", hashtags=["pytest"]),
    ]

    assert suggest(posts, "py", 5) == [
        {"type": "hashtag", "value": "#python"},
        {"type": "hashtag", "value": "#pytest"},
        {"type": "user", "value": "Pyotr"},
    ]
    assert suggest(posts, "", 5) == []


def test_search_posts_uses_cache_until_storage_changes(storage):
    svc = SearchService(storage)
    first = storage.create_post("python tips #python", "u1", "Alice")
    storage.create_post("cooking dinner", "u1", "Alice")

    assert [p.id for p in svc.search_posts("Python")] == [first.id]
    assert [p.id for p in svc.search_posts("python")] == [first.id]
    assert svc.get_cache_stats()["hits"] == 1

    second = storage.create_post("more python", "u2", "Bob")
    ids = [p.id for p in svc.search_posts("python")]
    assert set(ids) == {first.id, second.id}
    assert svc.get_cache_stats()["misses"] == 2

    assert svc.search_posts("   ") == []
    assert svc.search_posts("python", limit=1, offset=5) == []


def test_cache_evicts_oldest_and_expires(storage):
    clock = [0.0]
    svc = SearchService(storage, cache_ttl_seconds=10, max_entries=2, clock=lambda: clock[0])
    storage.create_post("alpha beta gamma", "u1", "Alice")

    svc.search_posts("alpha")
    svc.search_posts("beta")
    svc.search_posts("gamma")
    assert svc.get_cache_stats()["size"] == 2

    svc.search_posts("gamma")
    assert svc.get_cache_stats()["hits"] == 1

    clock[0] = 11.0
    svc.search_posts("gamma")
    assert svc.get_cache_stats()["hits"] == 1

    svc.clear_cache()
    assert svc.get_cache_stats()["size"] == 0


def test_popular_hashtags_and_users(storage):
    svc = SearchService(storage)
    storage.create_post("#python #rust", "u1", "Alice")
    storage.create_post("#python again", "u1", "Alice")
    storage.create_user("Alice", "alice@example.com", user_id="u1")
    storage.create_user("Bob", "bob@example.org", user_id="u2")

    ranked = svc.get_popular_hashtags(5)
    assert [item.hashtag for item in ranked] == ["python", "rust"]
    assert ranked[0].count == 2

    assert [u.id for u in svc.search_users("ALI")] == ["u1"]
    assert [u.id for u in svc.search_users("example.org")] == ["u2"]
    assert svc.search_users("") == []

    assert svc.get_search_suggestions("py") == [{"type": "hashtag", "value": "#python"}]


def test_search_with_explicit_now_bypasses_cache(storage):
    svc = SearchService(storage)
    post = storage.create_post("python tips", "u1", "Alice")
    svc.search_posts("python")

    later = datetime.now(timezone.utc) + timedelta(days=30)
    assert [p.id for p in svc.search_posts("python", now=later)] == [post.id]

    stats = svc.get_cache_stats()
    assert stats["hits"] == 0
    assert stats["misses"] == 1
