"""
Schema migration, backup and recovery behaviour of the JSON storage.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bailanysta.repositories.json_storage import (  # noqa: E402
    BACKUP_FAILED,
    CORRUPTED_DATA,
    FILE_NOT_FOUND,
    MIGRATION_FAILED,
    SCHEMA_VERSION,
    VALIDATION_FAILED,
    JsonStorage,
    StorageError,
    migrate_document,
)

TS = "2024-03-01T12:00:00Z"


def _legacy_document() -> dict:
    return {
        "users": {"u1": {"id": "u1", "name": "Alice", "createdAt": TS, "updatedAt": TS}},
        "posts": {
            "p1": {
                "id": "p1",
                "content": "Hi #Tag and #tag #Other",
                "authorId": "u1",
                "authorName": "Alice",
                "createdAt": TS,
                "updatedAt": TS,
                "hashtags": [],
                "reactionCount": 3,
                "commentCount": 0,
            }
        },
        "reactions": {
            "p1_u2": {"id": "r1", "type": "heart", "postId": "p1", "userId": "u2", "createdAt": TS},
        },
    }


def _paths(tmp_path):
    return tmp_path / "bailanysta.json", tmp_path / "bailanysta.backup.json"


def test_legacy_document_is_upgraded_once(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    data_file.write_text(json.dumps(_legacy_document()), encoding="utf-8")

    storage = JsonStorage(data_file, backup_file)
    document = storage.load()

    assert document["version"] == SCHEMA_VERSION
    assert document["comments"] == {}
    post = storage.get_post_by_id("p1")
    assert post.hashtags == ["tag", "other"]
    assert post.reaction_count == 1
    assert document["metadata"]["totalReactions"] == 1

    on_disk = data_file.read_text(encoding="utf-8")
    assert json.loads(on_disk)["version"] == SCHEMA_VERSION
    # the pre-migration file was kept as the backup
    assert "version" not in json.loads(backup_file.read_text(encoding="utf-8"))

    again = JsonStorage(data_file, backup_file)
    again.load()
    assert data_file.read_text(encoding="utf-8") == on_disk
    assert again.validate_integrity() is True


def test_v1_migration_drops_orphans_and_recomputes_counts():
    document = _legacy_document()
    document["version"] = 1
    document["comments"] = {
        "c1": {"id": "c1", "content": "ok", "postId": "p1", "authorId": "u2", "authorName": "Bob", "createdAt": TS},
        "c2": {"id": "c2", "content": "lost", "postId": "gone", "authorId": "u2", "authorName": "Bob", "createdAt": TS},
    }

    migrated, applied = migrate_document(document)

    assert applied == ["1->2"]
    assert list(migrated["comments"]) == ["c1"]
    assert migrated["posts"]["p1"]["commentCount"] == 1
    assert migrated["metadata"]["totalComments"] == 1

    current, applied = migrate_document(migrated)
    assert applied == []
    assert current is migrated


def test_newer_version_is_rejected(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    data_file.write_text(json.dumps({"version": SCHEMA_VERSION + 1, "posts": {}}), encoding="utf-8")

    with pytest.raises(StorageError) as exc:
        JsonStorage(data_file, backup_file).load()
    assert exc.value.code == MIGRATION_FAILED


def test_non_object_document_is_rejected(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    data_file.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(StorageError) as exc:
        JsonStorage(data_file, backup_file).load()
    assert exc.value.code == VALIDATION_FAILED


def test_corrupt_file_keeps_last_backup(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    storage = JsonStorage(data_file, backup_file)
    storage.create_post("first", "u1", "Alice")
    storage.backup()
    good_backup = backup_file.read_text(encoding="utf-8")

    data_file.write_text("{not json", encoding="utf-8")
    storage.clear_cache()

    with pytest.raises(StorageError) as exc:
        storage.load()
    assert exc.value.code == CORRUPTED_DATA
    with pytest.raises(StorageError):
        storage.create_post("second", "u1", "Alice")
    with pytest.raises(StorageError) as exc:
        storage.backup()
    assert exc.value.code == BACKUP_FAILED

    assert backup_file.read_text(encoding="utf-8") == good_backup


def test_write_over_corrupt_file_does_not_touch_backup(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    storage = JsonStorage(data_file, backup_file)
    storage.create_post("first", "u1", "Alice")
    storage.create_post("second", "u1", "Alice")
    good_backup = backup_file.read_text(encoding="utf-8")

    # corrupted behind the cache's back; the next write must not back it up
    data_file.write_text("garbage", encoding="utf-8")
    storage.create_post("third", "u1", "Alice")

    assert backup_file.read_text(encoding="utf-8") == good_backup
    assert len(json.loads(data_file.read_text(encoding="utf-8"))["posts"]) == 3


def test_backup_and_manual_restore(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    storage = JsonStorage(data_file, backup_file)
    kept = storage.create_post("kept", "u1", "Alice")

    assert storage.backup() == backup_file
    storage.create_post("lost", "u1", "Alice")
    assert len(storage.get_posts()) == 2

    assert storage.restore_backup() == data_file
    assert [p.id for p in storage.get_posts()] == [kept.id]


def test_restore_without_backup(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    storage = JsonStorage(data_file, backup_file)

    with pytest.raises(StorageError) as exc:
        storage.restore_backup()
    assert exc.value.code == FILE_NOT_FOUND

    backup_file.write_text("{oops", encoding="utf-8")
    with pytest.raises(StorageError) as exc:
        storage.restore_backup()
    assert exc.value.code == CORRUPTED_DATA


def test_migrate_is_idempotent(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    storage = JsonStorage(data_file, backup_file)
    storage.create_post("hello", "u1", "Alice")
    revision = storage.revision

    assert storage.migrate() is True
    assert storage.revision == revision


def test_default_backup_path_is_sibling(tmp_path):
    storage = JsonStorage(tmp_path / "bailanysta.json")
    assert storage.backup_file == tmp_path / "bailanysta.backup.json"


def test_v1_migration_rekeys_reactions_and_drops_duplicates(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    document = _legacy_document()
    document["version"] = 1
    document["reactions"] = {
        "r2": {"id": "r2", "type": "heart", "postId": "p1", "userId": "u2", "createdAt": "2024-03-02T12:00:00Z"},
        "r1": {"id": "r1", "type": "heart", "postId": "p1", "userId": "u2", "createdAt": TS},
    }
    data_file.write_text(json.dumps(document), encoding="utf-8")

    storage = JsonStorage(data_file, backup_file)
    reactions = storage.load()["reactions"]

    assert list(reactions) == ["p1_u2"]
    assert reactions["p1_u2"]["id"] == "r1"
    assert storage.get_post_by_id("p1").reaction_count == 1
    assert storage.find_integrity_issues() == []

    assert storage.toggle_reaction("p1", "u2") == (False, 0)
    assert storage.get_post_reactions("p1") == []


def test_backup_recreates_missing_data_file_from_cache(tmp_path):
    data_file, backup_file = _paths(tmp_path)
    storage = JsonStorage(data_file, backup_file)
    post = storage.create_post("kept", "u1", "Alice")
    data_file.unlink()

    assert storage.backup() == backup_file
    assert post.id in json.loads(backup_file.read_text(encoding="utf-8"))["posts"]
    assert post.id in json.loads(data_file.read_text(encoding="utf-8"))["posts"]
