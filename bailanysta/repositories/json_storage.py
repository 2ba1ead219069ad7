"""
File-backed persistence for users, posts, comments and reactions.

The whole application state is one JSON document::

    {"version": 2, "metadata": {...}, "users": {}, "posts": {},
     "comments": {}, "reactions": {}}

Reads go through an in-memory copy of that document that is kept until
clear_cache() (or an optional TTL). Every mutation works on a deep copy, writes
the complete document to ``<file>.tmp``, atomically replaces the data file and
only then swaps the cached copy, so a failed write leaves the cache as it was.
Before each write the on-disk file is copied to the backup file, unless it is
no longer valid JSON: a corrupt data file never overwrites the last good
backup. Restoring a backup is a manual step (restore_backup() or
scripts/restore_backup.py).
"""

from __future__ import annotations

import copy
import json
import logging
import os
import shutil
import threading
import time
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from bailanysta.core.config import get_settings
from bailanysta.domain.hashtags import extract_hashtags
from bailanysta.domain.models import Comment, Post, Reaction, User, utcnow
from bailanysta.domain.search import SORT_FIELDS, filter_posts_by_hashtag, paginate, sort_posts

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2
COLLECTIONS = ("users", "posts", "comments", "reactions")

FILE_NOT_FOUND = "STORAGE_FILE_NOT_FOUND"
CORRUPTED_DATA = "STORAGE_CORRUPTED_DATA"
VALIDATION_FAILED = "STORAGE_VALIDATION_FAILED"
WRITE_FAILED = "STORAGE_WRITE_FAILED"
BACKUP_FAILED = "STORAGE_BACKUP_FAILED"
MIGRATION_FAILED = "STORAGE_MIGRATION_FAILED"
POST_NOT_FOUND = "POST_NOT_FOUND"

POST_UPDATABLE_FIELDS = {"content", "mood", "hashtags"}
USER_UPDATABLE_FIELDS = {"name", "email", "bio", "preferences"}

M = TypeVar("M", bound=BaseModel)


class StorageError(Exception):
    """Raised for every storage failure; ``code`` is one of the STORAGE_* constants."""

    def __init__(self, message: str, code: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


def _now_iso() -> str:
    return utcnow().isoformat()


def _validation_details(exc: ValidationError) -> dict:
    return {"errors": json.loads(exc.json(include_url=False))}


def reaction_key(post_id: str, user_id: str) -> str:
    return f"{post_id}_{user_id}"


def empty_document() -> dict:
    now = _now_iso()
    return {
        "version": SCHEMA_VERSION,
        "users": {},
        "posts": {},
        "comments": {},
        "reactions": {},
        "metadata": {
            "createdAt": now,
            "lastUpdated": now,
            "totalPosts": 0,
            "totalUsers": 0,
            "totalComments": 0,
            "totalReactions": 0,
        },
    }


def refresh_metadata(document: dict) -> dict:
    metadata = document.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    now = _now_iso()
    metadata.setdefault("createdAt", now)
    metadata["lastUpdated"] = now
    metadata["totalPosts"] = len(document.get("posts", {}))
    metadata["totalUsers"] = len(document.get("users", {}))
    if document.get("version", 0) >= 2:
        metadata["totalComments"] = len(document.get("comments", {}))
        metadata["totalReactions"] = len(document.get("reactions", {}))
    document["metadata"] = metadata
    return metadata


def _collections_or_fail(document: dict) -> None:
    for name in COLLECTIONS:
        value = document.setdefault(name, {})
        if value is None:
            document[name] = {}
        elif not isinstance(value, dict):
            raise StorageError(
                f"Collection '{name}' must be an object",
                MIGRATION_FAILED,
                {"collection": name, "type": type(value).__name__},
            )


def _upgrade_legacy(document: dict) -> dict:
    """Documents written before versioning: add ``version`` and recomputed metadata."""
    _collections_or_fail(document)
    upgraded = {"version": 1}
    for name in COLLECTIONS:
        upgraded[name] = document[name]
    upgraded["metadata"] = {}
    refresh_metadata(upgraded)
    return upgraded


def _upgrade_v1(document: dict) -> dict:
    """v1 -> v2: re-derive hashtags and child counters, drop orphans, extend metadata."""
    _collections_or_fail(document)
    posts = document["posts"]
    orphans = 0
    for name in ("comments", "reactions"):
        records = document[name]
        for key in [k for k, rec in records.items() if not isinstance(rec, dict) or rec.get("postId") not in posts]:
            del records[key]
            orphans += 1
    # one heart per user and post, stored under its canonical key; the earliest wins
    rekeyed: dict = {}
    duplicates = 0
    for reaction in sorted(document["reactions"].values(), key=lambda r: str(r.get("createdAt") or "")):
        key = reaction_key(reaction.get("postId"), reaction.get("userId"))
        if key in rekeyed:
            duplicates += 1
            continue
        rekeyed[key] = reaction
    document["reactions"] = rekeyed
    for post_id, post in posts.items():
        if not isinstance(post, dict):
            raise StorageError("Post record must be an object", MIGRATION_FAILED, {"postId": post_id})
        post["hashtags"] = extract_hashtags(post.get("content"))
        post["reactionCount"] = sum(1 for r in document["reactions"].values() if r.get("postId") == post_id)
        post["commentCount"] = sum(1 for c in document["comments"].values() if c.get("postId") == post_id)
    if orphans:
        logger.warning("Dropped %d orphaned comment/reaction records during migration", orphans)
    if duplicates:
        logger.warning("Dropped %d duplicate reactions during migration", duplicates)
    document["version"] = 2
    refresh_metadata(document)
    return document


def migrate_document(document: dict) -> Tuple[dict, List[str]]:
    """
    Bring a parsed document up to SCHEMA_VERSION.

    Returns the (possibly new) document and the list of applied steps; an empty
    list means the document was already current and nothing needs to be written.
    """
    applied: List[str] = []
    version = document.get("version")
    if not version:
        document = _upgrade_legacy(document)
        applied.append("legacy->1")
        version = 1
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        raise StorageError("Unsupported document version", MIGRATION_FAILED, {"version": version})
    if version > SCHEMA_VERSION:
        raise StorageError(
            "Data file was written by a newer schema version",
            MIGRATION_FAILED,
            {"version": version, "supported": SCHEMA_VERSION},
        )
    if version == 1:
        document = _upgrade_v1(document)
        applied.append("1->2")
    return document, applied


class JsonStorage:
    """CRUD helpers over the single JSON document."""

    def __init__(
        self,
        data_file: Path | str,
        backup_file: Path | str | None = None,
        *,
        cache_ttl_seconds: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.data_file = Path(data_file)
        self.backup_file = (
            Path(backup_file)
            if backup_file
            else self.data_file.with_name(f"{self.data_file.stem}.backup{self.data_file.suffix}")
        )
        self.cache_ttl_seconds = max(0, int(cache_ttl_seconds or 0))
        self._lock = threading.RLock()
        self._cache: Optional[dict] = None
        self._cache_loaded_at = 0.0
        self._revision = 0
        self._clock = clock

    # -------------------------------------- cache --------------------------------------
    @property
    def revision(self) -> int:
        """Bumped whenever the cached document changes."""
        return self._revision

    def clear_cache(self) -> None:
        with self._lock:
            self._cache = None
            self._cache_loaded_at = 0.0

    def _cache_valid(self) -> bool:
        if self._cache is None:
            return False
        if self.cache_ttl_seconds <= 0:
            return True
        return (self._clock() - self._cache_loaded_at) < self.cache_ttl_seconds

    def _set_cache(self, document: dict) -> None:
        self._cache = document
        self._cache_loaded_at = self._clock()
        self._revision += 1

    # -------------------------------------- disk I/O --------------------------------------
    def load(self) -> dict:
        """Return the current document (cached). Callers must not mutate it."""
        with self._lock:
            if self._cache_valid():
                return self._cache
            return self._read_from_disk()

    def _read_from_disk(self) -> dict:
        try:
            raw = self.data_file.read_bytes()
        except FileNotFoundError:
            logger.info("Data file %s not found; creating an empty document", self.data_file)
            self._write(empty_document())
            return self._cache
        except OSError as exc:
            raise StorageError("Failed to read storage data", FILE_NOT_FOUND, {"originalError": str(exc)}) from exc
        try:
            parsed = json.loads(raw)
        except ValueError as exc:
            logger.error("Data file %s is corrupted: %s", self.data_file, exc)
            raise StorageError(
                "Data file is corrupted and cannot be parsed",
                CORRUPTED_DATA,
                {"originalError": str(exc), "backupFile": str(self.backup_file)},
            ) from exc
        if not isinstance(parsed, dict):
            raise StorageError("Invalid data structure", VALIDATION_FAILED, {"type": type(parsed).__name__})

        document, applied = migrate_document(parsed)
        if applied:
            logger.info("Migrated %s to schema version %d (%s)", self.data_file, SCHEMA_VERSION, ", ".join(applied))
            self._write(document)
        else:
            self._set_cache(document)
        logger.debug("Loaded %s (revision %d)", self.data_file, self._revision)
        return self._cache

    def _copy_to_backup(self) -> bool:
        """Copy the data file over the backup if it still parses; False when nothing was copied."""
        if not self.data_file.exists():
            return False
        try:
            current = json.loads(self.data_file.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Data file %s is not valid JSON; keeping previous backup %s", self.data_file, self.backup_file)
            return False
        if not isinstance(current, dict):
            logger.warning("Data file %s is not a JSON object; keeping previous backup", self.data_file)
            return False
        self.backup_file.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(self.data_file, self.backup_file)
        return True

    def _write(self, document: dict) -> None:
        refresh_metadata(document)
        tmp_file = self.data_file.with_name(self.data_file.name + ".tmp")
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            self._copy_to_backup()
            tmp_file.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_file, self.data_file)
        except OSError as exc:
            logger.error("Failed to write %s: %s", self.data_file, exc)
            try:
                tmp_file.unlink()
            except OSError:
                pass
            raise StorageError("Failed to write storage data", WRITE_FAILED, {"originalError": str(exc)}) from exc
        self._set_cache(document)

    def _mutate(self, change: Callable[[dict], Any]) -> Any:
        """Apply ``change`` to a copy of the document and persist it when it returns normally."""
        with self._lock:
            document = copy.deepcopy(self.load())
            result = change(document)
            self._write(document)
            return result

    # -------------------------------------- parsing --------------------------------------
    @staticmethod
    def _parse(model: Type[M], raw: Any, label: str) -> M:
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            raise StorageError(f"{label} validation failed", VALIDATION_FAILED, _validation_details(exc)) from exc

    def _all(self, collection: str, model: Type[M], label: str) -> List[M]:
        return [self._parse(model, raw, label) for raw in self.load()[collection].values()]

    # -------------------------------------- posts --------------------------------------
    def create_post(self, content: str, author_id: str, author_name: str, mood: Optional[str] = None) -> Post:
        text = (content or "").strip()
        post = self._parse(
            Post,
            {
                "id": str(uuid.uuid4()),
                "content": text,
                "author_id": author_id,
                "author_name": author_name,
                "mood": mood,
                "hashtags": extract_hashtags(text),
            },
            "Post",
        )

        def change(document: dict) -> None:
            document["posts"][post.id] = post.to_document()

        self._mutate(change)
        logger.debug("Created post %s by %s", post.id, author_id)
        return post

    def all_posts(self) -> List[Post]:
        return self._all("posts", Post, "Post")

    def get_posts(self, limit: Optional[int] = None, offset: int = 0, sort_by: str = "createdAt") -> List[Post]:
        if sort_by not in SORT_FIELDS:
            raise StorageError("Unsupported sort field", VALIDATION_FAILED, {"sortBy": sort_by})
        return paginate(sort_posts(self.all_posts(), sort_by), limit, offset)

    def get_post_by_id(self, post_id: str) -> Optional[Post]:
        raw = self.load()["posts"].get(post_id)
        return self._parse(Post, raw, "Post") if raw else None

    def get_posts_by_hashtag(
        self, hashtag: str, limit: Optional[int] = None, offset: int = 0, sort_by: str = "createdAt"
    ) -> List[Post]:
        if sort_by not in SORT_FIELDS:
            raise StorageError("Unsupported sort field", VALIDATION_FAILED, {"sortBy": sort_by})
        matching = filter_posts_by_hashtag(self.all_posts(), hashtag)
        return paginate(sort_posts(matching, sort_by), limit, offset)

    def update_post(self, post_id: str, updates: dict) -> Optional[Post]:
        """
        Apply ``updates`` (content, mood, hashtags) to a post. ``id`` and
        ``createdAt`` never change; hashtags must match the resulting content.
        Returns None when the post does not exist.
        """
        unknown = set(updates) - POST_UPDATABLE_FIELDS
        if unknown:
            raise StorageError("Post update contains read-only fields", VALIDATION_FAILED, {"fields": sorted(unknown)})

        def change(document: dict) -> Optional[Post]:
            raw = document["posts"].get(post_id)
            if not raw:
                return None
            data = self._parse(Post, raw, "Post").model_dump()
            data.update(updates)
            data["content"] = (data.get("content") or "").strip()
            expected = extract_hashtags(data["content"])
            if "hashtags" in updates and list(updates["hashtags"] or []) != expected:
                raise StorageError(
                    "Hashtags do not match post content",
                    VALIDATION_FAILED,
                    {"expected": expected, "received": updates["hashtags"]},
                )
            data["hashtags"] = expected
            data["updated_at"] = utcnow()
            post = self._parse(Post, data, "Post update")
            document["posts"][post_id] = post.to_document()
            return post

        with self._lock:
            if post_id not in self.load()["posts"]:
                return None
            return self._mutate(change)

    def delete_post(self, post_id: str) -> bool:
        """Remove a post together with its comments and reactions."""
        with self._lock:
            if post_id not in self.load()["posts"]:
                return False

            def change(document: dict) -> Tuple[int, int]:
                comments = [k for k, c in document["comments"].items() if c.get("postId") == post_id]
                reactions = [k for k, r in document["reactions"].items() if r.get("postId") == post_id]
                for key in comments:
                    del document["comments"][key]
                for key in reactions:
                    del document["reactions"][key]
                del document["posts"][post_id]
                return len(comments), len(reactions)

            removed_comments, removed_reactions = self._mutate(change)
        logger.info(
            "Deleted post %s with %d comments and %d reactions", post_id, removed_comments, removed_reactions
        )
        return True

    def get_user_posts(self, user_id: str, limit: Optional[int] = None, offset: int = 0) -> List[Post]:
        own = [post for post in self.all_posts() if post.author_id == user_id]
        return paginate(sort_posts(own, "createdAt"), limit, offset)

    # -------------------------------------- users --------------------------------------
    def create_user(
        self,
        name: str,
        email: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> User:
        user = self._parse(
            User,
            {
                "id": user_id or str(uuid.uuid4()),
                "name": (name or "").strip(),
                "email": (email or "").strip() or None,
                "bio": bio,
            },
            "User",
        )

        def change(document: dict) -> None:
            if user.id in document["users"]:
                raise StorageError("User already exists", VALIDATION_FAILED, {"userId": user.id})
            document["users"][user.id] = user.to_document()

        self._mutate(change)
        return user

    def list_users(self) -> List[User]:
        return self._all("users", User, "User")

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        raw = self.load()["users"].get(user_id)
        return self._parse(User, raw, "User") if raw else None

    def update_user(self, user_id: str, updates: dict) -> Optional[User]:
        unknown = set(updates) - USER_UPDATABLE_FIELDS
        if unknown:
            raise StorageError("User update contains read-only fields", VALIDATION_FAILED, {"fields": sorted(unknown)})

        def change(document: dict) -> User:
            data = self._parse(User, document["users"][user_id], "User").model_dump()
            data.update(updates)
            data["updated_at"] = utcnow()
            user = self._parse(User, data, "User update")
            document["users"][user_id] = user.to_document()
            return user

        with self._lock:
            if user_id not in self.load()["users"]:
                return None
            return self._mutate(change)

    def delete_user(self, user_id: str) -> bool:
        with self._lock:
            if user_id not in self.load()["users"]:
                return False
            self._mutate(lambda document: document["users"].pop(user_id))
        return True

    # -------------------------------------- reactions --------------------------------------
    def toggle_reaction(self, post_id: str, user_id: str) -> Tuple[bool, int]:
        """Add the user's heart, or remove it if present. Returns (is_liked, reaction_count)."""
        key = reaction_key(post_id, user_id)

        def change(document: dict) -> Tuple[bool, int]:
            post = document["posts"].get(post_id)
            if not post:
                raise StorageError("Post not found", POST_NOT_FOUND, {"postId": post_id})
            reactions = document["reactions"]
            if key in reactions:
                del reactions[key]
                liked = False
            else:
                reaction = self._parse(
                    Reaction, {"id": str(uuid.uuid4()), "post_id": post_id, "user_id": user_id}, "Reaction"
                )
                reactions[key] = reaction.to_document()
                liked = True
            post["reactionCount"] = sum(1 for r in reactions.values() if r.get("postId") == post_id)
            return liked, post["reactionCount"]

        return self._mutate(change)

    def get_user_reaction(self, post_id: str, user_id: str) -> Optional[Reaction]:
        raw = self.load()["reactions"].get(reaction_key(post_id, user_id))
        return self._parse(Reaction, raw, "Reaction") if raw else None

    def get_post_reactions(self, post_id: str) -> List[Reaction]:
        reactions = [r for r in self._all("reactions", Reaction, "Reaction") if r.post_id == post_id]
        return sorted(reactions, key=lambda r: r.created_at)

    # -------------------------------------- comments --------------------------------------
    def create_comment(self, post_id: str, content: str, author_id: str, author_name: str) -> Comment:
        comment = self._parse(
            Comment,
            {
                "id": str(uuid.uuid4()),
                "content": (content or "").strip(),
                "post_id": post_id,
                "author_id": author_id,
                "author_name": author_name,
            },
            "Comment",
        )

        def change(document: dict) -> None:
            post = document["posts"].get(post_id)
            if not post:
                raise StorageError("Post not found", POST_NOT_FOUND, {"postId": post_id})
            document["comments"][comment.id] = comment.to_document()
            post["commentCount"] = sum(1 for c in document["comments"].values() if c.get("postId") == post_id)

        self._mutate(change)
        return comment

    def get_comment_by_id(self, comment_id: str) -> Optional[Comment]:
        raw = self.load()["comments"].get(comment_id)
        return self._parse(Comment, raw, "Comment") if raw else None

    def get_comments_by_post_id(self, post_id: str) -> List[Comment]:
        comments = [c for c in self._all("comments", Comment, "Comment") if c.post_id == post_id]
        return sorted(comments, key=lambda c: c.created_at)

    def delete_comment(self, comment_id: str) -> bool:
        def change(document: dict) -> None:
            comment = document["comments"].pop(comment_id)
            post = document["posts"].get(comment.get("postId"))
            if post:
                remaining = sum(1 for c in document["comments"].values() if c.get("postId") == comment.get("postId"))
                post["commentCount"] = max(0, remaining)

        with self._lock:
            if comment_id not in self.load()["comments"]:
                return False
            self._mutate(change)
        return True

    # -------------------------------------- utilities --------------------------------------
    def backup(self) -> Path:
        """Copy the current data file to the backup file and return the backup path."""
        with self._lock:
            if not self.data_file.exists():
                if self._cache_valid():
                    logger.warning("Data file %s is missing; rewriting it from the cached document", self.data_file)
                    self._write(copy.deepcopy(self._cache))
                else:
                    self.load()
            try:
                copied = self._copy_to_backup()
            except OSError as exc:
                raise StorageError("Failed to create backup", BACKUP_FAILED, {"originalError": str(exc)}) from exc
            if not copied:
                raise StorageError(
                    "Data file is corrupted; the previous backup was kept",
                    BACKUP_FAILED,
                    {"backupFile": str(self.backup_file)},
                )
        logger.info("Backed up %s to %s", self.data_file, self.backup_file)
        return self.backup_file

    def restore_backup(self) -> Path:
        """Manual recovery: copy the backup over the data file and drop the cache."""
        with self._lock:
            try:
                parsed = json.loads(self.backup_file.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise StorageError("No backup file to restore", FILE_NOT_FOUND, {"backupFile": str(self.backup_file)}) from exc
            except ValueError as exc:
                raise StorageError("Backup file is corrupted", CORRUPTED_DATA, {"originalError": str(exc)}) from exc
            except OSError as exc:
                raise StorageError("Failed to read backup file", FILE_NOT_FOUND, {"originalError": str(exc)}) from exc
            if not isinstance(parsed, dict):
                raise StorageError("Invalid backup structure", VALIDATION_FAILED, {"type": type(parsed).__name__})
            try:
                self.data_file.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(self.backup_file, self.data_file)
            except OSError as exc:
                raise StorageError("Failed to restore backup", WRITE_FAILED, {"originalError": str(exc)}) from exc
            self.clear_cache()
        logger.warning("Restored %s from backup %s", self.data_file, self.backup_file)
        return self.data_file

    def migrate(self) -> bool:
        """Make sure the stored document is at SCHEMA_VERSION (load() already does this)."""
        with self._lock:
            document = copy.deepcopy(self.load())
            try:
                document, applied = migrate_document(document)
            except StorageError:
                raise
            except Exception as exc:
                raise StorageError("Migration failed", MIGRATION_FAILED, {"originalError": str(exc)}) from exc
            if applied:
                self._write(document)
        return True

    def find_integrity_issues(self) -> List[str]:
        """Human-readable list of broken invariants; empty when the document is consistent."""
        document = self.load()
        issues: List[str] = []
        parsed: dict[str, dict[str, Any]] = {}
        for name, model in (("users", User), ("posts", Post), ("comments", Comment), ("reactions", Reaction)):
            parsed[name] = {}
            for key, raw in document[name].items():
                try:
                    parsed[name][key] = model.model_validate(raw)
                except ValidationError as exc:
                    issues.append(f"{name}/{key}: invalid record ({exc.error_count()} errors)")

        posts = parsed["posts"]
        for key, reaction in parsed["reactions"].items():
            if key != reaction_key(reaction.post_id, reaction.user_id):
                issues.append(f"reactions/{key}: key does not match post/user")
            if reaction.post_id not in document["posts"]:
                issues.append(f"reactions/{key}: references missing post {reaction.post_id}")
        for key, comment in parsed["comments"].items():
            if comment.post_id not in document["posts"]:
                issues.append(f"comments/{key}: references missing post {comment.post_id}")
        for post_id, post in posts.items():
            if post.hashtags != extract_hashtags(post.content):
                issues.append(f"posts/{post_id}: hashtags out of sync with content")
            reactions = sum(1 for r in parsed["reactions"].values() if r.post_id == post_id)
            comments = sum(1 for c in parsed["comments"].values() if c.post_id == post_id)
            if post.reaction_count != reactions:
                issues.append(f"posts/{post_id}: reactionCount {post.reaction_count} != {reactions}")
            if post.comment_count != comments:
                issues.append(f"posts/{post_id}: commentCount {post.comment_count} != {comments}")
        return issues

    def validate_integrity(self) -> bool:
        try:
            issues = self.find_integrity_issues()
        except StorageError as exc:
            logger.warning("Integrity check could not load data: %s (%s)", exc.message, exc.code)
            return False
        for issue in issues:
            logger.warning("Integrity issue: %s", issue)
        return not issues

    def get_stats(self) -> dict:
        document = self.load()
        return {
            "totalPosts": len(document["posts"]),
            "totalUsers": len(document["users"]),
            "totalComments": len(document["comments"]),
            "totalReactions": len(document["reactions"]),
        }


@lru_cache
def get_storage() -> JsonStorage:
    """Process-wide storage built from Settings; reset with get_storage.cache_clear()."""
    settings = get_settings()
    return JsonStorage(
        settings.data_file,
        settings.backup_file,
        cache_ttl_seconds=settings.storage_cache_ttl_seconds,
    )
