#!/usr/bin/env python3
"""
Copy the Bailanysta data file to its backup file, optionally checking integrity first.

Usage:
  python scripts/backup_data.py [--data-file data/bailanysta.json] [--backup-file ...] [--check]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bailanysta.core.config import get_settings
from bailanysta.core.log import configure_logging
from bailanysta.repositories.json_storage import JsonStorage


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Back up the Bailanysta JSON document")
    ap.add_argument("--data-file", default=str(settings.data_file), help="Data file (default: DATA_FILE)")
    ap.add_argument("--backup-file", default=str(settings.backup_file), help="Backup destination (default: BACKUP_FILE)")
    ap.add_argument("--check", action="store_true", help="Refuse to back up when integrity issues are found")
    args = ap.parse_args()

    configure_logging(settings.log_level)
    storage = JsonStorage(args.data_file, args.backup_file)

    if args.check:
        issues = storage.find_integrity_issues()
        if issues:
            for issue in issues:
                sys.stderr.write(f"  {issue}\n")
            raise SystemExit(f"{len(issues)} integrity issue(s) found; backup skipped")

    target = storage.backup()
    stats = storage.get_stats()
    print("OK: backup written")
    print(f"  Backup: {target}")
    print(
        f"  Posts: {stats['totalPosts']}  Users: {stats['totalUsers']}  "
        f"Comments: {stats['totalComments']}  Reactions: {stats['totalReactions']}"
    )


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
