#!/usr/bin/env python3
"""
Manually restore the Bailanysta data file from its backup.

The running API keeps its own cache: restart it after restoring.

Usage:
  python scripts/restore_backup.py --yes [--data-file ...] [--backup-file ...]
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
    ap = argparse.ArgumentParser(description="Restore the Bailanysta JSON document from its backup")
    ap.add_argument("--data-file", default=str(settings.data_file), help="Data file to overwrite (default: DATA_FILE)")
    ap.add_argument("--backup-file", default=str(settings.backup_file), help="Backup to restore (default: BACKUP_FILE)")
    ap.add_argument("--yes", action="store_true", help="Confirm overwriting the current data file")
    args = ap.parse_args()

    if not args.yes:
        raise SystemExit("Refusing to overwrite the data file without --yes")

    configure_logging(settings.log_level)
    storage = JsonStorage(args.data_file, args.backup_file)
    restored = storage.restore_backup()
    ok = storage.validate_integrity()

    print("OK: data file restored")
    print(f"  Data file: {restored}")
    print(f"  Integrity: {'ok' if ok else 'issues found (see log)'}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
