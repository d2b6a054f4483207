"""Export collections to a JSON backup file.

Usage:
  python scripts/export_backup.py --out backup.json
  python scripts/export_backup.py --collections raffles participations --out raffles.json
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from collections.abc import Sequence

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from rifazo import create_app  # noqa: E402
from rifazo.services.backup_service import BACKUP_COLLECTIONS, BackupService  # noqa: E402

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dump RIFAZO collections to JSON")
    parser.add_argument("--out", dest="out", type=pathlib.Path, required=True)
    parser.add_argument(
        "--collections",
        nargs="+",
        choices=BACKUP_COLLECTIONS,
        default=list(BACKUP_COLLECTIONS),
    )
    parser.add_argument(
        "--admin",
        dest="admin",
        default=None,
        help="Only export raffle data created by this organizer",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    app = create_app({"SEED_INITIAL_USERS": False})
    with app.app_context():
        data = BackupService().export_collections(list(args.collections), for_admin=args.admin)

    args.out.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    for name, docs in data.items():
        logger.info("%s: %s documents", name, len(docs))
    logger.info("Backup written to %s", args.out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
