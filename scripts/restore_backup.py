"""Restore collections from a JSON backup file or URL.

Each selected collection is cleared and refilled from the backup. The
fundador account is always kept.

Usage:
  python scripts/restore_backup.py backup.json
  python scripts/restore_backup.py https://example.com/rifazo-backup.json --collections raffles
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from collections.abc import Sequence
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from rifazo import create_app  # noqa: E402
from rifazo.services.backup_service import BACKUP_COLLECTIONS, BackupService  # noqa: E402

logger = logging.getLogger(__name__)


def _build_http_session(retries: int, backoff_factor: float) -> requests.Session:
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)

    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _load_backup(source: str, timeout_seconds: float, retries: int, backoff: float) -> dict[str, Any]:
    if source.startswith(("http://", "https://")):
        http = _build_http_session(retries=retries, backoff_factor=backoff)
        resp = http.get(source, timeout=timeout_seconds)
        resp.raise_for_status()
        payload = resp.json()
    else:
        payload = json.loads(pathlib.Path(source).read_text(encoding="utf-8"))

    if not isinstance(payload, dict):
        raise ValueError("Backup must be a JSON object keyed by collection name")
    return payload


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Restore RIFAZO collections from a JSON backup")
    parser.add_argument("source", help="Path or http(s) URL of the backup file")
    parser.add_argument(
        "--collections",
        nargs="+",
        choices=BACKUP_COLLECTIONS,
        default=None,
        help="Collections to restore (default: every collection present in the backup)",
    )
    parser.add_argument("--timeout", dest="timeout_seconds", type=float, default=10.0)
    parser.add_argument("--retries", dest="retries", type=int, default=3)
    parser.add_argument("--backoff", dest="backoff", type=float, default=0.3)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    data = _load_backup(args.source, args.timeout_seconds, args.retries, args.backoff)
    names = list(args.collections) if args.collections else [n for n in BACKUP_COLLECTIONS if n in data]
    if not names:
        raise SystemExit("Backup contains none of the known collections")

    app = create_app({"SEED_INITIAL_USERS": False})
    with app.app_context():
        report = BackupService().import_collections(data, names)

    for line in report.summary:
        logger.info(line)
    for line in report.errors:
        logger.error(line)
    return 0 if report.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
