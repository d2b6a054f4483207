"""Insert the initial platform accounts (fundador, soporte).

Does nothing when the users collection already holds documents.
Reads DB_BACKEND / DATABASE_URL / MONGODB_URI from .env or the environment.

Usage:
  python scripts/seed_users.py
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from collections.abc import Sequence

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from rifazo import create_app  # noqa: E402
from rifazo.seed import seed_initial_users  # noqa: E402

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the initial RIFAZO accounts")
    parser.add_argument("--backend", dest="backend", choices=("sql", "mongo"), default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    overrides = {"SEED_INITIAL_USERS": False}
    if args.backend:
        overrides["DB_BACKEND"] = args.backend
    app = create_app(overrides)

    with app.app_context():
        created = seed_initial_users()

    if created:
        logger.info("Created %s account(s): %s", len(created), ", ".join(created))
    else:
        logger.info("Nothing to seed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
