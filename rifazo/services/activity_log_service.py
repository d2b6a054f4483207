"""Service layer for the admin activity log."""

from __future__ import annotations

import logging
from typing import Any

from rifazo.models.activity_log import ActionType, ActivityLog
from rifazo.repositories.activity_log_repository import ActivityLogRepository
from rifazo.utils.timeutils import to_iso, utcnow

logger = logging.getLogger(__name__)


class ActivityLogService:
    """Write and read audit entries."""

    def __init__(self, repository: ActivityLogRepository | None = None) -> None:
        self._repo = repository or ActivityLogRepository()

    def log(
        self,
        admin_username: str,
        action_type: ActionType | str,
        target_info: str | None = None,
        details: dict[str, Any] | str | None = None,
    ) -> ActivityLog | None:
        """Append an entry. Audit failures never break the calling operation."""

        entry = ActivityLog(
            timestamp=to_iso(utcnow()),
            admin_username=admin_username,
            action_type=ActionType(action_type).value,
            target_info=target_info,
            details=details,
        )
        try:
            return self._repo.add(entry)
        except Exception:
            logger.exception("Error adding activity log %s for %s", entry.action_type, admin_username)
            return None

    def list_logs(self, limit: int = 100, admin_username: str | None = None) -> list[ActivityLog]:
        return self._repo.list_recent(limit=limit, admin_username=admin_username)
