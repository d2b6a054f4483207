"""Repository layer for the activity log."""

from __future__ import annotations

from rifazo.models.activity_log import ActivityLog
from rifazo.repositories.base_repository import DocumentRepository


class ActivityLogRepository(DocumentRepository[ActivityLog]):
    """Persistence for ``activityLogs`` documents."""

    collection = "activityLogs"
    record_type = ActivityLog

    def list_recent(self, limit: int = 100, admin_username: str | None = None) -> list[ActivityLog]:
        filters = {"admin_username": admin_username} if admin_username else None
        return self.find(filters, sort="timestamp", descending=True, limit=limit)
