"""Activity log routes."""

from __future__ import annotations

from flask import Blueprint, request

from rifazo.auth import require_user, roles_required
from rifazo.models.user import ORGANIZER_ROLES
from rifazo.schemas.result import ActivityLogQuerySchema, ActivityLogSchema
from rifazo.services.activity_log_service import ActivityLogService
from rifazo.utils.responses import ok

activity_logs_bp = Blueprint("activity_logs", __name__)

_query_schema = ActivityLogQuerySchema()
_schema = ActivityLogSchema(many=True)
_service = ActivityLogService()


@activity_logs_bp.get("/activity-logs")
@roles_required(*ORGANIZER_ROLES)
def list_logs():
    """Newest entries first.

    Query params:
    - limit: max entries (default 100)
    - admin_username: founder-only filter; organizers always see their own entries
    """

    args = _query_schema.load(request.args)
    user = require_user()
    admin_username = args.get("admin_username") if user.is_founder else user.username
    logs = _service.list_logs(limit=int(args["limit"]), admin_username=admin_username)
    return ok(_schema.dump(logs))
