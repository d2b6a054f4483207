"""Backup export and restore routes."""

from __future__ import annotations

from flask import Blueprint, request

from rifazo.auth import require_user, roles_required
from rifazo.models.user import ORGANIZER_ROLES, Role
from rifazo.schemas.reference import BackupExportQuerySchema, BackupRestoreSchema, RestoreReportSchema
from rifazo.services.backup_service import BackupService
from rifazo.utils.responses import ok

backup_bp = Blueprint("backup", __name__)

_export_schema = BackupExportQuerySchema()
_restore_schema = BackupRestoreSchema()
_report_schema = RestoreReportSchema()
_service = BackupService()


@backup_bp.get("/backup")
@roles_required(*ORGANIZER_ROLES)
def export_backup():
    """Export collections as JSON; ``?collections=raffles&collections=participations``."""

    requested = request.args.getlist("collections")
    args = _export_schema.load({"collections": requested} if requested else {})
    return ok(_service.export_for(require_user(), list(args["collections"])))


@backup_bp.post("/backup")
@roles_required(Role.FOUNDER.value)
def restore_backup():
    payload = request.get_json(silent=True) or {}
    data = _restore_schema.load(payload)

    report = _service.restore_for(require_user(), data["data"], list(data["collections"]))
    return ok(_report_schema.dump(report), status_code=200 if report.success else 207)
