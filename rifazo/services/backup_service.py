"""Collection-level backup export and restore."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from rifazo.db import get_store
from rifazo.errors import ForbiddenError, ValidationError
from rifazo.models.user import FOUNDER_USERNAME, ManagedUser
from rifazo.repositories.document_store import Document, DocumentStore
from rifazo.services.plan_service import current_plan

logger = logging.getLogger(__name__)

BACKUP_COLLECTIONS = ("users", "raffles", "participations", "raffleResults", "activityLogs", "ratings")


@dataclass
class RestoreReport:
    success: bool = True
    errors: list[str] = field(default_factory=list)
    summary: list[str] = field(default_factory=list)


def _check_names(names: list[str]) -> list[str]:
    unknown = [n for n in names if n not in BACKUP_COLLECTIONS]
    if unknown:
        raise ValidationError(
            message="Unknown collections requested",
            details={"collections": [f"Unknown: {', '.join(unknown)}"]},
        )
    return list(names)


def can_export(user: ManagedUser) -> bool:
    if user.is_founder:
        return True
    return user.is_organizer and user.plan_active and current_plan(user).includes_backup_restore


class BackupService:
    def __init__(self, store: DocumentStore | None = None) -> None:
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store or get_store()

    def export_collections(self, names: list[str], for_admin: str | None = None) -> dict[str, list[Document]]:
        """Dump whole collections, or only an organizer's own raffle data."""

        names = _check_names(names)
        data: dict[str, list[Document]] = {}
        if for_admin is None:
            for name in names:
                data[name] = self.store.find(name)
            return data

        raffles = self.store.find("raffles", {"creator_username": for_admin})
        raffle_ids = [r["id"] for r in raffles]
        if "raffles" in names:
            data["raffles"] = raffles
        in_ids = {"raffle_id": {"$in": raffle_ids}}
        for name in names:
            if name in ("raffles", "users"):
                continue
            if name in ("participations", "raffleResults"):
                data[name] = self.store.find(name, in_ids) if raffle_ids else []
            elif name == "activityLogs":
                data[name] = self.store.find(name, {"admin_username": for_admin})
            else:
                data[name] = []
        return data

    def export_for(self, user: ManagedUser, names: list[str]) -> dict[str, list[Document]]:
        if not can_export(user):
            raise ForbiddenError(message="Tu plan no incluye respaldo y restauración.")
        return self.export_collections(names, for_admin=None if user.is_founder else user.username)

    def _clear(self, name: str) -> tuple[int, Document | None]:
        if name != "users":
            return self.store.delete_many(name, None), None
        kept = None
        deleted = 0
        for doc in self.store.find("users"):
            if doc.get("username") == FOUNDER_USERNAME:
                kept = doc
                continue
            self.store.delete("users", str(doc["id"]))
            deleted += 1
        return deleted, kept

    def import_collections(self, data: dict[str, Any], names: list[str]) -> RestoreReport:
        """Replace each requested collection with the backup's documents."""

        report = RestoreReport()
        for name in _check_names(names):
            docs = data.get(name)
            if docs is None:
                report.summary.append(f'Colección "{name}" no encontrada en el archivo de respaldo. Omitiendo.')
                continue
            try:
                deleted, kept = self._clear(name)
                report.summary.append(f'{deleted} documentos eliminados de "{name}".')
                imported = 0
                for doc in docs:
                    doc_id = doc.get("id")
                    if not doc_id:
                        continue
                    if kept is not None and doc.get("username") == FOUNDER_USERNAME and doc_id != kept["id"]:
                        report.summary.append(f'Usuario "{FOUNDER_USERNAME}" existente conservado.')
                        continue
                    self.store.replace(name, str(doc_id), doc)
                    imported += 1
                report.summary.append(f'{imported} documentos importados a "{name}".')
            except Exception as e:
                msg = f'Error restaurando la colección "{name}": {e}'
                logger.exception(msg)
                report.errors.append(msg)
                report.summary.append(f'Fallo al restaurar "{name}".')
        report.success = not report.errors
        return report

    def restore_for(self, user: ManagedUser, data: dict[str, Any], names: list[str]) -> RestoreReport:
        if not user.is_founder:
            raise ForbiddenError(message="Solo el fundador puede restaurar respaldos.")
        if not isinstance(data, dict):
            raise ValidationError(message="Backup payload must be an object keyed by collection")
        return self.import_collections(data, names)
