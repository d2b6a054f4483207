"""Collection backup export and restore."""

from __future__ import annotations

import pytest

from rifazo.errors import ForbiddenError, ValidationError
from rifazo.models.participation import Participation
from rifazo.models.raffle import Raffle
from rifazo.repositories.participation_repository import ParticipationRepository
from rifazo.repositories.raffle_repository import RaffleRepository
from rifazo.repositories.user_repository import UserRepository
from rifazo.services.backup_service import BACKUP_COLLECTIONS, BackupService, can_export
from rifazo.services.plan_service import PlanService


@pytest.fixture
def service(ctx):
    return BackupService()


@pytest.fixture
def two_raffles(ctx, founder, organizer):
    mine = RaffleRepository().add(Raffle(name="Rifa organizador", creator_username="organizador"))
    other = RaffleRepository().add(Raffle(name="Rifa fundador", creator_username="fundador"))
    ParticipationRepository().add(Participation(raffle_id=mine.id, participant_username="p"))
    ParticipationRepository().add(Participation(raffle_id=other.id, participant_username="p"))
    return mine, other


class TestExport:
    def test_full_export(self, service, two_raffles) -> None:
        data = service.export_collections(list(BACKUP_COLLECTIONS))
        assert set(data) == set(BACKUP_COLLECTIONS)
        assert len(data["raffles"]) == 2
        assert {u["username"] for u in data["users"]} == {"fundador", "organizador"}

    def test_organizer_export_is_scoped(self, service, two_raffles) -> None:
        mine, _ = two_raffles
        data = service.export_collections(["users", "raffles", "participations", "ratings"], for_admin="organizador")
        assert "users" not in data
        assert [r["id"] for r in data["raffles"]] == [mine.id]
        assert [p["raffle_id"] for p in data["participations"]] == [mine.id]
        assert data["ratings"] == []

    def test_unknown_collection(self, service) -> None:
        with pytest.raises(ValidationError):
            service.export_collections(["secrets"])

    def test_export_requires_pro_plan(self, service, organizer, founder, participant) -> None:
        assert can_export(founder)
        assert not can_export(participant)
        with pytest.raises(ForbiddenError):
            service.export_for(organizer, ["raffles"])

        pro = PlanService().assign_plan(organizer.id, "pro", "fundador")
        assert can_export(pro)
        assert service.export_for(pro, ["raffles"]) == {"raffles": []}


class TestRestore:
    def test_replaces_collections_and_keeps_founder(self, service, founder, organizer, two_raffles) -> None:
        backup = {
            "users": [
                {"id": "u-1", "username": "restaurado", "role": "user"},
                {"id": "other-founder", "username": "fundador", "role": "founder"},
                {"username": "sin_id"},
            ],
            "raffles": [{"id": "r-1", "name": "Rifa restaurada", "creator_username": "restaurado"}],
        }
        report = service.import_collections(backup, ["users", "raffles", "participations"])

        assert report.success
        assert report.errors == []
        assert 'Colección "participations" no encontrada en el archivo de respaldo. Omitiendo.' in report.summary
        assert '1 documentos importados a "users".' in report.summary

        users = {u.username: u for u in UserRepository().list_all()}
        assert set(users) == {"fundador", "restaurado"}
        assert users["fundador"].id == founder.id
        assert [r.id for r in RaffleRepository().list_all()] == ["r-1"]
        # Not requested, so untouched.
        assert len(ParticipationRepository().find()) == 2

    def test_restore_is_founder_only(self, service, organizer) -> None:
        with pytest.raises(ForbiddenError):
            service.restore_for(organizer, {}, ["raffles"])


class TestBackupApi:
    def test_export_and_restore(self, client, founder, organizer, login) -> None:
        login("fundador")
        resp = client.get("/api/admin/backup?collections=users&collections=raffles")
        assert resp.status_code == 200
        assert set(resp.get_json()["data"]) == {"users", "raffles"}

        resp = client.post(
            "/api/admin/backup",
            json={"data": {"raffles": [{"id": "r-9", "name": "Desde respaldo"}]}, "collections": ["raffles"]},
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["success"] is True
        assert [r["id"] for r in client.get("/api/raffles").get_json()["data"]] == ["r-9"]

    def test_organizer_without_backup_feature(self, client, organizer, login) -> None:
        login("organizador")
        assert client.get("/api/admin/backup").status_code == 403
        assert client.post("/api/admin/backup", json={"data": {}, "collections": ["raffles"]}).status_code == 403
