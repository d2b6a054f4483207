"""User management, plans and the founder panel API."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from rifazo.errors import ConflictError, ForbiddenError, ValidationError
from rifazo.models.activity_log import ActionType
from rifazo.models.participation import Participation
from rifazo.models.raffle import Raffle
from rifazo.models.rating import Rating
from rifazo.models.user import Role
from rifazo.repositories.activity_log_repository import ActivityLogRepository
from rifazo.repositories.participation_repository import ParticipationRepository
from rifazo.repositories.raffle_repository import RaffleRepository
from rifazo.repositories.rating_repository import RatingRepository
from rifazo.repositories.user_repository import UserRepository
from rifazo.services.activity_log_service import ActivityLogService
from rifazo.services.plan_service import PlanService, current_plan
from rifazo.services.user_service import UserService
from rifazo.utils.timeutils import start_of_day, to_iso


@pytest.fixture
def service(ctx):
    return UserService()


def _raffle(creator: str, name: str = "Rifa del mes") -> Raffle:
    return RaffleRepository().add(Raffle(name=name, total_numbers=10, creator_username=creator, created_at="2025-01-01"))


class TestCreateUser:
    def test_organizer_gets_free_plan(self, service) -> None:
        user = service.create_user({"username": "org1", "role": Role.ADMIN.value}, password="abc123")
        assert user.plan == "free"
        assert user.plan_active is True
        assert user.plan_assigned_by == "system_initial"
        assert user.public_alias == "org1"
        assert current_plan(user).raffle_limit == 2

    def test_participant_has_no_plan(self, service) -> None:
        user = service.create_user({"username": "part1"}, password="abc123")
        assert user.plan is None
        assert user.public_alias is None

    def test_unique_username_and_email(self, service) -> None:
        service.create_user({"username": "ana", "email": "ana@example.com"}, password="abc123")
        with pytest.raises(ConflictError):
            service.create_user({"username": "ana"}, password="abc123")
        with pytest.raises(ConflictError):
            service.create_user({"username": "ana2", "email": "ana@example.com"}, password="abc123")

    def test_listing_order(self, service, founder, organizer, participant) -> None:
        service.create_user({"username": "esperando", "role": Role.PENDING_APPROVAL.value}, password="abc123")
        assert [u.username for u in service.list_users()] == ["esperando", "fundador", "organizador", "participante"]


class TestUpdateUser:
    def test_rename_rewrites_references(self, service, founder, organizer, participant) -> None:
        raffle = _raffle("organizador")
        ParticipationRepository().add(
            Participation(raffle_id=raffle.id, creator_username="organizador", participant_username="participante")
        )
        RatingRepository().add(Rating(raffle_id=raffle.id, organizer_username="organizador", rater_username="x"))
        ActivityLogService().log("organizador", ActionType.RAFFLE_CREATED, "Rifa: Rifa del mes")

        updated = service.update_user(organizer.id, {"username": "org_nuevo"}, editor_username="fundador")

        assert updated.username == "org_nuevo"
        assert updated.public_alias == "org_nuevo"
        assert RaffleRepository().get(raffle.id).creator_username == "org_nuevo"
        assert ParticipationRepository().list_by_raffle(raffle.id)[0].creator_username == "org_nuevo"
        assert RatingRepository().list_by_organizer("org_nuevo")
        assert ActivityLogRepository().list_recent(admin_username="org_nuevo")
        assert ActivityLogRepository().list_recent(admin_username="organizador") == []
        edits = [log for log in ActivityLogRepository().list_recent() if log.action_type == ActionType.USER_EDITED.value]
        assert edits and "username" in edits[0].details["updated_fields"]

    def test_founder_is_protected(self, service, founder) -> None:
        with pytest.raises(ForbiddenError):
            service.update_user(founder.id, {"role": Role.ADMIN.value}, editor_username="fundador")
        with pytest.raises(ForbiddenError):
            service.update_user(founder.id, {"username": "otro"}, editor_username="fundador")
        with pytest.raises(ForbiddenError):
            service.delete_user(founder.id, "fundador")
        with pytest.raises(ForbiddenError):
            service.set_blocked(founder.id, True, "fundador")

    def test_password_change(self, service, participant) -> None:
        before = UserRepository().get(participant.id).password_hash
        service.update_user(participant.id, {"password": "nueva123"}, editor_username="fundador")
        assert UserRepository().get(participant.id).password_hash != before


class TestDeleteUser:
    def test_deleting_organizer_removes_their_raffles(self, service, founder, organizer, participant) -> None:
        raffle = _raffle("organizador")
        other = _raffle("fundador", name="Rifa del fundador")
        ParticipationRepository().add(Participation(raffle_id=raffle.id, participant_username="participante"))
        ParticipationRepository().add(Participation(raffle_id=other.id, participant_username="participante"))
        service.toggle_favorite(participant.id, raffle.id)
        service.toggle_favorite(participant.id, other.id)

        service.delete_user(organizer.id, "fundador")

        assert UserRepository().get(organizer.id) is None
        assert RaffleRepository().get(raffle.id) is None
        assert RaffleRepository().get(other.id) is not None
        assert [p.raffle_id for p in ParticipationRepository().find()] == [other.id]
        assert UserRepository().get(participant.id).favorite_raffle_ids == [other.id]

        deleted = [
            log for log in ActivityLogRepository().list_recent() if log.action_type == ActionType.RAFFLE_DELETED.value
        ]
        assert deleted[0].details["deleted_as_part_of_user_deletion"] == "organizador"


class TestModeration:
    def test_block_clears_session(self, service, participant) -> None:
        UserRepository().update(participant.id, {"session_id": "abc"})
        blocked = service.set_blocked(participant.id, True, "fundador")
        assert blocked.is_blocked
        assert UserRepository().get(participant.id).session_id is None
        assert not service.set_blocked(participant.id, False, "fundador").is_blocked

    def test_approve_only_pending(self, service, participant) -> None:
        pending = service.create_user({"username": "pendiente", "role": Role.PENDING_APPROVAL.value}, password="abc123")
        approved = service.approve_organizer(pending.id, "fundador")
        assert approved.role == Role.ADMIN.value
        with pytest.raises(ValidationError):
            service.approve_organizer(participant.id, "fundador")

    def test_reset_lockout(self, service, participant) -> None:
        UserRepository().update(participant.id, {"failed_login_attempts": 3, "lockout_until": "2999-01-01T00:00:00+00:00"})
        service.reset_lockout(participant.id, "fundador")
        stored = UserRepository().get(participant.id)
        assert stored.failed_login_attempts == 0
        assert stored.lockout_until is None


class TestPlans:
    @pytest.fixture
    def plans(self, ctx):
        return PlanService()

    def test_assign_now_and_scheduled(self, plans, organizer) -> None:
        today = date(2025, 3, 10)
        user = plans.assign_plan(organizer.id, "pro", "fundador", today=today)
        assert user.plan == "pro"
        assert user.plan_active is True
        assert user.plan_end_date == to_iso(start_of_day(date(2025, 4, 9)))

        scheduled = plans.assign_plan(organizer.id, "standard", "fundador", start_date=date(2025, 3, 20), today=today)
        assert scheduled.plan_active is False

    def test_unknown_plan(self, plans, organizer) -> None:
        with pytest.raises(ValidationError):
            plans.assign_plan(organizer.id, "gold", "fundador")

    def test_expiry_and_scheduled_activation(self, plans, organizer) -> None:
        UserRepository().update(organizer.id, {"raffles_created_this_period": 2})
        user = UserRepository().get(organizer.id)
        end = date.fromisoformat(user.plan_end_date[:10])

        status = plans.check_and_manage_plan_status(user, today=end - timedelta(days=1))
        assert status.expires_soon is True
        assert status.user.plan_active is True

        expired = plans.check_and_manage_plan_status(user, today=end + timedelta(days=1)).user
        assert expired.plan_active is False
        assert UserRepository().get(organizer.id).raffles_created_this_period == 0

        start = end + timedelta(days=3)
        plans.assign_plan(organizer.id, "standard", "fundador", start_date=start, today=end + timedelta(days=1))
        activated = plans.check_and_manage_plan_status(UserRepository().get(organizer.id), today=start).user
        assert activated.plan_active is True
        assert activated.plan == "standard"

    def test_remove_plan(self, plans, organizer) -> None:
        user = plans.remove_plan(organizer.id, "fundador")
        assert user.plan is None
        assert current_plan(user).raffle_limit == 0


class TestAdminApi:
    def test_requires_founder(self, client, organizer, login) -> None:
        assert client.get("/api/admin/users").status_code == 401
        login("organizador")
        resp = client.get("/api/admin/users")
        assert resp.status_code == 403
        assert resp.get_json()["error"]["code"] == "forbidden"

    def test_founder_manages_users(self, client, founder, organizer, participant, login) -> None:
        login("fundador")
        users = client.get("/api/admin/users").get_json()["data"]
        assert {u["username"] for u in users} == {"fundador", "organizador", "participante"}

        resp = client.post(
            "/api/admin/users",
            json={"username": "creado", "password": "abc123", "role": "admin", "email": "creado@example.com"},
        )
        assert resp.status_code == 201
        created = resp.get_json()["data"]
        assert created["plan"] == "free"

        resp = client.post(f"/api/admin/users/{participant.id}/block", json={"blocked": True})
        assert resp.get_json()["data"]["is_blocked"] is True

        resp = client.put(f"/api/admin/users/{organizer.id}/plan", json={"plan": "pro"})
        assert resp.get_json()["data"]["plan"] == "pro"
        resp = client.delete(f"/api/admin/users/{organizer.id}/plan")
        assert resp.get_json()["data"]["plan"] is None

        assert client.delete(f"/api/admin/users/{created['id']}").status_code == 200
        assert client.get(f"/api/admin/users/{created['id']}").status_code == 404

    def test_activity_log_scoped_for_organizers(self, client, founder, organizer, login) -> None:
        login("fundador")
        client.post("/api/auth/logout")
        login("organizador")
        logs = client.get("/api/admin/activity-logs?admin_username=fundador").get_json()["data"]
        assert logs
        assert {log["admin_username"] for log in logs} == {"organizador"}
