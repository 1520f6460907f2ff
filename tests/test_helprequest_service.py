"""Tests for HelpRequestService."""

import sqlite3
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest

from helprequest_api.app.core.exceptions import EntityNotFoundException
from helprequest_api.app.schemas.helprequest import HelpRequestCreate, HelpRequestUpdate
from helprequest_api.app.services.audit_service import AuditService
from helprequest_api.app.services.helprequest_service import HelpRequestService
from helprequest_api.app.stores.helprequest_store import HelpRequestStore

CREATE = HelpRequestCreate(
    requester_email="cgaucho@ucsb.edu",
    team_id="s22-5pm-3",
    table_or_breakout_room="7",
    request_time=datetime(2022, 4, 20, 17, 35),
    explanation="Need help with Swagger-ui",
    solved=False,
)


@pytest.fixture
def audit(connect) -> AuditService:
    return AuditService(connect)


@pytest.fixture
def service(connect, audit) -> HelpRequestService:
    return HelpRequestService(HelpRequestStore(connect), audit)


class TestHelpRequestService:

    @pytest.mark.asyncio
    async def test_create_then_get_returns_equal_record(self, service):
        created = await service.create_help_request(CREATE, user_id=1)

        fetched = await service.get_help_request(created.id)

        assert fetched == created
        assert fetched.model_dump(exclude={"id"}) == CREATE.model_dump()

    @pytest.mark.asyncio
    async def test_create_logs_a_single_info_line_with_request_time(self, service):
        with patch("helprequest_api.app.services.helprequest_service.logger") as mock_logger:
            created = await service.create_help_request(CREATE)

        mock_logger.info.assert_called_once_with(
            "Created help request %s for team %s at %s",
            created.id,
            "s22-5pm-3",
            "2022-04-20T17:35:00",
        )

    @pytest.mark.asyncio
    async def test_list_contains_every_created_record(self, service):
        ids = [(await service.create_help_request(CREATE)).id for _ in range(3)]

        listed = await service.list_help_requests()

        assert {r.id for r in listed} >= set(ids)

    @pytest.mark.asyncio
    async def test_update_changes_fields_and_keeps_id(self, service):
        created = await service.create_help_request(CREATE)
        incoming = HelpRequestUpdate(**{**CREATE.model_dump(), "solved": True, "explanation": "Fixed"})

        updated = await service.update_help_request(created.id, incoming)

        assert updated.id == created.id
        assert updated.solved is True
        assert updated.explanation == "Fixed"
        assert updated.team_id == created.team_id

    @pytest.mark.asyncio
    async def test_delete_returns_message_and_removes_record(self, service):
        created = await service.create_help_request(CREATE)

        message = await service.delete_help_request(created.id)

        assert message == f"HelpRequest with id {created.id} deleted"
        with pytest.raises(EntityNotFoundException):
            await service.get_help_request(created.id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["get", "update", "delete"])
    async def test_missing_id_raises_not_found(self, service, operation):
        calls = {
            "get": lambda: service.get_help_request(9999),
            "update": lambda: service.update_help_request(9999, HelpRequestUpdate(**CREATE.model_dump())),
            "delete": lambda: service.delete_help_request(9999),
        }

        with pytest.raises(EntityNotFoundException) as exc_info:
            await calls[operation]()

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "HelpRequest with id 9999 not found"

    @pytest.mark.asyncio
    async def test_mutations_are_audited(self, service, audit):
        created = await service.create_help_request(CREATE, user_id=7)
        await service.update_help_request(created.id, HelpRequestUpdate(**CREATE.model_dump()), user_id=7)
        await service.delete_help_request(created.id, user_id=7)

        logs = await audit.list_logs(object_type="helprequest")

        assert sorted(log["action"] for log in logs) == ["create", "delete", "update"]
        assert all(log["user_id"] == 7 and log["object_id"] == created.id for log in logs)

    @pytest.mark.asyncio
    async def test_audit_failure_does_not_fail_create(self, service, audit):
        with patch.object(audit, "log", AsyncMock(side_effect=sqlite3.OperationalError("disk I/O error"))):
            created = await service.create_help_request(CREATE)

        assert (await service.get_help_request(created.id)).id == created.id

    @pytest.mark.asyncio
    async def test_service_without_audit(self, connect):
        service = HelpRequestService(HelpRequestStore(connect))

        created = await service.create_help_request(CREATE)

        assert created.id >= 1
