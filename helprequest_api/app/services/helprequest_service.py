"""
Service layer for help requests.

``HelpRequestService`` implements the five operations of the resource:
list, get by id, create, update and delete.  It is constructed with the
store it persists through and the audit service it reports changes to;
neither is looked up globally.

Missing ids raise ``EntityNotFoundException`` which the API layer
renders as a 404.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from helprequest_api.app.core.exceptions import EntityNotFoundException
from helprequest_api.app.schemas.helprequest import (
    HelpRequestCreate,
    HelpRequestRead,
    HelpRequestUpdate,
)
from helprequest_api.app.services.audit_service import AuditService
from helprequest_api.app.stores.helprequest_store import HelpRequestStore

logger = logging.getLogger(__name__)

ENTITY_NAME = "HelpRequest"
OBJECT_TYPE = "helprequest"


class HelpRequestService:
    """CRUD operations over help requests."""

    def __init__(self, store: HelpRequestStore, audit: Optional[AuditService] = None):
        self.store = store
        self.audit = audit

    async def list_help_requests(self) -> List[HelpRequestRead]:
        return self.store.find_all()

    async def get_help_request(self, help_request_id: int) -> HelpRequestRead:
        help_request = self.store.find_by_id(help_request_id)
        if help_request is None:
            raise EntityNotFoundException(ENTITY_NAME, help_request_id)
        return help_request

    async def create_help_request(
        self,
        data: HelpRequestCreate,
        user_id: Optional[int] = None,
    ) -> HelpRequestRead:
        """Persist a new help request and return it with its assigned id."""
        help_request = self.store.save(data)
        logger.info(
            "Created help request %s for team %s at %s",
            help_request.id,
            help_request.team_id,
            help_request.request_time.isoformat(),
        )
        await self._audit(user_id, "create", help_request.id, {"team_id": data.team_id})
        return help_request

    async def update_help_request(
        self,
        help_request_id: int,
        data: HelpRequestUpdate,
        user_id: Optional[int] = None,
    ) -> HelpRequestRead:
        """Overwrite every mutable field of the help request ``help_request_id``."""
        help_request = self.store.save(data, help_request_id=help_request_id)
        if help_request is None:
            raise EntityNotFoundException(ENTITY_NAME, help_request_id)
        logger.info("Updated help request %s", help_request_id)
        await self._audit(user_id, "update", help_request_id, data.model_dump(mode="json"))
        return help_request

    async def delete_help_request(self, help_request_id: int, user_id: Optional[int] = None) -> str:
        """Delete the help request and return a confirmation message."""
        if not self.store.delete_by_id(help_request_id):
            raise EntityNotFoundException(ENTITY_NAME, help_request_id)
        logger.info("Deleted help request %s", help_request_id)
        await self._audit(user_id, "delete", help_request_id)
        return f"{ENTITY_NAME} with id {help_request_id} deleted"

    async def _audit(self, user_id: Optional[int], action: str, object_id: int, details: Optional[dict] = None) -> None:
        if self.audit is not None:
            await self.audit.record(user_id, action, OBJECT_TYPE, object_id, details)
