"""
Top‑level router for the API.

The endpoint modules build their routers around the service objects
passed in here; ``build_router`` wires them together under their
prefixes.  ``create_app`` mounts the result under ``/api``.
"""

from fastapi import APIRouter

from helprequest_api.app.services.audit_service import AuditService
from helprequest_api.app.services.helprequest_service import HelpRequestService
from helprequest_api.app.services.user_service import UserService

from .endpoints import audit, helprequests, users


def build_router(
    help_request_service: HelpRequestService,
    user_service: UserService,
    audit_service: AuditService,
) -> APIRouter:
    router = APIRouter()
    router.include_router(
        helprequests.build_router(help_request_service),
        prefix="/helprequests",
        tags=["HelpRequests"],
    )
    router.include_router(users.build_router(user_service), prefix="/users", tags=["users"])
    router.include_router(users.build_current_user_router(user_service), tags=["users"])
    router.include_router(audit.build_router(audit_service), prefix="/audit", tags=["audit"])
    return router
