"""
Audit log endpoints.

Super administrators can review who created, updated or deleted help
requests.  Records are returned newest first.
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from helprequest_api.app.api.routing import Route, register_routes
from helprequest_api.app.core.security import is_super_admin
from helprequest_api.app.services.audit_service import AuditService


def build_router(audit_service: AuditService) -> APIRouter:

    async def list_audit_logs(
        object_type: Optional[str] = Query(None, description="Filter by object type (helprequest)"),
        action: Optional[str] = Query(None, description="Filter by action (create, update, delete)"),
        limit: int = Query(100, ge=1, le=500, description="Maximum number of logs to return"),
        offset: int = Query(0, ge=0, description="Number of logs to skip"),
    ) -> List[dict]:
        return await audit_service.list_logs(
            object_type=object_type,
            action=action,
            limit=limit,
            offset=offset,
        )

    routes = [
        Route("GET", "/logs", list_audit_logs, is_super_admin, List[dict], "List audit records"),
    ]
    return register_routes(APIRouter(), routes)
