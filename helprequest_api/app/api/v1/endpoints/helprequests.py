"""
Help request endpoints.

Mounted under ``/api/helprequests``:

========  ========  =====  ==========================================
Method    Path      Role   Purpose
========  ========  =====  ==========================================
GET       /all      user   list every help request
GET       ""        user   fetch one by ``?id=``
POST      /post     admin  create from query or form parameters
PUT       ""        admin  replace all fields of ``?id=`` from JSON
DELETE    ""        admin  delete ``?id=``
========  ========  =====  ==========================================
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError

from helprequest_api.app.api.routing import Route, register_routes
from helprequest_api.app.core.exceptions import BadRequestException, bad_request_from_errors
from helprequest_api.app.core.security import get_current_user, has_role_admin, has_role_user
from helprequest_api.app.schemas.helprequest import (
    HelpRequestCreate,
    HelpRequestRead,
    HelpRequestUpdate,
    MessageResponse,
)
from helprequest_api.app.services.helprequest_service import HelpRequestService

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_create_params(request: Request) -> HelpRequestCreate:
    """Collect the create parameters from the query string and form body.

    Form values win over query values with the same name.  Missing or
    malformed values raise a 400 ``BadRequestException``.
    """
    params: Dict[str, Any] = dict(request.query_params)
    if request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        params.update({key: value for key, value in form.items() if isinstance(value, str)})
    try:
        return HelpRequestCreate.model_validate(params)
    except ValidationError as exc:
        raise bad_request_from_errors(exc.errors()) from None


async def read_update_body(request: Request) -> HelpRequestUpdate:
    """Decode and validate the JSON replacement record of a PUT.

    Resolved after the route's authorization dependency, so the body of
    a rejected caller is never read.  Bad JSON or bad fields raise a 400
    ``BadRequestException``.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise BadRequestException("Request body must be a JSON object") from None
    try:
        return HelpRequestUpdate.model_validate(payload)
    except ValidationError as exc:
        raise bad_request_from_errors(exc.errors()) from None


def _update_body_openapi() -> Dict[str, Any]:
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": HelpRequestUpdate.model_json_schema(by_alias=True)}},
        }
    }


def _create_params_openapi() -> Dict[str, Any]:
    descriptions = {
        "requestTime": "date (in iso format, e.g. YYYY-mm-ddTHH:MM:SS; see https://en.wikipedia.org/wiki/ISO_8601)",
    }
    schema_types = {"solved": "boolean"}
    return {
        "parameters": [
            {
                "name": field.alias,
                "in": "query",
                "required": True,
                "schema": {"type": schema_types.get(field.alias, "string")},
                "description": descriptions.get(field.alias, ""),
            }
            for field in HelpRequestCreate.model_fields.values()
        ]
    }


def build_router(service: HelpRequestService) -> APIRouter:
    """Return the help request router bound to ``service``."""

    async def all_help_requests() -> List[HelpRequestRead]:
        return await service.list_help_requests()

    async def get_by_id(help_request_id: int = Query(..., alias="id")) -> HelpRequestRead:
        return await service.get_help_request(help_request_id)

    async def post_help_request(
        data: HelpRequestCreate = Depends(read_create_params),
        current_user: dict = Depends(get_current_user),
    ) -> HelpRequestRead:
        return await service.create_help_request(data, user_id=current_user.get("user_id"))

    async def update_help_request(
        help_request_id: int = Query(..., alias="id"),
        incoming: HelpRequestUpdate = Depends(read_update_body),
        current_user: dict = Depends(get_current_user),
    ) -> HelpRequestRead:
        return await service.update_help_request(help_request_id, incoming, user_id=current_user.get("user_id"))

    async def delete_help_request(
        help_request_id: int = Query(..., alias="id"),
        current_user: dict = Depends(get_current_user),
    ) -> MessageResponse:
        message = await service.delete_help_request(help_request_id, user_id=current_user.get("user_id"))
        return MessageResponse(message=message)

    routes = [
        Route("GET", "/all", all_help_requests, has_role_user, List[HelpRequestRead], "List all help requests"),
        Route("GET", "", get_by_id, has_role_user, HelpRequestRead, "Get a single help request"),
        Route(
            "POST",
            "/post",
            post_help_request,
            has_role_admin,
            HelpRequestRead,
            "Create a help request",
            openapi_extra=_create_params_openapi(),
        ),
        Route(
            "PUT",
            "",
            update_help_request,
            has_role_admin,
            HelpRequestRead,
            "Update a single help request",
            openapi_extra=_update_body_openapi(),
        ),
        Route("DELETE", "", delete_help_request, has_role_admin, MessageResponse, "Delete a help request"),
    ]
    return register_routes(APIRouter(), routes)
