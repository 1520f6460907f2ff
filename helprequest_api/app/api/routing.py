"""
Explicit route tables.

Each endpoint module describes its routes as a list of ``Route``
entries: HTTP method, path, handler and the authorization predicate
the caller must satisfy.  ``register_routes`` adds them to an
``APIRouter`` with the predicate installed as a route‑level
dependency.  Route dependencies resolve before the endpoint's own, so
the check runs before query validation, before request bodies read by
dependencies such as ``read_create_params`` and before any store
access.  Endpoints guarded this way must not declare ``Body``
parameters, which FastAPI decodes ahead of every dependency.  A
``None`` predicate marks a public route.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends

from helprequest_api.app.core.security import Predicate, authorize


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    endpoint: Callable[..., Any]
    predicate: Optional[Predicate]
    response_model: Any = None
    summary: Optional[str] = None
    status_code: Optional[int] = None
    openapi_extra: Optional[Dict[str, Any]] = field(default=None, compare=False)


def register_routes(router: APIRouter, routes: Sequence[Route]) -> APIRouter:
    for route in routes:
        dependencies: List[Any] = []
        if route.predicate is not None:
            dependencies.append(Depends(authorize(route.predicate)))
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=[route.method],
            response_model=route.response_model,
            summary=route.summary,
            status_code=route.status_code,
            dependencies=dependencies,
            openapi_extra=route.openapi_extra,
        )
    return router
