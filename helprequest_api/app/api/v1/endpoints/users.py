"""
User endpoints.

Registration and login are public; login returns the bearer token the
help request endpoints expect.  ``/api/currentUser`` reports the
caller's profile together with the authorities (``ROLE_USER``,
``ROLE_ADMIN``) their role grants.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from helprequest_api.app.api.routing import Route, register_routes
from helprequest_api.app.core.exceptions import AuthenticationException
from helprequest_api.app.core.security import (
    authorities_for_role,
    create_access_token,
    get_current_user,
    has_role_admin,
    has_role_user,
)
from helprequest_api.app.schemas.user import (
    Authority,
    CurrentUserRead,
    Token,
    UserCreate,
    UserLogin,
    UserRead,
)
from helprequest_api.app.services.user_service import UserService


def build_router(user_service: UserService) -> APIRouter:
    """Routes mounted under ``/api/users``."""

    async def register_user(user: UserCreate) -> UserRead:
        return await user_service.create_user(user)

    async def login_user(credentials: UserLogin) -> Token:
        db_user = await user_service.authenticate(credentials.email, credentials.password)
        if not db_user:
            raise AuthenticationException("Invalid credentials")
        return Token(access_token=create_access_token({"sub": db_user.email}))

    async def list_users() -> List[UserRead]:
        return await user_service.list_users()

    routes = [
        Route("POST", "", register_user, None, UserRead, "Register a user", status.HTTP_201_CREATED),
        Route("POST", "/login", login_user, None, Token, "Log in and obtain a bearer token"),
        Route("GET", "", list_users, has_role_admin, List[UserRead], "List users"),
    ]
    return register_routes(APIRouter(), routes)


def build_current_user_router(user_service: UserService) -> APIRouter:
    """The ``/currentUser`` route, mounted directly under ``/api``."""

    async def current_user_profile(current_user: dict = Depends(get_current_user)) -> CurrentUserRead:
        email = current_user.get("sub")
        user = await user_service.get_user_by_email(email)
        return CurrentUserRead(
            id=current_user.get("user_id"),
            email=email,
            full_name=user.full_name if user else None,
            roles=[Authority(authority=a) for a in authorities_for_role(current_user.get("role_id"))],
        )

    routes = [
        Route("GET", "/currentUser", current_user_profile, has_role_user, CurrentUserRead, "Get the current user"),
    ]
    return register_routes(APIRouter(), routes)
