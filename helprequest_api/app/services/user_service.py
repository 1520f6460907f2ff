"""
Business logic for users.

Users authenticate with email and password and receive a bearer
token.  The role given at registration decides which help request
operations they may call:

* the first user ever registered becomes ``super_admin``;
* emails listed in ``ADMIN_EMAILS`` become ``admin``;
* everyone else is a plain ``user``.
"""

import logging
import sqlite3
from typing import Callable, List, Optional

from helprequest_api.app.core.config import settings
from helprequest_api.app.core.db import ROLE_ADMIN, ROLE_SUPER_ADMIN, ROLE_USER
from helprequest_api.app.core.exceptions import ConflictException
from helprequest_api.app.core.security import hash_password, verify_password
from helprequest_api.app.schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)


def _row_to_user_read(row: sqlite3.Row) -> UserRead:
    return UserRead(
        id=row["id"],
        email=row["email"],
        full_name=row["full_name"],
        role_id=row["role_id"],
        disabled=bool(row["disabled"]),
    )


class UserService:
    """Registration, authentication and lookup of users."""

    def __init__(self, connect: Callable[[], sqlite3.Connection]):
        self._connect = connect

    async def create_user(self, data: UserCreate) -> UserRead:
        """Register a new user and return it.

        Raises ``ConflictException`` if the email is already taken.
        """
        email = data.email.strip().lower()
        conn = self._connect()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT COUNT(*) AS count FROM users").fetchone()
            if row["count"] == 0:
                role_id = ROLE_SUPER_ADMIN
            elif email in settings.admin_emails:
                role_id = ROLE_ADMIN
            else:
                role_id = ROLE_USER
            try:
                cursor.execute(
                    "INSERT INTO users (email, full_name, password, role_id) VALUES (?, ?, ?, ?)",
                    (email, data.full_name, hash_password(data.password), role_id),
                )
            except sqlite3.IntegrityError:
                conn.rollback()
                raise ConflictException(f"User with email {email} already exists") from None
            user_id = cursor.lastrowid
            conn.commit()
            logger.info("Registered user %s with role %s", email, role_id)
            return UserRead(id=user_id, email=email, full_name=data.full_name, role_id=role_id, disabled=False)
        finally:
            conn.close()

    async def authenticate(self, email: str, password: str) -> Optional[UserRead]:
        """Return the user if the credentials match and the account is enabled."""
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
        finally:
            conn.close()
        if not row or row["disabled"]:
            return None
        if not verify_password(password, row["password"]):
            return None
        return _row_to_user_read(row)

    async def get_user_by_email(self, email: str) -> Optional[UserRead]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        finally:
            conn.close()
        return _row_to_user_read(row) if row else None

    async def list_users(self) -> List[UserRead]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY id ASC").fetchall()
        finally:
            conn.close()
        return [_row_to_user_read(row) for row in rows]
