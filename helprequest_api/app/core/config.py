"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with no configuration at all; in a deployment override
them via the environment.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip().lower() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Help Request API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Optional static token for super‑administrator API access.  Requests
    # carrying this token in the Authorization header are treated as the
    # super administrator without a JWT lookup.
    super_admin_static_token: str = os.getenv("SUPER_ADMIN_TOKEN", "")

    # Comma‑separated list of tokens for trusted services.  They are
    # authenticated with the role given by ``bot_role_id``.
    bot_tokens: str = os.getenv("BOT_TOKENS", "")
    bot_role_id: int = int(os.getenv("BOT_ROLE_ID", "3"))

    # Users registering with one of these emails receive the admin role.
    admin_emails: List[str] = field(default_factory=lambda: _split_csv(os.getenv("ADMIN_EMAILS", "")))

    # Path to the SQLite database.  Relative paths are resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "helprequests.db")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
