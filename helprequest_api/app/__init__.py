"""
Application package.

Layers, from the outside in: ``api`` (routers and route tables),
``services`` (operations and audit), ``stores`` (SQL and row
marshalling), ``schemas`` (Pydantic payloads) and ``core``
(configuration, database, security, errors, logging).
"""

from .main import app  # noqa: F401
