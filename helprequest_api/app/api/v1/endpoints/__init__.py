"""
Endpoint modules.

Each module exposes ``build_router(...)`` which takes the service
objects it needs and returns an ``APIRouter`` registered from an
explicit route table.
"""
