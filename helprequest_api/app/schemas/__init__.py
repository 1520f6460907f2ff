"""
Pydantic schema definitions for API payloads.

Schemas are separated from the SQL in ``stores`` so the JSON
representation can differ from the column layout.
"""
