"""
Service layer.

Services implement the operations exposed by the API on top of the
stores and raise ``core.exceptions`` types for the API layer to render.
"""
