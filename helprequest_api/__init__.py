"""
Top‑level package for the Help Request API.

The web service lives in ``helprequest_api.app``; ``helprequest_api.client``
is a small ``requests`` based client for it.
"""

__all__ = []
