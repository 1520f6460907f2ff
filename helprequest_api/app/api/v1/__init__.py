"""Endpoints and top‑level router of the API."""
