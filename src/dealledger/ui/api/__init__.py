"""FastAPI application exposing the fact ledger and alert resolutions."""

from __future__ import annotations

from .app import create_app

__all__ = ["create_app"]
