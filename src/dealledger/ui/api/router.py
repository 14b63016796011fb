"""Top-level router collecting every endpoint module."""

from __future__ import annotations

from fastapi import APIRouter

from dealledger.ui.api.endpoints import deals, facts

api_router = APIRouter()
api_router.include_router(deals.router)
api_router.include_router(facts.router)
