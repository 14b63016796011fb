"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from fastapi import FastAPI

from dealledger import __version__
from dealledger.app import ledger_unit_of_work_factory, severity_credits
from dealledger.ui.api.errors import register_exception_handlers
from dealledger.ui.api.router import api_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping

    from dealledger.domain.ports import LedgerUnitOfWorkFactory

log = getLogger(__name__)


def create_app(
    *,
    unit_of_work_factory: LedgerUnitOfWorkFactory | None = None,
    credits: Mapping[str, int] | None = None,
) -> FastAPI:
    """Build the API.

    Without an explicit factory the SQLAlchemy adapter is started during the
    application lifespan and its unit of work is used.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if unit_of_work_factory is None:
            app.state.unit_of_work_factory = ledger_unit_of_work_factory()
        log.info("Deal ledger API %s ready", __version__)
        yield
        log.info("Deal ledger API shutting down")

    app = FastAPI(
        title="Deal Ledger",
        version=__version__,
        description="Fact reconciliation and alert resolution for deal analysis",
        lifespan=lifespan,
    )
    if unit_of_work_factory is not None:
        app.state.unit_of_work_factory = unit_of_work_factory
    app.state.severity_credits = severity_credits(credits)
    register_exception_handlers(app)
    app.include_router(api_router)
    return app
