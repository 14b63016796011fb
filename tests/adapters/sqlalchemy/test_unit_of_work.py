from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect

from dealledger.adapters.sqlalchemy.migrations import current_revision, head_revision
from dealledger.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from dealledger.domain.model import Deal
from tests.helpers.facts import OWNER

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyLedgerUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:")
    engine_b = create_engine("sqlite+pysqlite:///:memory:")

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_startup_migrates_to_head(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    assert current_revision(sqlite_engine) == head_revision() == "0001_initial_schema"
    tables = set(inspect(sqlite_engine).get_table_names())
    assert {"deal", "fact_event", "pending_review", "alert_resolution"} <= tables


def test_unit_of_work_commits(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    deal = Deal(owner_id=OWNER, name="Committed")

    with SqlAlchemyLedgerUnitOfWork() as uow:
        uow.repositories.deals.add(deal)
        uow.commit()

    with SqlAlchemyLedgerUnitOfWork() as uow:
        stored = uow.repositories.deals.get(deal.id)
        assert stored is not None
        assert stored.name == "Committed"


def test_unit_of_work_discards_uncommitted_changes(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    deal = Deal(owner_id=OWNER, name="Discarded")

    with SqlAlchemyLedgerUnitOfWork() as uow:
        uow.repositories.deals.add(deal)

    with SqlAlchemyLedgerUnitOfWork() as uow:
        assert uow.repositories.deals.get(deal.id) is None


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    deal = Deal(owner_id=OWNER, name="Rolled back")

    with pytest.raises(RuntimeError), SqlAlchemyLedgerUnitOfWork() as uow:
        uow.repositories.deals.add(deal)
        uow.session.flush()
        raise RuntimeError("boom")

    with SqlAlchemyLedgerUnitOfWork() as uow:
        assert uow.repositories.deals.get(deal.id) is None


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyLedgerUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
