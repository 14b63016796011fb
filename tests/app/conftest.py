from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from dealledger.ui.api import create_app
from tests.helpers.facts import OWNER

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from dealledger.adapters.sqlalchemy import SqlAlchemyLedgerUnitOfWork


@pytest.fixture
def client(
    ledger_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork],
) -> Iterator[TestClient]:
    app = create_app(unit_of_work_factory=ledger_unit_of_work)
    with TestClient(app, headers={"X-User-Id": OWNER}) as test_client:
        yield test_client


@pytest.fixture
def deal_id(client: TestClient) -> str:
    response = client.post("/deals", json={"name": "Acme Seed"})
    assert response.status_code == 201
    return response.json()["id"]
