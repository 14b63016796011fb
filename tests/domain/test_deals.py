from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import pytest

from dealledger.domain.deals import create_deal, get_deal, parse_deal_id, require_user
from dealledger.domain.errors import NotFoundError, ValidationError
from tests.helpers.facts import OWNER, STRANGER

if TYPE_CHECKING:
    from collections.abc import Callable

    from dealledger.adapters.sqlalchemy import SqlAlchemyLedgerUnitOfWork
    from dealledger.domain.model import Deal


def test_owner_can_read_their_deal(
    ledger_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork], deal: Deal
) -> None:
    loaded = get_deal(deal_id=deal.id, user_id=OWNER, unit_of_work_factory=ledger_unit_of_work)

    assert loaded.name == "Acme Seed"
    assert loaded.owner_id == OWNER


def test_other_users_cannot_see_the_deal(
    ledger_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork], deal: Deal
) -> None:
    with pytest.raises(NotFoundError):
        get_deal(deal_id=deal.id, user_id=STRANGER, unit_of_work_factory=ledger_unit_of_work)


def test_deal_name_is_required(
    ledger_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork],
) -> None:
    with pytest.raises(ValidationError):
        create_deal(name="  ", user_id=OWNER, unit_of_work_factory=ledger_unit_of_work)


def test_malformed_deal_ids_look_missing() -> None:
    deal_id = UUID("00000000-0000-0000-0000-00000000d001")

    assert parse_deal_id(str(deal_id)) == deal_id
    with pytest.raises(NotFoundError):
        parse_deal_id("not-a-uuid")


def test_require_user_rejects_blank_ids() -> None:
    assert require_user(" ba ") == "ba"
    with pytest.raises(ValidationError) as exc:
        require_user("")
    assert exc.value.field == "userId"
