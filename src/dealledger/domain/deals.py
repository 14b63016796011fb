"""Deal creation and ownership checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from dealledger.domain.errors import NotFoundError, ValidationError
from dealledger.domain.model import Deal

if TYPE_CHECKING:
    from dealledger.domain.ports import LedgerRepositories, LedgerUnitOfWorkFactory

log = logging.getLogger(__name__)


def parse_deal_id(raw: str | UUID) -> UUID:
    """Read a deal id; malformed ids are reported like unknown deals."""

    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw).strip())
    except ValueError:
        raise NotFoundError(f"Deal {raw} not found") from None


def require_user(user_id: str | None) -> str:
    if user_id is None or not user_id.strip():
        raise ValidationError("caller id is required", field="userId")
    return user_id.strip()


def require_owned_deal(repositories: LedgerRepositories, deal_id: UUID, user_id: str) -> Deal:
    """Return the deal if the caller owns it; otherwise behave as if it does not exist."""

    deal = repositories.deals.get(deal_id)
    if deal is None or not deal.is_owned_by(user_id):
        raise NotFoundError(f"Deal {deal_id} not found")
    return deal


def create_deal(
    *,
    name: str,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> Deal:
    deal = Deal(owner_id=require_user(user_id), name=name)
    with unit_of_work_factory() as uow:
        uow.repositories.deals.add(deal)
        uow.commit()
    log.info("Created deal %s (%s) for %s", deal.id, deal.name, deal.owner_id)
    return deal


def get_deal(
    *,
    deal_id: UUID,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> Deal:
    with unit_of_work_factory() as uow:
        return require_owned_deal(uow.repositories, deal_id, require_user(user_id))
