"""Request-scoped dependencies shared by the endpoint modules."""

from collections.abc import Mapping
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from dealledger.domain.deals import parse_deal_id
from dealledger.domain.ports import LedgerUnitOfWorkFactory


def get_unit_of_work_factory(request: Request) -> LedgerUnitOfWorkFactory:
    return request.app.state.unit_of_work_factory


def get_severity_credits(request: Request) -> Mapping[str, int]:
    return request.app.state.severity_credits


def get_user_id(
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
) -> str:
    """Caller identity; authentication happens upstream of this service."""

    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id.strip()


def get_deal_id(deal_id: str) -> UUID:
    return parse_deal_id(deal_id)


UnitOfWorkFactory = Annotated[LedgerUnitOfWorkFactory, Depends(get_unit_of_work_factory)]
SeverityCredits = Annotated[Mapping[str, int], Depends(get_severity_credits)]
UserId = Annotated[str, Depends(get_user_id)]
DealId = Annotated[UUID, Depends(get_deal_id)]
