"""Domain error taxonomy shared by services and adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class LedgerError(Exception):
    """Base class for every error raised by the ledger core."""


class ValidationError(LedgerError, ValueError):
    """Raised when input is malformed; nothing has been written."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(LedgerError, LookupError):
    """Raised when a deal or review does not exist or is not visible to the caller."""


class ConflictError(LedgerError):
    """Raised when a concurrent write invalidated the state an operation was based on."""


class StaleReviewError(ConflictError):
    """Raised when a pending review was already consumed."""

    def __init__(self, review_id: UUID) -> None:
        super().__init__(f"Review {review_id} was already resolved; refetch and retry")
        self.review_id = review_id


@dataclass(slots=True, frozen=True)
class IntegrityWarning:
    """More than one live CREATED event was found for one fact at read time."""

    fact_key: str
    live_event_ids: tuple[UUID, ...]
    chosen_event_id: UUID

    def describe(self) -> str:
        ids = ", ".join(str(event_id) for event_id in self.live_event_ids)
        return (
            f"{len(self.live_event_ids)} live events for {self.fact_key!r} ({ids}); "
            f"using {self.chosen_event_id}"
        )
