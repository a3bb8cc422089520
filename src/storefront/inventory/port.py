"""Stock ledger port (abstract interface).

The ledger is the single owner of per-variant stock counts. Every adapter
must make ``reserve`` a check-and-decrement in one indivisible step, so
concurrent reservations against the same variant can never oversell it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StockLevel:
    """Stock of one variant as observed right after a ledger operation."""

    variant_id: str
    stock_quantity: int


@dataclass(frozen=True)
class StockMovement:
    """One entry of the append-only movement log."""

    variant_id: str
    kind: str
    quantity_change: int
    balance_after: int
    reference: str | None = None
    created_at: datetime | None = None


class StockLedger(ABC):
    """Abstract stock ledger interface."""

    @abstractmethod
    def register(self, variant_id: str, quantity: int) -> StockLevel:
        """Open a stock row for a new variant."""
        ...

    @abstractmethod
    def reserve(self, variant_id: str, quantity: int, reference: str | None = None) -> StockLevel:
        """Take ``quantity`` units out of stock, or raise InsufficientStock.

        A reference that was already applied makes the call a no-op that
        returns the current level.
        """
        ...

    @abstractmethod
    def release(self, variant_id: str, quantity: int, reference: str | None = None) -> StockLevel:
        """Put ``quantity`` units back into stock."""
        ...

    @abstractmethod
    def set_level(self, variant_id: str, quantity: int) -> StockLevel:
        """Overwrite the stock count (admin correction)."""
        ...

    @abstractmethod
    def level(self, variant_id: str) -> StockLevel:
        ...

    @abstractmethod
    def levels(self, variant_ids) -> dict[str, int]:
        """Stock counts keyed by variant id; unknown ids are left out."""
        ...

    @abstractmethod
    def remove(self, variant_ids) -> None:
        """Drop the stock rows of deleted variants."""
        ...

    @abstractmethod
    def movements(self, variant_id: str) -> list[StockMovement]:
        ...
