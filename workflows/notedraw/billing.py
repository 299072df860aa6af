"""Credit ledger interface consulted around image generation."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class CreditLedger(Protocol):
    """External credit accounting.

    ``has_enough_credits`` gates each image generation; ``consume_credits``
    is called only after a unit completes.
    """

    async def has_enough_credits(self, amount: int) -> bool: ...

    async def consume_credits(self, amount: int, description: str) -> None: ...


class InMemoryCreditLedger:
    """Simple balance held in memory (CLI --credits and tests)."""

    def __init__(self, balance: int):
        self.balance = balance
        self.charges: list[tuple[int, str]] = []

    async def has_enough_credits(self, amount: int) -> bool:
        return self.balance >= amount

    async def consume_credits(self, amount: int, description: str) -> None:
        self.balance -= amount
        self.charges.append((amount, description))
        logger.debug(f"Charged {amount} credits for {description} (balance {self.balance})")
