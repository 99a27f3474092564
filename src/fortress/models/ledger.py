"""Resource ledger — wood, stone, food and focus tokens.

Stocks are non-negative integers. Deductions either succeed in full or
leave the ledger untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from fortress.util.constants import RESOURCE_KEYS


@dataclass
class ResourceLedger:
    """Stock quantities plus the separate focus-token counter.

    Attributes:
        stocks: Resource key → amount (wood, stone, food).
        focus_tokens: Tokens earned per completed session, spent on calming.
    """

    stocks: dict[str, int] = field(default_factory=lambda: {k: 0 for k in RESOURCE_KEYS})
    focus_tokens: int = 0

    def get(self, key: str) -> int:
        return self.stocks.get(key, 0)

    def can_afford(self, costs: Mapping[str, int]) -> bool:
        """True if every required resource is covered."""
        return all(self.get(res) >= amount for res, amount in costs.items())

    def spend(self, costs: Mapping[str, int]) -> bool:
        """Deduct *costs* if affordable. Returns False (and changes nothing) otherwise."""
        if not self.can_afford(costs):
            return False
        for res, amount in costs.items():
            self.stocks[res] = self.get(res) - amount
        return True

    def credit(self, amounts: Mapping[str, int]) -> None:
        """Add resources. Negative amounts are ignored."""
        for res, amount in amounts.items():
            self.stocks[res] = self.get(res) + max(0, int(amount))

    def take_up_to(self, key: str, amount: int) -> int:
        """Remove at most *amount* of *key*; returns how much was removed."""
        taken = max(0, min(self.get(key), int(amount)))
        self.stocks[key] = self.get(key) - taken
        return taken

    def spend_token(self) -> bool:
        """Consume one focus token if available."""
        if self.focus_tokens <= 0:
            return False
        self.focus_tokens -= 1
        return True

    def to_dict(self) -> dict[str, int]:
        return {**{k: self.get(k) for k in RESOURCE_KEYS}, "focus_tokens": self.focus_tokens}
