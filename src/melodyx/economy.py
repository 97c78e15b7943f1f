"""Reward sink: where mode controllers send point and token deltas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@runtime_checkable
class RewardSink(Protocol):
    def grant(self, currency: str, amount: int, reason: str = "") -> None: ...


@dataclass
class Grant:
    currency: str
    amount: int
    reason: str = ""


@dataclass
class RewardLedger:
    """In-process sink that keeps every grant and running balances."""

    grants: list[Grant] = field(default_factory=list)

    def grant(self, currency: str, amount: int, reason: str = "") -> None:
        self.grants.append(Grant(currency, amount, reason))

    def balance(self, currency: str) -> int:
        return sum(g.amount for g in self.grants if g.currency == currency)


class NullSink:
    def grant(self, currency: str, amount: int, reason: str = "") -> None:
        pass
