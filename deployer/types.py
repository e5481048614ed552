"""Shared result types for the deployment flows."""

from dataclasses import dataclass
from enum import Enum

from .costs import format_native


class RunStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class BalanceSnapshot:
    """A balance as sampled at one point in the run. Never refreshed in place."""
    address: str
    wei: int
    label: str

    def __str__(self) -> str:
        return format_native(self.wei)


@dataclass(frozen=True)
class Sufficiency:
    balance: int
    required: int

    @property
    def met(self) -> bool:
        return self.balance >= self.required

    @property
    def deficit(self) -> int:
        return max(self.required - self.balance, 0)

    def describe(self) -> str:
        if self.met:
            return "met"
        return f"short by {format_native(self.deficit)}"
