"""Service module exports."""

from . import accounts, debts

__all__ = [
    "accounts",
    "debts",
]
