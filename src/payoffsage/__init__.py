"""PayoffSage debt payoff projection package."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .errors import InvalidInput
from .services.debts import Debt, PayoffPlan, PayoffStrategy, ProjectionResult, project

__all__ = [
    "BaseConfig",
    "Debt",
    "DevConfig",
    "InvalidInput",
    "PayoffPlan",
    "PayoffStrategy",
    "ProjectionResult",
    "project",
]
