"""Debt payoff projections (snowball and avalanche).

The projector is a pure function of its inputs: balances are copied before the
month loop runs, nothing is cached between calls, and the only clock read is
``date.today()`` when the caller does not pass ``today`` explicitly.
"""

from __future__ import annotations

import calendar
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Hashable, Iterable, Optional, Sequence

from ..errors import InvalidInput

logger = logging.getLogger("payoffsage.services.debts")

MAX_MONTHS = 360
MINIMUM_PAYMENT_FLOOR = 25.0
MINIMUM_PAYMENT_RATE = 0.02


class PayoffStrategy(str, Enum):
    """Which debt receives the extra monthly payment."""

    AVALANCHE = "avalanche"  # highest APR first
    SNOWBALL = "snowball"  # smallest balance first

    @classmethod
    def parse(cls, value: "PayoffStrategy | str") -> "PayoffStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidInput(f"Invalid debt payoff strategy: {value!r}") from exc


@dataclass(slots=True, frozen=True)
class ProjectionSettings:
    """Knobs for the month loop.

    ``allow_negative_amortization`` reproduces the raw minimum-payment rule even
    when it does not cover the month's interest, letting balances grow. By
    default the payment is floored at the interest charge so balances never rise.
    """

    max_months: int = MAX_MONTHS
    minimum_payment_floor: float = MINIMUM_PAYMENT_FLOOR
    minimum_payment_rate: float = MINIMUM_PAYMENT_RATE
    allow_negative_amortization: bool = False

    def minimum_payment(self, balance: float) -> float:
        return max(self.minimum_payment_floor, balance * self.minimum_payment_rate)


DEFAULT_SETTINGS = ProjectionSettings()


@dataclass(slots=True)
class Debt:
    """A single owed balance fed to the projector."""

    id: Hashable
    balance: float
    annual_interest_rate: Optional[float] = 0.0  # percent, 4.5 == 4.5% APR
    name: Optional[str] = None

    @property
    def monthly_rate(self) -> float:
        return float(self.annual_interest_rate or 0.0) / 100.0 / 12.0


@dataclass(slots=True)
class PayoffPlan:
    """Strategy plus extra payment; name/account metadata is display only."""

    strategy: PayoffStrategy | str = PayoffStrategy.AVALANCHE
    extra_monthly_payment: float = 0.0
    debts: list[Debt] = field(default_factory=list)
    name: str = ""
    account_ids: list[Hashable] = field(default_factory=list)
    is_active: bool = True


@dataclass(slots=True)
class MonthlySnapshot:
    """State of every debt at the end of one simulated month."""

    month: int
    due_date: date
    balances: dict[Hashable, float]
    interest: dict[Hashable, float]
    payments: dict[Hashable, float]
    target_id: Optional[Hashable]
    total_interest: float


@dataclass(slots=True)
class ProjectionResult:
    """Outcome of a payoff projection."""

    months_to_payoff: int
    payoff_date: date
    total_interest_paid: float
    converged: bool = True
    remaining_balance: float = 0.0
    payoff_order: list[Hashable] = field(default_factory=list)
    schedule: list[MonthlySnapshot] = field(default_factory=list)

    def as_dict(self, *, include_schedule: bool = False) -> dict[str, Any]:
        """Return a JSON-friendly representation for presentation code."""

        data: dict[str, Any] = {
            "months_to_payoff": self.months_to_payoff,
            "payoff_date": self.payoff_date.isoformat(),
            "total_interest_paid": self.total_interest_paid,
            "converged": self.converged,
            "remaining_balance": self.remaining_balance,
            "payoff_order": [str(debt_id) for debt_id in self.payoff_order],
        }
        if include_schedule:
            data["schedule"] = [
                {
                    "month": snap.month,
                    "date": snap.due_date.isoformat(),
                    "target": None if snap.target_id is None else str(snap.target_id),
                    "total_interest": round_cents(snap.total_interest),
                    "balances": {str(k): round_cents(v) for k, v in snap.balances.items()},
                    "payments": {str(k): round_cents(v) for k, v in snap.payments.items()},
                }
                for snap in self.schedule
            ]
        return data


def round_cents(amount: float) -> float:
    """Round to cents using half-up rounding."""

    return float(Decimal(repr(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def add_months(start: date, months: int) -> date:
    """Advance ``start`` by calendar months, clamping to the month's last day."""

    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _require_number(value: Any, *, label: str) -> float:
    if isinstance(value, bool):
        raise InvalidInput(f"{label} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"{label} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidInput(f"{label} must be finite, got {value!r}")
    if number < 0:
        raise InvalidInput(f"{label} cannot be negative, got {value!r}")
    return number


def validate_inputs(debts: Sequence[Debt], extra_monthly_payment: float) -> None:
    """Reject negative, non-finite or duplicate-id inputs with ``InvalidInput``."""

    _require_number(extra_monthly_payment, label="extra_monthly_payment")
    seen: set[Hashable] = set()
    for debt in debts:
        _require_number(debt.balance, label=f"balance of debt {debt.id!r}")
        if debt.annual_interest_rate is not None:
            _require_number(
                debt.annual_interest_rate, label=f"annual_interest_rate of debt {debt.id!r}"
            )
        if debt.id in seen:
            raise InvalidInput(f"Duplicate debt id: {debt.id!r}")
        seen.add(debt.id)


def order_debts(debts: Iterable[Debt], strategy: PayoffStrategy | str) -> list[Debt]:
    """Return debts in targeting order; ties keep their input order."""

    strategy = PayoffStrategy.parse(strategy)
    if strategy is PayoffStrategy.AVALANCHE:
        # Sort debts by APR, descending (sorted() is stable under reverse=True).
        return sorted(debts, key=lambda d: float(d.annual_interest_rate or 0.0), reverse=True)
    # Sort debts by balance, ascending.
    return sorted(debts, key=lambda d: float(d.balance))


def simulate(
    debts: Sequence[Debt],
    *,
    strategy: PayoffStrategy | str,
    extra_monthly_payment: float = 0.0,
    today: date | None = None,
    settings: ProjectionSettings | None = None,
) -> list[MonthlySnapshot]:
    """Run the month-by-month amortization loop and return every month."""

    settings = settings or DEFAULT_SETTINGS
    debts = list(debts)
    validate_inputs(debts, extra_monthly_payment)
    extra = float(extra_monthly_payment)
    start = today or date.today()

    # The targeting order is fixed here and never re-sorted as balances move.
    ordered = order_debts(debts, strategy)
    ids = [debt.id for debt in ordered]
    rates = [debt.monthly_rate for debt in ordered]
    balances = [max(float(debt.balance), 0.0) for debt in ordered]

    schedule: list[MonthlySnapshot] = []
    month = 0
    while any(balance > 0 for balance in balances) and month < settings.max_months:
        target = next(index for index, balance in enumerate(balances) if balance > 0)
        updated = list(balances)
        interest_by_id: dict[Hashable, float] = {}
        payments_by_id: dict[Hashable, float] = {}
        month_interest = 0.0

        for index, balance in enumerate(balances):
            if balance <= 0:
                continue

            interest_charge = balance * rates[index]
            payment = settings.minimum_payment(balance)
            if index == target:
                payment += extra
            if not settings.allow_negative_amortization:
                payment = max(payment, interest_charge)

            total_due = balance + interest_charge
            if payment >= total_due:
                # Overpayment is clamped away, never rolled to the next debt.
                payment = total_due
                updated[index] = 0.0
            else:
                updated[index] = max(0.0, balance - (payment - interest_charge))
            interest_by_id[ids[index]] = interest_charge
            payments_by_id[ids[index]] = payment
            month_interest += interest_charge

        balances = updated
        month += 1
        schedule.append(
            MonthlySnapshot(
                month=month,
                due_date=add_months(start, month),
                balances=dict(zip(ids, balances)),
                interest=interest_by_id,
                payments=payments_by_id,
                target_id=ids[target],
                total_interest=month_interest,
            )
        )

    return schedule


def project(
    debts: Sequence[Debt] | None,
    plan: PayoffPlan,
    *,
    today: date | None = None,
    settings: ProjectionSettings | None = None,
) -> ProjectionResult:
    """Project months to payoff, payoff date and total interest for a plan.

    ``debts`` falls back to ``plan.debts`` when ``None``. Hitting the month cap
    with money still owed is reported through ``converged=False`` rather than
    an exception.
    """

    settings = settings or DEFAULT_SETTINGS
    debts = list(plan.debts if debts is None else debts)
    strategy = PayoffStrategy.parse(plan.strategy)
    start = today or date.today()

    logger.debug(
        "Projecting payoff",
        extra={"strategy": strategy.value, "debt_count": len(debts), "plan": plan.name},
    )
    schedule = simulate(
        debts,
        strategy=strategy,
        extra_monthly_payment=plan.extra_monthly_payment,
        today=start,
        settings=settings,
    )

    months = len(schedule)
    total_interest = sum(snap.total_interest for snap in schedule)
    remaining = sum(schedule[-1].balances.values()) if schedule else 0.0
    converged = remaining <= 0

    result = ProjectionResult(
        months_to_payoff=months,
        payoff_date=add_months(start, months),
        total_interest_paid=round_cents(total_interest),
        converged=converged,
        remaining_balance=round_cents(remaining),
        payoff_order=[debt.id for debt in order_debts(debts, strategy)],
        schedule=schedule,
    )

    if not converged:
        logger.warning(
            "Payoff did not converge within %s months; %.2f still owed",
            settings.max_months,
            result.remaining_balance,
            extra={"strategy": strategy.value, "plan": plan.name},
        )
    else:
        logger.info(
            "Projected payoff in %s months",
            months,
            extra={
                "strategy": strategy.value,
                "debt_count": len(debts),
                "total_interest_paid": result.total_interest_paid,
            },
        )
    return result


def compare_strategies(
    debts: Sequence[Debt],
    *,
    extra_monthly_payment: float = 0.0,
    today: date | None = None,
    settings: ProjectionSettings | None = None,
) -> dict[PayoffStrategy, ProjectionResult]:
    """Project the same debts under every strategy."""

    start = today or date.today()
    return {
        strategy: project(
            debts,
            PayoffPlan(strategy=strategy, extra_monthly_payment=extra_monthly_payment),
            today=start,
            settings=settings,
        )
        for strategy in PayoffStrategy
    }


def project_many(
    requests: Iterable[tuple[Sequence[Debt], PayoffPlan]],
    *,
    max_workers: int | None = None,
    today: date | None = None,
    settings: ProjectionSettings | None = None,
) -> list[ProjectionResult]:
    """Project independent (debts, plan) pairs on a thread pool, preserving order."""

    start = today or date.today()
    pending = list(requests)
    if not pending:
        return []
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(
            pool.map(
                lambda item: project(item[0], item[1], today=start, settings=settings),
                pending,
            )
        )


__all__ = [
    "MAX_MONTHS",
    "MINIMUM_PAYMENT_FLOOR",
    "MINIMUM_PAYMENT_RATE",
    "Debt",
    "MonthlySnapshot",
    "PayoffPlan",
    "PayoffStrategy",
    "ProjectionResult",
    "ProjectionSettings",
    "add_months",
    "round_cents",
    "compare_strategies",
    "order_debts",
    "project",
    "project_many",
    "simulate",
    "validate_inputs",
]
