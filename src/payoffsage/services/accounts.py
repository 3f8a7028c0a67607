"""Selecting payoff inputs from ledger accounts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Hashable, Iterable, Optional

from .debts import Debt, PayoffPlan, ProjectionResult, ProjectionSettings, project, round_cents

DEBT_ACCOUNT_TYPES = frozenset({"loan", "credit_card"})


@dataclass(slots=True)
class Account:
    """Ledger account as supplied by the surrounding application."""

    id: Hashable
    name: str
    type: str
    current_balance: float
    interest_rate: Optional[float] = None
    is_active: bool = True


def is_debt_account(account: Account) -> bool:
    """Return True for active loans and credit cards that still owe money."""

    return (
        account.is_active
        and (account.type or "").lower() in DEBT_ACCOUNT_TYPES
        and float(account.current_balance or 0.0) != 0.0
    )


def _to_debt(account: Account) -> Debt:
    # Ledgers store liabilities with either sign; the projector wants owed amounts.
    return Debt(
        id=account.id,
        balance=abs(float(account.current_balance)),
        annual_interest_rate=account.interest_rate or 0.0,
        name=account.name,
    )


def debts_from_accounts(
    accounts: Iterable[Account], *, account_ids: Iterable[Hashable] | None = None
) -> list[Debt]:
    """Return projector inputs for the debt accounts among ``accounts``.

    Without ``account_ids`` every debt account is returned in ledger order.
    With ``account_ids`` the ids are resolved in the order given; ids that are
    unknown or point at non-debt accounts are skipped.
    """

    eligible = [account for account in accounts if is_debt_account(account)]
    if account_ids is None:
        return [_to_debt(account) for account in eligible]

    by_id = {account.id: account for account in eligible}
    debts: list[Debt] = []
    seen: set[Hashable] = set()
    for account_id in account_ids:
        account = by_id.get(account_id)
        if account is None or account_id in seen:
            continue
        seen.add(account_id)
        debts.append(_to_debt(account))
    return debts


def total_outstanding(accounts: Iterable[Account]) -> float:
    """Sum of owed balances across debt accounts, rounded to cents."""

    return round_cents(
        sum(abs(float(account.current_balance)) for account in accounts if is_debt_account(account))
    )


def project_plan(
    plan: PayoffPlan,
    accounts: Iterable[Account],
    *,
    today: date | None = None,
    settings: ProjectionSettings | None = None,
) -> ProjectionResult:
    """Resolve ``plan.account_ids`` against the ledger and project the payoff."""

    debts = debts_from_accounts(accounts, account_ids=plan.account_ids)
    return project(debts, plan, today=today, settings=settings)


__all__ = [
    "DEBT_ACCOUNT_TYPES",
    "Account",
    "debts_from_accounts",
    "is_debt_account",
    "project_plan",
    "total_outstanding",
]
