"""Pytest configuration and shared fixtures for PayoffSage tests.

Provides a fixed projection date, common debt sets, and an isolated
environment so config/logging tests never touch the working directory.
"""

from __future__ import annotations

import logging
from datetime import date

import pytest

from payoffsage.services.accounts import Account
from payoffsage.services.debts import Debt

# =============================================================================
# Environment Fixtures
# =============================================================================

_ENV_VARS = (
    "PAYOFFSAGE_DATA_DIR",
    "PAYOFFSAGE_DEV_MODE",
    "PAYOFFSAGE_LOG_LEVEL",
    "PAYOFFSAGE_MAX_MONTHS",
    "PAYOFFSAGE_MINIMUM_PAYMENT_FLOOR",
    "PAYOFFSAGE_MINIMUM_PAYMENT_RATE",
)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Clear PayoffSage env vars and point DATA_DIR at a temp folder."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PAYOFFSAGE_DATA_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by setup_logging between tests."""
    yield
    logger = logging.getLogger("payoffsage")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def today() -> date:
    """Fixed projection start so payoff dates are deterministic."""
    return date(2025, 1, 15)


@pytest.fixture
def rate_vs_balance_debts() -> list[Debt]:
    """A: larger balance at a high APR; B: smaller balance at a low APR."""
    return [
        Debt(id="A", balance=1000.0, annual_interest_rate=20.0),
        Debt(id="B", balance=500.0, annual_interest_rate=5.0),
    ]


@pytest.fixture
def ledger_accounts() -> list[Account]:
    """Mixed ledger with assets, debts in both sign conventions, and inactive rows."""
    return [
        Account(id="chk", name="Checking", type="checking", current_balance=2400.0),
        Account(
            id="card",
            name="Visa",
            type="credit_card",
            current_balance=-1200.0,
            interest_rate=19.9,
        ),
        Account(id="car", name="Car Loan", type="loan", current_balance=8000.0, interest_rate=4.5),
        Account(
            id="old",
            name="Closed Loan",
            type="loan",
            current_balance=-300.0,
            interest_rate=7.0,
            is_active=False,
        ),
        Account(id="zero", name="Store Card", type="credit_card", current_balance=0.0),
    ]
