"""Exceptions raised by the payoff engine."""


class InvalidInput(ValueError):
    """Debt or plan data is malformed (negative, non-finite or unknown values)."""
