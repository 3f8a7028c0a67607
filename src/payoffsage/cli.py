"""Command line entry points for PayoffSage."""

from __future__ import annotations

import json

import click

from .config import BaseConfig
from .errors import InvalidInput
from .logging_config import get_logger, setup_logging
from .services.debts import (
    Debt,
    PayoffPlan,
    PayoffStrategy,
    ProjectionResult,
    compare_strategies,
    project,
)

logger = get_logger("cli")


def _parse_debts(ctx, param, values) -> list[Debt]:
    """Turn ``ID:BALANCE[:RATE]`` strings into debts."""

    debts: list[Debt] = []
    for raw in values:
        parts = raw.split(":")
        if len(parts) not in (2, 3) or not parts[0]:
            raise click.BadParameter(f"expected ID:BALANCE[:RATE], got {raw!r}", param=param)
        try:
            balance = float(parts[1])
            rate = float(parts[2]) if len(parts) == 3 and parts[2] else 0.0
        except ValueError as exc:
            raise click.BadParameter(f"non-numeric amount in {raw!r}", param=param) from exc
        debts.append(Debt(id=parts[0], balance=balance, annual_interest_rate=rate))
    return debts


debt_option = click.option(
    "--debt",
    "debts",
    multiple=True,
    callback=_parse_debts,
    metavar="ID:BALANCE[:RATE]",
    help="Debt to include; repeat for several. RATE is the APR in percent.",
)
extra_option = click.option(
    "--extra",
    type=float,
    default=0.0,
    show_default=True,
    help="Extra monthly payment applied to the targeted debt.",
)


def _settings(ctx: click.Context):
    return ctx.obj["config"].projection_settings()


def _echo_result(label: str, result: ProjectionResult) -> None:
    click.echo(f"{label}:")
    click.echo(f"  Months to payoff: {result.months_to_payoff}")
    click.echo(f"  Payoff date:      {result.payoff_date.isoformat()}")
    click.echo(f"  Total interest:   {result.total_interest_paid:,.2f}")
    if not result.converged:
        click.echo(
            f"  Not paid off after {result.months_to_payoff} months; "
            f"{result.remaining_balance:,.2f} still owed."
        )


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Log projection details.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Project debt payoff timelines."""

    config = BaseConfig()
    if verbose:
        setup_logging(config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    logger.debug("Running %s", ctx.invoked_subcommand)


@main.command("project")
@debt_option
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in PayoffStrategy], case_sensitive=False),
    default=PayoffStrategy.AVALANCHE.value,
    show_default=True,
)
@extra_option
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON.")
@click.option("--schedule", is_flag=True, default=False, help="Include the monthly schedule.")
@click.pass_context
def project_command(
    ctx: click.Context,
    debts: list[Debt],
    strategy: str,
    extra: float,
    as_json: bool,
    schedule: bool,
) -> None:
    """Project payoff for one strategy."""

    plan = PayoffPlan(strategy=strategy, extra_monthly_payment=extra)
    try:
        result = project(debts, plan, settings=_settings(ctx))
    except InvalidInput as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(result.as_dict(include_schedule=schedule), indent=2))
        return

    _echo_result(PayoffStrategy.parse(strategy).value.capitalize(), result)
    if schedule:
        for snap in result.schedule:
            balances = ", ".join(f"{k}={v:,.2f}" for k, v in snap.balances.items())
            click.echo(f"  {snap.month:>3} {snap.due_date.isoformat()}  {balances}")


@main.command("compare")
@debt_option
@extra_option
@click.pass_context
def compare_command(ctx: click.Context, debts: list[Debt], extra: float) -> None:
    """Compare avalanche and snowball for the same debts."""

    try:
        results = compare_strategies(debts, extra_monthly_payment=extra, settings=_settings(ctx))
    except InvalidInput as exc:
        raise click.ClickException(str(exc)) from exc

    for strategy, result in results.items():
        _echo_result(strategy.value.capitalize(), result)

    avalanche = results[PayoffStrategy.AVALANCHE].total_interest_paid
    snowball = results[PayoffStrategy.SNOWBALL].total_interest_paid
    click.echo(f"Interest difference (snowball - avalanche): {snowball - avalanche:,.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
