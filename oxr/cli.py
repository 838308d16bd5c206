"""Command line interface for querying the Open Exchange Rates API."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import click
from dotenv import load_dotenv

from .client import OXR
from .config import get_settings
from .dates import Period
from .errors import OXRError
from .logging import setup_logging

logger = logging.getLogger(__name__)


def _prepare_environment() -> None:
    """Load environment variables from a ``.env`` file in the working directory."""

    env_file = os.path.join(os.getcwd(), ".env")
    if os.path.exists(env_file):
        load_dotenv(env_file)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, sort_keys=True))


def _build_client(ctx: click.Context) -> OXR:
    """Create the client from the environment once a command actually runs."""

    options = ctx.find_root().params
    _prepare_environment()
    try:
        settings = get_settings()
    except ValueError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc
    setup_logging(settings)

    try:
        client = OXR.from_settings(settings)
        if options.get("base"):
            client.set_base_currency(options["base"])
    except OXRError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc
    if options.get("show_alternative") is not None:
        client.set_show_alternative(options["show_alternative"])
    ctx.call_on_close(client.close)
    return client


def _run(ctx: click.Context, call) -> None:
    client = _build_client(ctx)
    try:
        _echo_json(call(client))
    except OXRError as exc:
        logger.debug("Command failed", exc_info=True)
        raise click.ClickException(str(exc)) from exc


def _symbols(values: tuple[str, ...]) -> list[str]:
    codes: list[str] = []
    for value in values:
        codes.extend(part for part in value.split(",") if part)
    return codes


@click.group()
@click.option("--base", default=None, help="Base currency (defaults to OXR_BASE_CURRENCY or USD)")
@click.option(
    "--show-alternative/--no-show-alternative",
    default=None,
    help="Include alternative, black market and digital currencies",
)
@click.pass_context
def cli(ctx: click.Context, base: str | None, show_alternative: bool | None) -> None:
    """Query exchange rates from openexchangerates.org."""


@cli.command("currencies")
@click.pass_context
def currencies_cmd(ctx: click.Context) -> None:
    """List available currency codes and names."""

    _run(ctx, lambda client: client.get_currencies())


@cli.command("latest")
@click.option("--symbols", "-s", multiple=True, help="Limit results to these currencies")
@click.pass_context
def latest_cmd(ctx: click.Context, symbols: tuple[str, ...]) -> None:
    """Show the latest rates."""

    _run(ctx, lambda client: client.get_latest_rates(_symbols(symbols)))


@cli.command("historical")
@click.argument("date")
@click.option("--symbols", "-s", multiple=True, help="Limit results to these currencies")
@click.pass_context
def historical_cmd(ctx: click.Context, date: str, symbols: tuple[str, ...]) -> None:
    """Show end-of-day rates for DATE (YYYY-MM-DD)."""

    _run(ctx, lambda client: client.get_historical_rates(date, _symbols(symbols)))


@cli.command("time-series")
@click.argument("start")
@click.argument("end")
@click.option("--symbols", "-s", multiple=True, help="Limit results to these currencies")
@click.pass_context
def time_series_cmd(ctx: click.Context, start: str, end: str, symbols: tuple[str, ...]) -> None:
    """Show daily rates between START and END (YYYY-MM-DD)."""

    _run(ctx, lambda client: client.get_time_series(start, end, _symbols(symbols)))


@cli.command("convert")
@click.argument("amount", type=float)
@click.argument("to")
@click.option("--from", "from_currency", default=None, help="Source currency (defaults to base)")
@click.pass_context
def convert_cmd(ctx: click.Context, amount: float, to: str, from_currency: str | None) -> None:
    """Convert AMOUNT into currency TO."""

    _run(ctx, lambda client: client.convert(amount, to, from_currency).to_dict())


@cli.command("ohlc")
@click.argument("start_time")
@click.argument("period", type=click.Choice([member.value for member in Period]))
@click.option("--symbols", "-s", multiple=True, help="Limit results to these currencies")
@click.pass_context
def ohlc_cmd(ctx: click.Context, start_time: str, period: str, symbols: tuple[str, ...]) -> None:
    """Show OHLC rates for PERIOD starting at START_TIME (YYYY-MM-DDThh:mm:00Z)."""

    _run(ctx, lambda client: client.get_ohlc_rates(start_time, period, _symbols(symbols)))


@cli.command("usage")
@click.pass_context
def usage_cmd(ctx: click.Context) -> None:
    """Show plan and usage statistics for the configured app id."""

    _run(ctx, lambda client: client.get_usage())


def main() -> None:
    cli(prog_name="oxr")


if __name__ == "__main__":
    main()
