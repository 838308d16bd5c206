from __future__ import annotations

import json

import pytest
import responses
from click.testing import CliRunner
from responses import matchers

from oxr import cli as cli_module
from oxr.cli import cli

API_BASE = "https://openexchangerates.org/api"


@pytest.fixture()
def runner(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OXR_APP_ID", "cli-app")
    monkeypatch.delenv("OXR_BASE_CURRENCY", raising=False)
    monkeypatch.delenv("OXR_SHOW_ALTERNATIVE", raising=False)
    monkeypatch.setattr(cli_module, "setup_logging", lambda settings: None)
    return CliRunner()


@responses.activate
def test_latest_prints_rates_as_json(runner, load_json_fixture):
    responses.add(
        responses.GET,
        f"{API_BASE}/latest.json",
        json=load_json_fixture("latest_usd.json"),
        match=[
            matchers.query_param_matcher(
                {"app_id": "cli-app", "base": "EUR", "show_alternative": "1", "symbols": "GBP,JPY"}
            )
        ],
        status=200,
    )

    result = runner.invoke(
        cli, ["--base", "eur", "--show-alternative", "latest", "-s", "GBP,JPY"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["GBP"] == 0.803


@responses.activate
def test_convert_prints_conversion(runner, load_json_fixture):
    responses.add(
        responses.GET,
        f"{API_BASE}/convert/19999.95/GBP/EUR",
        json=load_json_fixture("convert.json"),
        status=200,
    )

    result = runner.invoke(cli, ["convert", "19999.95", "EUR", "--from", "GBP"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["value"] == 23231.94


def test_validation_error_exits_non_zero_without_request(runner):
    with responses.RequestsMock() as rsps:
        result = runner.invoke(cli, ["historical", "June 1st"])

        assert len(rsps.calls) == 0

    assert result.exit_code == 1
    assert "not a valid date" in result.output


@responses.activate
def test_api_error_is_reported(runner, load_json_fixture):
    responses.add(
        responses.GET,
        f"{API_BASE}/usage.json",
        json=load_json_fixture("error_invalid_app_id.json"),
        status=401,
    )

    result = runner.invoke(cli, ["usage"])

    assert result.exit_code == 1
    assert "invalid_app_id" in result.output


def test_unknown_period_rejected_by_choice(runner):
    result = runner.invoke(cli, ["ohlc", "2023-06-01T10:30:00Z", "2h"])

    assert result.exit_code == 2


def test_missing_app_id_is_usage_error(runner, monkeypatch):
    monkeypatch.delenv("OXR_APP_ID")

    result = runner.invoke(cli, ["usage"])

    assert result.exit_code == 2
    assert "OXR_APP_ID" in result.output


def test_dotenv_file_is_loaded(runner, monkeypatch, tmp_path, load_json_fixture):
    monkeypatch.delenv("OXR_APP_ID")
    (tmp_path / ".env").write_text("OXR_APP_ID=from-dotenv\n")

    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            f"{API_BASE}/usage.json",
            json=load_json_fixture("usage.json"),
            match=[matchers.query_param_matcher({"app_id": "from-dotenv"})],
            status=200,
        )
        result = runner.invoke(cli, ["usage"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["plan"]["name"] == "Enterprise"


def test_subcommand_help_works_without_app_id(runner, monkeypatch):
    monkeypatch.delenv("OXR_APP_ID")

    result = runner.invoke(cli, ["latest", "--help"])

    assert result.exit_code == 0
    assert "--symbols" in result.output


def test_bad_subcommand_arguments_do_not_open_a_client(runner, monkeypatch):
    built = []
    monkeypatch.setattr(cli_module, "_build_client", lambda ctx: built.append(ctx))

    result = runner.invoke(cli, ["convert", "ten", "EUR"])

    assert result.exit_code == 2
    assert built == []


@responses.activate
def test_client_closed_after_command(runner, monkeypatch, load_json_fixture):
    closed = []
    monkeypatch.setattr(cli_module.OXR, "close", lambda self: closed.append(self))
    responses.add(
        responses.GET,
        f"{API_BASE}/usage.json",
        json=load_json_fixture("usage.json"),
        status=200,
    )

    result = runner.invoke(cli, ["usage"])

    assert result.exit_code == 0, result.output
    assert len(closed) == 1
