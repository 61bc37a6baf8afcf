"""Tests for the `crunchbase` command line interface."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner
from fakes import json_response
from loguru import logger

from crunchbase_client import cli as cli_module
from crunchbase_client.api import CrunchbaseAPI


@pytest.fixture
def fake_api(monkeypatch: pytest.MonkeyPatch):
    """Route every `CrunchbaseAPI` built by the CLI through a mock transport."""
    seen: list[httpx.Request] = []
    responses: dict[str, httpx.Response] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return responses.get(request.url.path, json_response(error={"message": "nope", "status": 404}))

    def factory(settings, client=None, registry=None) -> CrunchbaseAPI:
        mock = httpx.Client(transport=httpx.MockTransport(handler))
        return CrunchbaseAPI(settings, mock, registry)

    monkeypatch.setattr(cli_module, "CrunchbaseAPI", factory)
    return seen, responses


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "crunchbase.yml"
    path.write_text("CRUNCHBASE_USER_KEY: cli-key\nCRUNCHBASE_BASE_URL: https://api.example.com\n")
    return path


@pytest.fixture(autouse=True)
def _clear_config_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("CRUNCHBASE_CONFIG_PATH", raising=False)
    yield
    # The CLI points loguru at the runner's captured stderr; restore the default sink.
    logger.remove()
    logger.add(sys.stderr)


def _json_lines(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def test_get_prints_entity_json(fake_api, config_file: Path) -> None:
    seen, responses = fake_api
    responses["/v3.1/organizations/facebook"] = json_response({"properties": {"name": "Facebook"}})

    result = CliRunner().invoke(
        cli_module.cli, ["--config", str(config_file), "get", "organizations", "facebook"]
    )

    assert result.exit_code == 0, result.output
    assert _json_lines(result.stdout) == [{"name": "Facebook"}]
    assert seen[0].url.params["user_key"] == "cli-key"


def test_search_passes_options(fake_api, config_file: Path) -> None:
    seen, responses = fake_api
    responses["/v3.1/people"] = json_response([{"first_name": "Ada"}, {"first_name": "Grace"}])

    result = CliRunner().invoke(
        cli_module.cli,
        ["--config", str(config_file), "search", "people", "--page", "2", "--option", "name=ada"],
    )

    assert result.exit_code == 0, result.output
    assert [item["first_name"] for item in _json_lines(result.stdout)] == ["Ada", "Grace"]
    params = seen[0].url.params
    assert params["page"] == "2"
    assert params["order"] == "created_at asc"
    assert params["name"] == "ada"


def test_api_errors_exit_non_zero(fake_api, config_file: Path) -> None:
    result = CliRunner().invoke(
        cli_module.cli, ["--config", str(config_file), "get", "people", "nobody"]
    )

    assert result.exit_code == 1


def test_missing_credential_exits_non_zero(fake_api, monkeypatch: pytest.MonkeyPatch) -> None:
    seen, _ = fake_api
    monkeypatch.delenv("CRUNCHBASE_USER_KEY", raising=False)

    result = CliRunner().invoke(cli_module.cli, ["get", "people", "ada"])

    assert result.exit_code == 1
    assert seen == []


def test_malformed_option_is_a_usage_error(fake_api, config_file: Path) -> None:
    result = CliRunner().invoke(
        cli_module.cli, ["--config", str(config_file), "search", "people", "--option", "novalue"]
    )

    assert result.exit_code == 2
