"""
Tests for the command-line interface.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from articlesift.cli import cli, describe_method
from articlesift.errors import NotFoundError, ParsingFailedError
from articlesift.extractor.models import (
    BenchmarkRecord,
    BenchmarkWinner,
    HybridParsingResult,
    ParsingMethod,
)

URL = "https://example.com/story"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def mock_configure_logging():
    """Keep the CLI from replacing the root log handlers during tests."""
    with patch("articlesift.cli.configure_logging") as mock:
        yield mock


def test_log_level_option_overrides_config(runner, mock_configure_logging):
    result = runner.invoke(cli, ["--log-level", "DEBUG", "recommend", URL])

    assert result.exit_code == 0
    assert mock_configure_logging.call_args.args[0].log_level == "DEBUG"


@pytest.fixture
def parsed_result():
    return HybridParsingResult(
        parsing_method=ParsingMethod.HYBRID,
        title="Observatory confirms binary system",
        content="x" * 1500,
        url=URL,
        author="Dana Ortiz",
        has_full_content=True,
        confidence=90,
    )


def test_describe_method_covers_every_member():
    assert {describe_method(method) for method in ParsingMethod} == {
        "structured data only",
        "readability only",
        "structured data + readability",
        "structured data (readability failed)",
    }


@patch("articlesift.cli.parse_article_hybrid", new_callable=AsyncMock)
def test_parse_json(mock_parse, runner, parsed_result):
    mock_parse.return_value = parsed_result

    result = runner.invoke(cli, ["parse", URL, "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["parsingMethod"] == "hybrid"
    assert payload["confidence"] == 90
    assert payload["accessibility"]["isAccessible"] is True


@patch("articlesift.cli.parse_article_hybrid", new_callable=AsyncMock)
def test_parse_table(mock_parse, runner, parsed_result):
    mock_parse.return_value = parsed_result

    result = runner.invoke(cli, ["parse", URL])

    assert result.exit_code == 0
    assert "Observatory confirms binary system" in result.output
    assert "structured data + readability" in result.output


@patch("articlesift.cli.parse_article_hybrid", new_callable=AsyncMock)
def test_parse_failure_exits_nonzero(mock_parse, runner):
    failure = ParsingFailedError("Failed to parse article: HTTP 404")
    failure.__cause__ = NotFoundError("HTTP 404")
    mock_parse.side_effect = failure

    result = runner.invoke(cli, ["parse", URL, "--json"])

    assert result.exit_code == 1
    assert json.loads(result.output)["details"]["category"] == "no-content"


def test_recommend(runner):
    result = runner.invoke(cli, ["recommend", "https://someone.blogspot.com/post"])

    assert result.exit_code == 0
    assert "traditional-first" in result.output


@patch("articlesift.cli.benchmark_parsing_methods", new_callable=AsyncMock)
def test_benchmark_reads_url_file(mock_benchmark, runner, tmp_path):
    url_file = tmp_path / "urls.txt"
    url_file.write_text("# comment\nhttps://example.com/a\n\nhttps://example.com/b\n")
    mock_benchmark.return_value = [
        BenchmarkRecord(url="https://example.com/a", winner=BenchmarkWinner.HYBRID),
        BenchmarkRecord(url="https://example.com/b"),
    ]

    result = runner.invoke(cli, ["benchmark", "--file", str(url_file), "--json"])

    assert result.exit_code == 0
    assert mock_benchmark.await_args.args[0] == ["https://example.com/a", "https://example.com/b"]
    assert [record["winner"] for record in json.loads(result.output)] == ["hybrid", "traditional"]


def test_benchmark_requires_urls(runner):
    result = runner.invoke(cli, ["benchmark"])
    assert result.exit_code != 0


@patch("articlesift.web.main.run_web_server")
def test_serve_uses_config_defaults(mock_run, runner):
    result = runner.invoke(cli, ["serve", "--port", "9100"])

    assert result.exit_code == 0
    assert mock_run.call_args.kwargs["host"] == "127.0.0.1"
    assert mock_run.call_args.kwargs["port"] == 9100
