"""Command-line interface for ArticleSift."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
import structlog
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from articlesift import __version__
from articlesift.config import Config, settings
from articlesift.errors import ArticleSiftError, describe_parsing_error
from articlesift.extractor.accessibility import get_content_accessibility_status
from articlesift.extractor.benchmark import benchmark_parsing_methods
from articlesift.extractor.manager import parse_article_hybrid
from articlesift.extractor.models import HybridParsingResult, ParsingMethod
from articlesift.extractor.platform_advisor import get_platform_recommendations
from articlesift.observability import configure_logging

console = Console()
logger = structlog.get_logger(__name__)


def describe_method(method: ParsingMethod) -> str:
    match method:
        case ParsingMethod.STRUCTURED_ONLY:
            return "structured data only"
        case ParsingMethod.TRADITIONAL_ONLY:
            return "readability only"
        case ParsingMethod.HYBRID:
            return "structured data + readability"
        case ParsingMethod.STRUCTURED_FALLBACK:
            return "structured data (readability failed)"


def _print_error(exc: ArticleSiftError, url: str) -> None:
    report = describe_parsing_error(exc, url)
    body = f"{report.message}\n\n[dim]{report.details}[/dim]"
    if report.suggestions:
        body += "\n\n" + "\n".join(f"• {s}" for s in report.suggestions)
    console.print(Panel(body, title=f"[red]{report.title}[/red]", border_style="red"))


def _render_result(result: HybridParsingResult) -> None:
    accessibility = get_content_accessibility_status(result)

    table = Table(title=result.title or result.url or "Article")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("Method", f"{result.parsing_method.value} ({describe_method(result.parsing_method)})")
    table.add_row("Confidence", str(result.confidence))
    table.add_row("Structured score", str(result.structured_data_score))
    table.add_row("Extraction methods", ", ".join(result.extraction_methods) or "-")
    table.add_row("Author", result.author or "-")
    table.add_row("Published", result.date_published or "-")
    table.add_row("Words", str(result.word_count or 0))
    table.add_row("Extraction time", f"{result.extraction_time} ms")
    table.add_row("Accessible", "yes" if accessibility.is_accessible else f"no ({accessibility.error_type.value})")
    console.print(table)

    if not accessibility.is_accessible:
        console.print(f"[yellow]{accessibility.reason}[/yellow]")
        for suggestion in accessibility.suggestions:
            console.print(f"  • {suggestion}")
    elif result.excerpt:
        console.print(Panel(result.excerpt, title="Excerpt"))


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """ArticleSift - Hybrid structured-data and readability article extraction."""
    ctx.ensure_object(dict)
    loaded: Config = Config.from_yaml(Path(config)) if config else settings
    ctx.obj["config"] = loaded

    monitoring = loaded.monitoring
    if log_level:
        monitoring = monitoring.model_copy(update={"log_level": log_level})
    configure_logging(monitoring)


@cli.command()
@click.argument("url")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def parse(ctx: click.Context, url: str, as_json: bool) -> None:
    """Parse a single article with the hybrid parser."""
    config: Config = ctx.obj["config"]
    try:
        result = asyncio.run(parse_article_hybrid(url, config=config))
    except ArticleSiftError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e), "details": describe_parsing_error(e, url).to_dict()}, indent=2))
        else:
            _print_error(e, url)
        sys.exit(1)

    if as_json:
        payload = result.to_dict()
        payload["accessibility"] = get_content_accessibility_status(result).to_dict()
        click.echo(json.dumps(payload, indent=2))
    else:
        _render_result(result)


@cli.command()
@click.argument("url")
def recommend(url: str) -> None:
    """Show the parsing strategy hint for a URL's domain."""
    recommendation = get_platform_recommendations(url)
    console.print(
        Panel(
            f"Strategy: [bold]{recommendation.recommended_strategy.value}[/bold]\n"
            f"Likely has structured data: {'yes' if recommendation.likely_has_structured_data else 'no'}\n"
            f"{recommendation.reason}",
            title=url,
        )
    )


def _collect_urls(urls: Tuple[str, ...], url_file: Optional[str]) -> List[str]:
    collected = list(urls)
    if url_file:
        for line in Path(url_file).read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                collected.append(line)
    return collected


@cli.command()
@click.argument("urls", nargs=-1)
@click.option("--file", "url_file", type=click.Path(exists=True), help="File with one URL per line")
@click.option("--json", "as_json", is_flag=True, help="Print the records as JSON")
@click.pass_context
def benchmark(ctx: click.Context, urls: Tuple[str, ...], url_file: Optional[str], as_json: bool) -> None:
    """Compare structured, traditional and hybrid parsing on each URL."""
    targets = _collect_urls(urls, url_file)
    if not targets:
        raise click.UsageError("Provide at least one URL or --file")

    with console.status(f"Benchmarking {len(targets)} URL(s)..."):
        records = asyncio.run(benchmark_parsing_methods(targets, config=ctx.obj["config"]))

    if as_json:
        click.echo(json.dumps([record.to_dict() for record in records], indent=2))
        return

    table = Table(title="Parsing Benchmark")
    table.add_column("URL", style="cyan", overflow="fold")
    table.add_column("Structured")
    table.add_column("Traditional")
    table.add_column("Hybrid")
    table.add_column("Winner", style="bold green")

    def cell(success: bool, elapsed: int) -> str:
        return f"[green]{elapsed} ms[/green]" if success else "[red]failed[/red]"

    for record in records:
        table.add_row(
            record.url,
            cell(record.structured_success, record.structured_time),
            cell(record.traditional_success, record.traditional_time),
            cell(record.hybrid_success, record.hybrid_time),
            record.winner.value,
        )
    console.print(table)


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Start the HTTP API."""
    from articlesift.web.main import run_web_server

    web = ctx.obj["config"].web
    host = host or web.host
    port = port or web.port
    console.print(f"[green]Starting ArticleSift API at http://{host}:{port}[/green]")
    run_web_server(host=host, port=port, config=ctx.obj["config"])


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
