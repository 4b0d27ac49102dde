"""
Side-by-side timing of structured, traditional and hybrid parsing.
"""

from __future__ import annotations

import time
from typing import Iterable, List, Optional

import structlog

from ..config.config import Config
from ..crawler.http_client import HttpClient
from ..metadata.structured_data_parser import has_useful_structured_data
from .manager import HybridParser
from .models import BenchmarkRecord, BenchmarkWinner

logger = structlog.get_logger(__name__)

HYBRID_SUCCESS_CONFIDENCE = 60
HYBRID_TIME_TOLERANCE = 1.2


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def pick_winner(record: BenchmarkRecord) -> BenchmarkWinner:
    if record.structured_success and record.structured_time < record.traditional_time:
        return BenchmarkWinner.STRUCTURED
    slowest = max(record.structured_time, record.traditional_time)
    if record.hybrid_success and record.hybrid_time < slowest * HYBRID_TIME_TOLERANCE:
        return BenchmarkWinner.HYBRID
    return BenchmarkWinner.TRADITIONAL


async def _benchmark_url(parser: HybridParser, url: str) -> BenchmarkRecord:
    record = BenchmarkRecord(url=url)
    log = logger.bind(url=url)

    # Each strategy is measured independently; a failure only zeroes its own timing.
    start = time.perf_counter()
    try:
        structured = await parser.structured.extract(url)
        record.structured_time = _elapsed_ms(start)
        record.structured_success = has_useful_structured_data(structured)
    except Exception as e:
        log.warning("Structured benchmark failed", error=str(e), exc_info=True)

    start = time.perf_counter()
    try:
        await parser.traditional.parse(url)
        record.traditional_time = _elapsed_ms(start)
        record.traditional_success = True
    except Exception as e:
        log.warning("Traditional benchmark failed", error=str(e), exc_info=True)

    start = time.perf_counter()
    try:
        result = await parser.parse(url)
        record.hybrid_time = _elapsed_ms(start)
        record.hybrid_success = result.confidence > HYBRID_SUCCESS_CONFIDENCE
    except Exception as e:
        log.warning("Hybrid benchmark failed", error=str(e), exc_info=True)

    record.winner = pick_winner(record)
    log.info("Benchmark completed", **record.to_dict())
    return record


async def benchmark_parsing_methods(
    urls: Iterable[str],
    *,
    parser: Optional[HybridParser] = None,
    config: Optional[Config] = None,
) -> List[BenchmarkRecord]:
    """
    Time every strategy against each URL, sequentially.

    Args:
        urls: Pages to benchmark
        parser: Pre-built parser; a short-lived HTTP client is created otherwise
        config: Configuration used when building the default parser

    Returns:
        One record per URL, in input order
    """
    if parser is not None:
        return [await _benchmark_url(parser, url) for url in urls]

    async with HttpClient(config) as client:
        default_parser = HybridParser.from_http_client(client, config)
        return [await _benchmark_url(default_parser, url) for url in urls]
