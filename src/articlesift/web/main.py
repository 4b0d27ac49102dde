"""
FastAPI application exposing hybrid article parsing over HTTP.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable, Dict, Literal, Optional
from uuid import uuid4

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST
from pydantic import BaseModel

from articlesift import __version__
from articlesift.config import Config, settings
from articlesift.crawler.http_client import HttpClient
from articlesift.errors import ArticleSiftError, NoContentError, describe_parsing_error
from articlesift.extractor.accessibility import get_content_accessibility_status
from articlesift.extractor.benchmark import benchmark_parsing_methods
from articlesift.extractor.manager import HybridParser
from articlesift.extractor.platform_advisor import get_platform_recommendations
from articlesift.observability import export_prometheus

from .responses import (
    HYBRID_INFO,
    hybrid_success_body,
    inaccessible_body,
    parse_hybrid_body,
    status_code_for,
    traditional_body,
)

logger = structlog.get_logger(__name__)


class ParseRequest(BaseModel):
    url: Optional[str] = None
    hybrid: bool = True


class ParseHybridRequest(BaseModel):
    url: Optional[str] = None
    mode: Literal["hybrid", "benchmark"] = "hybrid"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Own one pooled HTTP client for the application's lifetime."""
    config = getattr(app.state, "config", None) or settings
    app.state.config = config
    client = HttpClient(config)
    await client.initialize()
    app.state.http_client = client
    app.state.start_time = time.time()
    logger.info("ArticleSift API started", version=__version__)

    yield

    await client.close()
    logger.info("ArticleSift API stopped")


app = FastAPI(
    title="ArticleSift API",
    version=__version__,
    lifespan=lifespan,
)


def get_parser(request: Request) -> HybridParser:
    return HybridParser.from_http_client(request.app.state.http_client, request.app.state.config)


def _url_required() -> JSONResponse:
    return JSONResponse({"error": "URL is required"}, status_code=400)


async def _parse_traditional(parser: HybridParser, url: str) -> JSONResponse:
    try:
        article = await parser.traditional.parse(url)
    except NoContentError as e:
        return JSONResponse({"error": str(e)}, status_code=422)
    except ArticleSiftError as e:
        report = describe_parsing_error(e, url)
        logger.error("Traditional parsing failed", url=url, error=str(e), category=report.category)
        return JSONResponse(
            {"error": f"Failed to parse article: {e}", "details": report.to_dict()},
            status_code=500,
        )

    return JSONResponse(traditional_body(article, get_platform_recommendations(url)))


async def _parse_hybrid(parser: HybridParser, url: str) -> JSONResponse:
    try:
        result = await parser.parse(url)
    except ArticleSiftError as e:
        logger.warning("Hybrid parsing failed, falling back to traditional", url=url, error=str(e))
        return await _parse_traditional(parser, url)

    recommendations = get_platform_recommendations(url)
    accessibility = get_content_accessibility_status(result, parser.weights)
    status_code = status_code_for(accessibility)
    if status_code != 200:
        logger.info("Content accessibility issue", url=url, reason=accessibility.reason)
        return JSONResponse(inaccessible_body(result, recommendations, accessibility), status_code=status_code)

    return JSONResponse(hybrid_success_body(result, url, recommendations, accessibility))


async def _dispatch_parse(parser: HybridParser, request: ParseRequest) -> JSONResponse:
    if not request.url:
        return _url_required()
    if request.hybrid:
        return await _parse_hybrid(parser, request.url)
    return await _parse_traditional(parser, request.url)


@app.get("/api/parse")
async def parse_get(
    url: Optional[str] = None,
    hybrid: bool = True,
    parser: HybridParser = Depends(get_parser),
) -> JSONResponse:
    """Parse an article given as a query parameter."""
    return await _dispatch_parse(parser, ParseRequest(url=url, hybrid=hybrid))


@app.post("/api/parse")
async def parse_post(body: ParseRequest, parser: HybridParser = Depends(get_parser)) -> JSONResponse:
    """Parse an article given in a JSON body."""
    return await _dispatch_parse(parser, body)


@app.post("/api/parse-hybrid")
async def parse_hybrid_post(body: ParseHybridRequest, parser: HybridParser = Depends(get_parser)) -> JSONResponse:
    """Hybrid parse with full parsing details, or a benchmark of every strategy."""
    if not body.url:
        return _url_required()

    recommendations = get_platform_recommendations(body.url)
    try:
        if body.mode == "benchmark":
            records = await benchmark_parsing_methods([body.url], parser=parser)
            return JSONResponse(
                {
                    "success": True,
                    "mode": "benchmark",
                    "benchmark": records[0].to_dict(),
                    "recommendations": recommendations.to_dict(),
                }
            )
        result = await parser.parse(body.url)
    except ArticleSiftError as e:
        report = describe_parsing_error(e, body.url)
        logger.error("Hybrid parse API failed", url=body.url, error=str(e), category=report.category)
        return JSONResponse({"error": str(e), "details": report.to_dict()}, status_code=500)

    return JSONResponse(parse_hybrid_body(result, recommendations))


@app.get("/api/parse-hybrid")
async def parse_hybrid_info(url: Optional[str] = None) -> JSONResponse:
    """Strategy hint for a URL plus a description of the available modes."""
    if not url:
        return _url_required()
    return JSONResponse(
        {
            "success": True,
            "url": url,
            "recommendations": get_platform_recommendations(url).to_dict(),
            "info": HYBRID_INFO,
        }
    )


@app.get("/metrics")
async def get_prometheus_metrics() -> Response:
    """Endpoint for Prometheus to scrape."""
    return Response(export_prometheus(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health_check() -> Dict[str, Any]:
    """Liveness probe with the package version."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": __version__,
    }


@app.middleware("http")
async def add_process_time_header(request: Request, call_next: Callable) -> Any:
    """Add timing headers and log every request."""
    start_time = time.time()
    request_id = str(uuid4())

    with structlog.contextvars.bound_contextvars(request_id=request_id):
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "API request",
            endpoint=request.url.path,
            method=request.method,
            status_code=response.status_code,
            response_time_ms=round(process_time * 1000, 2),
        )

    return response


def run_web_server(host: str = "127.0.0.1", port: int = 8000, config: Optional[Config] = None) -> None:
    """Serve the API with uvicorn, optionally bound to an explicit config."""
    import uvicorn

    if config is not None:
        app.state.config = config

    logger.info("Starting ArticleSift API", host=host, port=port)
    uvicorn.run(app, host=host, port=port)
