"""
structlog setup for ArticleSift.

Every record, whether emitted through structlog or the stdlib ``logging``
module, goes through one processor chain. Console output is human-readable;
file output is one JSON object per line.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

import structlog
from structlog.contextvars import get_contextvars

if TYPE_CHECKING:
    from articlesift.config.config import MonitoringConfig


def add_request_url(logger: logging.Logger, method_name: str, event_dict: Dict[Any, Any]) -> Dict[Any, Any]:
    """Copy the URL bound by ``HybridParser.parse`` into ``url`` unless the event sets its own."""
    request_url = get_contextvars().get("request_url")
    if request_url is not None:
        event_dict.setdefault("url", request_url)
    return event_dict


def _pre_chain() -> List[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        add_request_url,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _output(config: MonitoringConfig) -> Tuple[logging.Handler, Any]:
    if config.log_file:
        return logging.FileHandler(config.log_file), structlog.processors.JSONRenderer()
    return logging.StreamHandler(sys.stderr), structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(config: MonitoringConfig) -> None:
    """Install a single root handler and route structlog through it."""
    pre_chain = _pre_chain()
    handler, renderer = _output(config)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(config.log_level.upper())

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger("articlesift.logging").info(
        "Logging configured", level=config.log_level, output=config.log_file or "console"
    )
