"""HTTP API for article parsing."""

from __future__ import annotations

from .main import app, run_web_server

__all__ = ["app", "run_web_server"]
