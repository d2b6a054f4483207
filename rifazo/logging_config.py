"""Logging configuration."""

from __future__ import annotations

import logging
import time

from flask import Flask, g, request

NOISY_LOGGERS = ("sqlalchemy.engine", "pymongo", "werkzeug")

request_logger = logging.getLogger("rifazo.requests")


def configure_logging(app: Flask) -> None:
    """Configure stdlib logging from LOG_LEVEL and log API requests at DEBUG."""

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger("rifazo").setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    @app.before_request
    def _start_timer() -> None:
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):  # type: ignore[no-untyped-def]
        started = g.pop("request_started", None)
        if started is not None and request.path.startswith("/api/"):
            request_logger.debug(
                "%s %s -> %s (%.1f ms)",
                request.method,
                request.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response
