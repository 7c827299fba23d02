import logging
import sys

import structlog

from src.config.settings import get_settings


def setup_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog for console (dev) or JSON (prod) output."""
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    log_level = logging.getLevelNamesMapping().get(level_name, logging.INFO)
    use_json = settings.json_logs if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
