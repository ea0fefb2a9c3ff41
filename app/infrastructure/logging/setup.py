"""structlog setup for the counters bot.

Rendering depends on the environment: a colored console in development,
one JSON object per line in production. Under pytest, events still pass
through the processor chain but the root logger drops them.

Modules grab their logger once at import time:

    logger = get_module_logger()
    logger.info("counter_viewed", counter_name="warnings")
"""

import inspect
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.configuration import settings

APP_NAME = "counters-bot"

SILENT_LEVEL = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _add_app_info(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp each event with the bot name and the deployed git sha."""
    event_dict["app_name"] = APP_NAME
    event_dict["app_version"] = settings.GIT_SHA
    return event_dict


def _build_processors(prod_mode: bool) -> list[Any]:
    callsite = structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.MODULE,
            structlog.processors.CallsiteParameter.FUNC_NAME,
            structlog.processors.CallsiteParameter.LINENO,
        ]
    )
    renderer = (
        structlog.processors.JSONRenderer()
        if prod_mode
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_app_info,
        callsite,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def _apply(processors: list[Any], level: int, force: bool = False) -> BoundLogger:
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level, force=force)
    return structlog.stdlib.get_logger()


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Level name such as "DEBUG". Falls back to settings.LOG_LEVEL.
        is_production: JSON output when true. Falls back to settings.is_production.

    Returns:
        The root structlog logger.
    """
    if _is_test_environment():
        logging.root.setLevel(SILENT_LEVEL)
        return _apply(
            [
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            SILENT_LEVEL,
            force=True,
        )

    if is_production is None:
        is_production = settings.is_production
    level_name = (log_level or settings.LOG_LEVEL).upper()
    return _apply(
        _build_processors(is_production),
        getattr(logging, level_name, logging.INFO),
    )


logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Return the root logger bound to the caller's module.

    ``component`` is the last dotted segment of the module name (``view``
    for ``modules.counters.view``) and ``module_path`` is the full name.
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module = inspect.getmodule(caller) if caller is not None else None
    if module is None:
        return logger.bind(component="unknown")

    name = module.__name__
    return logger.bind(component=name.rsplit(".", 1)[-1], module_path=name)
