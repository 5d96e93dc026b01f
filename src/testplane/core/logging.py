"""Logging setup: structlog events rendered by stdlib handlers.

Each configured output becomes one handler on the root logger with its own
level and renderer, so third-party stdlib loggers (websockets, asyncio) end
up in the same place as our own events.

While a run is open its id is bound as a structlog context variable; every
event logged from that context carries ``run_id``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from testplane.config.models import LoggingConfig, LogOutputConfig

_RUN_ID_KEY = "run_id"

# Loggers that are too chatty below WARNING
_NOISY_LOGGERS = ("websockets", "asyncio")


# =============================================================================
# Run correlation
# =============================================================================


def set_run_id(run_id: str | None = None) -> str:
    """Bind a run id to the current context, generating one if not given."""
    rid = run_id or uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(**{_RUN_ID_KEY: rid})
    return rid


def get_run_id() -> str | None:
    return structlog.contextvars.get_contextvars().get(_RUN_ID_KEY)


def clear_run_id() -> None:
    structlog.contextvars.unbind_contextvars(_RUN_ID_KEY)


# =============================================================================
# Setup
# =============================================================================


def _level(name: str | None, default: int = logging.INFO) -> int:
    if not name:
        return default
    return logging.getLevelNamesMapping().get(name.upper(), default)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]


def _build_handler(
    output: LogOutputConfig,
    level: int,
    pre_chain: list[structlog.types.Processor],
) -> logging.Handler:
    handler: logging.Handler
    stream = {"stderr": sys.stderr, "stdout": sys.stdout}.get(output.destination)
    if stream is not None:
        handler = logging.StreamHandler(stream)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=stream is not None and stream.isatty(),
            pad_event_to=0,
            pad_level=False,
        )

    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> list[logging.Handler]:
    """Install one root handler per configured output.

    Without ``config`` a single stderr output is set up at ``level``.
    Returns the installed handlers. Calling again replaces them.
    """
    from testplane.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level)
    pre_chain = _shared_processors()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(root_level)

    handlers = [
        _build_handler(output, _level(output.level, root_level), pre_chain)
        for output in config.outputs
    ]
    for handler in handlers:
        root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))

    return handlers
