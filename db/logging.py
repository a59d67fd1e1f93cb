from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import Literal

import structlog


def configure_logging(log_level: str, component: str, *, stream: Literal["stdout", "stderr"] = "stdout") -> None:
    """
    JSON-lines logging shared by the registry service and the `seed`/`reports` CLIs.

    Every event carries `component`. CLIs pass `stream="stderr"` so their stdout stays
    machine-readable JSON.
    """
    level = log_level.upper()
    logging.basicConfig(format="%(message)s", stream=getattr(sys, stream), level=level)
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(component=component)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        # Look the stream up per logger so a redirected sys.stdout/sys.stderr is honoured.
        logger_factory=lambda *_: structlog.PrintLogger(getattr(sys, stream)),
        cache_logger_on_first_use=False,
    )


def operation(name: str, **fields: object) -> AbstractContextManager:
    """Tag every event logged inside the block, e.g. `seed.cleared` under operation="seed"."""
    return structlog.contextvars.bound_contextvars(operation=name, **fields)


logger = structlog.get_logger()
