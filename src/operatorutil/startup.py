"""Code intended to run on start-up, before running any handlers."""

from __future__ import annotations

__all__ = ("configure_logging", "start_operator")

import logging
from typing import Any

import structlog

from operatorutil.config import OperatorConfig
from operatorutil.namespaces import NamespacedController, apply_to


def configure_logging(config: OperatorConfig) -> None:
    """Configure structlog for the operator process."""
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if config.log_json:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def start_operator(
    controller: NamespacedController,
    config: OperatorConfig | None = None,
    logger: Any | None = None,
) -> OperatorConfig:
    """Start up the operator: configure logging and hand the watched
    namespaces to ``controller``.

    Returns the configuration, read from the environment unless given.
    """
    if config is None:
        config = OperatorConfig.from_environ()
    configure_logging(config)
    if logger is None:
        logger = structlog.get_logger(__name__)

    apply_to(controller, config.watch_namespaces, logger=logger)
    return config
