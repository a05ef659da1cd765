"""Operator configuration, read from the environment once at start-up."""

from __future__ import annotations

__all__ = ("OperatorConfig", "WATCH_NAMESPACES_ENV")

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from operatorutil.namespaces import ALL, NamespaceSet, resolve_namespaces

WATCH_NAMESPACES_ENV = "WATCH_NAMESPACES"
"""Comma-delimited namespaces to watch. Unset, empty or ``*`` means all."""

LOG_LEVEL_ENV = "LOG_LEVEL"

LOG_JSON_ENV = "LOG_JSON"


class OperatorConfig(BaseModel):
    """Settings shared by the operator's handlers.

    Build it once with `from_environ` and pass it to the code that needs
    it.
    """

    model_config = ConfigDict(frozen=True)

    watch_namespaces: NamespaceSet = ALL
    """The namespaces whose resources are reconciled."""

    log_level: str = "INFO"

    log_json: bool = False
    """Render log lines as JSON instead of for a console."""

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str] | None = None
    ) -> OperatorConfig:
        """Read the configuration from ``environ``, which defaults to
        `os.environ`.
        """
        if environ is None:
            environ = os.environ
        return cls(
            watch_namespaces=resolve_namespaces(
                environ.get(WATCH_NAMESPACES_ENV)
            ),
            log_level=environ.get(LOG_LEVEL_ENV, "INFO").upper(),
            log_json=environ.get(LOG_JSON_ENV, "").lower()
            in ("1", "true", "yes"),
        )
