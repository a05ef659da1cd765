"""The status object reported on a custom resource.

A `Status` holds a short history of `Condition` values, a phase and a health
summary. Values are immutable: every ``with_*`` method returns a new object,
and the health is always derived from the conditions and the phase.
"""

from __future__ import annotations

__all__ = (
    "AVAILABLE",
    "ERROR",
    "EXCEPTION",
    "FALSE",
    "HEALTHY",
    "MAX_CONDITIONS",
    "OK",
    "PENDING",
    "PROGRESSING",
    "READY",
    "TRUE",
    "UNHEALTHY",
    "UNKNOWN",
    "Condition",
    "Health",
    "Status",
)

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

AVAILABLE = "Available"
ERROR = "Error"
EXCEPTION = "Exception"
FALSE = "False"
HEALTHY = "Healthy"
OK = "OK"
PENDING = "Pending"
PROGRESSING = "Progressing"
READY = "Ready"
TRUE = "True"
UNHEALTHY = "Unhealthy"
UNKNOWN = "Unknown"

MAX_CONDITIONS = 5
"""Number of conditions retained in a status, the most recent ones."""


def _now() -> str:
    """Return the current UTC time as an RFC 3339 string."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="microseconds")
        .replace("+00:00", "Z")
    )


class Health(BaseModel):
    """The health summary of a resource."""

    model_config = ConfigDict(frozen=True)

    status: str = HEALTHY

    @classmethod
    def healthy(cls) -> Health:
        return cls(status=HEALTHY)

    @classmethod
    def unhealthy(cls) -> Health:
        return cls(status=UNHEALTHY)

    @classmethod
    def unknown(cls) -> Health:
        return cls(status=UNKNOWN)


class Condition(BaseModel):
    """A timestamped statement about the state of a resource.

    The default condition says the resource is ready (``type=Ready``,
    ``status=True``, ``reason=OK``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    last_transition_time: str = Field(
        default_factory=_now, alias="lastTransitionTime"
    )
    message: str = OK
    reason: str = OK
    status: str = TRUE
    type: str = READY

    @property
    def is_ready(self) -> bool:
        return self.type == READY and self.status == TRUE

    @property
    def is_error(self) -> bool:
        return self.reason in (ERROR, EXCEPTION)

    @property
    def health(self) -> Health:
        if self.is_ready:
            return Health.healthy()
        return Health.unhealthy() if self.is_error else Health.unknown()

    def _with(self, **changes: str) -> Condition:
        # Every new condition gets its own timestamp.
        changes["last_transition_time"] = _now()
        return self.model_copy(update=changes)

    def with_error(self, message: str) -> Condition:
        """Return a not-ready condition with the reason ``Error``."""
        return self._with(
            message=message, reason=ERROR, status=FALSE, type=READY
        )

    def with_exception(self, err: BaseException) -> Condition:
        """Return a not-ready condition with the reason ``Exception``.

        Only the text of the exception is kept.
        """
        return self._with(
            message=str(err), reason=EXCEPTION, status=FALSE, type=READY
        )

    def with_message(self, message: str) -> Condition:
        return self._with(message=message)

    def with_reason(self, reason: str) -> Condition:
        return self._with(reason=reason)

    def with_status(self, status: str) -> Condition:
        return self._with(status=status)

    def with_type(self, type: str) -> Condition:
        return self._with(type=type)


class Status(BaseModel):
    """The status subresource of a custom resource.

    Parameters
    ----------
    conditions : tuple of `Condition`
        The condition history, oldest first. At most `MAX_CONDITIONS` are
        kept.
    phase : str
        The coarse lifecycle phase, ``Ready`` or ``Pending`` unless a caller
        sets another one with `with_phase`.
    health : `Health`
        Always derived from the conditions and the phase. A value passed
        in, or stored on the resource, is replaced.
    """

    model_config = ConfigDict(frozen=True)

    conditions: tuple[Condition, ...] = ()
    health: Health = Field(default_factory=Health.healthy)
    phase: str = READY

    @field_validator("conditions")
    @classmethod
    def keep_last_conditions(
        cls, conditions: tuple[Condition, ...]
    ) -> tuple[Condition, ...]:
        return conditions[-MAX_CONDITIONS:]

    @model_validator(mode="after")
    def derive_health(self) -> Status:
        object.__setattr__(self, "health", self._derived_health())
        return self

    def _derived_health(self) -> Health:
        if self.conditions:
            return self.conditions[-1].health
        return Health.healthy() if self.phase == READY else Health.unknown()

    def with_condition(self, condition: Condition) -> Status:
        """Return a new status with ``condition`` appended to the history.

        The oldest conditions are dropped beyond `MAX_CONDITIONS`. The phase
        becomes ``Ready`` if the condition is ready, otherwise ``Pending``.
        """
        return Status(
            conditions=(*self.conditions, condition),
            phase=READY if condition.is_ready else PENDING,
        )

    def with_error(self, message: str) -> Status:
        return self.with_condition(Condition().with_error(message))

    def with_exception(self, err: BaseException) -> Status:
        return self.with_condition(Condition().with_exception(err))

    def with_phase(self, phase: str) -> Status:
        """Return a new status with another phase and the same conditions.

        The health follows the last condition. Only without conditions does
        it follow the new phase.
        """
        return Status(conditions=self.conditions, phase=phase)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the shape stored in the resource's ``status``."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Status:
        """Parse a stored ``status`` field. An empty field gives the default
        status.
        """
        return cls.model_validate(dict(data) if data else {})
