"""What a reconciliation reports back about a resource's status."""

from __future__ import annotations

__all__ = (
    "UpdateControl",
    "reconcile_with_status",
    "reply_update_if_exists",
)

from collections.abc import Callable
from typing import Any

import kopf
import structlog
from kubernetes.client.exceptions import ApiException
from pydantic import BaseModel, ConfigDict

from operatorutil.k8s import ResourceRef, patch_status, resource_exists
from operatorutil.status import Condition, Status


class UpdateControl(BaseModel):
    """The outcome of a reconciliation: patch the status, or leave the
    resource alone.
    """

    model_config = ConfigDict(frozen=True)

    status: Status | None = None

    @classmethod
    def patch_status(cls, status: Status) -> UpdateControl:
        return cls(status=status)

    @classmethod
    def no_update(cls) -> UpdateControl:
        return cls()

    @property
    def patches_status(self) -> bool:
        return self.status is not None

    def apply(self, patch: kopf.Patch) -> None:
        """Write the status into the patch kopf applies after a handler
        returns.
        """
        if self.status is not None:
            patch.status.update(self.status.to_dict())


def reply_update_if_exists(
    *,
    ref: ResourceRef,
    status: Status,
    k8s_client: Any,
    logger: Any | None = None,
) -> UpdateControl:
    """Patch the status only if the resource still exists.

    A resource can be deleted between the event and the end of the
    reconciliation. Then there is nothing to patch and the outcome is
    `UpdateControl.no_update`.

    Parameters
    ----------
    ref : `ResourceRef`
        The reconciled resource.
    status : `Status`
        The new status.
    k8s_client
        A Kubernetes client (see `operatorutil.k8s.create_k8sclient`).
    logger : Any, optional
        The kopf logger. Defaults to a structlog logger.
    """
    if logger is None:
        logger = structlog.get_logger(__name__)

    if resource_exists(ref=ref, k8s_client=k8s_client):
        return UpdateControl.patch_status(status)

    logger.info(
        f"{ref.plural} {ref.name} no longer exists, not updating its status"
    )
    return UpdateControl.no_update()


def reconcile_with_status(
    fn: Callable[[], Any],
    *,
    status: Status,
    ref: ResourceRef,
    k8s_client: Any,
    logger: Any | None = None,
) -> UpdateControl:
    """Run a reconciliation and record its result as a condition.

    Success appends the default ready condition. An exception appends an
    ``Exception`` condition with its message. A `kopf.TemporaryError` is
    written to the resource right away and then raised again, so kopf
    still retries the handler, also when the status cannot be written.
    """
    if logger is None:
        logger = structlog.get_logger(__name__)

    try:
        fn()
    except kopf.TemporaryError as err:
        try:
            control = reply_update_if_exists(
                ref=ref,
                status=status.with_exception(err),
                k8s_client=k8s_client,
                logger=logger,
            )
            if control.status is not None:
                patch_status(
                    ref=ref, status=control.status, k8s_client=k8s_client
                )
        except ApiException:
            logger.exception(
                "Could not record the error in the status of "
                f"{ref.plural} {ref.name}"
            )
        raise
    except Exception as err:
        logger.exception(f"Reconciliation of {ref.plural} {ref.name} failed")
        new_status = status.with_exception(err)
    else:
        new_status = status.with_condition(Condition())

    return reply_update_if_exists(
        ref=ref, status=new_status, k8s_client=k8s_client, logger=logger
    )
