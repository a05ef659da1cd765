"""Tests for the operatorutil.reply module."""

from __future__ import annotations

from unittest.mock import MagicMock

import kopf
import pytest
from kubernetes.client.exceptions import ApiException

from operatorutil.k8s import ResourceRef
from operatorutil.reply import (
    UpdateControl,
    reconcile_with_status,
    reply_update_if_exists,
)
from operatorutil.status import EXCEPTION, PENDING, READY, Status


@pytest.fixture
def ref() -> ResourceRef:
    return ResourceRef("example.com", "v1", "widgets", "widget", "apps")


@pytest.fixture
def k8s_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def gone_client() -> MagicMock:
    client = MagicMock()
    api = client.CustomObjectsApi.return_value
    api.get_namespaced_custom_object.side_effect = ApiException(status=404)
    return client


def test_update_control_apply() -> None:
    status = Status().with_error("Broken")
    patch = kopf.Patch()
    UpdateControl.patch_status(status).apply(patch)
    assert patch["status"] == status.to_dict()


def test_no_update_apply() -> None:
    control = UpdateControl.no_update()
    patch = kopf.Patch()
    control.apply(patch)
    assert not control.patches_status
    assert "status" not in patch


def test_reply_when_resource_exists(
    ref: ResourceRef, k8s_client: MagicMock
) -> None:
    status = Status().with_error("Broken")
    control = reply_update_if_exists(
        ref=ref, status=status, k8s_client=k8s_client
    )
    assert control.patches_status
    assert control.status == status


def test_reply_when_resource_is_gone(
    ref: ResourceRef, gone_client: MagicMock
) -> None:
    control = reply_update_if_exists(
        ref=ref, status=Status(), k8s_client=gone_client
    )
    assert control == UpdateControl.no_update()
    api = gone_client.CustomObjectsApi.return_value
    api.patch_namespaced_custom_object_status.assert_not_called()


def test_reconcile_success(ref: ResourceRef, k8s_client: MagicMock) -> None:
    previous = Status().with_error("Broken")
    control = reconcile_with_status(
        lambda: None, status=previous, ref=ref, k8s_client=k8s_client
    )
    assert control.status is not None
    assert control.status.phase == READY
    assert len(control.status.conditions) == 2


def test_reconcile_failure(ref: ResourceRef, k8s_client: MagicMock) -> None:
    def fail() -> None:
        raise RuntimeError("database unavailable")

    control = reconcile_with_status(
        fail, status=Status(), ref=ref, k8s_client=k8s_client
    )
    assert control.status is not None
    assert control.status.phase == PENDING
    condition = control.status.conditions[-1]
    assert condition.reason == EXCEPTION
    assert condition.message == "database unavailable"


def test_reconcile_failure_on_deleted_resource(
    ref: ResourceRef, gone_client: MagicMock
) -> None:
    def fail() -> None:
        raise RuntimeError("deleted underneath")

    control = reconcile_with_status(
        fail, status=Status(), ref=ref, k8s_client=gone_client
    )
    assert not control.patches_status


def test_reconcile_temporary_error_is_raised(
    ref: ResourceRef, k8s_client: MagicMock
) -> None:
    def fail() -> None:
        raise kopf.TemporaryError("not yet", delay=5)

    with pytest.raises(kopf.TemporaryError):
        reconcile_with_status(
            fail, status=Status(), ref=ref, k8s_client=k8s_client
        )

    api = k8s_client.CustomObjectsApi.return_value
    body = api.patch_namespaced_custom_object_status.call_args.kwargs["body"]
    assert body["status"]["conditions"][-1]["message"] == "not yet"
    assert body["status"]["health"] == {"status": "Unhealthy"}


def test_reconcile_temporary_error_survives_status_failure(
    ref: ResourceRef,
) -> None:
    k8s_client = MagicMock()
    api = k8s_client.CustomObjectsApi.return_value
    api.patch_namespaced_custom_object_status.side_effect = ApiException(
        status=500
    )

    def fail() -> None:
        raise kopf.TemporaryError("not yet", delay=5)

    with pytest.raises(kopf.TemporaryError, match="not yet"):
        reconcile_with_status(
            fail, status=Status(), ref=ref, k8s_client=k8s_client
        )
    api.patch_namespaced_custom_object_status.assert_called_once()
