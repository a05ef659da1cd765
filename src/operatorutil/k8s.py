"""Helpers for interacting with Kubernetes APIs."""

from __future__ import annotations

__all__ = (
    "ResourceRef",
    "all_resources",
    "create_k8sclient",
    "patch_status",
    "resource_exists",
)

from typing import TYPE_CHECKING, Any, NamedTuple

import kubernetes
from kubernetes.client.exceptions import ApiException

if TYPE_CHECKING:
    import kopf

    from operatorutil.status import Status


def create_k8sclient() -> kubernetes.client:
    """Get a Kubernetes client configured with available cluster
    authentication.

    If in-cluster authentication is available, that is used. Otherwise
    this function falls-back to using a kubectl config file, which is
    appropriate for development.
    """
    try:
        kubernetes.config.load_incluster_config()
    except kubernetes.config.ConfigException:
        kubernetes.config.load_kube_config()
    return kubernetes.client


class ResourceRef(NamedTuple):
    """Identifies a single custom resource.

    ``namespace`` is `None` for cluster-scoped resources.
    """

    group: str
    version: str
    plural: str
    name: str
    namespace: str | None = None

    @classmethod
    def from_kopf(
        cls,
        resource: kopf.Resource,
        *,
        name: str,
        namespace: str | None = None,
    ) -> ResourceRef:
        """Build a reference from the ``resource``, ``name`` and
        ``namespace`` keyword arguments kopf passes to handlers.
        """
        return cls(
            group=resource.group,
            version=resource.version,
            plural=resource.plural,
            name=name,
            namespace=namespace,
        )


def resource_exists(*, ref: ResourceRef, k8s_client: Any) -> bool:
    """Check whether a custom resource still exists.

    Parameters
    ----------
    ref : `ResourceRef`
        The resource to look up.
    k8s_client
        A Kubernetes client (see `create_k8sclient`).

    Returns
    -------
    exists : bool
        `False` if the API server answers 404.

    Raises
    ------
    kubernetes.client.exceptions.ApiException
        For any other API error.
    """
    api = k8s_client.CustomObjectsApi()
    try:
        if ref.namespace is None:
            api.get_cluster_custom_object(
                group=ref.group,
                version=ref.version,
                plural=ref.plural,
                name=ref.name,
            )
        else:
            api.get_namespaced_custom_object(
                group=ref.group,
                version=ref.version,
                namespace=ref.namespace,
                plural=ref.plural,
                name=ref.name,
            )
    except ApiException as err:
        if err.status == 404:
            return False
        raise
    return True


def all_resources(
    *,
    group: str,
    version: str,
    plural: str,
    k8s_client: Any,
) -> list[dict[str, Any]]:
    """List the custom resources of a kind in every namespace.

    Parameters
    ----------
    group : str
        The API group of the custom resource.
    version : str
        The API version.
    plural : str
        The plural name of the resource kind.
    k8s_client
        A Kubernetes client (see `create_k8sclient`).

    Returns
    -------
    items : list of dict
        The resource manifests.
    """
    api = k8s_client.CustomObjectsApi()
    response = api.list_cluster_custom_object(
        group=group, version=version, plural=plural
    )
    return response["items"]


def patch_status(
    *, ref: ResourceRef, status: Status, k8s_client: Any
) -> dict[str, Any]:
    """Merge-patch the status subresource of a custom resource.

    Returns the patched resource.
    """
    api = k8s_client.CustomObjectsApi()
    body = {"status": status.to_dict()}
    if ref.namespace is None:
        return api.patch_cluster_custom_object_status(
            group=ref.group,
            version=ref.version,
            plural=ref.plural,
            name=ref.name,
            body=body,
        )
    return api.patch_namespaced_custom_object_status(
        group=ref.group,
        version=ref.version,
        namespace=ref.namespace,
        plural=ref.plural,
        name=ref.name,
        body=body,
    )
