"""The set of namespaces an operator watches.

The watch-set comes from configuration, usually the ``WATCH_NAMESPACES``
environment variable. It is either an explicit set of namespace names or
`ALL`.
"""

from __future__ import annotations

__all__ = (
    "ALL",
    "KopfController",
    "NamespaceSet",
    "NamespacedController",
    "WatchScope",
    "apply_to",
    "kopf_run_options",
    "namespace_filter",
    "resolve_namespaces",
    "should_reconcile",
    "should_reconcile_resource",
)

import enum
from collections.abc import Callable, Mapping
from typing import Any, Literal, Protocol, Union

import kopf
import structlog


class WatchScope(enum.Enum):
    """Scopes that are not an explicit list of namespaces."""

    ALL = "*"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}.{self.name}"


ALL = WatchScope.ALL
"""Watch every namespace in the cluster."""

NamespaceSet = Union[frozenset[str], Literal[WatchScope.ALL]]


def resolve_namespaces(raw: str | None) -> NamespaceSet:
    """Parse a namespace specification.

    Parameters
    ----------
    raw : str or None
        ``None``, an empty string or ``"*"`` mean all namespaces. Anything
        else is a comma-delimited list of names; whitespace around each
        name is ignored.

    Returns
    -------
    namespaces
        `ALL`, or a frozenset of namespace names.
    """
    if not raw or raw == ALL.value:
        return ALL
    return frozenset(
        segment.strip() for segment in raw.split(",") if segment.strip()
    )


def should_reconcile(
    namespaces: NamespaceSet, namespace: str | None
) -> bool:
    """Return whether a resource in ``namespace`` should be reconciled.

    Cluster-scoped resources (no namespace) are only reconciled when all
    namespaces are watched.
    """
    if namespaces is ALL:
        return True
    return namespace is not None and namespace in namespaces


def should_reconcile_resource(
    namespaces: NamespaceSet, body: Mapping[str, Any]
) -> bool:
    """Apply `should_reconcile` to a resource body."""
    namespace = body.get("metadata", {}).get("namespace")
    return should_reconcile(namespaces, namespace)


def kopf_run_options(namespaces: NamespaceSet) -> dict[str, Any]:
    """Translate a watch-set into keyword arguments for `kopf.run`."""
    if namespaces is ALL:
        return {"clusterwide": True}
    return {"namespaces": sorted(namespaces)}


def namespace_filter(namespaces: NamespaceSet) -> Callable[..., bool]:
    """Return a filter for the ``when`` argument of kopf handlers.

    Example::

        @kopf.on.create("example.com", "v1", "widgets",
                        when=namespace_filter(config.watch_namespaces))
        def create_widget(**kwargs): ...
    """

    def _filter(*, namespace: str | None = None, **kwargs: Any) -> bool:
        return should_reconcile(namespaces, namespace)

    return _filter


class NamespacedController(Protocol):
    """A controller whose watched namespaces can be changed."""

    def change_namespaces(self, namespaces: NamespaceSet) -> None: ...


def apply_to(
    controller: NamespacedController,
    namespaces: NamespaceSet,
    logger: Any | None = None,
) -> None:
    """Tell ``controller`` which namespaces to watch.

    ``logger`` may be the kopf logger or a structlog logger.
    """
    if logger is None:
        logger = structlog.get_logger(__name__)

    controller.change_namespaces(namespaces)
    if namespaces is ALL:
        logger.info("Watching all namespaces")
    elif not namespaces:
        logger.warning("Watching no namespaces, nothing will be reconciled")
    else:
        logger.info(f"Watching namespaces {', '.join(sorted(namespaces))}")


class KopfController:
    """Runs the kopf operator in the current watch-set.

    kopf fixes its namespaces when it starts, so a change made while
    `run` is active takes effect on the next start.
    """

    def __init__(self, namespaces: NamespaceSet = ALL) -> None:
        self.namespaces = namespaces

    def change_namespaces(self, namespaces: NamespaceSet) -> None:
        self.namespaces = namespaces

    def run_options(self) -> dict[str, Any]:
        return kopf_run_options(self.namespaces)

    def run(self, **kwargs: Any) -> None:
        """Run kopf until it exits. ``kwargs`` are passed to `kopf.run`."""
        kopf.run(**self.run_options(), **kwargs)
