"""Helpers for Kubernetes operators built with kopf: namespace watch-sets
and an append-only custom resource status.
"""

from operatorutil.namespaces import (
    ALL,
    resolve_namespaces,
    should_reconcile,
)
from operatorutil.status import Condition, Health, Status
from operatorutil.version import __version__

__all__ = (
    "ALL",
    "Condition",
    "Health",
    "Status",
    "__version__",
    "resolve_namespaces",
    "should_reconcile",
)
