"""Tests for the operatorutil.version module."""

import operatorutil
from operatorutil.version import get_version


def test_version_is_exported() -> None:
    assert operatorutil.__version__ == get_version()
    assert get_version()
