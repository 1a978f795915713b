"""
Global pytest fixtures for lldbconnect tests.

This module provides:
- Fault handling for native crashes
- Isolation of the process-wide library cache and environment
"""

import faulthandler

import pytest

from lldbconnect._bindings import LIB_ENV, reset_lib
from lldbconnect.bridge import ENCODING_ENV

# Enable faulthandler to trace native crashes (segfaults)
faulthandler.enable()


@pytest.fixture(autouse=True)
def _isolate_native_state(monkeypatch):
    """Each test starts with no cached library and no encoding override."""
    monkeypatch.delenv(LIB_ENV, raising=False)
    monkeypatch.delenv(ENCODING_ENV, raising=False)
    reset_lib()
    yield
    reset_lib()
