"""
Shared test fixtures for lldbconnect.

Provides a recording stand-in for the native shim so the factory and the
wrapper can be tested without building LLDB.

Maps to: N/A (shared test fixtures)
"""

from .native import FakeShimLibrary

__all__ = ["FakeShimLibrary"]
