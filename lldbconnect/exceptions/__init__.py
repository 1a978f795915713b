"""
lldbconnect exceptions.

This module defines the exception hierarchy for lldbconnect:

    LldbConnectError (base)
    ├── InvalidArgumentError - Absent or wrongly-typed argument
    ├── EncodingError - Locator text not representable natively
    ├── NativeConstructionError - Native constructor faulted or returned NULL
    ├── LibraryNotFoundError - Native shim library could not be loaded
    └── StateError - Operation on a closed ConnectionOptions
"""

from .exceptions import (
    EncodingError,
    InvalidArgumentError,
    LibraryNotFoundError,
    LldbConnectError,
    NativeConstructionError,
    StateError,
)

__all__ = [
    # Base
    "LldbConnectError",
    # Arguments
    "InvalidArgumentError",
    # String bridge
    "EncodingError",
    # Native boundary
    "NativeConstructionError",
    "LibraryNotFoundError",
    # State
    "StateError",
]
