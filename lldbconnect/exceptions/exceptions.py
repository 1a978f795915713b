"""
lldbconnect exceptions.

This module defines the exception hierarchy for lldbconnect:

    LldbConnectError (base)
    ├── InvalidArgumentError - Absent or wrongly-typed argument (programmer error)
    ├── EncodingError - Locator text not representable as a native narrow string
    ├── NativeConstructionError - Native options constructor faulted or returned NULL
    ├── LibraryNotFoundError - Native shim library could not be loaded
    └── StateError - Operation on a closed ConnectionOptions

Usage:
    try:
        options = create_connection_options(url)
    except lldbconnect.EncodingError as e:
        print(f"Cannot pass locator to LLDB: {e}")
    except lldbconnect.NativeConstructionError as e:
        print(f"LLDB rejected {e.locator!r}: {e}")
    except lldbconnect.LldbConnectError as e:
        # Catch any lldbconnect error with structured details
        print(f"Error {e.code}: {e}")
        print(f"Details: {e.details}")

A failed construction means "no connection options available". Callers must
stop rather than fall back to a default locator.
"""

from typing import Any

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


class LldbConnectError(Exception):
    """
    Base exception for all lldbconnect errors.

    Attributes
    ----------
    message : str
        Human-readable error description.
    code : str
        Stable, string-based error code (e.g., "ENCODING_ERROR").
        Use this for programmatic error handling.
    details : dict[str, Any]
        Structured context (e.g., {"locator": "...", "encoding": "utf-8"}).
    original_code : int | None
        Numeric code for the error category (for logging).
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_code = original_code

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, code={self.code!r})"


# =============================================================================
# Argument Errors
# =============================================================================


class InvalidArgumentError(LldbConnectError, ValueError):
    """
    Absent or invalid argument.

    Raised before any native call when:
    - The locator is ``None``
    - The locator is not a ``str`` (e.g. ``bytes``)
    - An encoding name cannot be resolved

    This is a programmer error, not a runtime condition.
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_ARGUMENT",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code or 100)


# =============================================================================
# Encoding Errors
# =============================================================================


class EncodingError(LldbConnectError, ValueError):
    """
    Locator text cannot be represented as a native narrow string.

    Raised when:
    - A character has no mapping in the native encoding
    - The text contains an embedded NUL, which would silently truncate
      the locator on the native side

    Non-representable characters are always rejected, never substituted.
    A substituted locator could point LLDB at the wrong endpoint.
    """

    def __init__(
        self,
        message: str,
        code: str = "ENCODING_ERROR",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code or 200)


# =============================================================================
# Native Boundary Errors
# =============================================================================


class NativeConstructionError(LldbConnectError, RuntimeError):
    """
    The native connect-options constructor failed.

    Raised when the constructor faults (ctypes surfaces the fault as
    ``OSError``, chained as ``__cause__``) or returns a NULL handle.
    No partial ``ConnectionOptions`` is returned.

    Attributes
    ----------
    locator : str
        The locator text that was being converted.
    """

    def __init__(
        self,
        message: str,
        locator: str,
        code: str = "NATIVE_CONSTRUCTION_FAILED",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        details = dict(details or {})
        details.setdefault("locator", locator)
        super().__init__(message, code, details, original_code or 300)
        self.locator = locator


class LibraryNotFoundError(LldbConnectError, OSError):
    """
    The native shim library could not be located or loaded.

    Set ``LLDBCONNECT_LIB`` to the full path of the shim library, or install
    it where ``ctypes.util.find_library("lldbconnect")`` can find it.
    """

    def __init__(
        self,
        message: str,
        code: str = "LIBRARY_NOT_FOUND",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code or 500)


# =============================================================================
# State Errors
# =============================================================================


class StateError(LldbConnectError, RuntimeError):
    """
    Invalid object state error.

    Raised when the native handle of a closed ``ConnectionOptions`` is
    requested.
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_STATE",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)
