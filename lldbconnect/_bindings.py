"""
FFI bindings for the LLDB connect-options shim.

Justification: Loads the shim library once per process, applies the
signatures from _native.py, and wraps each C call so callers never touch
ctypes conversions directly. The ``lib`` argument on every wrapper lets a
factory drive an alternate library object with the same symbols.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import os
import sys
import threading
from pathlib import Path
from typing import Any

from ._logging import scoped_logger
from ._native import setup_signatures
from .exceptions import LibraryNotFoundError

__all__ = [
    "LIB_ENV",
    "LIB_NAME",
    "call_options_create",
    "call_options_destroy",
    "call_options_get_local_cache_directory",
    "call_options_get_rsync_enabled",
    "call_options_get_url",
    "get_lib",
    "library_candidates",
    "reset_lib",
]

log = scoped_logger("native")

LIB_ENV = "LLDBCONNECT_LIB"
LIB_NAME = "lldbconnect"

_lib: Any = None
_lib_lock = threading.Lock()


def _bundled_lib_name() -> str:
    """Platform-specific file name of the shim shipped beside the package."""
    if sys.platform == "win32":
        return f"{LIB_NAME}.dll"
    if sys.platform == "darwin":
        return f"lib{LIB_NAME}.dylib"
    return f"lib{LIB_NAME}.so"


def library_candidates() -> list[str]:
    """
    Return the locations get_lib() will try, in order.

    An explicit ``LLDBCONNECT_LIB`` is the only candidate when set, so a
    misconfigured path fails loudly instead of silently loading another copy.
    """
    explicit = os.environ.get(LIB_ENV)
    if explicit:
        return [explicit]

    candidates = []
    found = ctypes.util.find_library(LIB_NAME)
    if found:
        candidates.append(found)
    candidates.append(str(Path(__file__).parent / _bundled_lib_name()))
    return candidates


def _load() -> Any:
    errors: dict[str, str] = {}
    for candidate in library_candidates():
        try:
            lib = ctypes.CDLL(candidate)
        except OSError as e:
            errors[candidate] = str(e)
            continue
        try:
            setup_signatures(lib)
        except AttributeError as e:
            raise LibraryNotFoundError(
                f"{candidate} is not an lldbconnect shim: {e}",
                details={"path": candidate},
            ) from e
        log.debug("Loaded native library", extra={"path": candidate})
        return lib

    raise LibraryNotFoundError(
        f"Could not load the lldbconnect native library (set {LIB_ENV} to its path)",
        details={"tried": errors},
    )


def get_lib() -> Any:
    """Get the shim library handle, loading it on first use."""
    global _lib
    if _lib is None:
        with _lib_lock:
            if _lib is None:
                _lib = _load()
    return _lib


def reset_lib() -> None:
    """Forget the cached library so the next get_lib() reloads it."""
    global _lib
    with _lib_lock:
        _lib = None


def _decode(raw: bytes | None, encoding: str) -> str | None:
    if raw is None:
        return None
    # Output only: a lossy decode never feeds back into a native call.
    return raw.decode(encoding, errors="replace")


def call_options_create(lib: Any, url: Any) -> int | None:
    """Construct native connect options. Returns the handle, or None for NULL."""
    return lib.lldb_connect_options_create(url)


def call_options_destroy(lib: Any, handle: int) -> None:
    """Destroy native connect options."""
    lib.lldb_connect_options_destroy(handle)


def call_options_get_url(lib: Any, handle: int, encoding: str) -> str | None:
    """Get the URL stored in the options (borrowed string)."""
    return _decode(lib.lldb_connect_options_get_url(handle), encoding)


def call_options_get_rsync_enabled(lib: Any, handle: int) -> bool:
    """Check whether rsync file transfer is enabled on the options."""
    return bool(lib.lldb_connect_options_get_rsync_enabled(handle))


def call_options_get_local_cache_directory(lib: Any, handle: int, encoding: str) -> str | None:
    """Get the local cache directory stored in the options (borrowed string)."""
    return _decode(lib.lldb_connect_options_get_local_cache_directory(handle), encoding)
