"""
Owning wrapper around a native LLDB connect-options value.
"""

from __future__ import annotations

import threading
from typing import Any

from ._bindings import (
    call_options_destroy,
    call_options_get_local_cache_directory,
    call_options_get_rsync_enabled,
    call_options_get_url,
)
from ._logging import scoped_logger
from .exceptions import InvalidArgumentError, StateError

__all__ = ["ConnectionOptions"]

log = scoped_logger("options")


class ConnectionOptions:
    """
    Exclusive owner of one native ``SBPlatformConnectOptions`` value.

    Instances come from ConnectionOptionsFactory.create(). The native value
    is released exactly once: on close(), on leaving a ``with`` block, or
    when the object is garbage collected, whichever happens first. The
    wrapper cannot be copied or pickled, so no two Python objects ever own
    the same native value.

    close() and the accessors share a lock, so a wrapper may be read on one
    thread while another closes it; the read finishes before the release.

    The wrapper is read-only. Construction succeeding only means LLDB built
    the value; it does not mean the locator was checked. A malformed URL may
    only be reported when the platform connects.

    Examples
    --------
    ::

        with create_connection_options("connect://10.0.0.5:4242") as options:
            session.connect_platform(options)  # native side receives options.handle
    """

    __slots__ = ("_lib", "_handle", "_encoding", "_lock", "__weakref__")

    def __init__(self, lib: Any, handle: int, encoding: str):
        if not handle:
            raise InvalidArgumentError("ConnectionOptions requires a non-NULL native handle")
        object.__setattr__(self, "_lib", lib)
        object.__setattr__(self, "_handle", handle)
        object.__setattr__(self, "_encoding", encoding)
        object.__setattr__(self, "_lock", threading.Lock())

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def close(self) -> None:
        """
        Release the native value.

        After calling close(), the options cannot be used. Safe to call
        multiple times (idempotent). Waits for any accessor that is reading
        the native value on another thread.
        """
        lock = getattr(self, "_lock", None)
        if lock is None:
            return
        with lock:
            handle = getattr(self, "_handle", None)
            if not handle:
                return
            object.__setattr__(self, "_handle", None)
            call_options_destroy(self._lib, handle)
        log.debug("Released connect options", extra={"handle": hex(handle)})

    def __enter__(self) -> ConnectionOptions:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit, calls close()."""
        self.close()

    def __del__(self):
        try:
            self.close()
        except Exception:
            pass

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} owns a native value and cannot be copied")

    def __deepcopy__(self, memo: dict):
        raise TypeError(f"{type(self).__name__} owns a native value and cannot be copied")

    def __reduce_ex__(self, protocol: Any):
        raise TypeError(f"{type(self).__name__} owns a native value and cannot be pickled")

    @property
    def closed(self) -> bool:
        """True once the native value has been released."""
        return not self._handle

    @property
    def encoding(self) -> str:
        """Narrow encoding the locator was bridged with."""
        return self._encoding

    @property
    def handle(self) -> int:
        """
        Raw native pointer, for passing to session-establishment code.

        The wrapper keeps ownership: do not destroy the handle yourself, and
        keep the wrapper alive while the handle is in use.

        Raises
        ------
        StateError
            If the options have been closed.
        """
        handle = self._handle
        if not handle:
            raise StateError("ConnectionOptions has been closed")
        return handle

    @property
    def _as_parameter_(self) -> int:
        # Lets ctypes accept the wrapper wherever a void* is expected.
        return self.handle

    def _read(self, call, *args):
        # close() takes the same lock, so the value cannot be freed mid-call.
        with self._lock:
            return call(self._lib, self.handle, *args)

    @property
    def url(self) -> str | None:
        """URL held by the native options, as LLDB stored it."""
        return self._read(call_options_get_url, self._encoding)

    @property
    def rsync_enabled(self) -> bool:
        """Whether LLDB will use rsync to transfer files for this platform."""
        return self._read(call_options_get_rsync_enabled)

    @property
    def local_cache_directory(self) -> str | None:
        """Local cache directory for rsync transfers, if one is set."""
        return self._read(call_options_get_local_cache_directory, self._encoding)

    def __repr__(self) -> str:
        try:
            return f"{type(self).__name__}(url={self.url!r})"
        except StateError:
            return f"{type(self).__name__}(<closed>)"
