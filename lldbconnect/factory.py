"""
Factory for LLDB platform connect options.

Turns a connection locator such as ``"connect://10.0.0.5:4242"`` into a
ConnectionOptions that owns the native value. Each call is independent:

    Pending --bridge + native create--> Done (ConnectionOptions returned)
                                    \\-> Failed (exception raised)

Nothing is retried. Construction is pure and in-memory, so a second attempt
with the same input would fail the same way.
"""

from __future__ import annotations

from typing import Any

from ._bindings import call_options_create, call_options_destroy, get_lib
from ._logging import scoped_logger
from .bridge import bridge, native_encoding
from .exceptions import NativeConstructionError
from .options import ConnectionOptions

__all__ = ["ConnectionOptionsFactory", "create_connection_options"]

log = scoped_logger("factory")


class ConnectionOptionsFactory:
    """
    Creates ConnectionOptions from connection locators.

    Parameters
    ----------
    lib : optional
        Library object exposing the shim's C functions. Defaults to the
        process-wide library from get_lib(), loaded on first create().
    encoding : str, optional
        Narrow encoding for locators. Defaults to native_encoding(),
        resolved on every call so environment changes take effect.

    The factory holds no per-call state and may be shared across threads.
    It does not serialize native calls; if the LLDB build in use needs that,
    the caller must provide it.
    """

    def __init__(self, lib: Any = None, encoding: str | None = None):
        self._lib = lib
        self._encoding = native_encoding(encoding) if encoding is not None else None

    @property
    def lib(self) -> Any:
        """The library object used for native calls."""
        if self._lib is None:
            return get_lib()
        return self._lib

    def create(self, locator: str) -> ConnectionOptions:
        """
        Build connect options for ``locator``.

        A returned ConnectionOptions only means LLDB accepted the bytes and
        built a value; SBPlatformConnectOptions has no IsValid(), so no
        semantic check of the URL has happened.

        Raises
        ------
        InvalidArgumentError
            ``locator`` is None or not a str. No native call is made.
        EncodingError
            ``locator`` is not representable in the native encoding.
            No native call is made.
        NativeConstructionError
            The native constructor faulted or returned NULL.
        LibraryNotFoundError
            The shim library could not be loaded.
        """
        encoding = native_encoding(self._encoding)
        buf = bridge(locator, encoding)
        lib = self.lib

        log.debug("Creating connect options", extra={"locator": locator, "encoding": encoding})
        try:
            handle = call_options_create(lib, buf)
        except OSError as e:
            log.error(
                "Native connect options constructor faulted",
                extra={"locator": locator, "error": str(e)},
            )
            raise NativeConstructionError(
                f"LLDB failed to construct connect options for {locator!r}: {e}",
                locator,
            ) from e
        finally:
            del buf

        if not handle:
            log.error(
                "Native connect options constructor returned NULL", extra={"locator": locator}
            )
            raise NativeConstructionError(
                f"LLDB returned no connect options for {locator!r}", locator
            )

        try:
            return ConnectionOptions(lib, handle, encoding)
        except BaseException:
            call_options_destroy(lib, handle)
            raise


_default_factory = ConnectionOptionsFactory()


def create_connection_options(locator: str) -> ConnectionOptions:
    """
    Create connect options for ``locator`` using the default native library.

    Examples
    --------
    >>> options = create_connection_options("connect://10.0.0.5:4242")
    >>> options.url
    'connect://10.0.0.5:4242'
    >>> options.close()
    """
    return _default_factory.create(locator)
