"""
lldbconnect - LLDB platform connect options from Python.

Converts a connection locator string into an owned native
``lldb::SBPlatformConnectOptions`` value through a small C shim loaded with
ctypes.

Quick Start
-----------

    >>> from lldbconnect import create_connection_options
    >>>
    >>> with create_connection_options("connect://10.0.0.5:4242") as options:
    ...     session.connect_platform(options)

Passing a locator that cannot cross the boundary intact fails before LLDB is
called:

    >>> create_connection_options("connect://h\\u00f6st:4242")  # on an ASCII locale
    Traceback (most recent call last):
    ...
    lldbconnect.exceptions.exceptions.EncodingError: ...

Configuration
-------------

- ``LLDBCONNECT_LIB`` - path of the native shim library
- ``LLDBCONNECT_NATIVE_ENCODING`` - override the narrow encoding
- ``LLDBCONNECT_LOG_LEVEL`` / ``LLDBCONNECT_LOG_FORMAT`` - logging
"""

from lldbconnect._logging import setup_logging
from lldbconnect.bridge import bridge, encode_locator, native_encoding
from lldbconnect.exceptions import (
    EncodingError,
    InvalidArgumentError,
    LibraryNotFoundError,
    LldbConnectError,
    NativeConstructionError,
    StateError,
)
from lldbconnect.factory import ConnectionOptionsFactory, create_connection_options
from lldbconnect.options import ConnectionOptions

__all__ = [
    # Factory
    "create_connection_options",
    "ConnectionOptionsFactory",
    "ConnectionOptions",
    # String bridge
    "bridge",
    "encode_locator",
    "native_encoding",
    # Logging
    "setup_logging",
    # Exceptions
    "LldbConnectError",
    "InvalidArgumentError",
    "EncodingError",
    "NativeConstructionError",
    "LibraryNotFoundError",
    "StateError",
]
