"""
String bridge: Python text to native narrow strings.

LLDB takes connection URLs as ``const char*`` in the platform's narrow
encoding. This module converts a ``str`` into a null-terminated ctypes
buffer, rejecting anything that would not survive the trip intact:

- ``None`` or non-``str`` input raises InvalidArgumentError
- characters with no mapping in the native encoding raise EncodingError
- embedded NUL characters raise EncodingError (C would truncate there)

Nothing is ever substituted. A locator that changed in transit could send
the debugger to a different endpoint without any visible failure.
"""

from __future__ import annotations

import codecs
import ctypes
import locale
import os

from ._logging import scoped_logger
from .exceptions import EncodingError, InvalidArgumentError

__all__ = ["ENCODING_ENV", "bridge", "encode_locator", "native_encoding"]

log = scoped_logger("bridge")

ENCODING_ENV = "LLDBCONNECT_NATIVE_ENCODING"


def _resolve(name: str) -> str:
    try:
        codec = codecs.lookup(name)
    except LookupError as e:
        raise InvalidArgumentError(
            f"Unknown encoding: {name!r}", details={"encoding": name}
        ) from e
    # Binary codecs such as base64 are registered but cannot encode str.
    try:
        "".encode(codec.name)
    except LookupError as e:
        raise InvalidArgumentError(
            f"Not a text encoding: {name!r}", details={"encoding": name}
        ) from e
    return codec.name


def native_encoding(encoding: str | None = None) -> str:
    """
    Resolve the narrow encoding used for native strings.

    Precedence: the ``encoding`` argument, then ``LLDBCONNECT_NATIVE_ENCODING``,
    then the locale's preferred encoding (the ANSI code page on Windows,
    usually UTF-8 elsewhere). The result is the codec's canonical name.

    Raises
    ------
    InvalidArgumentError
        If the encoding name is unknown or names a non-text codec.
    """
    if encoding is None:
        encoding = os.environ.get(ENCODING_ENV) or locale.getpreferredencoding(False)
    return _resolve(encoding)


def encode_locator(text: str, encoding: str | None = None) -> bytes:
    """
    Encode locator text for the native side, without the terminator.

    Parameters
    ----------
    text : str
        The connection locator. May be empty; must not be ``None``.
    encoding : str, optional
        Override the native encoding (see native_encoding()).

    Returns
    -------
    bytes
        Exact transcoding of ``text``. Contains no NUL byte.

    Raises
    ------
    InvalidArgumentError
        If ``text`` is ``None`` or not a ``str``.
    EncodingError
        If ``text`` contains NUL or a character the encoding cannot represent.
    """
    if text is None:
        raise InvalidArgumentError("Connection locator must not be None")
    if not isinstance(text, str):
        raise InvalidArgumentError(
            f"Connection locator must be str, not {type(text).__name__}",
            details={"type": type(text).__name__},
        )

    encoding = native_encoding(encoding)

    nul_at = text.find("\x00")
    if nul_at != -1:
        log.debug("Rejected locator with embedded NUL", extra={"position": nul_at})
        raise EncodingError(
            f"Connection locator contains an embedded NUL at position {nul_at}",
            details={"position": nul_at, "encoding": encoding},
        )

    try:
        data = text.encode(encoding, errors="strict")
    except UnicodeEncodeError as e:
        bad = e.object[e.start : e.end]
        log.debug(
            "Rejected locator with unrepresentable characters",
            extra={"encoding": encoding, "position": e.start},
        )
        raise EncodingError(
            f"Connection locator character {bad!r} at position {e.start} "
            f"cannot be represented in {encoding}",
            details={"position": e.start, "encoding": encoding, "characters": bad},
        ) from e

    # Wide encodings (utf-16, utf-32) emit NUL bytes for plain ASCII.
    if b"\x00" in data:
        raise EncodingError(
            f"{encoding} is not a narrow encoding; encoded locator contains NUL bytes",
            details={"encoding": encoding},
        )

    return data


def bridge(text: str, encoding: str | None = None) -> ctypes.Array:
    """
    Convert locator text into a null-terminated native string buffer.

    The returned ``c_char`` array holds the encoded text followed by exactly
    one NUL and can be passed wherever ctypes expects ``c_char_p``. It is
    released with its last Python reference, so keep it alive only for the
    duration of the native call.

    Examples
    --------
    >>> buf = bridge("connect://10.0.0.5:4242", encoding="ascii")
    >>> buf.raw
    b'connect://10.0.0.5:4242\\x00'
    >>> bridge("").raw
    b'\\x00'
    """
    data = encode_locator(text, encoding)
    return ctypes.create_string_buffer(data, len(data) + 1)
