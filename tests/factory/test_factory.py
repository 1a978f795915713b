"""
Options factory tests.

Tests for lldbconnect.factory:
- Bytes handed to the native constructor
- Failure signalling (bridge errors, native faults, NULL handles)
- No native call for rejected input
- Independence of repeated and concurrent constructions

Maps to: lldbconnect/factory.py
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from lldbconnect import (
    ConnectionOptions,
    ConnectionOptionsFactory,
    EncodingError,
    InvalidArgumentError,
    LibraryNotFoundError,
    NativeConstructionError,
    create_connection_options,
)
from lldbconnect.bridge import ENCODING_ENV
from tests.fixtures.native import FakeShimLibrary

SCENARIO_URL = "connect://10.0.0.5:4242"


class TestCreate:
    """Tests for successful construction."""

    def test_returns_connection_options(self, factory):
        """create() returns an open ConnectionOptions."""
        options = factory.create(SCENARIO_URL)
        assert isinstance(options, ConnectionOptions)
        assert not options.closed
        assert options.handle

    def test_native_receives_exact_bytes(self, factory, fake_lib):
        """The constructor sees the encoded text plus one terminator."""
        factory.create(SCENARIO_URL)
        assert fake_lib.create_calls == [b"connect://10.0.0.5:4242\x00"]

    def test_native_receives_no_embedded_nul(self, factory, fake_lib):
        """Only the final byte passed to the constructor is NUL."""
        factory.create(SCENARIO_URL)
        (raw,) = fake_lib.create_calls
        assert raw.index(b"\x00") == len(raw) - 1

    def test_url_round_trips_through_native(self, factory):
        """The native value holds the locator that was passed in."""
        options = factory.create(SCENARIO_URL)
        assert options.url == SCENARIO_URL

    def test_empty_locator_succeeds(self, factory, fake_lib):
        """An empty locator is passed through; LLDB decides what it means."""
        options = factory.create("")
        assert options.handle
        assert fake_lib.create_calls == [b"\x00"]

    def test_encoding_recorded_on_options(self, ascii_factory):
        """The wrapper remembers the encoding used for its locator."""
        options = ascii_factory.create(SCENARIO_URL)
        assert options.encoding == "ascii"

    def test_non_ascii_locator_with_utf8(self, factory, fake_lib):
        """Representable non-ASCII text is encoded, not rejected."""
        factory.create("unix-abstract-connect:///tmp/sökt")
        assert fake_lib.create_calls == ["unix-abstract-connect:///tmp/sökt\x00".encode()]

    def test_environment_encoding_used_per_call(self, fake_lib, monkeypatch):
        """A factory without an encoding reads the environment on each call."""
        factory = ConnectionOptionsFactory(lib=fake_lib)
        monkeypatch.setenv(ENCODING_ENV, "latin-1")
        factory.create("h\xf6st")
        assert fake_lib.create_calls == [b"h\xf6st\x00"]


class TestRejectedInput:
    """Tests that invalid input never reaches the native layer."""

    def test_none_raises_without_native_call(self, factory, fake_lib):
        """None raises InvalidArgumentError and allocates nothing natively."""
        with pytest.raises(InvalidArgumentError):
            factory.create(None)
        assert fake_lib.create_calls == []
        assert fake_lib.live == {}

    def test_embedded_nul_raises_without_native_call(self, factory, fake_lib):
        """A NUL inside the locator raises EncodingError before LLDB runs."""
        with pytest.raises(EncodingError):
            factory.create("connect://10.0.0.5\x00:4242")
        assert fake_lib.create_calls == []

    def test_unrepresentable_raises_without_native_call(self, ascii_factory, fake_lib):
        """Unrepresentable characters raise EncodingError before LLDB runs."""
        with pytest.raises(EncodingError):
            ascii_factory.create("connect://höst:4242")
        assert fake_lib.create_calls == []

    def test_bridge_errors_propagate_unchanged(self, ascii_factory):
        """Bridge errors are not wrapped in NativeConstructionError."""
        with pytest.raises(EncodingError) as exc_info:
            ascii_factory.create("☃")
        assert not isinstance(exc_info.value, NativeConstructionError)

    def test_binary_codec_in_environment_raises_without_native_call(
        self, fake_lib, monkeypatch
    ):
        """A non-text codec configured by environment is an argument error."""
        monkeypatch.setenv(ENCODING_ENV, "base64")
        factory = ConnectionOptionsFactory(lib=fake_lib)
        with pytest.raises(InvalidArgumentError):
            factory.create("connect://h:1")
        assert fake_lib.create_calls == []

    def test_none_does_not_load_library(self):
        """Argument errors win over a missing native library."""
        factory = ConnectionOptionsFactory()
        with patch(
            "lldbconnect.factory.get_lib",
            side_effect=LibraryNotFoundError("no library"),
        ) as get_lib:
            with pytest.raises(InvalidArgumentError):
                factory.create(None)
        get_lib.assert_not_called()


class TestNativeFailure:
    """Tests for failures reported by the native constructor."""

    def test_fault_raises_native_construction_error(self):
        """An OSError from ctypes becomes NativeConstructionError."""
        fault = OSError("exception: access violation reading 0x0000000000000000")
        factory = ConnectionOptionsFactory(lib=FakeShimLibrary(fault=fault), encoding="ascii")
        with pytest.raises(NativeConstructionError) as exc_info:
            factory.create(SCENARIO_URL)
        error = exc_info.value
        assert error.locator == SCENARIO_URL
        assert error.details["locator"] == SCENARIO_URL
        assert error.__cause__ is fault
        assert SCENARIO_URL in str(error)

    def test_null_handle_raises_native_construction_error(self):
        """A NULL return is treated as failure, not wrapped."""
        lib = FakeShimLibrary(return_null=True)
        factory = ConnectionOptionsFactory(lib=lib, encoding="ascii")
        with pytest.raises(NativeConstructionError) as exc_info:
            factory.create(SCENARIO_URL)
        assert exc_info.value.locator == SCENARIO_URL
        assert exc_info.value.code == "NATIVE_CONSTRUCTION_FAILED"
        assert sum(lib.destroy_counts.values()) == 0

    def test_failure_is_not_retried(self):
        """The constructor is called exactly once per create()."""
        lib = FakeShimLibrary(fault=OSError("fault"))
        factory = ConnectionOptionsFactory(lib=lib, encoding="ascii")
        with pytest.raises(NativeConstructionError):
            factory.create(SCENARIO_URL)
        assert len(lib.create_calls) == 1

    def test_fault_is_logged_with_locator(self, caplog):
        """Native faults are logged at ERROR with the locator attached."""
        lib = FakeShimLibrary(fault=OSError("fault"))
        factory = ConnectionOptionsFactory(lib=lib, encoding="ascii")
        with caplog.at_level(logging.ERROR, logger="lldbconnect"):
            with pytest.raises(NativeConstructionError):
                factory.create(SCENARIO_URL)
        records = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert records
        assert records[0].locator == SCENARIO_URL

    def test_wrapper_failure_releases_native_value(self, factory, fake_lib):
        """If wrapping the handle fails, the native value is destroyed once."""
        with patch(
            "lldbconnect.factory.ConnectionOptions",
            side_effect=RuntimeError("wrapper failed"),
        ):
            with pytest.raises(RuntimeError, match="wrapper failed"):
                factory.create(SCENARIO_URL)
        assert len(fake_lib.create_calls) == 1
        (handle,) = fake_lib.destroy_counts
        assert fake_lib.destroy_counts[handle] == 1
        assert fake_lib.live == {}

    def test_interrupt_while_wrapping_releases_native_value(self, factory, fake_lib):
        """BaseException during wrapping also releases, then propagates."""
        with patch(
            "lldbconnect.factory.ConnectionOptions",
            side_effect=KeyboardInterrupt,
        ):
            with pytest.raises(KeyboardInterrupt):
                factory.create(SCENARIO_URL)
        assert set(fake_lib.destroy_counts.values()) == {1}
        assert fake_lib.live == {}

    def test_missing_library_propagates(self):
        """LibraryNotFoundError surfaces when the shim cannot be loaded."""
        factory = ConnectionOptionsFactory(encoding="ascii")
        with patch(
            "lldbconnect.factory.get_lib",
            side_effect=LibraryNotFoundError("no library"),
        ):
            with pytest.raises(LibraryNotFoundError):
                factory.create(SCENARIO_URL)


class TestIndependence:
    """Tests that constructions never share native state."""

    def test_same_locator_twice_gives_distinct_handles(self, factory):
        """Two creates with the same text own two different native values."""
        first = factory.create(SCENARIO_URL)
        second = factory.create(SCENARIO_URL)
        assert first.handle != second.handle

    def test_handles_release_independently(self, factory, fake_lib):
        """Closing one wrapper leaves the other alive."""
        first = factory.create(SCENARIO_URL)
        second = factory.create(SCENARIO_URL)
        first_handle = first.handle
        second_handle = second.handle

        first.close()
        assert fake_lib.destroy_counts[first_handle] == 1
        assert second_handle in fake_lib.live
        assert second.url == SCENARIO_URL

        second.close()
        assert fake_lib.destroy_counts[second_handle] == 1
        assert fake_lib.live == {}

    def test_concurrent_creates(self, factory, fake_lib):
        """Concurrent calls each get their own native value."""
        urls = [f"connect://10.0.0.{i}:4242" for i in range(64)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(factory.create, urls))

        assert len({options.handle for options in results}) == len(urls)
        assert [options.url for options in results] == urls

        for options in results:
            options.close()
        assert fake_lib.live == {}
        assert set(fake_lib.destroy_counts.values()) == {1}


class TestCreateConnectionOptions:
    """Tests for the module-level convenience function."""

    def test_uses_default_library(self, fake_lib, monkeypatch):
        """create_connection_options() goes through get_lib()."""
        monkeypatch.setenv(ENCODING_ENV, "ascii")
        with patch("lldbconnect.factory.get_lib", return_value=fake_lib):
            options = create_connection_options(SCENARIO_URL)
        assert options.url == SCENARIO_URL
        assert fake_lib.create_calls == [b"connect://10.0.0.5:4242\x00"]

    def test_rejects_none(self):
        """None is rejected even with no library available."""
        with pytest.raises(InvalidArgumentError):
            create_connection_options(None)
