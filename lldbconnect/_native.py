"""
C API signatures for the LLDB connect-options shim.

The shim exposes ``lldb::SBPlatformConnectOptions`` through a flat C ABI so
it can be driven from ctypes::

    void*       lldb_connect_options_create(const char* url);
    void        lldb_connect_options_destroy(void* options);
    const char* lldb_connect_options_get_url(void* options);
    bool        lldb_connect_options_get_rsync_enabled(void* options);
    const char* lldb_connect_options_get_local_cache_directory(void* options);

``create`` copies ``url`` before returning and never keeps the pointer.
Strings returned by the getters are owned by the options value and stay
valid until ``destroy``; callers must not free them.
"""

import ctypes
from typing import Any

__all__ = ["OptionsHandle", "SIGNATURES", "setup_signatures"]

# Handle type for documentation
OptionsHandle = ctypes.c_void_p

# name -> (argtypes, restype)
SIGNATURES: dict[str, tuple[list[Any], Any]] = {
    "lldb_connect_options_create": ([ctypes.c_char_p], ctypes.c_void_p),
    "lldb_connect_options_destroy": ([ctypes.c_void_p], None),
    "lldb_connect_options_get_url": ([ctypes.c_void_p], ctypes.c_char_p),
    "lldb_connect_options_get_rsync_enabled": ([ctypes.c_void_p], ctypes.c_bool),
    "lldb_connect_options_get_local_cache_directory": ([ctypes.c_void_p], ctypes.c_char_p),
}


def setup_signatures(lib: Any) -> None:
    """
    Configure argtypes/restype for every shim function.

    Missing argtypes let ctypes pass 64-bit pointers as C ints, which
    truncates handles on 64-bit platforms. Every symbol must be present.
    """
    for name, (argtypes, restype) in SIGNATURES.items():
        func = getattr(lib, name)
        func.argtypes = argtypes
        func.restype = restype
