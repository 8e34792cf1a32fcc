# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Bounds-checked access to raw image buffers.

Every parser addresses the input through integer offsets. These helpers
validate each (offset, length) pair against the buffer size before slicing
or unpacking, and raise TruncatedDataError instead of reading short.
"""

import struct
from typing import Tuple

from exiflens.exceptions import TruncatedDataError


def require(data: bytes, offset: int, length: int) -> None:
    """Raise TruncatedDataError unless data[offset:offset + length] is fully inside data."""
    if offset < 0 or length < 0 or offset + length > len(data):
        raise TruncatedDataError(
            f"Read of {length} bytes at offset {offset} exceeds buffer of {len(data)} bytes",
            offset=offset,
            length=length,
            available=max(len(data) - offset, 0),
        )


def read_bytes(data: bytes, offset: int, length: int) -> bytes:
    require(data, offset, length)
    return data[offset:offset + length]


def unpack_from(fmt: str, data: bytes, offset: int) -> Tuple:
    """
    Unpack a struct format at offset after checking it fits.
    
    Args:
        fmt: struct format string including the byte-order prefix
        data: Buffer to read from
        offset: Absolute offset into data
        
    Returns:
        Tuple of unpacked values
    """
    require(data, offset, struct.calcsize(fmt))
    return struct.unpack_from(fmt, data, offset)


def trim_nul(raw: bytes) -> bytes:
    """Strip trailing NUL padding."""
    return raw.rstrip(b'\x00')
