"""Header of the classic LZMA file format."""

import struct
from dataclasses import dataclass

from .decoderdict import MAX_DICT_CAP
from .properties import Properties, properties_for_code

HEADER_LEN = 13

_NO_HEADER_SIZE = (1 << 64) - 1
_MAX_INT64 = (1 << 63) - 1
_LAYOUT = struct.Struct("<BIQ")


@dataclass(frozen=True)
class Header:
    """Properties, dictionary size and uncompressed size (-1 if unknown)."""

    properties: Properties
    dict_size: int
    size: int

    def to_bytes(self) -> bytes:
        """Encode the header; a non-positive size is written as unknown."""
        self.properties.verify()
        if not 0 <= self.dict_size <= MAX_DICT_CAP:
            raise ValueError(f"lzma: DictCap {self.dict_size} out of range")
        if self.size > _MAX_INT64:
            raise ValueError("lzma: uncompressed size out of int64 range")
        s = self.size if self.size > 0 else _NO_HEADER_SIZE
        return _LAYOUT.pack(self.properties.code(), self.dict_size, s)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Header":
        """Decode a header of exactly HEADER_LEN bytes."""
        if len(data) != HEADER_LEN:
            raise ValueError("lzma: header data has wrong length")
        code, dict_size, s = _LAYOUT.unpack(bytes(data))
        props = properties_for_code(code)
        if s == _NO_HEADER_SIZE:
            size = -1
        elif s > _MAX_INT64:
            raise ValueError("LZMA header: uncompressed size out of int64 range")
        else:
            size = s
        return cls(props, dict_size, size)


def _valid_dict_size(dict_cap: int) -> bool:
    if dict_cap == MAX_DICT_CAP:
        return True
    return any(
        dict_cap in (1 << n, (1 << n) + (1 << (n - 1))) for n in range(10, 32)
    )


def valid_header(data: bytes) -> bool:
    """Check for a plausible LZMA file header.

    Only dictionary sizes 2^n or 2^n+2^(n-1) with n >= 10, or 2^32-1, are
    accepted, and an explicit size must not exceed 256 GiB.
    """
    try:
        h = Header.from_bytes(data)
    except ValueError:
        return False
    if not _valid_dict_size(h.dict_size):
        return False
    return h.size < 0 or h.size <= 1 << 38