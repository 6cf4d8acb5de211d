"""Chunk headers, chunk sequencing and dictionary capacity codes of LZMA2."""

from dataclasses import dataclass
from enum import IntEnum

from .properties import Properties, properties_for_code

MAX_COMPRESSED = 1 << 16
MAX_UNCOMPRESSED = 1 << 21

UNCOMPRESSED_HEADER_LEN = 3

MAX_DICT_CAP = (1 << 32) - 1
MAX_DICT_CAP_CODE = 40

# Header byte values; compressed chunks carry the high bits of the
# uncompressed size in the low five bits.
_H_EOS = 0
_H_UD = 1
_H_U = 2
_H_L = 1 << 7
_H_LR = 1 << 7 | 1 << 5
_H_LRN = 1 << 7 | 1 << 6
_H_LRND = 1 << 7 | 1 << 6 | 1 << 5


class ChunkError(ValueError):
    """Raised for malformed chunk headers or chunk sequences."""


class ChunkType(IntEnum):
    """Kind of an LZMA2 chunk."""

    EOS = 0
    UD = 1
    U = 2
    L = 3
    LR = 4
    LRN = 5
    LRND = 6

    def __str__(self) -> str:
        return self.name


_UNCOMPRESSED_TYPES = {_H_EOS: ChunkType.EOS, _H_UD: ChunkType.UD, _H_U: ChunkType.U}
_COMPRESSED_TYPES = {
    _H_L: ChunkType.L,
    _H_LR: ChunkType.LR,
    _H_LRN: ChunkType.LRN,
    _H_LRND: ChunkType.LRND,
}
_TYPE_BYTES = {
    ChunkType.UD: _H_UD,
    ChunkType.U: _H_U,
    ChunkType.L: _H_L,
    ChunkType.LR: _H_LR,
    ChunkType.LRN: _H_LRN,
    ChunkType.LRND: _H_LRND,
}
_HEADER_LENS = {
    ChunkType.EOS: 1,
    ChunkType.U: UNCOMPRESSED_HEADER_LEN,
    ChunkType.UD: UNCOMPRESSED_HEADER_LEN,
    ChunkType.L: 5,
    ChunkType.LR: 5,
    ChunkType.LRN: 6,
    ChunkType.LRND: 6,
}


def header_chunk_type(h: int) -> ChunkType:
    """Return the chunk type of a header byte, ignoring the size bits."""
    if h & _H_L == 0:
        try:
            return _UNCOMPRESSED_TYPES[h]
        except KeyError:
            raise ChunkError("lzma: unsupported chunk header byte") from None
    return _COMPRESSED_TYPES[h & _H_LRND]


def header_len(c: ChunkType) -> int:
    """Return the length of the chunk header for the chunk type."""
    try:
        return _HEADER_LENS[c]
    except KeyError:
        raise ValueError(f"unsupported chunk type {c}") from None


@dataclass(frozen=True)
class ChunkHeader:
    """Contents of an LZMA2 chunk header.

    The size fields hold the stored values, which are one less than the
    actual sizes.
    """

    ctype: ChunkType
    uncompressed: int = 0
    compressed: int = 0
    props: Properties = Properties()

    def __str__(self) -> str:
        return f"{self.ctype} {self.uncompressed} {self.compressed} {self.props}"

    def to_bytes(self) -> bytes:
        """Encode the chunk header."""
        ctype = ChunkType(self.ctype)
        self.props.verify()
        data = bytearray(header_len(ctype))
        if ctype == ChunkType.EOS:
            return bytes(data)
        data[0] = _TYPE_BYTES[ctype]
        data[1:3] = (self.uncompressed & 0xFFFF).to_bytes(2, "big")
        if ctype <= ChunkType.U:
            return bytes(data)
        data[0] |= (self.uncompressed >> 16) & 0x1F
        data[3:5] = (self.compressed & 0xFFFF).to_bytes(2, "big")
        if ctype <= ChunkType.LR:
            return bytes(data)
        data[5] = self.props.code()
        return bytes(data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ChunkHeader":
        """Decode a chunk header; ``data`` must have exactly the header length."""
        if not data:
            raise ChunkError("no data")
        c = header_chunk_type(data[0])
        n = header_len(c)
        if len(data) < n:
            raise ChunkError("incomplete data")
        if len(data) > n:
            raise ChunkError("invalid data length")
        if c == ChunkType.EOS:
            return cls(c)
        uncompressed = int.from_bytes(data[1:3], "big")
        if c <= ChunkType.U:
            return cls(c, uncompressed)
        uncompressed |= (data[0] & 0x1F) << 16
        compressed = int.from_bytes(data[3:5], "big")
        if c <= ChunkType.LR:
            return cls(c, uncompressed, compressed)
        return cls(c, uncompressed, compressed, properties_for_code(data[5]))


def _read_full(stream, n: int) -> bytes:
    out = bytearray()
    while len(out) < n:
        data = stream.read(n - len(out))
        if not data:
            break
        out += data
    return bytes(out)


def read_chunk_header(stream) -> ChunkHeader:
    """Read a chunk header from a binary stream; raises EOFError if it is cut short."""
    first = _read_full(stream, 1)
    if not first:
        raise EOFError("no chunk header")
    c = header_chunk_type(first[0])
    rest_len = header_len(c) - 1
    rest = _read_full(stream, rest_len)
    if len(rest) < rest_len:
        raise EOFError("incomplete chunk header")
    return ChunkHeader.from_bytes(first + rest)


START = "S"
STOP = "T"

# States: S start, L normal LZMA, R reset required, U uncompressed, T terminal.
_TRANSITIONS = {
    "S": {ChunkType.EOS: "T", ChunkType.UD: "R", ChunkType.LRND: "L"},
    "L": {
        ChunkType.EOS: "T",
        ChunkType.UD: "R",
        ChunkType.U: "U",
        ChunkType.L: "L",
        ChunkType.LR: "L",
        ChunkType.LRN: "L",
        ChunkType.LRND: "L",
    },
    "R": {
        ChunkType.EOS: "T",
        ChunkType.UD: "R",
        ChunkType.U: "R",
        ChunkType.LRN: "L",
        ChunkType.LRND: "L",
    },
    "U": {
        ChunkType.EOS: "T",
        ChunkType.UD: "R",
        ChunkType.U: "U",
        ChunkType.L: "L",
        ChunkType.LR: "L",
        ChunkType.LRN: "L",
        ChunkType.LRND: "L",
    },
    "T": {},
}

_DEFAULT_TYPES = {
    "S": ChunkType.LRND,
    "L": ChunkType.L,
    "U": ChunkType.L,
    "R": ChunkType.LRN,
}


class ChunkState:
    """Tracks which chunk types may follow in an LZMA2 chunk sequence."""

    def __init__(self):
        self.value = START

    def next(self, ctype: ChunkType) -> None:
        """Advance the state for a chunk of the given type."""
        table = _TRANSITIONS.get(self.value)
        if table is None:
            raise ChunkError("lzma: wrong chunk state")
        try:
            self.value = table[ctype]
        except KeyError:
            raise ChunkError("lzma: unexpected chunk type") from None

    def default_chunk_type(self) -> ChunkType:
        """Return the chunk type to use by default in the current state."""
        return _DEFAULT_TYPES.get(self.value, ChunkType.EOS)


def _decode_dict_cap(c: int) -> int:
    return (2 | (c & 1)) << (11 + ((c >> 1) & 0x1F))


def decode_dict_cap(c: int) -> int:
    """Decode a dictionary capacity code byte."""
    if c >= MAX_DICT_CAP_CODE:
        if c == MAX_DICT_CAP_CODE:
            return MAX_DICT_CAP
        raise ValueError("lzma: invalid dictionary size code")
    return _decode_dict_cap(c)


def encode_dict_cap(n: int) -> int:
    """Return the code of the smallest capacity not below ``n``, or the maximum code."""
    a, b = 0, MAX_DICT_CAP_CODE
    while a < b:
        c = a + ((b - a) >> 1)
        m = _decode_dict_cap(c)
        if n <= m:
            if n == m:
                return c
            b = c
        else:
            a = c + 1
    return a