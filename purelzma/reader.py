"""Reader for the classic LZMA file format."""

from .decoder import DecodeError, Decoder
from .decoderdict import MAX_DICT_CAP, MIN_DICT_CAP, DecoderDict
from .header import HEADER_LEN, Header
from .state import State

# Upper limit for the dictionary capacity unless configured otherwise.
DEFAULT_DICT_CAP = (1 << 31) - 1

# Streams larger than a pebibyte are rejected.
MAX_STREAM_SIZE = 1 << 50


class DictSizeError(ValueError):
    """Raised when the header dictionary size exceeds the configured capacity."""

    def __init__(self, config_dict_cap: int, header_dict_size: int):
        self.config_dict_cap = config_dict_cap
        self.header_dict_size = header_dict_size
        self.message = (
            f"lzma: header dictionary size {header_dict_size} exceeds "
            f"configured dictionary capacity {config_dict_cap}")
        super().__init__(self.message)


def _read_full(stream, n: int) -> bytes:
    out = bytearray()
    while len(out) < n:
        data = stream.read(n - len(out))
        if not data:
            break
        out += data
    return bytes(out)


class Reader:
    """Decompresses a classic LZMA stream from a binary stream.

    ``dict_cap`` limits the dictionary size accepted from the header; zero
    selects 2 GiB minus one byte. The allocated dictionary never exceeds
    the larger of the stream size and the minimum capacity.
    """

    def __init__(self, stream, dict_cap: int = 0):
        if dict_cap == 0:
            dict_cap = DEFAULT_DICT_CAP
        if not MIN_DICT_CAP <= dict_cap <= MAX_DICT_CAP:
            raise ValueError("lzma: dictionary capacity is out of range")
        data = _read_full(stream, HEADER_LEN)
        if len(data) < HEADER_LEN:
            raise DecodeError("lzma: unexpected EOF")
        self._header_orig = Header.from_bytes(data)
        h = self._header_orig
        if dict_cap < h.dict_size:
            raise DictSizeError(dict_cap, h.dict_size)
        dict_size = max(h.dict_size, MIN_DICT_CAP)
        size = h.size
        if 0 <= size < dict_size:
            dict_size = size
        if size > MAX_STREAM_SIZE:
            raise ValueError(
                f"lzma: stream size {size} exceeds a pebibyte (1024^5)")
        dict_size = max(dict_size, MIN_DICT_CAP)
        self._header = Header(h.properties, dict_size, size)
        try:
            self._decoder = Decoder(stream, State(h.properties),
                                    DecoderDict(dict_size), size)
        except EOFError as exc:
            raise DecodeError("lzma: unexpected EOF") from exc

    def header(self) -> Header:
        """Return the header as read from the stream."""
        return self._header_orig

    def eos_marker(self) -> bool:
        """Return whether an end-of-stream marker has been encountered."""
        return self._decoder.eos_marker

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` decompressed bytes, all remaining if negative.

        An empty result signals the end of the stream.
        """
        return self._decoder.read(size)