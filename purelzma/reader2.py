"""Reader for LZMA2 chunk sequences."""

from .decoder import DecodeError, Decoder
from .decoderdict import MAX_DICT_CAP, MIN_DICT_CAP, DecoderDict
from .header2 import STOP, ChunkState, ChunkType, read_chunk_header
from .state import State

DEFAULT_DICT_CAP = 8 * 1024 * 1024

_ERRORS = (DecodeError, ValueError, EOFError)


class _LimitedReader:
    """Reads at most ``remaining`` bytes from a stream."""

    def __init__(self, stream, limit: int):
        self.stream = stream
        self.remaining = limit

    def read(self, n: int = -1) -> bytes:
        if self.remaining <= 0:
            return b""
        if n < 0 or n > self.remaining:
            n = self.remaining
        data = self.stream.read(n) or b""
        self.remaining -= len(data)
        return data


class UncompressedReader:
    """Reads an uncompressed chunk of ``size`` bytes through the dictionary."""

    def __init__(self, stream, dict: DecoderDict, size: int):
        self.dict = dict
        self.reopen(stream, size)

    def reopen(self, stream, size: int) -> None:
        """Start a new uncompressed chunk of ``size`` bytes."""
        self._lr = _LimitedReader(stream, size)
        self._eof = False
        self._done = False
        self._err = None

    def _fill(self) -> bool:
        """Copy chunk data into the dictionary; return True at the chunk end."""
        if not self._eof:
            want = self.dict.available()
            copied = 0
            while copied < want:
                data = self._lr.read(want - copied)
                if not data:
                    break
                self.dict.write(data)
                copied += len(data)
            if copied == want:
                return False
            self._eof = True
            if copied > 0:
                return False
        if self._lr.remaining != 0:
            raise DecodeError("lzma: unexpected EOF")
        return True

    def read(self, n: int = -1) -> bytes:
        """Return up to ``n`` bytes, all remaining if ``n`` is negative.

        An empty result signals the end of the chunk.
        """
        if self._err is not None:
            raise self._err
        if self._done:
            return b""
        out = bytearray()
        while True:
            want = n - len(out) if n >= 0 else len(self.dict.buf.data)
            out += self.dict.read(want)
            if 0 <= n <= len(out):
                return bytes(out)
            try:
                if self._fill():
                    self._done = True
                    return bytes(out)
            except DecodeError as exc:
                self._err = exc
                if out:
                    return bytes(out)
                raise


class Reader2:
    """Decompresses an LZMA2 chunk sequence from a binary stream.

    A ``dict_cap`` of zero selects the default capacity of 8 MiB.
    """

    def __init__(self, stream, dict_cap: int = 0):
        if dict_cap == 0:
            dict_cap = DEFAULT_DICT_CAP
        if not MIN_DICT_CAP <= dict_cap <= MAX_DICT_CAP:
            raise ValueError("lzma: dictionary capacity is out of range")
        self._stream = stream
        self._dict = DecoderDict(dict_cap)
        self._cstate = ChunkState()
        self._ur = None
        self._decoder = None
        self._chunk_reader = None
        self._err = None
        self._done = False
        try:
            self._advance()
        except _ERRORS as exc:
            self._err = exc

    def _advance(self) -> None:
        if not self._start_chunk():
            self._done = True

    def _start_chunk(self) -> bool:
        """Parse the next chunk header; return False at the end-of-stream chunk."""
        self._chunk_reader = None
        try:
            header = read_chunk_header(self._stream)
        except EOFError as exc:
            raise DecodeError("lzma: unexpected EOF") from exc
        self._cstate.next(header.ctype)
        if self._cstate.value == STOP:
            return False
        if header.ctype in (ChunkType.UD, ChunkType.LRND):
            self._dict.reset()
        size = header.uncompressed + 1
        if header.ctype in (ChunkType.U, ChunkType.UD):
            if self._ur is None:
                self._ur = UncompressedReader(self._stream, self._dict, size)
            else:
                self._ur.reopen(self._stream, size)
            self._chunk_reader = self._ur
            return True
        limited = _LimitedReader(self._stream, header.compressed + 1)
        try:
            if self._decoder is None:
                self._decoder = Decoder(limited, State(header.props), self._dict, size)
            else:
                if header.ctype == ChunkType.LR:
                    self._decoder.state.reset()
                elif header.ctype in (ChunkType.LRN, ChunkType.LRND):
                    self._decoder.state = State(header.props)
                self._decoder.reopen(limited, size)
        except EOFError as exc:
            raise DecodeError("lzma: unexpected EOF") from exc
        self._chunk_reader = self._decoder
        return True

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` decompressed bytes, all remaining if negative.

        An empty result signals the end of the stream. If an error occurs
        after some data has been read, that data is returned and the
        error is raised by the next call.
        """
        if self._err is not None:
            raise self._err
        out = bytearray()
        while not self._done and (size < 0 or len(out) < size):
            want = size - len(out) if size >= 0 else -1
            try:
                chunk = self._chunk_reader.read(want)
                out += chunk
                if want < 0 or len(chunk) < want:
                    self._advance()
            except _ERRORS as exc:
                self._err = exc
                if out:
                    return bytes(out)
                raise
        return bytes(out)

    def eos(self) -> bool:
        """Return whether the end-of-stream chunk has been read."""
        return self._cstate.value == STOP