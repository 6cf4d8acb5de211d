"""Decoder for raw LZMA streams without a header."""

from .codecs import MAX_MATCH_LEN, MIN_DISTANCE, MIN_MATCH_LEN
from .decoderdict import DecoderDict
from .operation import Literal, Match
from .rangecodec import RangeDecoder
from .state import State

_EOS_DIST = (1 << 32) - 1


class DecodeError(Exception):
    """Raised when an LZMA stream is malformed."""


class Decoder:
    """Decodes a raw LZMA stream into a decoder dictionary.

    A negative ``size`` means the size is unknown and the stream must be
    terminated by an end-of-stream marker.
    """

    def __init__(self, reader, state: State, dict: DecoderDict, size: int):
        self._rd = RangeDecoder(reader)
        self.state = state
        self.dict = dict
        self.size = size
        self.start = dict.pos()
        self.eos = False
        self.eos_marker = False

    def reopen(self, reader, size: int) -> None:
        """Restart with a new reader and size, resetting the decompressed count."""
        self._rd = RangeDecoder(reader)
        self.start = self.dict.pos()
        self.size = size
        self.eos = False

    def _decode_literal(self) -> Literal:
        s = self.state
        lit_state = s.lit_state(self.dict.byte_at(1), self.dict.head)
        match = self.dict.byte_at(s.rep[0] + 1)
        return Literal(s.lit_codec.decode(self._rd, s.state, match, lit_state))

    def read_op(self):
        """Decode the next operation; return None at an end-of-stream marker."""
        s = self.state
        rd = self._rd
        state, state2, pos_state = s.states(self.dict.head)

        if rd.decode_bit(s.is_match, state2) == 0:
            op = self._decode_literal()
            s.update_state_literal()
            return op

        if rd.decode_bit(s.is_rep, state) == 0:
            # simple match
            s.rep[3], s.rep[2], s.rep[1] = s.rep[2], s.rep[1], s.rep[0]
            s.update_state_match()
            n = s.len_codec.decode(rd, pos_state)
            s.rep[0] = s.dist_codec.decode(rd, n)
            if s.rep[0] == _EOS_DIST:
                self.eos_marker = True
                return None
            return Match(s.rep[0] + MIN_DISTANCE, n + MIN_MATCH_LEN)

        dist = s.rep[0]
        if rd.decode_bit(s.is_rep_g0, state) == 0:
            if rd.decode_bit(s.is_rep_g0_long, state2) == 0:
                s.update_state_short_rep()
                return Match(dist + MIN_DISTANCE, 1)
        else:
            if rd.decode_bit(s.is_rep_g1, state) == 0:
                dist = s.rep[1]
            else:
                if rd.decode_bit(s.is_rep_g2, state) == 0:
                    dist = s.rep[2]
                else:
                    dist = s.rep[3]
                    s.rep[3] = s.rep[2]
                s.rep[2] = s.rep[1]
            s.rep[1] = s.rep[0]
            s.rep[0] = dist
        n = s.rep_len_codec.decode(rd, pos_state)
        s.update_state_rep()
        return Match(dist + MIN_DISTANCE, n + MIN_MATCH_LEN)

    def apply(self, op) -> None:
        """Apply a literal or match to the dictionary."""
        if isinstance(op, Match):
            self.dict.write_match(op.distance, op.n)
        elif isinstance(op, Literal):
            self.dict.write_byte(op.b)
        else:
            raise TypeError("op is neither a match nor a literal")

    def _read_op_checked(self):
        try:
            return self.read_op()
        except EOFError as exc:
            raise DecodeError("lzma: unexpected EOF") from exc

    def decompress(self) -> bool:
        """Fill the dictionary while space is left.

        Returns True once the end of the stream has been reached.
        """
        if self.eos:
            return True
        while self.dict.available() >= MAX_MATCH_LEN:
            try:
                op = self._read_op_checked()
            except DecodeError:
                self.eos = True
                raise
            if op is None:
                self.eos = True
                if not self._rd.possibly_at_end():
                    raise DecodeError("lzma: data after end of stream marker")
                if self.size >= 0 and self.size != self.decompressed():
                    raise DecodeError("lzma: wrong uncompressed data size")
                return True
            self.apply(op)
            if self.size >= 0 and self.decompressed() >= self.size:
                self.eos = True
                if self.decompressed() > self.size:
                    raise DecodeError("lzma: wrong uncompressed data size")
                if not self._rd.possibly_at_end():
                    if self._read_op_checked() is not None:
                        raise DecodeError("lzma: wrong uncompressed data size")
                return True
        return False

    def read(self, n: int = -1) -> bytes:
        """Return up to ``n`` decompressed bytes, all remaining if ``n`` is negative.

        An empty result signals the end of the stream.
        """
        out = bytearray()
        while n < 0 or len(out) < n:
            want = n - len(out) if n >= 0 else len(self.dict.buf.data)
            chunk = self.dict.read(want)
            if not chunk and self.eos:
                break
            out += chunk
            if 0 <= n <= len(out):
                break
            self.decompress()
        return bytes(out)

    def decompressed(self) -> int:
        """Return the number of bytes decompressed since the last (re)start."""
        return self.dict.pos() - self.start