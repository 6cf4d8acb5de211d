"""Encoder producing raw LZMA streams without a header."""

from .buffer import NoSpaceError
from .codecs import MAX_DISTANCE, MAX_MATCH_LEN, MIN_DISTANCE, MIN_MATCH_LEN
from .encoderdict import EncoderDict
from .operation import Literal, Match
from .rangecodec import LimitError, RangeEncoder
from .state import State

# Upper limit of the bytes required to encode a single operation.
OP_LEN_MARGIN = 16

# Pseudo operation marking the end of the stream.
_EOS_MATCH = Match(MAX_DISTANCE, MIN_MATCH_LEN)


class Encoder:
    """Compresses data buffered in an encoder dictionary into a byte writer.

    Wrap the writer in a LimitedByteWriter to limit the output size. If
    ``eos_marker`` is true, close writes an end-of-stream marker.
    """

    def __init__(self, writer, state: State, dict: EncoderDict,
                 eos_marker: bool = False):
        self._re = RangeEncoder(writer)
        self.state = state
        self.dict = dict
        self.marker = eos_marker
        self.start = dict.pos()
        self.margin = OP_LEN_MARGIN + (5 if eos_marker else 0)

    def write(self, data: bytes) -> int:
        """Buffer ``data``, compressing buffered data whenever space runs out.

        Raises LimitError once the limit of the writer has been reached.
        """
        data = bytes(data)
        n = 0
        while True:
            try:
                n += self.dict.write(data[n:])
                return n
            except NoSpaceError as exc:
                n += exc.written
            self.compress(False)

    def reopen(self, writer) -> None:
        """Continue with a new byte writer, resetting the compressed count."""
        self._re = RangeEncoder(writer)
        self.start = self.dict.pos()

    def _write_literal(self, lit: Literal) -> None:
        s = self.state
        d = self.dict
        re = self._re
        state, state2, _ = s.states(d.pos())
        re.encode_bit(0, s.is_match, state2)
        lit_state = s.lit_state(d.byte_at(1), d.pos())
        match = d.byte_at(s.rep[0] + 1)
        s.lit_codec.encode(re, lit.b, state, match, lit_state)
        s.update_state_literal()

    def _write_match(self, m: Match) -> None:
        s = self.state
        re = self._re
        if not MIN_DISTANCE <= m.distance <= MAX_DISTANCE:
            raise ValueError(f"match distance {m.distance} out of range")
        dist = m.distance - MIN_DISTANCE
        if not MIN_MATCH_LEN <= m.n <= MAX_MATCH_LEN and not (
                dist == s.rep[0] and m.n == 1):
            raise ValueError(
                f"match length {m.n} out of range; dist {dist} rep[0] {s.rep[0]}")
        state, state2, pos_state = s.states(self.dict.pos())
        re.encode_bit(1, s.is_match, state2)
        g = s.rep.index(dist) if dist in s.rep else 4
        re.encode_bit(int(g < 4), s.is_rep, state)
        n = m.n - MIN_MATCH_LEN
        if g == 4:
            # simple match
            s.rep[:] = [dist, s.rep[0], s.rep[1], s.rep[2]]
            s.update_state_match()
            s.len_codec.encode(re, n, pos_state)
            s.dist_codec.encode(re, dist, n)
            return
        re.encode_bit(int(g != 0), s.is_rep_g0, state)
        if g == 0:
            long_rep = m.n != 1
            re.encode_bit(int(long_rep), s.is_rep_g0_long, state2)
            if not long_rep:
                s.update_state_short_rep()
                return
        else:
            re.encode_bit(int(g != 1), s.is_rep_g1, state)
            if g != 1:
                re.encode_bit(int(g != 2), s.is_rep_g2, state)
                if g != 2:
                    s.rep[3] = s.rep[2]
                s.rep[2] = s.rep[1]
            s.rep[1] = s.rep[0]
            s.rep[0] = dist
        s.update_state_rep()
        s.rep_len_codec.encode(re, n, pos_state)

    def _write_op(self, op) -> None:
        if self._re.available() < self.margin:
            raise LimitError()
        if isinstance(op, Literal):
            self._write_literal(op)
        elif isinstance(op, Match):
            self._write_match(op)
        else:
            raise TypeError("unexpected operation")

    def compress(self, all: bool = False) -> None:
        """Compress buffered data; with ``all`` true everything is compressed.

        Raises LimitError if the writer has reached its limit.
        """
        keep = 0 if all else MAX_MATCH_LEN - 1
        d = self.dict
        while d.buffered() > keep:
            op = d.matcher.next_op(self.state.rep)
            self._write_op(op)
            d.discard(len(op))

    def close(self) -> None:
        """Terminate the stream, writing the end-of-stream marker if requested.

        If the writer limit is reached, the stream is closed and the rest
        of the data stays in the buffer.
        """
        try:
            self.compress(True)
        except LimitError:
            pass
        if self.marker:
            self._write_match(_EOS_MATCH)
        self._re.close()

    def compressed(self) -> int:
        """Return the number of input bytes that have been compressed."""
        return self.dict.pos() - self.start