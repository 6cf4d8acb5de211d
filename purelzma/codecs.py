"""Probability-tree codecs for literals, lengths and distances."""

from .bitops import nlz32
from .rangecodec import PROB_INIT, DirectCodec, RangeDecoder, RangeEncoder

MIN_DISTANCE = 1
MAX_DISTANCE = 1 << 32
LEN_STATES = 4
START_POS_MODEL = 4
END_POS_MODEL = 14
POS_SLOT_BITS = 6
ALIGN_BITS = 4

MAX_POS_BITS = 4
MIN_MATCH_LEN = 2
MAX_MATCH_LEN = MIN_MATCH_LEN + 16 + 256 - 1

MIN_LC = 0
MAX_LC = 8
MIN_LP = 0
MAX_LP = 4


class _ProbTree:
    """A tree of probabilities for values with a fixed number of bits."""

    def __init__(self, bits: int):
        if not 1 <= bits <= 32:
            raise ValueError("bits outside of range [1,32]")
        self.bits = bits
        self.probs = [PROB_INIT] * (1 << bits)

    def _clone(self):
        clone = object.__new__(type(self))
        clone.bits = self.bits
        clone.probs = list(self.probs)
        return clone


class TreeCodec(_ProbTree):
    """Codes fixed-size values with the most significant bit at the tree root."""

    def __init__(self, bits: int):
        super().__init__(bits)

    def copy(self) -> "TreeCodec":
        """Return an independent copy."""
        return self._clone()

    def encode(self, e: RangeEncoder, v: int) -> None:
        """Encode the ``bits`` lowest bits of ``v``."""
        m = 1
        for i in reversed(range(self.bits)):
            b = (v >> i) & 1
            e.encode_bit(b, self.probs, m)
            m = (m << 1) | b

    def decode(self, d: RangeDecoder) -> int:
        """Decode a value of ``bits`` bits."""
        m = 1
        for _ in range(self.bits):
            m = (m << 1) | d.decode_bit(self.probs, m)
        return m - (1 << self.bits)


class TreeReverseCodec(_ProbTree):
    """Codes fixed-size values with the least significant bit at the tree root."""

    def __init__(self, bits: int):
        super().__init__(bits)

    def copy(self) -> "TreeReverseCodec":
        """Return an independent copy."""
        return self._clone()

    def encode(self, e: RangeEncoder, v: int) -> None:
        """Encode the ``bits`` lowest bits of ``v``, lowest first."""
        m = 1
        for i in range(self.bits):
            b = (v >> i) & 1
            e.encode_bit(b, self.probs, m)
            m = (m << 1) | b

    def decode(self, d: RangeDecoder) -> int:
        """Decode a value of ``bits`` bits, lowest first."""
        m = 1
        v = 0
        for j in range(self.bits):
            b = d.decode_bit(self.probs, m)
            m = (m << 1) | b
            v |= b << j
        return v


class LiteralCodec:
    """Codes literal bytes; 0x300 probabilities per literal state."""

    def __init__(self, lc: int, lp: int):
        if not MIN_LC <= lc <= MAX_LC:
            raise ValueError("lc out of range")
        if not MIN_LP <= lp <= MAX_LP:
            raise ValueError("lp out of range")
        self.lc = lc
        self.lp = lp
        self.probs = [PROB_INIT] * (0x300 << (lc + lp))

    def copy(self) -> "LiteralCodec":
        """Return an independent copy."""
        clone = object.__new__(LiteralCodec)
        clone.lc = self.lc
        clone.lp = self.lp
        clone.probs = list(self.probs)
        return clone

    def encode(self, e: RangeEncoder, s: int, state: int, match: int,
               lit_state: int) -> None:
        """Encode byte ``s`` in the context of the state and match byte."""
        k = lit_state * 0x300
        probs = self.probs
        symbol = 1
        r = s
        if state >= 7:
            m = match
            while True:
                match_bit = (m >> 7) & 1
                m <<= 1
                bit = (r >> 7) & 1
                r <<= 1
                i = ((1 + match_bit) << 8) | symbol
                e.encode_bit(bit, probs, k + i)
                symbol = (symbol << 1) | bit
                if match_bit != bit or symbol >= 0x100:
                    break
        while symbol < 0x100:
            bit = (r >> 7) & 1
            r <<= 1
            e.encode_bit(bit, probs, k + symbol)
            symbol = (symbol << 1) | bit

    def decode(self, d: RangeDecoder, state: int, match: int,
               lit_state: int) -> int:
        """Decode a literal byte in the context of the state and match byte."""
        k = lit_state * 0x300
        probs = self.probs
        symbol = 1
        if state >= 7:
            m = match
            while True:
                match_bit = (m >> 7) & 1
                m <<= 1
                i = ((1 + match_bit) << 8) | symbol
                bit = d.decode_bit(probs, k + i)
                symbol = (symbol << 1) | bit
                if match_bit != bit or symbol >= 0x100:
                    break
        while symbol < 0x100:
            symbol = (symbol << 1) | d.decode_bit(probs, k + symbol)
        return symbol - 0x100


class LengthCodec:
    """Codes match length offsets (length minus MIN_MATCH_LEN)."""

    def __init__(self):
        self.choice = [PROB_INIT, PROB_INIT]
        self.low = [TreeCodec(3) for _ in range(1 << MAX_POS_BITS)]
        self.mid = [TreeCodec(3) for _ in range(1 << MAX_POS_BITS)]
        self.high = TreeCodec(8)

    def copy(self) -> "LengthCodec":
        """Return an independent copy."""
        clone = object.__new__(LengthCodec)
        clone.choice = list(self.choice)
        clone.low = [tc.copy() for tc in self.low]
        clone.mid = [tc.copy() for tc in self.mid]
        clone.high = self.high.copy()
        return clone

    def encode(self, e: RangeEncoder, l: int, pos_state: int) -> None:
        """Encode the length offset ``l``."""
        if not 0 <= l <= MAX_MATCH_LEN - MIN_MATCH_LEN:
            raise ValueError("lengthCodec.encode: l out of range")
        if l < 8:
            e.encode_bit(0, self.choice, 0)
            self.low[pos_state].encode(e, l)
            return
        e.encode_bit(1, self.choice, 0)
        if l < 16:
            e.encode_bit(0, self.choice, 1)
            self.mid[pos_state].encode(e, l - 8)
            return
        e.encode_bit(1, self.choice, 1)
        self.high.encode(e, l - 16)

    def decode(self, d: RangeDecoder, pos_state: int) -> int:
        """Decode a length offset."""
        if d.decode_bit(self.choice, 0) == 0:
            return self.low[pos_state].decode(d)
        if d.decode_bit(self.choice, 1) == 0:
            return self.mid[pos_state].decode(d) + 8
        return self.high.decode(d) + 16


def len_state(l: int) -> int:
    """Clamp a length offset to a supported length state."""
    return min(l, LEN_STATES - 1)


class DistCodec:
    """Codes distance offsets (distance minus MIN_DISTANCE)."""

    def __init__(self):
        self.pos_slot_codecs = [TreeCodec(POS_SLOT_BITS) for _ in range(LEN_STATES)]
        self.pos_model = [
            TreeReverseCodec((pos_slot >> 1) - 1)
            for pos_slot in range(START_POS_MODEL, END_POS_MODEL)
        ]
        self.align_codec = TreeReverseCodec(ALIGN_BITS)

    def copy(self) -> "DistCodec":
        """Return an independent copy."""
        clone = object.__new__(DistCodec)
        clone.pos_slot_codecs = [tc.copy() for tc in self.pos_slot_codecs]
        clone.pos_model = [tc.copy() for tc in self.pos_model]
        clone.align_codec = self.align_codec.copy()
        return clone

    def encode(self, e: RangeEncoder, dist: int, l: int) -> None:
        """Encode the distance offset ``dist`` using length offset ``l``.

        The offset 0xFFFFFFFF marks the end of the stream.
        """
        bits = 0
        if dist < START_POS_MODEL:
            pos_slot = dist
        else:
            bits = 30 - nlz32(dist)
            pos_slot = START_POS_MODEL - 2 + (bits << 1) + ((dist >> bits) & 1)

        self.pos_slot_codecs[len_state(l)].encode(e, pos_slot)

        if pos_slot < START_POS_MODEL:
            return
        if pos_slot < END_POS_MODEL:
            self.pos_model[pos_slot - START_POS_MODEL].encode(e, dist)
            return
        DirectCodec(bits - ALIGN_BITS).encode(e, dist >> ALIGN_BITS)
        self.align_codec.encode(e, dist)

    def decode(self, d: RangeDecoder, l: int) -> int:
        """Decode a distance offset using length offset ``l``."""
        pos_slot = self.pos_slot_codecs[len_state(l)].decode(d)
        if pos_slot < START_POS_MODEL:
            return pos_slot

        bits = (pos_slot >> 1) - 1
        dist = (2 | (pos_slot & 1)) << bits
        if pos_slot < END_POS_MODEL:
            return dist + self.pos_model[pos_slot - START_POS_MODEL].decode(d)

        dist += DirectCodec(bits - ALIGN_BITS).decode(d) << ALIGN_BITS
        return dist + self.align_codec.decode(d)