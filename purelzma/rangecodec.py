"""Range encoder and decoder for single bits."""

from dataclasses import dataclass

MOVE_BITS = 5
PROB_BITS = 11
PROB_INIT = 1 << (PROB_BITS - 1)

_MASK32 = 0xFFFFFFFF
_TOP = 1 << 24
_MAX_INT64 = (1 << 63) - 1


class LimitError(Exception):
    """Raised when the byte limit of a writer has been reached."""

    def __init__(self, message: str = "limit reached"):
        super().__init__(message)


class LimitedByteWriter:
    """Byte writer that accepts at most ``remaining`` further bytes."""

    def __init__(self, writer, limit: int):
        self.writer = writer
        self.remaining = limit

    def write_byte(self, c: int) -> None:
        """Write one byte or raise LimitError if the limit is reached."""
        if self.remaining <= 0:
            raise LimitError()
        self.writer.write(bytes((c,)))
        self.remaining -= 1


class RangeEncoder:
    """Encodes bits into a byte stream using range coding."""

    def __init__(self, writer):
        if not isinstance(writer, LimitedByteWriter):
            writer = LimitedByteWriter(writer, _MAX_INT64)
        self.writer = writer
        self.nrange = 0xFFFFFFFF
        self.low = 0
        self.cache_len = 1
        self.cache = 0

    def available(self) -> int:
        """Return the bytes that can still be written, reserving those needed by close."""
        return self.writer.remaining - (self.cache_len + 4)

    def _write_byte(self, c: int) -> None:
        if self.available() < 1:
            raise LimitError()
        self.writer.write_byte(c)

    def _normalize(self) -> None:
        if self.nrange < _TOP:
            self.nrange = (self.nrange << 8) & _MASK32
            self._shift_low()

    def direct_encode_bit(self, b: int) -> None:
        """Encode the lowest bit of ``b`` with probability one half."""
        self.nrange >>= 1
        if b & 1:
            self.low += self.nrange
        self._normalize()

    def encode_bit(self, b: int, probs: list, i: int) -> None:
        """Encode the lowest bit of ``b`` using and updating ``probs[i]``."""
        p = probs[i]
        bound = (self.nrange >> PROB_BITS) * p
        if b & 1 == 0:
            self.nrange = bound
            probs[i] = p + (((1 << PROB_BITS) - p) >> MOVE_BITS)
        else:
            self.low += bound
            self.nrange -= bound
            probs[i] = p - (p >> MOVE_BITS)
        self._normalize()

    def close(self) -> None:
        """Flush the remaining state of the encoder."""
        for _ in range(5):
            self._shift_low()

    def _shift_low(self) -> None:
        if (self.low & _MASK32) < 0xFF000000 or (self.low >> 32) != 0:
            tmp = self.cache
            while True:
                self._write_byte((tmp + (self.low >> 32)) & 0xFF)
                tmp = 0xFF
                self.cache_len -= 1
                if self.cache_len <= 0:
                    break
            self.cache = (self.low >> 24) & 0xFF
        self.cache_len += 1
        self.low = (self.low << 8) & _MASK32


class RangeDecoder:
    """Decodes bits from a range-coded byte stream."""

    def __init__(self, reader):
        self.reader = reader
        self.nrange = 0xFFFFFFFF
        self.code = 0
        if self._read_byte() != 0:
            raise ValueError("range decoder: first byte not zero")
        for _ in range(4):
            self._update_code()
        if self.code >= self.nrange:
            raise ValueError("range decoder: code not below range")

    def _read_byte(self) -> int:
        b = self.reader.read(1)
        if not b:
            raise EOFError("range decoder: no more data")
        return b[0]

    def _update_code(self) -> None:
        self.code = ((self.code << 8) | self._read_byte()) & _MASK32

    def _normalize(self) -> None:
        if self.nrange < _TOP:
            self.nrange = (self.nrange << 8) & _MASK32
            self._update_code()

    def possibly_at_end(self) -> bool:
        """Return whether the stream may end at this point."""
        return self.code == 0

    def direct_decode_bit(self) -> int:
        """Decode a bit encoded with probability one half."""
        self.nrange >>= 1
        self.code = (self.code - self.nrange) & _MASK32
        if self.code >> 31:
            self.code = (self.code + self.nrange) & _MASK32
            b = 0
        else:
            b = 1
        self._normalize()
        return b

    def decode_bit(self, probs: list, i: int) -> int:
        """Decode a bit using and updating ``probs[i]``."""
        p = probs[i]
        bound = (self.nrange >> PROB_BITS) * p
        if self.code < bound:
            self.nrange = bound
            probs[i] = p + (((1 << PROB_BITS) - p) >> MOVE_BITS)
            b = 0
        else:
            self.code -= bound
            self.nrange -= bound
            probs[i] = p - (p >> MOVE_BITS)
            b = 1
        self._normalize()
        return b


@dataclass(frozen=True)
class DirectCodec:
    """Codes values of a fixed number of bits, most significant bit first."""

    bits: int

    def encode(self, encoder: RangeEncoder, v: int) -> None:
        """Encode the ``bits`` lowest bits of ``v``."""
        for i in reversed(range(self.bits)):
            encoder.direct_encode_bit(v >> i)

    def decode(self, decoder: RangeDecoder) -> int:
        """Decode a value of ``bits`` bits."""
        v = 0
        for _ in range(self.bits):
            v = (v << 1) | decoder.direct_decode_bit()
        return v