"""Dictionary used by the LZMA decoder."""

from .buffer import Buffer, NoSpaceError
from .codecs import MAX_MATCH_LEN

MIN_DICT_CAP = 1 << 12
MAX_DICT_CAP = (1 << 32) - 1


class DecoderDict:
    """Decoder dictionary whose whole buffer also serves as read buffer."""

    def __init__(self, dict_cap: int):
        # The lower limit of one byte keeps test cases simple.
        if not 1 <= dict_cap <= MAX_DICT_CAP:
            raise ValueError("lzma: dictCap out of range")
        self.buf = Buffer(dict_cap)
        self.head = 0

    def reset(self) -> None:
        """Clear the dictionary; buffered data can still be read."""
        self.head = 0

    def write_byte(self, c: int) -> None:
        """Append a single literal byte."""
        self.buf.write_byte(c)
        self.head += 1

    def pos(self) -> int:
        """Return the position of the dictionary head."""
        return self.head

    def dict_len(self) -> int:
        """Return the current length of the dictionary."""
        return min(self.head, self.buf.cap())

    def byte_at(self, dist: int) -> int:
        """Return the byte ``dist`` positions back, or 0 if out of range."""
        if not 0 < dist <= self.dict_len():
            return 0
        return self.buf.data[(self.buf.front - dist) % len(self.buf.data)]

    def write_match(self, dist: int, length: int) -> None:
        """Append ``length`` bytes copied from ``dist`` positions back.

        Raises NoSpaceError if the bytes do not fit; read from the
        dictionary first.
        """
        if not 0 < dist <= self.dict_len():
            raise ValueError("writeMatch: distance out of range")
        if not 0 < length <= MAX_MATCH_LEN:
            raise ValueError("writeMatch: length out of range")
        if length > self.buf.available():
            raise NoSpaceError(0)
        self.head += length
        size = len(self.buf.data)
        while length > 0:
            i = (self.buf.front - dist) % size
            chunk = min(length, dist, size - i)
            self.buf.write(bytes(self.buf.data[i:i + chunk]))
            length -= chunk

    def write(self, data: bytes) -> int:
        """Append ``data`` and advance the head.

        Raises NoSpaceError if not everything fitted; the head is then
        advanced by the bytes actually written.
        """
        try:
            n = self.buf.write(data)
        except NoSpaceError as exc:
            self.head += exc.written
            raise
        self.head += n
        return n

    def available(self) -> int:
        """Return the number of bytes that can be written."""
        return self.buf.available()

    def read(self, n: int) -> bytes:
        """Consume and return up to ``n`` buffered bytes."""
        return self.buf.read(n)