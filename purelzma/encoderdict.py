"""Dictionary used by the LZMA encoder."""

from .buffer import Buffer, NoSpaceError
from .codecs import MAX_MATCH_LEN
from .decoderdict import MAX_DICT_CAP


class EncoderDict:
    """Encoder dictionary with an additional buffer for data not yet encoded.

    The ``matcher`` must provide ``set_dict(d)``, ``write(data)`` and
    ``next_op(rep)``; it receives every byte that enters the dictionary.
    """

    def __init__(self, dict_cap: int, buf_size: int, matcher):
        if not 1 <= dict_cap <= MAX_DICT_CAP:
            raise ValueError("lzma: dictionary capacity out of range")
        if buf_size < 1:
            raise ValueError("lzma: buffer size must be larger than zero")
        self.buf = Buffer(dict_cap + buf_size)
        self.capacity = dict_cap
        self.matcher = matcher
        self.head = 0
        matcher.set_dict(self)

    def discard(self, n: int) -> None:
        """Move ``n`` buffered bytes into the dictionary; ``n`` is at most MAX_MATCH_LEN."""
        if not 0 <= n <= MAX_MATCH_LEN:
            raise ValueError(f"lzma: can't discard {n} bytes")
        p = self.buf.read(n)
        if len(p) < n:
            raise ValueError(f"lzma: can't discard {n} bytes")
        self.head += n
        self.matcher.write(p)

    def __len__(self) -> int:
        return min(self.buf.available(), self.head)

    def dict_len(self) -> int:
        """Return the actual length of the data in the dictionary."""
        return min(self.head, self.capacity)

    def available(self) -> int:
        """Return the number of bytes a following write can store."""
        return self.buf.available() - self.dict_len()

    def write(self, data: bytes) -> int:
        """Buffer ``data`` without moving the head.

        Raises NoSpaceError, carrying the number of bytes stored, if not
        everything fitted.
        """
        m = max(self.available(), 0)
        short = len(data) > m
        if short:
            data = data[:m]
        n = self.buf.write(data)
        if short:
            raise NoSpaceError(n)
        return n

    def pos(self) -> int:
        """Return the position of the head."""
        return self.head

    def byte_at(self, distance: int) -> int:
        """Return the byte ``distance`` positions before the head, or 0 if out of range."""
        if not 0 < distance <= len(self):
            return 0
        return self.buf.data[(self.buf.rear - distance) % len(self.buf.data)]

    def copy_n(self, writer, n: int) -> int:
        """Write the last ``n`` dictionary bytes to ``writer`` and return the count.

        Raises NoSpaceError, carrying the count written, if fewer than
        ``n`` bytes are in the dictionary.
        """
        if n <= 0:
            return 0
        m = len(self)
        short = n > m
        if short:
            n = m
        data = self.buf.data
        rear = self.buf.rear
        i = rear - n
        written = 0
        if i < 0:
            part = bytes(data[len(data) + i:])
            writer.write(part)
            written += len(part)
            i = 0
        part = bytes(data[i:rear])
        writer.write(part)
        written += len(part)
        if short:
            raise NoSpaceError(written)
        return written

    def buffered(self) -> int:
        """Return the number of bytes waiting in the buffer."""
        return self.buf.buffered()