"""Circular byte buffer."""


class NoSpaceError(Exception):
    """Raised when a write does not fit into the available space.

    The attribute ``written`` tells how many bytes were stored before
    the space ran out.
    """

    def __init__(self, written: int = 0, message: str = "insufficient space"):
        super().__init__(message)
        self.written = written


def prefix_len(a: bytes, b: bytes) -> int:
    """Return the length of the common prefix of ``a`` and ``b``."""
    n = 0
    for x, y in zip(a, b):
        if x != y:
            break
        n += 1
    return n


class Buffer:
    """Circular buffer of bytes.

    The buffer is empty when ``front`` equals ``rear``, so a full buffer
    holds one byte less than the length of ``data``.
    """

    def __init__(self, size: int):
        self.data = bytearray(size + 1)
        self.front = 0
        self.rear = 0

    def cap(self) -> int:
        """Return the capacity of the buffer."""
        return len(self.data) - 1

    def reset(self) -> None:
        """Empty the buffer."""
        self.front = 0
        self.rear = 0

    def buffered(self) -> int:
        """Return the number of bytes that can be read."""
        return (self.front - self.rear) % len(self.data)

    def available(self) -> int:
        """Return the number of bytes that can be written."""
        return (self.rear - 1 - self.front) % len(self.data)

    def _add_index(self, i: int, n: int) -> int:
        return (i + n) % len(self.data)

    def peek(self, n: int) -> bytes:
        """Return up to ``n`` bytes from the buffer without consuming them."""
        n = min(n, self.buffered())
        head = bytes(self.data[self.rear:self.rear + n])
        if len(head) < n:
            head += self.data[:n - len(head)]
        return head

    def read(self, n: int) -> bytes:
        """Consume and return up to ``n`` bytes from the buffer."""
        p = self.peek(n)
        self.rear = self._add_index(self.rear, len(p))
        return p

    def discard(self, n: int) -> int:
        """Skip ``n`` bytes; raises ValueError if fewer were available."""
        if n < 0:
            raise ValueError("buffer.discard: negative argument")
        m = self.buffered()
        short = m < n
        if short:
            n = m
        self.rear = self._add_index(self.rear, n)
        if short:
            raise ValueError("buffer.discard: discarded less bytes than requested")
        return n

    def write(self, data: bytes) -> int:
        """Store ``data``; raises NoSpaceError if it did not fit completely."""
        m = self.available()
        short = m < len(data)
        if short:
            data = data[:m]
        n = len(data)
        k = min(n, len(self.data) - self.front)
        self.data[self.front:self.front + k] = data[:k]
        if k < n:
            self.data[:n - k] = data[k:]
        self.front = self._add_index(self.front, n)
        if short:
            raise NoSpaceError(n)
        return n

    def write_byte(self, c: int) -> None:
        """Store a single byte."""
        if self.available() < 1:
            raise NoSpaceError(0)
        self.data[self.front] = c
        self.front = self._add_index(self.front, 1)

    def match_len(self, distance: int, p: bytes) -> int:
        """Return the common prefix length of ``p`` and the data ``distance`` bytes before the rear."""
        n = 0
        i = self.rear - distance
        if i < 0:
            n = prefix_len(p, self.data[len(self.data) + i:])
            if n < -i:
                return n
            p = p[n:]
            i = 0
        return n + prefix_len(p, self.data[i:])