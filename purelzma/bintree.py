"""Binary search tree over four-byte words, used to find matches."""

import unicodedata
from dataclasses import dataclass

from .codecs import MAX_MATCH_LEN, MIN_DISTANCE
from .operation import Literal, Match

WORD_LEN = 4

_MASK32 = 0xFFFFFFFF
_INDEX_LIMIT = (1 << 32) - 1


class _Node:
    __slots__ = ("x", "p", "l", "r")

    def __init__(self):
        self.x = 0
        self.p = None
        self.l = None
        self.r = None


@dataclass
class _MatchParams:
    rep: list
    n_accept: int
    check: int
    stop_shorter: bool = False


def xval(a: bytes) -> int:
    """Convert the first four bytes of ``a`` into a big-endian 32-bit value."""
    a = bytes(a[:4])
    return int.from_bytes(a + bytes(4 - len(a)), "big")


def dump_x(x: int) -> str:
    """Render a word as four characters, with dots for non-graphic bytes."""
    out = []
    for c in (x & _MASK32).to_bytes(4, "big"):
        ch = chr(c)
        graphic = ch.isprintable() or unicodedata.category(ch) == "Zs"
        out.append(ch if graphic else ".")
    return "".join(out)


class BinTree:
    """Matcher keeping the last ``capacity`` words in a binary search tree.

    Nodes are identified by their index in a ring of nodes; ``None`` is
    the missing node.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("BinTree: capacity must be larger than zero")
        if capacity >= _INDEX_LIMIT:
            raise ValueError("BinTree: capacity must be less than 2^32-1")
        self.nodes = [_Node() for _ in range(capacity)]
        self.hoff = -WORD_LEN
        self.front = 0
        self.root = None
        self.x = 0
        self.dict = None
        self._data = b""

    def set_dict(self, d) -> None:
        """Attach the encoder dictionary."""
        self.dict = d

    def write_byte(self, c: int) -> None:
        """Add a byte, inserting the word that it completes."""
        self.x = ((self.x << 8) | c) & _MASK32
        self.hoff += 1
        if self.hoff < 0:
            return
        v = self.front
        if v < self.hoff:
            # The ring is full; the oldest node is overwritten.
            self._remove(v)
        self.nodes[v].x = self.x
        self._add(v)
        self.front += 1
        if self.front >= len(self.nodes):
            self.front = 0

    def write(self, data: bytes) -> int:
        """Add all bytes of ``data``."""
        for c in data:
            self.write_byte(c)
        return len(data)

    def _add(self, v: int) -> None:
        nodes = self.nodes
        vn = nodes[v]
        vn.l = vn.r = None
        if self.root is None:
            self.root = v
            vn.p = None
            return
        x = vn.x
        p = self.root
        while True:
            pn = nodes[p]
            if x <= pn.x:
                if pn.l is None:
                    pn.l = v
                    vn.p = p
                    return
                p = pn.l
            else:
                if pn.r is None:
                    pn.r = v
                    vn.p = p
                    return
                p = pn.r

    def _replace_child(self, p, is_left: bool, new) -> None:
        if p is None:
            self.root = new
        elif is_left:
            self.nodes[p].l = new
        else:
            self.nodes[p].r = new

    def _remove(self, v: int) -> None:
        nodes = self.nodes
        vn = nodes[v]
        if self.root == v:
            p, is_left = None, False
        else:
            p = vn.p
            is_left = nodes[p].l == v
        l, r = vn.l, vn.r
        if l is None:
            self._replace_child(p, is_left, r)
            if r is not None:
                nodes[r].p = p
            return
        if r is None:
            self._replace_child(p, is_left, l)
            nodes[l].p = p
            return

        un = nodes[l]
        if un.r is None:
            # The in-order predecessor is l itself.
            un.r = r
            nodes[r].p = l
            un.p = p
            self._replace_child(p, is_left, l)
            return
        u = un.r
        while nodes[u].r is not None:
            u = nodes[u].r
        un = nodes[u]
        ul, up = un.l, un.p
        nodes[up].r = ul
        if ul is not None:
            nodes[ul].p = up

        un.l, un.r = l, r
        nodes[l].p = u
        nodes[r].p = u
        self._replace_child(p, is_left, u)
        un.p = p

    def search(self, v, x: int) -> tuple:
        """Search the subtree at ``v`` for ``x``.

        Returns ``(n, n)`` for the highest node holding ``x``, otherwise the
        nodes ``(a, b)`` that bracket ``x``, either of which may be None.
        """
        a = b = None
        if v is None:
            return a, b
        nodes = self.nodes
        while True:
            vn = nodes[v]
            if x <= vn.x:
                if x == vn.x:
                    return v, v
                b = v
                if vn.l is None:
                    return a, b
                v = vn.l
            else:
                a = v
                if vn.r is None:
                    return a, b
                v = vn.r

    def max(self, v):
        """Return the node with the largest value in the subtree at ``v``."""
        if v is None:
            return None
        while self.nodes[v].r is not None:
            v = self.nodes[v].r
        return v

    def min(self, v):
        """Return the node with the smallest value in the subtree at ``v``."""
        if v is None:
            return None
        while self.nodes[v].l is not None:
            v = self.nodes[v].l
        return v

    def pred(self, v):
        """Return the in-order predecessor of ``v``."""
        if v is None:
            return None
        u = self.max(self.nodes[v].l)
        if u is not None:
            return u
        while True:
            p = self.nodes[v].p
            if p is None:
                return None
            if self.nodes[p].r == v:
                return p
            v = p

    def succ(self, v):
        """Return the in-order successor of ``v``."""
        if v is None:
            return None
        u = self.min(self.nodes[v].r)
        if u is not None:
            return u
        while True:
            p = self.nodes[v].p
            if p is None:
                return None
            if self.nodes[p].l == v:
                return p
            v = p

    def distance(self, v: int) -> int:
        """Return the ring distance from the front to node ``v``."""
        dist = self.front - v
        if dist <= 0:
            dist += len(self.nodes)
        return dist

    def _match(self, m: Match, dists, p: _MatchParams) -> tuple:
        buf = self.dict.buf
        data = self._data
        size = len(buf.data)
        it = iter(dists)
        checked = 0
        while True:
            if checked >= p.check:
                return m, checked, True
            dist = next(it, None)
            if dist is None:
                return m, checked, False
            checked += 1
            if m.n > 0:
                i = (buf.rear - dist + m.n - 1) % size
                if buf.data[i] != data[m.n - 1]:
                    if p.stop_shorter:
                        return m, checked, False
                    continue
            n = buf.match_len(dist, data)
            if n == 0:
                if p.stop_shorter:
                    return m, checked, False
                continue
            if n == 1 and dist - MIN_DISTANCE != p.rep[0]:
                continue
            if n < m.n or (n == m.n and dist >= m.distance):
                continue
            m = Match(dist, n)
            if n >= p.n_accept:
                return m, checked, True

    def _equal_iter(self, u, x: int):
        while u is not None:
            dist = self.distance(u)
            a, b = self.search(self.nodes[u].l, x)
            u = a if a == b else None
            yield dist

    def _succ_iter(self, v):
        while v is not None:
            yield self.distance(v)
            v = self.succ(v)

    def _pred_iter(self, u):
        while u is not None:
            yield self.distance(u)
            u = self.pred(u)

    def next_op(self, rep) -> object:
        """Return the next operation, a Match or a Literal, for the buffered data."""
        data = self.dict.buf.peek(MAX_MATCH_LEN)
        if not data:
            raise RuntimeError("no data in buffer")
        self._data = data
        m = self._find(rep, data)
        if m.n == 0:
            return Literal(data[0])
        return m

    def _find(self, rep, data: bytes) -> Match:
        p = _MatchParams(rep=list(rep), n_accept=MAX_MATCH_LEN, check=32)
        m, checked, accepted = self._match(Match(0, 0), (3, 2, 1), p)
        if accepted:
            return m
        p.check -= checked
        x = xval(data)
        u, v = self.search(self.root, x)
        if u == v and len(data) == 4:
            m, _, _ = self._match(m, self._equal_iter(u, x), p)
            return m
        p.stop_shorter = True
        m, checked, accepted = self._match(m, self._succ_iter(v), p)
        if accepted:
            return m
        p.check -= checked
        m, _, _ = self._match(m, self._pred_iter(u), p)
        return m