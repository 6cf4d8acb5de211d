"""Operations applied to the dictionary: matches and literals."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Match:
    """Repetition of ``n`` bytes at the given distance."""

    distance: int
    n: int

    def __len__(self) -> int:
        return self.n

    def __str__(self) -> str:
        return f"M{{{self.distance},{self.n}}}"


@dataclass(frozen=True)
class Literal:
    """A single literal byte."""

    b: int

    def __len__(self) -> int:
        return 1

    def __str__(self) -> str:
        c = chr(self.b)
        if not c.isprintable():
            c = "."
        return f"L{{{c}/{self.b:02x}}}"