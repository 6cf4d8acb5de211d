"""LZMA literal and position parameters."""

from dataclasses import dataclass

MIN_LC = 0
MAX_LC = 8
MIN_LP = 0
MAX_LP = 4
MIN_PB = 0
MAX_PB = 4

MAX_PROPERTY_CODE = (MAX_PB + 1) * (MAX_LP + 1) * (MAX_LC + 1) - 1


@dataclass(frozen=True)
class Properties:
    """The LZMA parameters LC, LP and PB."""

    lc: int = 0
    lp: int = 0
    pb: int = 0

    def __str__(self) -> str:
        return f"LC {self.lc} LP {self.lp} PB {self.pb}"

    def verify(self) -> None:
        """Raise ValueError if a parameter is out of range."""
        if not MIN_LC <= self.lc <= MAX_LC:
            raise ValueError("lzma: lc out of range")
        if not MIN_LP <= self.lp <= MAX_LP:
            raise ValueError("lzma: lp out of range")
        if not MIN_PB <= self.pb <= MAX_PB:
            raise ValueError("lzma: pb out of range")

    def code(self) -> int:
        """Return the properties code byte."""
        return (self.pb * 5 + self.lp) * 9 + self.lc


def properties_for_code(code: int) -> Properties:
    """Convert a properties code byte into Properties."""
    if not 0 <= code <= MAX_PROPERTY_CODE:
        raise ValueError("lzma: invalid properties code")
    code, lc = divmod(code, 9)
    pb, lp = divmod(code, 5)
    return Properties(lc, lp, pb)