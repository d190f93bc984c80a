"""Quote (point-in-time price snapshot) data model."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Quote:
    """Point-in-time quote in Finnhub's ``/quote`` shape.

    Attributes:
        c: Current price.
        d: Absolute change from previous close.
        dp: Percent change from previous close.
        h: Session high.
        l: Session low.
        o: Session open.
        pc: Previous close.
    """

    c: float
    d: float
    dp: float
    h: float
    l: float
    o: float
    pc: float

    @property
    def price(self) -> float:
        return self.c

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Quote:
        """Build a quote from a provider payload.

        Raises KeyError, TypeError or ValueError on a malformed payload.
        ``d``/``dp`` come back as null for symbols without a previous close.
        """
        return cls(
            c=float(data["c"]),
            d=float(data.get("d") or 0.0),
            dp=float(data.get("dp") or 0.0),
            h=float(data["h"]),
            l=float(data["l"]),
            o=float(data["o"]),
            pc=float(data["pc"]),
        )
