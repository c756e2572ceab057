"""Color value types shared by the color helpers and the palette resolver."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RGBColor:
    """A 24-bit color split into its red, green and blue channels."""

    r: int
    g: int
    b: int

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)
