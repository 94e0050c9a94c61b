from __future__ import annotations

import math
from dataclasses import dataclass

RGB_EXTENT = 255.0
UNIT_CUBE_DIAGONAL = math.sqrt(3.0)


@dataclass(frozen=True)
class RGB:
    """A point in the [0, 255]^3 color cube.

    Channels are floats and are never clamped: constructing a point outside
    the cube is a programming error and fails the range assertion.
    """

    r: float
    g: float
    b: float

    def __post_init__(self) -> None:
        assert self._valid(), f"RGB channel out of range: {self!r}"

    def _valid(self) -> bool:
        return all(0.0 <= c <= RGB_EXTENT for c in (self.r, self.g, self.b))

    def __mul__(self, m: float) -> RGB:
        return RGB(self.r * m, self.g * m, self.b * m)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> str:
        r, g, b = (int(round(c)) for c in self.as_tuple())
        return f"#{r:02x}{g:02x}{b:02x}"

    def norm(self) -> float:
        return math.sqrt(self.r * self.r + self.g * self.g + self.b * self.b)

    def distance(self, other: RGB) -> float:
        dr = other.r - self.r
        dg = other.g - self.g
        db = other.b - self.b
        return math.sqrt(dr * dr + dg * dg + db * db)

    def distance_to_identity_line(self) -> float:
        """Distance from this point to the achromatic axis r=g=b.

        Simplification of the point-line distance in three dimensions for the
        line through the origin with direction (1, 1, 1).
        """
        bg = self.b - self.g
        br = self.b - self.r
        gr = self.g - self.r
        return math.sqrt(bg * bg + br * br + gr * gr) / UNIT_CUBE_DIAGONAL

    def distance_along_identity_line(self) -> float:
        """Length of the projection of this point onto the achromatic axis."""
        n = self.norm()
        d = self.distance_to_identity_line()
        # Cancellation can push the radicand slightly below zero near the axis.
        return math.sqrt(max(0.0, n * n - d * d))

    def projection_on_identity_line(self) -> RGB:
        """Gray point (v, v, v) at the foot of the perpendicular to r=g=b."""
        v = min(RGB_EXTENT, self.distance_along_identity_line() / UNIT_CUBE_DIAGONAL)
        return RGB(v, v, v)
