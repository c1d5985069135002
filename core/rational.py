"""Continued-fraction approximation of decimals as integer fractions.

EXIF stores values such as exposure time as rationals. A shutter speed read
back as `0.008` is shown as `1/125`, so the approximation has to recover the
small fraction the camera wrote rather than an exact binary expansion.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

DEFAULT_EPSILON = 1.0e-6


@dataclass(frozen=True)
class Rational:
    """An integer fraction `num/den` with `den >= 1`."""

    num: int
    den: int

    @classmethod
    def approximate(cls, value: float, epsilon: float = DEFAULT_EPSILON) -> Rational:
        """Return the first convergent of `value` within `epsilon * den**2`.

        Args:
            value: Non-negative finite decimal.
            epsilon: Precision bound; the error allowed grows with the denominator.

        Raises:
            ValueError: If `value` is negative, NaN or infinite.
        """
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Cannot approximate {value!r} as a rational")

        x = float(value)
        whole = math.floor(x)
        # (h1, k1) is the previous convergent, (h, k) the current one
        h1, k1, h, k = 1, 0, int(whole), 1
        while x - whole > epsilon * k * k:
            x = 1.0 / (x - whole)
            whole = math.floor(x)
            h1, k1, h, k = h, k, h1 + int(whole) * h, k1 + int(whole) * k
        return cls(h, k)

    @property
    def is_proper(self) -> bool:
        """True when the fraction is below one and reads best as `num/den`."""
        return self.num < self.den

    def __float__(self) -> float:
        return self.num / self.den

    def __str__(self) -> str:
        return f"{self.num}/{self.den}"
