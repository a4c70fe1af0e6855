"""
Continuous scales mapping data values to surface coordinates.

The power scale with exponent 1 behaves exactly like the linear scale, which
is how line charts switch between linear and power-scaled y axes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Self


def tick_values(start: float, stop: float, count: int = 10) -> list[float]:
    """
    Roughly ``count`` human-friendly tick values covering [start, stop].

    Steps are 1, 2 or 5 times a power of ten.
    """
    if count <= 0:
        return []
    if start == stop:
        return [start]

    reverse = stop < start
    if reverse:
        start, stop = stop, start

    raw_step = (stop - start) / count
    power = 10 ** math.floor(math.log10(raw_step))
    error = raw_step / power
    if error >= math.sqrt(50):
        factor = 10
    elif error >= math.sqrt(10):
        factor = 5
    elif error >= math.sqrt(2):
        factor = 2
    else:
        factor = 1
    step = factor * power

    first = math.ceil(start / step)
    last = math.floor(stop / step)
    ticks = [round(i * step, 12) for i in range(first, last + 1)]
    return ticks[::-1] if reverse else ticks


@dataclass(frozen=True)
class LinearScale:
    """Affine map from ``domain`` to ``range``."""

    domain: tuple[float, float]
    range: tuple[float, float]

    def _forward(self, value: float) -> float:
        return value

    def _backward(self, value: float) -> float:
        return value

    def __call__(self, value: float) -> float:
        d0, d1 = (self._forward(v) for v in self.domain)
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        t = (self._forward(value) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def invert(self, position: float) -> float:
        d0, d1 = (self._forward(v) for v in self.domain)
        r0, r1 = self.range
        if r1 == r0:
            return self.domain[0]
        t = (position - r0) / (r1 - r0)
        return self._backward(d0 + t * (d1 - d0))

    def with_domain(self, domain: tuple[float, float]) -> Self:
        return replace(self, domain=(float(domain[0]), float(domain[1])))

    def ticks(self, count: int = 10) -> list[float]:
        return tick_values(self.domain[0], self.domain[1], count)


@dataclass(frozen=True)
class PowScale(LinearScale):
    """Sign-preserving power transform applied before the affine map."""

    exponent: float = 1.0

    def _forward(self, value: float) -> float:
        return math.copysign(abs(value) ** self.exponent, value)

    def _backward(self, value: float) -> float:
        return math.copysign(abs(value) ** (1 / self.exponent), value)

    def transform(self, value: float) -> float:
        """The power transform alone, without the affine map."""
        return self._forward(value)
