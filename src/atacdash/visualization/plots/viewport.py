"""
Per-view pan/zoom state.

Each plot view owns one ``ZoomBehavior``. The transform scales and
translates surface coordinates; axes are redrawn by rescaling their scales
through the transform, so zooming never needs the underlying data to be
transformed again.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from atacdash.visualization.plots.scales import LinearScale

MIN_MARKER_RADIUS = 0.5


@dataclass(frozen=True)
class ViewportTransform:
    """Uniform scale ``k`` followed by translation ``(x, y)``."""

    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    @property
    def is_identity(self) -> bool:
        return self.k == 1.0 and self.x == 0.0 and self.y == 0.0

    def apply(self, point: tuple[float, float]) -> tuple[float, float]:
        return (point[0] * self.k + self.x, point[1] * self.k + self.y)

    def invert(self, point: tuple[float, float]) -> tuple[float, float]:
        return ((point[0] - self.x) / self.k, (point[1] - self.y) / self.k)

    def invert_x(self, value: float) -> float:
        return (value - self.x) / self.k

    def invert_y(self, value: float) -> float:
        return (value - self.y) / self.k

    def rescale_x(self, scale: LinearScale) -> LinearScale:
        """The scale whose domain is what is visible along x under this transform."""
        r0, r1 = scale.range
        return scale.with_domain((scale.invert(self.invert_x(r0)), scale.invert(self.invert_x(r1))))

    def rescale_y(self, scale: LinearScale) -> LinearScale:
        r0, r1 = scale.range
        return scale.with_domain((scale.invert(self.invert_y(r0)), scale.invert(self.invert_y(r1))))


IDENTITY = ViewportTransform()

# Wheel zoom factor per pixel of scroll, as in browser zoom behaviours.
WHEEL_DELTA = 0.002


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def marker_radius(base: float, k: float) -> float:
    """Marker radius shrinking with zoom, never below MIN_MARKER_RADIUS."""
    return max(base - math.log(k), MIN_MARKER_RADIUS)


class ZoomBehavior:
    """Scale-bounded, translation-unbounded zoom and pan."""

    def __init__(self, scale_extent: tuple[float, float] = (1.0, 40.0)) -> None:
        self.scale_extent = scale_extent
        self.transform = IDENTITY

    def constrain(self, k: float) -> float:
        low, high = self.scale_extent
        return min(max(k, low), high)

    def scale_to(self, k: float, anchor: tuple[float, float] = (0.0, 0.0)) -> ViewportTransform:
        """Zoom to scale ``k`` keeping the surface point ``anchor`` fixed."""
        k = self.constrain(k)
        px, py = self.transform.invert(anchor)
        self.transform = ViewportTransform(k, anchor[0] - px * k, anchor[1] - py * k)
        return self.transform

    def scale_by(self, factor: float, anchor: tuple[float, float] = (0.0, 0.0)) -> ViewportTransform:
        return self.scale_to(self.transform.k * factor, anchor)

    def translate_by(self, dx: float, dy: float) -> ViewportTransform:
        t = self.transform
        self.transform = ViewportTransform(t.k, t.x + dx, t.y + dy)
        return self.transform

    def wheel(self, delta_y: float, anchor: tuple[float, float]) -> ViewportTransform:
        return self.scale_by(2 ** (-delta_y * WHEEL_DELTA), anchor)

    def double_click(self, anchor: tuple[float, float], shift: bool = False) -> ViewportTransform:
        return self.scale_by(0.5 if shift else 2.0, anchor)

    def reset(self, frames: int = 20) -> list[ViewportTransform]:
        """
        Animate back to the identity transform.

        Returns the intermediate transforms (eased), ending with the identity.
        """
        start = self.transform
        steps = []
        for i in range(1, frames + 1):
            t = ease_cubic_in_out(i / frames)
            steps.append(
                ViewportTransform(
                    start.k + (1.0 - start.k) * t,
                    start.x * (1 - t),
                    start.y * (1 - t),
                )
            )
        steps[-1] = IDENTITY
        self.transform = IDENTITY
        return steps
