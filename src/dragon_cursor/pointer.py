"""Pointer position, button state and per-tick speed sampling."""

from __future__ import annotations

import logging
import math

logger = logging.getLogger(__name__)


class PointerState:
    """Latest pointer sample as written by input events.

    Input handlers only call :meth:`move_to`, :meth:`press` and
    :meth:`release`; the simulation calls :meth:`sample` once per tick.
    """

    __slots__ = ("x", "y", "prev_x", "prev_y", "down", "speed", "_bounds")

    def __init__(self, x: float, y: float, width: float, height: float) -> None:
        self._bounds = (float(width), float(height))
        self.x, self.y = self._clamp(float(x), float(y))
        self.prev_x = self.x
        self.prev_y = self.y
        self.down = False
        self.speed = 0.0

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y

    def _clamp(self, x: float, y: float) -> tuple[float, float]:
        w, h = self._bounds
        return min(max(x, 0.0), w), min(max(y, 0.0), h)

    def move_to(self, x: float, y: float) -> bool:
        """Record a new position. Non-finite coordinates are ignored.

        Returns True if the sample was accepted.
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            logger.debug("Ignoring non-finite pointer sample (%r, %r).", x, y)
            return False
        self.x, self.y = self._clamp(float(x), float(y))
        return True

    def press(self) -> None:
        self.down = True

    def release(self) -> None:
        self.down = False

    def sample(self) -> float:
        """Measure movement since the previous tick and roll the sample."""
        self.speed = math.hypot(self.x - self.prev_x, self.y - self.prev_y)
        self.prev_x = self.x
        self.prev_y = self.y
        return self.speed

    def resize(self, width: float, height: float) -> None:
        """Update clamp bounds; the pointer only moves if now out of bounds."""
        self._bounds = (float(width), float(height))
        self.x, self.y = self._clamp(self.x, self.y)
        self.prev_x, self.prev_y = self._clamp(self.prev_x, self.prev_y)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "down": self.down,
            "speed": self.speed,
        }
