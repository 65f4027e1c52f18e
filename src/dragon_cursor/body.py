"""Segmented body representation and the chain-follow rule."""

from __future__ import annotations

import math

from dragon_cursor.config import BodyConfig


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(value: float, lo: float, hi: float) -> float:
    return lo if value < lo else hi if value > hi else value


def depth_at(index: int, count: int) -> float:
    """Depth ramp from 1 at the head toward (never reaching) 0 at the tail."""
    if index == 0:
        return 1.0
    return 1.0 - index / (count + 6)


class Segment:
    """One joint of the body: position, orientation, depth and wiggle."""

    __slots__ = ("x", "y", "angle", "z", "wiggle")

    def __init__(
        self,
        x: float,
        y: float,
        angle: float = 0.0,
        z: float = 1.0,
        wiggle: float = 0.0,
    ) -> None:
        self.x = x
        self.y = y
        self.angle = angle
        self.z = z
        self.wiggle = wiggle

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "angle": self.angle,
            "z": self.z,
            "wiggle": self.wiggle,
        }


class Body:
    """A fixed-length chain of segments.

    The head is ``segments[0]``; the tail is ``segments[-1]``. Only the head
    is steered directly, every other segment follows its predecessor.
    """

    def __init__(
        self,
        config: BodyConfig,
        center: tuple[float, float],
    ) -> None:
        self.config = config
        cx, cy = center
        count = config.segments
        self.segments: list[Segment] = [
            Segment(
                cx - i * config.spacing * 0.5,
                cy + math.sin(i * 0.18) * 10,
                z=depth_at(i, count),
            )
            for i in range(count)
        ]

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def head(self) -> Segment:
        return self.segments[0]

    def mouth(self, offset: float) -> tuple[float, float]:
        """Point ``offset`` pixels ahead of the head along its facing."""
        head = self.head
        return (
            head.x + math.cos(head.angle) * offset,
            head.y + math.sin(head.angle) * offset,
        )

    def ease_head_toward(self, tx: float, ty: float, factor: float) -> None:
        head = self.head
        head.x = lerp(head.x, tx, factor)
        head.y = lerp(head.y, ty, factor)

    def follow_factor(self, index: int, biting: bool) -> float:
        """Interpolation factor the chain-follow rule uses for *index*."""
        cfg = self.config
        if biting and index < cfg.bite_follow_segments:
            return cfg.bite_follow_ease
        return cfg.follow_ease

    def follow(self, clock: float, biting: bool = False) -> None:
        """Pull every non-head segment toward its predecessor.

        Runs head to tail so each segment sees its predecessor's position
        from this same tick.
        """
        spacing = self.config.spacing
        count = len(self.segments)
        for i in range(1, count):
            prev = self.segments[i - 1]
            cur = self.segments[i]
            ang = math.atan2(prev.y - cur.y, prev.x - cur.x)
            tx = prev.x - math.cos(ang) * spacing
            ty = prev.y - math.sin(ang) * spacing
            factor = self.follow_factor(i, biting)
            cur.x = lerp(cur.x, tx, factor)
            cur.y = lerp(cur.y, ty, factor)
            cur.angle = math.atan2(prev.y - cur.y, prev.x - cur.x)
            cur.z = depth_at(i, count)
            cur.wiggle = (
                math.sin(clock * (1.5 + i * 0.02) + i * 0.32)
                * 0.6 * (1 - i / count)
            )

    def is_finite(self) -> bool:
        return all(
            math.isfinite(s.x) and math.isfinite(s.y) and math.isfinite(s.angle)
            for s in self.segments
        )

    def to_dict(self) -> dict:
        """Serialize body state to a dictionary."""
        return {"segments": [s.to_dict() for s in self.segments]}
