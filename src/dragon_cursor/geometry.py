"""Pure stroke geometry for the compositor.

Everything here turns simulation state into lists of :class:`Stroke`
records without touching a drawing surface, so shapes can be checked in
tests and the renderer stays a thin rasterizer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from dragon_cursor.bite import BitePhase
from dragon_cursor.body import Body, clamp, lerp
from dragon_cursor.config import Color, Palette, RenderConfig

if TYPE_CHECKING:
    from dragon_cursor.engine import DragonEngine
    from dragon_cursor.particles import ParticlePool

Point = tuple[float, float]

TEETH = 7


@dataclass(frozen=True)
class Stroke:
    """A single straight line segment with width and RGBA color."""

    start: Point
    end: Point
    width: float
    color: Color

    @property
    def length(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])


def _with_alpha(color: Color, alpha: float) -> Color:
    return (color[0], color[1], color[2], int(round(255 * clamp(alpha, 0.0, 1.0))))


def spine_width(z: float) -> float:
    """Main spine width for a segment at depth *z*."""
    return lerp(12.5, 1.2, 1 - z) * (1.0 + z * 0.18)


def body_strokes(
    body: Body,
    render: RenderConfig,
    biting: bool = False,
) -> list[Stroke]:
    """Spine (main and ridge) and ribs, ordered tail to head."""
    palette = render.palette
    segs = body.segments
    count = len(segs)
    strokes: list[Stroke] = []
    for i in range(count - 1, 0, -1):
        a, b = segs[i], segs[i - 1]
        z = a.z or 0.4
        width = spine_width(z)
        if i < 6:
            color = palette.white
        elif i < 18:
            color = palette.light
        else:
            color = palette.dim

        strokes.append(Stroke(
            (a.x + a.wiggle * 2, a.y + a.wiggle * 2),
            (b.x + b.wiggle * 2, b.y + b.wiggle * 2),
            max(1.0, width), color,
        ))
        strokes.append(Stroke(
            (a.x - a.wiggle, a.y - a.wiggle),
            (b.x - b.wiggle, b.y - b.wiggle),
            max(0.6, width * 0.35),
            palette.white if i < 9 else palette.light,
        ))
        if i % render.leg_every == 0 and 3 < i < count - 3:
            strokes.extend(_rib(body, i, render, biting))
    return strokes


def shadow_strokes(body: Body) -> list[Stroke]:
    """Soft shadows under the spine, lower and darker toward the tail.

    Kept apart from :func:`body_strokes` so they can be blended beneath the
    spine instead of overwriting it.
    """
    segs = body.segments
    strokes: list[Stroke] = []
    for i in range(len(segs) - 1, 0, -1):
        a, b = segs[i], segs[i - 1]
        z = a.z or 0.4
        shadow = 6 * (1 - z)
        strokes.append(Stroke(
            (a.x + shadow, a.y + shadow),
            (b.x + shadow, b.y + shadow),
            max(0.6, spine_width(z) * 0.28),
            (0, 0, 0, int(255 * 0.6 * (1 - z))),
        ))
    return strokes


def _rib(body: Body, i: int, render: RenderConfig, biting: bool) -> list[Stroke]:
    palette = render.palette
    segs = body.segments
    a, b = segs[i], segs[i - 1]
    ang = a.angle or math.atan2(b.y - a.y, b.x - a.x)
    perp_x, perp_y = math.sin(ang), -math.cos(ang)
    length = lerp(8, render.leg_length, i / len(segs))
    if biting and i < body.config.bite_follow_segments:
        length *= 1.6
    side = 1 if i % (render.leg_every * 2) == 0 else -1
    sx = a.x + perp_x * 6 * side
    sy = a.y + perp_y * 6 * side
    tx = sx + perp_x * length * side - math.cos(a.angle) * 12
    ty = sy + perp_y * length * side - math.sin(a.angle) * 12
    return [
        Stroke((sx, sy), (tx, ty), 1.8, palette.dim),
        Stroke(
            (sx, sy),
            (tx + math.cos(a.angle) * 6, ty + math.sin(a.angle) * 6),
            0.9, palette.light,
        ),
    ]


def wing_anchors(count: int) -> tuple[int, int]:
    return int(count * 0.14), int(count * 0.35)


def wing_strokes(body: Body, clock: float, render: RenderConfig) -> list[Stroke]:
    """Four fanned wings: two bilateral pairs anchored along the torso."""
    palette = render.palette
    ribs = render.wing_ribs
    strokes: list[Stroke] = []
    for pair, idx in enumerate(wing_anchors(len(body))):
        anchor = body.segments[idx]
        base = anchor.angle or 0.0
        for side in (-1, 1):
            for r in range(ribs):
                t = r / (ribs - 1)
                spread = lerp(80, 420 + pair * 60, t) * (1 + 0.2 * math.sin(clock * 0.9 + r))
                ang = base + side * (math.pi / 2 + t * (0.85 + pair * 0.12))
                ex = anchor.x + math.cos(ang) * spread
                ey = anchor.y + math.sin(ang) * spread * (0.9 + 0.25 * t)
                strokes.append(Stroke(
                    (anchor.x, anchor.y), (ex, ey),
                    lerp(2.4, 0.6, t), palette.dim,
                ))
                strokes.append(Stroke(
                    (anchor.x, anchor.y),
                    (ex - math.cos(ang) * 6, ey - math.sin(ang) * 6),
                    max(0.6, lerp(1.2, 0.5, t)), palette.light,
                ))
    return strokes


def flame_strokes(pool: ParticlePool) -> list[Stroke]:
    strokes = []
    for p in pool:
        alpha = clamp(p.fade, 0.02, 1.0) * p.alpha
        strokes.append(Stroke(
            (p.x, p.y),
            (p.x - p.vx * 0.012, p.y - p.vy * 0.012),
            p.thickness,
            (255, int(220 * alpha), int(100 * alpha), int(255 * alpha)),
        ))
    return strokes


def eat_strokes(pool: ParticlePool, palette: Palette) -> list[Stroke]:
    return [
        Stroke(
            (p.x, p.y),
            (p.x - p.vx * 0.01, p.y - p.vy * 0.01),
            p.thickness,
            _with_alpha(palette.white, clamp(p.fade, 0.02, 1.0)),
        )
        for p in pool
    ]


@dataclass
class HeadGeometry:
    """Foreground head detail plus the key points it was built from."""

    tip: Point
    jaw_left: Point
    jaw_right: Point
    jaw_open: float
    strokes: list[Stroke] = field(default_factory=list)


def jaw_opening(engine: DragonEngine) -> float:
    """Jaws open wider as the pointer nears and fully during a bite."""
    if engine.bite.active:
        return 0.9
    return 0.08 + engine.interest() * 0.96


def head_geometry(
    engine: DragonEngine,
    rng: np.random.Generator,
    palette: Palette | None = None,
) -> HeadGeometry:
    """Snout, jaws, horns, teeth and eye for the current head pose.

    *rng* only drives the per-tooth angular jitter.
    """
    palette = palette or engine.config.render.palette
    h = engine.body.head
    ang = h.angle or 0.0
    hx, hy = h.x, h.y
    cos_a, sin_a = math.cos(ang), math.sin(ang)
    tip = (hx + cos_a * 72, hy + sin_a * 72)
    strokes = [Stroke((hx - cos_a * 12, hy - sin_a * 12), tip, 5.6, palette.light)]

    jaw_open = jaw_opening(engine)
    vibr = 0.0
    if engine.bite.phase is BitePhase.SNAP:
        vibr = math.sin(engine.clock * 300) * 0.5
    reach = 32 + jaw_open * 36
    jaw_left = (hx + math.cos(ang + 0.30 + vibr) * reach,
                hy + math.sin(ang + 0.30 + vibr) * reach)
    jaw_right = (hx + math.cos(ang - 0.30 - vibr) * reach,
                 hy + math.sin(ang - 0.30 - vibr) * reach)
    strokes.append(Stroke(tip, jaw_left, 4.2, palette.white))
    strokes.append(Stroke(tip, jaw_right, 4.2, palette.white))

    horn_base = (hx - cos_a * 10, hy - sin_a * 10)
    for offset in (0.78, -0.78):
        horn = (hx + math.cos(ang + offset) * 58, hy + math.sin(ang + offset) * 58)
        strokes.append(Stroke(horn_base, horn, 3.8, palette.light))

    tooth_len = 8 + jaw_open * 26
    jitter = (rng.random(TEETH) - 0.5) * 0.16
    for k in range(TEETH):
        f = k / (TEETH - 1)
        bx = lerp(jaw_right[0], jaw_left[0], f)
        by = lerp(jaw_right[1], jaw_left[1], f)
        off = ang + float(jitter[k])
        strokes.append(Stroke(
            (bx, by),
            (bx - math.cos(off) * tooth_len, by - math.sin(off) * tooth_len),
            1.2, palette.white,
        ))

    ex = hx + cos_a * 22 - sin_a * 14
    ey = hy + sin_a * 22 + cos_a * 14
    strokes.append(Stroke((ex - 4, ey - 1), (ex + 4, ey + 1), 1.6, palette.white))
    strokes.append(Stroke((ex - 1, ey - 4), (ex + 1, ey + 4), 1.6, palette.white))

    if engine.pointer.down:
        core = engine.config.particles.flame_mouth
        strokes.append(Stroke(
            (hx + cos_a * core, hy + sin_a * core),
            (hx + cos_a * (core + 28), hy + sin_a * (core + 28)),
            6.0, palette.fire_core,
        ))

    return HeadGeometry(
        tip=tip, jaw_left=jaw_left, jaw_right=jaw_right,
        jaw_open=jaw_open, strokes=strokes,
    )
