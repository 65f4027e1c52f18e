"""Default head steering: keep a stand-off distance behind the pointer."""

from __future__ import annotations

import math

from dragon_cursor.body import Body


def wobble(clock: float, amp: float, speed: float) -> float:
    """Ambient sinusoidal heading perturbation."""
    return math.sin(clock * speed) * amp


def bearing(from_x: float, from_y: float, to_x: float, to_y: float) -> float:
    return math.atan2(to_y - from_y, to_x - from_x)


def stalk_target(
    head_x: float,
    head_y: float,
    pointer: tuple[float, float],
    offset: float,
) -> tuple[float, float]:
    """Point *offset* pixels back from the pointer toward the head."""
    px, py = pointer
    ang = bearing(head_x, head_y, px, py)
    return px - math.cos(ang) * offset, py - math.sin(ang) * offset


def face_pointer(body: Body, pointer: tuple[float, float], perturb: float) -> None:
    head = body.head
    head.angle = bearing(head.x, head.y, pointer[0], pointer[1]) + perturb


def stalk(
    body: Body,
    pointer: tuple[float, float],
    clock: float,
    ease: float | None = None,
) -> None:
    """Ease the head toward the stalking target and face the pointer.

    *ease* defaults to the configured head ease; the bite recover phase
    passes its own, faster factor.
    """
    cfg = body.config
    head = body.head
    tx, ty = stalk_target(head.x, head.y, pointer, cfg.trail_offset)
    body.ease_head_toward(tx, ty, cfg.head_ease if ease is None else ease)
    face_pointer(body, pointer, wobble(clock, cfg.wobble_amp, cfg.wobble_speed))
