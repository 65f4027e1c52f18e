"""Tests for the body chain and stalking steering."""

import math

import numpy as np
import pytest

from dragon_cursor.body import Body, Segment, depth_at
from dragon_cursor.config import BodyConfig
from dragon_cursor.steering import stalk, stalk_target


def _dist(a: Segment, b: Segment) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


class TestBodyInit:
    def test_length_fixed(self):
        body = Body(BodyConfig(segments=12), (100, 100))
        assert len(body) == 12
        assert body.head is body.segments[0]

    def test_seeded_curve(self):
        body = Body(BodyConfig(segments=5, spacing=20), (100, 100))
        assert body.head.position == (100, 100)
        assert body.segments[1].x == pytest.approx(90)
        assert body.segments[1].y == pytest.approx(100 + math.sin(0.18) * 10)

    def test_single_segment(self):
        body = Body(BodyConfig(segments=1), (0, 0))
        body.follow(1.0)
        assert body.head.position == (0, 0)

    def test_depth_ramp(self):
        assert depth_at(0, 10) == 1.0
        assert depth_at(9, 10) > 0
        zs = [depth_at(i, 76) for i in range(76)]
        assert all(a >= b for a, b in zip(zs, zs[1:]))


class TestChainFollow:
    def test_head_untouched(self):
        body = Body(BodyConfig(segments=8), (50, 50))
        body.head.x, body.head.y = 300, 300
        body.follow(0.5)
        assert body.head.position == (300, 300)

    def test_follow_factor(self):
        body = Body(BodyConfig(), (0, 0))
        assert body.follow_factor(3, biting=True) == 0.6
        assert body.follow_factor(8, biting=True) == 0.78
        assert body.follow_factor(3, biting=False) == 0.78

    @pytest.mark.parametrize("biting", [False, True])
    def test_bounded_stretch(self, biting):
        """Each tick removes a fixed share of every joint's excess stretch."""
        cfg = BodyConfig(segments=30)
        body = Body(cfg, (400, 300))
        rng = np.random.default_rng(3)
        for tick in range(120):
            body.head.x += rng.uniform(-40, 40)
            body.head.y += rng.uniform(-40, 40)
            before = [(s.x, s.y) for s in body.segments]
            body.follow(tick / 60, biting=biting)
            for i in range(1, len(body)):
                prev, cur = body.segments[i - 1], body.segments[i]
                old_x, old_y = before[i]
                reach = math.hypot(prev.x - old_x, prev.y - old_y)
                factor = body.follow_factor(i, biting)
                stretch = _dist(prev, cur) - cfg.spacing
                assert abs(stretch) <= (1 - factor) * abs(reach - cfg.spacing) + 1e-6

    def test_settles_at_spacing(self):
        cfg = BodyConfig(segments=10)
        body = Body(cfg, (0, 0))
        for tick in range(200):
            body.follow(tick / 60)
        for i in range(1, len(body)):
            assert _dist(body.segments[i - 1], body.segments[i]) == pytest.approx(
                cfg.spacing, abs=1e-6,
            )

    def test_depth_monotonic_after_ticks(self):
        body = Body(BodyConfig(), (200, 200))
        for tick in range(30):
            body.head.x += 7
            body.follow(tick / 60)
            zs = [s.z for s in body.segments]
            assert all(a >= b for a, b in zip(zs, zs[1:]))
            assert 0 < zs[-1] < 1

    def test_orientation_faces_predecessor(self):
        body = Body(BodyConfig(segments=4), (0, 0))
        body.follow(0.0)
        seg, prev = body.segments[2], body.segments[1]
        assert seg.angle == pytest.approx(math.atan2(prev.y - seg.y, prev.x - seg.x))

    def test_wiggle_tapers(self):
        body = Body(BodyConfig(segments=40), (0, 0))
        body.follow(1.3)
        assert all(abs(s.wiggle) <= 0.6 * (1 - i / 40) + 1e-9
                   for i, s in enumerate(body.segments[1:], start=1))

    def test_mouth(self):
        body = Body(BodyConfig(segments=2), (10, 10))
        body.head.angle = math.pi / 2
        mx, my = body.mouth(56)
        assert mx == pytest.approx(10)
        assert my == pytest.approx(66)


class TestStalking:
    def test_target_keeps_distance(self):
        tx, ty = stalk_target(0, 0, (300, 0), 220)
        assert (tx, ty) == pytest.approx((80, 0))

    def test_converges_geometrically_without_overshoot(self):
        cfg = BodyConfig(segments=3)
        body = Body(cfg, (100, 300))
        pointer = (1000, 300)
        target_x = pointer[0] - cfg.trail_offset
        gap = target_x - body.head.x
        for _ in range(100):
            stalk(body, pointer, clock=0.0)
            new_gap = target_x - body.head.x
            assert new_gap == pytest.approx(gap * (1 - cfg.head_ease))
            assert new_gap > 0
            gap = new_gap

    def test_moving_pointer_trails_without_overshoot(self):
        cfg = BodyConfig(segments=3)
        body = Body(cfg, (100, 300))
        velocity = 5.0
        px = 600.0
        for _ in range(300):
            px += velocity
            stalk(body, (px, 300), clock=0.0)
            assert body.head.x < px - cfg.trail_offset
        steady = velocity * (1 - cfg.head_ease) / cfg.head_ease
        assert (px - cfg.trail_offset) - body.head.x == pytest.approx(steady, rel=1e-3)

    def test_heading_faces_pointer_plus_wobble(self):
        cfg = BodyConfig(segments=2)
        body = Body(cfg, (0, 0))
        stalk(body, (500, 0), clock=0.0)
        assert body.head.angle == pytest.approx(0.0)
