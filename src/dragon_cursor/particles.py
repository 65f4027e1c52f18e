"""Flame and eat-burst particle pools."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from dragon_cursor.config import ParticleConfig

if TYPE_CHECKING:
    from dragon_cursor.body import Body

logger = logging.getLogger(__name__)


class Particle:
    """A short-lived directional streak."""

    __slots__ = ("x", "y", "vx", "vy", "age", "life", "thickness", "alpha")

    def __init__(
        self,
        x: float,
        y: float,
        vx: float,
        vy: float,
        life: float,
        thickness: float,
        alpha: float = 1.0,
    ) -> None:
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.age = 0.0
        self.life = life
        self.thickness = thickness
        self.alpha = alpha

    @property
    def fade(self) -> float:
        """Linear fade from 1 at birth toward 0 at end of life."""
        if self.life <= 0:
            return 0.0
        return 1.0 - self.age / self.life


class ParticlePool:
    """A bounded collection of particles sharing one damping constant.

    Spawns beyond ``capacity`` are dropped; existing particles are never
    evicted to make room.
    """

    def __init__(self, capacity: int, damping: float) -> None:
        if capacity < 0:
            raise ValueError("capacity must be >= 0.")
        self.capacity = capacity
        self.damping = damping
        self.particles: list[Particle] = []
        self.spawned_total = 0
        self.removed_total = 0
        self.dropped_total = 0

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self):
        return iter(self.particles)

    @property
    def free(self) -> int:
        return max(0, self.capacity - len(self.particles))

    def add(self, particle: Particle) -> bool:
        """Append *particle* if there is room. Returns True if kept."""
        if len(self.particles) >= self.capacity:
            self.dropped_total += 1
            return False
        self.particles.append(particle)
        self.spawned_total += 1
        return True

    def advance(self, dt: float) -> int:
        """Age, integrate and damp every particle; drop expired ones.

        Returns the number of particles removed.
        """
        damping = self.damping
        survivors: list[Particle] = []
        for p in self.particles:
            p.age += dt
            if p.age >= p.life:
                continue
            p.x += p.vx * dt
            p.y += p.vy * dt
            p.vx *= damping
            p.vy *= damping
            survivors.append(p)
        removed = len(self.particles) - len(survivors)
        self.particles = survivors
        self.removed_total += removed
        return removed

    def clear(self) -> None:
        self.removed_total += len(self.particles)
        self.particles = []


class ParticleSystem:
    """Owns the flame and eat pools and spawns into them at the mouth."""

    def __init__(
        self,
        config: ParticleConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or ParticleConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.flame = ParticlePool(self.config.max_particles, self.config.flame_damping)
        self.eat = ParticlePool(self.config.max_eat_particles, self.config.eat_damping)

    def spawn_flame(self, body: Body, intensity: float = 1.0) -> int:
        """Spawn ``floor(rate * intensity)`` flame streaks.

        Returns how many were actually added.
        """
        cfg = self.config
        rng = self.rng
        requested = math.floor(cfg.rate * intensity)
        count = min(requested, self.flame.free)
        self.flame.dropped_total += requested - count
        if count <= 0:
            return 0

        ex, ey = body.mouth(cfg.flame_mouth)
        heading = body.head.angle
        angles = heading + rng.uniform(-0.65, 0.65, count)
        speeds = rng.uniform(260, 1400, count) * (0.6 + intensity * 1.4)
        jitter = rng.uniform(-120, 120, (count, 2))
        lives = rng.uniform(0.25, 0.8, count)
        thickness = rng.uniform(0.6, 4.0, count) * (0.6 + intensity)
        alphas = rng.uniform(0.6, 1.0, count)
        for i in range(count):
            self.flame.add(Particle(
                ex, ey,
                float(np.cos(angles[i]) * speeds[i] + jitter[i, 0]),
                float(np.sin(angles[i]) * speeds[i] + jitter[i, 1]),
                float(lives[i]),
                float(thickness[i]),
                float(alphas[i]),
            ))
        return count

    def spawn_eat(self, body: Body, count: int) -> int:
        """Spawn a bright burst of *count* eat streaks at the jaws."""
        cfg = self.config
        rng = self.rng
        kept = min(count, self.eat.free)
        self.eat.dropped_total += max(0, count - kept)
        if kept <= 0:
            return 0

        ex, ey = body.mouth(cfg.eat_mouth)
        angles = body.head.angle + rng.uniform(-1.8, 1.8, kept)
        speeds = rng.uniform(120, 540, kept)
        jitter = rng.uniform(-80, 80, (kept, 2))
        lives = rng.uniform(0.28, 0.9, kept)
        thickness = rng.uniform(0.6, 3.4, kept)
        for i in range(kept):
            self.eat.add(Particle(
                ex, ey,
                float(np.cos(angles[i]) * speeds[i] + jitter[i, 0]),
                float(np.sin(angles[i]) * speeds[i] + jitter[i, 1]),
                float(lives[i]),
                float(thickness[i]),
            ))
        logger.debug("Eat burst: %d particles at (%.1f, %.1f).", kept, ex, ey)
        return kept

    def advance(self, dt: float) -> None:
        self.flame.advance(dt)
        self.eat.advance(dt)

    def to_dict(self) -> dict:
        return {
            "flame": len(self.flame),
            "eat": len(self.eat),
            "flame_spawned": self.flame.spawned_total,
            "eat_spawned": self.eat.spawned_total,
        }
