"""Tick-based simulation composing body, bite, pointer and particle logic."""

from __future__ import annotations

import logging
import math

import numpy as np

from dragon_cursor.bite import BiteController
from dragon_cursor.body import Body, clamp
from dragon_cursor.config import DragonConfig
from dragon_cursor.particles import ParticleSystem
from dragon_cursor.pointer import PointerState
from dragon_cursor.steering import stalk

logger = logging.getLogger(__name__)


class DragonEngine:
    """Single-creature, tick-based simulation.

    The engine owns all simulation state. Input handlers only write to
    :attr:`pointer`; each call to :meth:`step` advances everything by one
    tick and returns the updated state dictionary. No drawing surface is
    needed.
    """

    def __init__(self, config: DragonConfig | None = None) -> None:
        cfg = config or DragonConfig()
        self.config = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.width = cfg.width
        self.height = cfg.height

        center = (cfg.width / 2, cfg.height / 2)
        self.body = Body(cfg.body, center)
        self.pointer = PointerState(center[0], center[1], cfg.width, cfg.height)
        self.bite = BiteController(cfg.bite)
        self.particles = ParticleSystem(cfg.particles, rng=self.rng)

        self.clock = 0.0
        self.tick = 0

    def _sanitize_dt(self, dt: float) -> float:
        if not math.isfinite(dt) or dt < 0:
            logger.warning("Discarding invalid frame delta %r.", dt)
            return 0.0
        return min(dt, self.config.max_dt)

    def step(self, dt: float) -> dict:
        """Advance the simulation by one tick of *dt* seconds."""
        dt = self._sanitize_dt(dt)
        speed = self.pointer.sample()
        pointer = self.pointer.position
        self.clock += dt

        if self.bite.active:
            landed = self.bite.steer(self.body, pointer, self.clock, dt)
            if landed:
                self.particles.spawn_eat(self.body, self.config.bite.eat_burst)
        else:
            stalk(self.body, pointer, self.clock)

        self.body.follow(self.clock, biting=self.bite.active)

        # Linger is judged against the head where this tick left it.
        head = self.body.head
        self.bite.update_linger(
            (head.x, head.y), pointer, speed, dt, self.clock,
        )

        pcfg = self.config.particles
        if self.pointer.down:
            self.particles.spawn_flame(self.body, pcfg.fire_intensity)
        elif self.rng.random() < pcfg.ember_chance:
            self.particles.spawn_flame(self.body, pcfg.ember_intensity)

        self.particles.advance(dt)
        self.tick += 1
        return self.get_state()

    def interest(self) -> float:
        """Proximity of the pointer to the head, 1 at the head, 0 beyond reach."""
        head = self.body.head
        px, py = self.pointer.position
        dist = math.hypot(px - head.x, py - head.y)
        return clamp(1 - dist / self.config.bite.distance, 0.0, 1.0)

    def resize(self, width: int, height: int) -> None:
        """Change the output bounds. The creature's pose is left untouched."""
        if width < 1 or height < 1:
            logger.warning("Ignoring resize to %dx%d.", width, height)
            return
        self.width = width
        self.height = height
        self.pointer.resize(width, height)
        logger.info("Resized to %dx%d.", width, height)

    def get_state(self) -> dict:
        """Return the full, serializable simulation state."""
        return {
            "tick": self.tick,
            "clock": self.clock,
            "size": [self.width, self.height],
            "pointer": self.pointer.to_dict(),
            "bite": self.bite.to_dict(),
            "particles": self.particles.to_dict(),
            "body": self.body.to_dict(),
        }
