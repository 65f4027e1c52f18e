"""Dragon Cursor — line-only dragon simulation and renderer."""

from dragon_cursor.bite import BiteController, BitePhase, BiteSession
from dragon_cursor.body import Body, Segment
from dragon_cursor.config import (
    BiteConfig,
    BodyConfig,
    DragonConfig,
    Palette,
    ParticleConfig,
    RenderConfig,
)
from dragon_cursor.engine import DragonEngine
from dragon_cursor.particles import Particle, ParticlePool, ParticleSystem
from dragon_cursor.pointer import PointerState

__all__ = [
    "BiteConfig",
    "BiteController",
    "BitePhase",
    "BiteSession",
    "Body",
    "BodyConfig",
    "DragonConfig",
    "DragonEngine",
    "Palette",
    "Particle",
    "ParticleConfig",
    "ParticlePool",
    "ParticleSystem",
    "PointerState",
    "RenderConfig",
    "Segment",
]
