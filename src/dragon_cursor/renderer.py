"""pygame compositor: persistent trail buffer plus crisp foreground."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pygame

from dragon_cursor.config import RenderConfig
from dragon_cursor.geometry import (
    Stroke,
    body_strokes,
    eat_strokes,
    flame_strokes,
    head_geometry,
    shadow_strokes,
    wing_strokes,
)

if TYPE_CHECKING:
    from dragon_cursor.engine import DragonEngine

logger = logging.getLogger(__name__)

BACKGROUND = (0, 0, 0)


def draw_strokes(surface: pygame.Surface, strokes: list[Stroke]) -> None:
    for s in strokes:
        pygame.draw.line(surface, s.color, s.start, s.end, max(1, round(s.width)))


def _premultiplied(color) -> tuple[int, int, int]:
    a = color[3] / 255
    return int(color[0] * a), int(color[1] * a), int(color[2] * a)


class Renderer:
    """Owns the trail buffer and scratch layers for one output surface.

    The trail buffer is never cleared; each frame it is darkened by a
    translucent black fill so earlier body poses fade out exponentially.
    """

    def __init__(
        self,
        size: tuple[int, int],
        config: RenderConfig | None = None,
    ) -> None:
        self.config = config or RenderConfig()
        self.size = (0, 0)
        self.trail: pygame.Surface | None = None
        self._spark = pygame.Surface((64, 64))
        self.resize(size)

    def resize(self, size: tuple[int, int]) -> None:
        """Reallocate surfaces for *size*, keeping the existing trail."""
        w, h = max(1, int(size[0])), max(1, int(size[1]))
        old = self.trail
        self.size = (w, h)
        self.trail = pygame.Surface(self.size)
        self.trail.fill(BACKGROUND)
        if old is not None:
            self.trail.blit(old, (0, 0))

        self._fade = pygame.Surface(self.size, pygame.SRCALPHA)
        self._fade.fill((0, 0, 0, round(255 * self.config.fade_alpha)))
        self._layer = pygame.Surface(self.size, pygame.SRCALPHA)

    def composite(self, target: pygame.Surface, strokes: list[Stroke]) -> None:
        """Alpha-blend *strokes* over *target*.

        ``pygame.draw.line`` replaces destination alpha instead of blending,
        so the strokes go through a cleared transparent layer first. Strokes
        within one call still overwrite each other where they cross.
        """
        self._layer.fill((0, 0, 0, 0))
        draw_strokes(self._layer, strokes)
        target.blit(self._layer, (0, 0))

    def add(self, target: pygame.Surface, strokes: list[Stroke]) -> None:
        """Add each stroke's alpha-weighted color onto *target*.

        Every stroke is rasterized alone into a small black scratch surface
        and blitted with ``BLEND_ADD``, so overlapping strokes accumulate.
        """
        for s in strokes:
            pad = int(math.ceil(s.width)) + 1
            x0 = int(math.floor(min(s.start[0], s.end[0]))) - pad
            y0 = int(math.floor(min(s.start[1], s.end[1]))) - pad
            w = int(math.ceil(max(s.start[0], s.end[0]))) + pad - x0 + 1
            h = int(math.ceil(max(s.start[1], s.end[1]))) + pad - y0 + 1
            sw, sh = self._spark.get_size()
            if w > sw or h > sh:
                self._spark = pygame.Surface((max(w, sw), max(h, sh)))
            area = pygame.Rect(0, 0, w, h)
            self._spark.fill(BACKGROUND, area)
            pygame.draw.line(
                self._spark, _premultiplied(s.color),
                (s.start[0] - x0, s.start[1] - y0),
                (s.end[0] - x0, s.end[1] - y0),
                max(1, round(s.width)),
            )
            target.blit(self._spark, (x0, y0), area, special_flags=pygame.BLEND_ADD)

    def render(
        self,
        engine: DragonEngine,
        screen: pygame.Surface,
        rng: np.random.Generator,
    ) -> None:
        """Composite one frame of *engine* onto *screen*."""
        if screen.get_size() != self.size:
            self.resize(screen.get_size())

        screen.fill(BACKGROUND)

        self.trail.blit(self._fade, (0, 0))
        # Shadows go down first so the spine is blended over them.
        self.composite(self.trail, shadow_strokes(engine.body))
        self.composite(
            self.trail,
            body_strokes(engine.body, self.config, engine.bite.active)
            + wing_strokes(engine.body, engine.clock, self.config),
        )

        screen.blit(self.trail, (0, 0))

        particles = engine.particles
        self.add(screen, flame_strokes(particles.flame))
        self.add(screen, eat_strokes(particles.eat, self.config.palette))

        draw_strokes(screen, head_geometry(engine, rng, self.config.palette).strokes)


def export_screenshot(
    screen: pygame.Surface,
    directory: str | Path = ".",
) -> Path | None:
    """Save *screen* as a timestamped PNG.

    Returns the written path, or ``None`` if the export failed.
    """
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    path = Path(directory) / f"dragon_{stamp}.png"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        pygame.image.save(screen, str(path))
    except (pygame.error, OSError) as exc:
        logger.warning("Screenshot export to %s failed: %s", path, exc)
        return None
    logger.info("Screenshot saved to %s", path)
    return path
