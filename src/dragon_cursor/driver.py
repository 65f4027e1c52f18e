"""Window, input translation and the per-frame update/render loop."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pygame

from dragon_cursor.config import DragonConfig
from dragon_cursor.engine import DragonEngine
from dragon_cursor.renderer import Renderer, export_screenshot

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Dragon Cursor"

# Log a reminder when this many frames in a row have failed.
_FAILURE_REPORT_EVERY = 120


class AnimationDriver:
    """Runs the engine and renderer once per display refresh.

    Input events only write pointer fields or set flags; the simulation and
    drawing happen in :meth:`frame`. A frame that raises is logged and
    skipped, the loop never stops because of one.
    """

    def __init__(self, config: DragonConfig | None = None) -> None:
        self.config = config or DragonConfig()
        self.engine = DragonEngine(self.config)
        self.renderer = Renderer(
            (self.config.width, self.config.height), self.config.render,
        )
        self.render_rng = np.random.default_rng(
            None if self.config.seed is None else self.config.seed + 1,
        )
        self.screen: pygame.Surface | None = None
        self.clock: pygame.time.Clock | None = None
        self.running = False
        self.frames = 0
        self.failed_frames = 0
        self._consecutive_failures = 0
        self._screenshot_requested = False

    def open(self) -> None:
        """Initialize pygame and create the window."""
        pygame.init()
        pygame.display.set_caption(WINDOW_TITLE)
        self.screen = pygame.display.set_mode(
            (self.config.width, self.config.height), pygame.RESIZABLE,
        )
        self.clock = pygame.time.Clock()
        logger.info(
            "Window opened at %dx%d, target %d fps.",
            self.config.width, self.config.height, self.config.fps,
        )

    def close(self) -> None:
        self.screen = None
        pygame.quit()

    def handle_event(self, event: pygame.event.Event) -> None:
        """Translate one pygame event into state writes."""
        pointer = self.engine.pointer
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.MOUSEMOTION:
            pointer.move_to(*event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            pointer.press()
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            pointer.release()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_s:
                self._screenshot_requested = True
            elif event.key == pygame.K_ESCAPE:
                self.running = False
        elif event.type == pygame.VIDEORESIZE:
            self.resize(event.w, event.h)

    def resize(self, width: int, height: int) -> None:
        """Resize between ticks: bounds change, pose and trail survive."""
        if pygame.display.get_init() and self.screen is not None:
            self.screen = pygame.display.set_mode(
                (width, height), pygame.RESIZABLE,
            )
        self.engine.resize(width, height)
        self.renderer.resize((width, height))

    def frame(self, dt: float, screen: pygame.Surface) -> bool:
        """Run one update+render pass. Returns False if the frame failed."""
        try:
            self.engine.step(dt)
            self.renderer.render(self.engine, screen, self.render_rng)
            if self._screenshot_requested:
                self._screenshot_requested = False
                export_screenshot(screen, Path(self.config.screenshot_dir))
        except Exception:
            self.failed_frames += 1
            self._consecutive_failures += 1
            logger.exception("Frame %d failed; skipping.", self.frames)
            if self._consecutive_failures % _FAILURE_REPORT_EVERY == 0:
                logger.error(
                    "%d consecutive frames have failed.",
                    self._consecutive_failures,
                )
            return False
        finally:
            self.frames += 1
        self._consecutive_failures = 0
        return True

    def run(self, max_frames: int | None = None) -> int:
        """Run until the window closes or *max_frames* frames have passed.

        Returns the number of frames run.
        """
        if self.screen is None:
            self.open()
        self.running = True
        start = self.frames
        try:
            while self.running:
                dt = self.clock.tick(self.config.fps) / 1000.0
                for event in pygame.event.get():
                    self.handle_event(event)
                if not self.running:
                    break
                self.frame(dt, self.screen)
                pygame.display.flip()
                if max_frames is not None and self.frames - start >= max_frames:
                    break
        finally:
            self.close()
        logger.info(
            "Stopped after %d frames (%d failed).",
            self.frames - start, self.failed_frames,
        )
        return self.frames - start
