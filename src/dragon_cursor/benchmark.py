"""Headless simulation throughput measurement."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass

from dragon_cursor.config import DragonConfig
from dragon_cursor.engine import DragonEngine

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    """Results from a throughput benchmark run."""

    ticks: int
    wall_time_seconds: float
    ticks_per_second: float
    peak_flame: int
    peak_eat: int
    bites: int

    def summary(self) -> str:
        return (
            f"Benchmark: {self.ticks} ticks in "
            f"{self.wall_time_seconds:.2f}s | "
            f"{self.ticks_per_second:.1f} ticks/s, "
            f"peak particles {self.peak_flame} flame / {self.peak_eat} eat, "
            f"{self.bites} bite(s)"
        )


def scripted_pointer(tick: int, width: int, height: int) -> tuple[float, float]:
    """A slow orbit that pauses every few seconds so bites can trigger."""
    cycle = tick % 600
    phase = min(cycle, 360) / 60.0
    radius = min(width, height) * 0.3
    return (
        width / 2 + math.cos(phase) * radius,
        height / 2 + math.sin(phase) * radius,
    )


def benchmark_throughput(
    *,
    ticks: int = 600,
    seed: int | None = 0,
    fire: bool = True,
    fps: int = 60,
) -> BenchmarkResult:
    """Measure raw simulation throughput (no drawing surface).

    Drives the engine for *ticks* fixed-size steps with a scripted pointer,
    holding the fire button for the first half when *fire* is set.
    """
    engine = DragonEngine(DragonConfig(seed=seed, fps=fps))
    dt = 1.0 / fps
    peak_flame = 0
    peak_eat = 0

    start = time.perf_counter()
    for tick in range(ticks):
        engine.pointer.move_to(*scripted_pointer(tick, engine.width, engine.height))
        if fire and tick < ticks // 2:
            engine.pointer.press()
        else:
            engine.pointer.release()
        engine.step(dt)
        peak_flame = max(peak_flame, len(engine.particles.flame))
        peak_eat = max(peak_eat, len(engine.particles.eat))
    elapsed = time.perf_counter() - start

    result = BenchmarkResult(
        ticks=ticks,
        wall_time_seconds=elapsed,
        ticks_per_second=ticks / max(elapsed, 1e-9),
        peak_flame=peak_flame,
        peak_eat=peak_eat,
        bites=engine.bite.bites,
    )
    logger.info(result.summary())
    return result
