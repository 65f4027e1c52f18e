"""Tunable parameters for the dragon simulation and renderer."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

Color = tuple[int, int, int, int]


@dataclass(frozen=True)
class BodyConfig:
    """Segment chain and stalking steering parameters."""

    segments: int = 76
    spacing: float = 20.0
    head_ease: float = 0.06
    wobble_amp: float = 0.14
    wobble_speed: float = 0.9
    trail_offset: float = 220.0
    follow_ease: float = 0.78
    bite_follow_ease: float = 0.6
    bite_follow_segments: int = 8

    def __post_init__(self) -> None:
        if self.segments < 1:
            raise ValueError("segments must be at least 1.")
        if self.spacing <= 0:
            raise ValueError("spacing must be positive.")
        for name in ("head_ease", "follow_ease", "bite_follow_ease"):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1].")


@dataclass(frozen=True)
class BiteConfig:
    """Linger trigger and lunge/snap/recover timings."""

    distance: float = 130.0
    hold_time: float = 0.55
    hold_fraction: float = 0.8
    linger_speed: float = 2.5
    lunge_duration: float = 0.5
    lunge_reach: float = 0.2
    snap_duration: float = 0.18
    recover_duration: float = 0.6
    recover_ease: float = 0.18
    cooldown: float = 1.2
    eat_burst: int = 64

    def __post_init__(self) -> None:
        if self.distance <= 0:
            raise ValueError("distance must be positive.")
        for name in (
            "hold_time", "lunge_duration", "snap_duration",
            "recover_duration", "cooldown",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0.")
        if not 0 < self.recover_ease <= 1:
            raise ValueError("recover_ease must be in (0, 1].")


@dataclass(frozen=True)
class ParticleConfig:
    """Flame and eat-burst particle parameters."""

    rate: int = 24
    max_particles: int = 1200
    max_eat_particles: int = 300
    fire_intensity: float = 1.8
    ember_intensity: float = 0.28
    ember_chance: float = 0.02
    flame_damping: float = 0.986
    eat_damping: float = 0.96
    flame_mouth: float = 56.0
    eat_mouth: float = 48.0

    def __post_init__(self) -> None:
        if self.rate < 0:
            raise ValueError("rate must be >= 0.")
        if self.max_particles < 0 or self.max_eat_particles < 0:
            raise ValueError("particle capacities must be >= 0.")
        if not 0 <= self.ember_chance <= 1:
            raise ValueError("ember_chance must be in [0, 1].")


@dataclass(frozen=True)
class Palette:
    """The four line colors, as RGBA tuples."""

    white: Color = (255, 255, 255, 255)
    light: Color = (220, 220, 220, 250)
    dim: Color = (110, 110, 110, 230)
    fire_core: Color = (255, 255, 220, 255)


@dataclass(frozen=True)
class RenderConfig:
    """Compositor parameters."""

    fade_alpha: float = 0.11
    leg_every: int = 2
    leg_length: float = 42.0
    wing_ribs: int = 14
    palette: Palette = field(default_factory=Palette)

    def __post_init__(self) -> None:
        if not 0 <= self.fade_alpha <= 1:
            raise ValueError("fade_alpha must be in [0, 1].")
        if self.leg_every < 1:
            raise ValueError("leg_every must be at least 1.")
        if self.wing_ribs < 2:
            raise ValueError("wing_ribs must be at least 2.")


@dataclass(frozen=True)
class DragonConfig:
    """Full configuration for a dragon session.

    Supports JSON serialization so a tuned set of parameters can be reused.
    """

    # Window / driver
    width: int = 1280
    height: int = 720
    fps: int = 60
    max_dt: float = 0.1
    seed: int | None = None
    screenshot_dir: str = "."

    body: BodyConfig = field(default_factory=BodyConfig)
    bite: BiteConfig = field(default_factory=BiteConfig)
    particles: ParticleConfig = field(default_factory=ParticleConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("width and height must be at least 1.")
        if self.fps < 1:
            raise ValueError("fps must be at least 1.")
        if self.max_dt <= 0:
            raise ValueError("max_dt must be positive.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict (tuples become lists)."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> DragonConfig:
        """Rebuild a config, including nested sections, from a plain dict."""
        raw = dict(raw)
        render = dict(raw.pop("render", {}))
        palette = {
            name: tuple(value)
            for name, value in render.pop("palette", {}).items()
        }
        render["palette"] = Palette(**palette)
        return cls(
            body=BodyConfig(**raw.pop("body", {})),
            bite=BiteConfig(**raw.pop("bite", {})),
            particles=ParticleConfig(**raw.pop("particles", {})),
            render=RenderConfig(**render),
            **raw,
        )

    @classmethod
    def load(cls, path: str | Path) -> DragonConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
