"""Tests for the configuration dataclasses."""

import json

import pytest

from dragon_cursor.config import (
    BiteConfig,
    BodyConfig,
    DragonConfig,
    Palette,
    ParticleConfig,
    RenderConfig,
)


class TestDefaults:
    def test_body_defaults(self):
        cfg = BodyConfig()
        assert cfg.segments == 76
        assert cfg.spacing == 20.0
        assert cfg.head_ease == 0.06
        assert cfg.trail_offset == 220.0

    def test_bite_defaults(self):
        cfg = BiteConfig()
        assert cfg.distance == 130.0
        assert cfg.hold_time == 0.55
        assert cfg.lunge_duration == 0.5
        assert cfg.cooldown == 1.2
        assert cfg.eat_burst == 64

    def test_particle_defaults(self):
        cfg = ParticleConfig()
        assert cfg.rate == 24
        assert cfg.max_particles == 1200
        assert cfg.max_eat_particles == 300

    def test_render_defaults(self):
        cfg = RenderConfig()
        assert cfg.fade_alpha == 0.11
        assert cfg.wing_ribs == 14
        assert cfg.palette.white == (255, 255, 255, 255)

    def test_frozen(self):
        cfg = DragonConfig()
        with pytest.raises(AttributeError):
            cfg.fps = 30


class TestValidation:
    def test_segments_at_least_one(self):
        with pytest.raises(ValueError, match="segments"):
            BodyConfig(segments=0)

    def test_spacing_positive(self):
        with pytest.raises(ValueError, match="spacing"):
            BodyConfig(spacing=0)

    def test_ease_range(self):
        with pytest.raises(ValueError, match="head_ease"):
            BodyConfig(head_ease=1.5)

    def test_negative_capacity(self):
        with pytest.raises(ValueError, match="capacities"):
            ParticleConfig(max_particles=-1)

    def test_fade_alpha_range(self):
        with pytest.raises(ValueError, match="fade_alpha"):
            RenderConfig(fade_alpha=2.0)

    def test_negative_cooldown(self):
        with pytest.raises(ValueError, match="cooldown"):
            BiteConfig(cooldown=-1)

    def test_window_size(self):
        with pytest.raises(ValueError, match="width"):
            DragonConfig(width=0)


class TestSerialization:
    def test_to_dict_serializable(self):
        serialized = json.dumps(DragonConfig().to_dict())
        assert isinstance(serialized, str)

    def test_save_and_load(self, tmp_path):
        cfg = DragonConfig(
            width=800, seed=7,
            body=BodyConfig(segments=30),
            render=RenderConfig(palette=Palette(dim=(1, 2, 3, 4))),
        )
        path = tmp_path / "nested" / "dragon.json"
        cfg.save(path)
        assert path.exists()

        loaded = DragonConfig.load(path)
        assert loaded == cfg
        assert loaded.render.palette.dim == (1, 2, 3, 4)

    def test_load_partial(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"fps": 30, "bite": {"cooldown": 3.0}}))
        loaded = DragonConfig.load(path)
        assert loaded.fps == 30
        assert loaded.bite.cooldown == 3.0
        assert loaded.body == BodyConfig()
