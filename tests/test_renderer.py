"""Tests for the pygame compositor."""

import numpy as np
import pygame
import pytest

from dragon_cursor.config import DragonConfig, ParticleConfig, RenderConfig
from dragon_cursor.engine import DragonEngine
from dragon_cursor.geometry import Stroke
from dragon_cursor.particles import Particle
from dragon_cursor.renderer import Renderer, export_screenshot

SIZE = (1000, 1000)


@pytest.fixture()
def engine():
    eng = DragonEngine(DragonConfig(
        width=SIZE[0], height=SIZE[1], seed=0,
        particles=ParticleConfig(ember_chance=0.0),
    ))
    eng.step(1 / 60)
    return eng


@pytest.fixture()
def renderer():
    return Renderer(SIZE, RenderConfig())


class TestRender:
    def test_draws_body_into_trail_and_screen(self, engine, renderer):
        screen = pygame.Surface(SIZE)
        renderer.render(engine, screen, np.random.default_rng(0))
        hx, hy = engine.body.head.position
        assert screen.get_at((int(hx), int(hy)))[:3] != (0, 0, 0)
        mid = engine.body.segments[30]
        assert renderer.trail.get_at((int(mid.x), int(mid.y)))[:3] != (0, 0, 0)

    def test_trail_fades_each_frame(self, engine, renderer):
        corner = (SIZE[0] - 1, 0)
        renderer.trail.set_at(corner, (255, 255, 255))
        screen = pygame.Surface(SIZE)
        renderer.render(engine, screen, np.random.default_rng(0))
        faded = renderer.trail.get_at(corner)[0]
        assert 200 < faded < 255
        renderer.render(engine, screen, np.random.default_rng(0))
        assert renderer.trail.get_at(corner)[0] < faded

    def test_particles_drawn_additively(self, engine, renderer):
        engine.particles.spawn_eat(engine.body, 30)
        screen = pygame.Surface(SIZE)
        renderer.render(engine, screen, np.random.default_rng(0))
        p = engine.particles.eat.particles[0]
        assert screen.get_at((int(p.x), int(p.y)))[:3] != (0, 0, 0)

    def test_overlapping_particles_accumulate(self, engine, renderer):
        # Four quarter-faded sparks on the same spot should sum to near white.
        for _ in range(4):
            spark = Particle(980, 20, 500, 0, 1.0, 3.0)
            spark.age = 0.75
            engine.particles.eat.add(spark)
        screen = pygame.Surface(SIZE)
        renderer.render(engine, screen, np.random.default_rng(0))
        r, g, b = screen.get_at((978, 20))[:3]
        assert min(r, g, b) >= 240

    def test_single_faded_particle_stays_dim(self, engine, renderer):
        spark = Particle(980, 20, 500, 0, 1.0, 3.0)
        spark.age = 0.75
        engine.particles.eat.add(spark)
        screen = pygame.Surface(SIZE)
        renderer.render(engine, screen, np.random.default_rng(0))
        assert 50 <= screen.get_at((978, 20))[0] <= 80

    def test_shadow_does_not_cover_spine(self, engine, renderer):
        screen = pygame.Surface(SIZE)
        renderer.render(engine, screen, np.random.default_rng(0))
        a, b = engine.body.segments[3], engine.body.segments[2]
        mx = (a.x + b.x) / 2 + (a.wiggle + b.wiggle)
        my = (a.y + b.y) / 2 + (a.wiggle + b.wiggle)
        assert renderer.trail.get_at((round(mx), round(my)))[:3] == (255, 255, 255)

    def test_adapts_to_screen_size(self, engine, renderer):
        screen = pygame.Surface((640, 480))
        renderer.render(engine, screen, np.random.default_rng(0))
        assert renderer.size == (640, 480)
        assert renderer.trail.get_size() == (640, 480)


class TestResize:
    def test_trail_content_survives(self, renderer):
        renderer.trail.set_at((5, 5), (255, 255, 255))
        renderer.resize((1200, 1100))
        assert renderer.trail.get_size() == (1200, 1100)
        assert renderer.trail.get_at((5, 5))[:3] == (255, 255, 255)
        assert renderer.trail.get_at((1150, 1050))[:3] == (0, 0, 0)

    def test_shrink_keeps_overlap(self, renderer):
        renderer.trail.set_at((5, 5), (255, 255, 255))
        renderer.resize((100, 100))
        assert renderer.trail.get_at((5, 5))[:3] == (255, 255, 255)


class TestScreenshot:
    def test_writes_png(self, tmp_path):
        screen = pygame.Surface((32, 32))
        screen.fill((255, 0, 0))
        path = export_screenshot(screen, tmp_path / "shots")
        assert path is not None
        assert path.exists()
        assert path.suffix == ".png"

    def test_failure_returns_none(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        screen = pygame.Surface((8, 8))
        assert export_screenshot(screen, blocker / "shots") is None


class TestComposite:
    def test_translucent_stroke_blends_with_target(self, renderer):
        target = pygame.Surface(SIZE)
        target.fill((200, 200, 200))
        renderer.composite(target, [Stroke((10, 50), (90, 50), 6, (0, 0, 0, 128))])
        assert 90 <= target.get_at((50, 50))[0] <= 110
        assert target.get_at((50, 80))[:3] == (200, 200, 200)

    def test_add_clips_at_surface_edge(self, renderer):
        target = pygame.Surface((40, 40))
        renderer.add(target, [Stroke((-10, 5), (60, 5), 3, (255, 255, 255, 255))])
        assert target.get_at((0, 5))[:3] == (255, 255, 255)
        assert target.get_at((39, 5))[:3] == (255, 255, 255)
        assert target.get_at((20, 30))[:3] == (0, 0, 0)
