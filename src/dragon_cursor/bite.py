"""Linger detection and the lunge/snap/recover bite state machine."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass

from dragon_cursor.body import Body, clamp
from dragon_cursor.config import BiteConfig
from dragon_cursor.steering import bearing, face_pointer, stalk, wobble

logger = logging.getLogger(__name__)


class BitePhase(enum.Enum):
    """Bite phases, visited strictly in declaration order."""

    IDLE = "idle"
    LUNGE = "lunge"
    SNAP = "snap"
    RECOVER = "recover"


@dataclass
class BiteSession:
    """Transient state of the current bite, if any."""

    active: bool = False
    phase: BitePhase = BitePhase.IDLE
    elapsed: float = 0.0

    def enter(self, phase: BitePhase) -> None:
        self.phase = phase
        self.elapsed = 0.0
        self.active = phase is not BitePhase.IDLE


class BiteController:
    """Turns pointer dwell near the head into a scripted strike.

    ``linger`` is ``None`` while the pointer is not lingering. All times are
    on the simulation clock, so the controller can be driven without a
    display or wall clock.
    """

    def __init__(self, config: BiteConfig | None = None) -> None:
        self.config = config or BiteConfig()
        self.session = BiteSession()
        self.linger: float | None = None
        self.last_bite_time = -math.inf
        self.bites = 0

    @property
    def active(self) -> bool:
        return self.session.active

    @property
    def phase(self) -> BitePhase:
        return self.session.phase

    def cooled_down(self, clock: float) -> bool:
        return clock - self.last_bite_time > self.config.cooldown

    def update_linger(
        self,
        head: tuple[float, float],
        pointer: tuple[float, float],
        pointer_speed: float,
        dt: float,
        clock: float,
    ) -> bool:
        """Accumulate linger time and start a bite once it is long enough.

        Returns True if a new session started on this call.
        """
        cfg = self.config
        dist = math.hypot(pointer[0] - head[0], pointer[1] - head[1])
        giving_chance = (
            dist < cfg.distance
            and pointer_speed < cfg.linger_speed
            and not self.session.active
            and self.cooled_down(clock)
        )
        if not giving_chance:
            self.linger = None
            return False

        self.linger = (self.linger or 0.0) + dt
        if self.linger > cfg.hold_time * cfg.hold_fraction:
            self.start(clock)
            return True
        return False

    def start(self, clock: float) -> None:
        self.session.enter(BitePhase.LUNGE)
        self.last_bite_time = clock
        self.bites += 1
        logger.info("Bite %d started at t=%.2fs.", self.bites, clock)

    def steer(
        self,
        body: Body,
        pointer: tuple[float, float],
        clock: float,
        dt: float,
    ) -> bool:
        """Apply the active phase's head override for one tick.

        Returns True on the tick the lunge lands (lunge -> snap), which is
        when the eat burst should be spawned.
        """
        session = self.session
        if not session.active:
            return False

        cfg = self.config
        body_cfg = body.config
        wob = wobble(clock, body_cfg.wobble_amp, body_cfg.wobble_speed)
        head = body.head
        session.elapsed += dt

        if session.phase is BitePhase.LUNGE:
            progress = 1.0
            if cfg.lunge_duration > 0:
                progress = clamp(session.elapsed / cfg.lunge_duration, 0.0, 1.0)
            ang = bearing(head.x, head.y, pointer[0], pointer[1])
            reach = body_cfg.trail_offset * cfg.lunge_reach
            tx = pointer[0] - math.cos(ang) * reach
            ty = pointer[1] - math.sin(ang) * reach
            body.ease_head_toward(
                tx, ty, clamp(0.28 + progress * 0.6, 0.28, 0.95),
            )
            face_pointer(body, pointer, wob * 2)
            if session.elapsed > cfg.lunge_duration:
                session.enter(BitePhase.SNAP)
                return True

        elif session.phase is BitePhase.SNAP:
            jolt = math.sin(clock * 200) * 4
            head.x += math.cos(head.angle) * jolt
            head.y += math.sin(head.angle) * jolt
            head.angle += math.sin(clock * 400) * 0.06
            if session.elapsed > cfg.snap_duration:
                session.enter(BitePhase.RECOVER)

        elif session.phase is BitePhase.RECOVER:
            stalk(body, pointer, clock, ease=cfg.recover_ease)
            if session.elapsed > cfg.recover_duration:
                session.enter(BitePhase.IDLE)
                self.linger = None
                logger.info("Bite %d finished at t=%.2fs.", self.bites, clock)

        return False

    def to_dict(self) -> dict:
        return {
            "active": self.session.active,
            "phase": self.session.phase.value,
            "elapsed": self.session.elapsed,
            "linger": self.linger,
            "last_bite_time": self.last_bite_time,
            "bites": self.bites,
        }
