import asyncio, random, logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import List, Optional

from .config import CFG, Cfg
from .metrics import _now_mono
from .state import ConfigSnapshot, ConfigStore
from .scoring import protection_level
from .surface import Surface, hex_rgb

log = logging.getLogger("dashsim.particles")


class Kind(str, Enum):
    ATTACK = "attack"
    LEGITIMATE = "legitimate"


class Color(str, Enum):
    LEGITIMATE = "legitimate"
    BLOCKED_HEAVY = "blocked-heavy"
    BLOCKED_MEDIUM = "blocked-medium"
    UNBLOCKED = "unblocked"

COLOR_HEX = {
    Color.LEGITIMATE:     "#22c55e",
    Color.BLOCKED_HEAVY:  "#ef4444",
    Color.BLOCKED_MEDIUM: "#eab308",
    Color.UNBLOCKED:      "#ef4444",
}
COLOR_RGB = {c: hex_rgb(h) for c, h in COLOR_HEX.items()}

HEAVY_LEVEL, MEDIUM_LEVEL = 4, 2
HEAVY_SLOWDOWN, MEDIUM_SLOWDOWN = 0.3, 0.6
SPEED_MIN, SPEED_MAX = 2.0, 5.0
DELIVERY_X = 0.8   # legitimate particles past 80% of the width get a delivery line


@dataclass
class Particle:
    x: float = 0.0
    y: float = 0.0
    speed: float = 0.0
    color: Color = Color.UNBLOCKED
    kind: Kind = Kind.ATTACK
    base_speed: float = 0.0   # draw before any mitigation multiplier

    @property
    def radius(self) -> int:
        return 3 if self.kind is Kind.LEGITIMATE else 2

    def as_dict(self) -> dict:
        d = asdict(self)
        d["color"] = self.color.value
        d["hex"] = COLOR_HEX[self.color]
        d["kind"] = self.kind.value
        return d


class Animator:
    """Fixed pool of traffic particles redrawn every frame.

    Colour and speed are assigned at reset time from the snapshot read then;
    a particle keeps them for its whole traversal.
    """

    def __init__(self, surface: Optional[Surface], cfg: Cfg = CFG,
                 rng: Optional[random.Random] = None):
        self.surface = surface
        self.cfg = cfg
        self.rng = rng or random.Random()
        self.width = surface.width if surface is not None else cfg.surface_w
        self.height = surface.height if surface is not None else cfg.surface_h
        self.pool: List[Particle] = []
        self.frames = 0

    def allocate(self, snap: ConfigSnapshot):
        self.pool = []
        for _ in range(self.cfg.particle_count):
            p = Particle()
            self.reset_particle(p, snap)
            self.pool.append(p)

    def discard(self):
        self.pool = []
        self.frames = 0

    def reset_particle(self, p: Particle, snap: ConfigSnapshot,
                       force_kind: Optional[Kind] = None):
        rng = self.rng
        p.x = 0.0
        p.y = rng.uniform(0, self.height)
        p.base_speed = p.speed = rng.uniform(SPEED_MIN, SPEED_MAX)
        if force_kind is not None:
            p.kind = force_kind
        else:
            p.kind = Kind.LEGITIMATE if rng.random() > 1.0 - self.cfg.legit_ratio else Kind.ATTACK

        level = protection_level(snap.security)
        if p.kind is Kind.LEGITIMATE:
            p.color = Color.LEGITIMATE
        elif level >= HEAVY_LEVEL:
            p.color = Color.BLOCKED_HEAVY
            p.speed *= HEAVY_SLOWDOWN
        elif level >= MEDIUM_LEVEL:
            p.color = Color.BLOCKED_MEDIUM
            p.speed *= MEDIUM_SLOWDOWN
        else:
            p.color = Color.UNBLOCKED

    def step(self, snap: ConfigSnapshot):
        """One frame: fade, delivery lines, draw + advance, reset on exit."""
        s = self.surface
        draw = s is not None and s.available
        w = self.width

        if draw:
            s.fade()
            dest_x, dest_y = w, self.height / 2
            for p in self.pool:
                if p.kind is Kind.LEGITIMATE and p.x > w * DELIVERY_X:
                    s.line(p.x, p.y, dest_x, dest_y)

        for p in self.pool:
            if draw:
                s.circle(p.x, p.y, p.radius, COLOR_RGB[p.color])
            p.x += p.speed
            if p.x > w:
                self.reset_particle(p, snap)
        self.frames += 1

    def snapshot(self) -> List[dict]:
        return [p.as_dict() for p in self.pool]

    async def run(self, store: ConfigStore):
        frame_s = self.cfg.frame_s
        next_t = _now_mono()
        log.info("[ANIM] running, %d particles @ %d fps", len(self.pool), self.cfg.fps)

        while True:
            now = _now_mono()
            if now < next_t:
                await asyncio.sleep(next_t - now)
                continue
            self.step(store.snapshot)
            next_t += frame_s
            if next_t <= _now_mono():
                next_t = _now_mono() + frame_s
