"""Idle/Running lifecycle tying the metrics loop and the animator together.

start() and stop() are idempotent. stop() cancels the periodic tasks without
awaiting them and throws away all per-run state (history, derived values,
particle pool), so nothing recurring survives a stop.
"""
import asyncio, logging, random
from enum import Enum
from typing import Optional

from .analysis import load_status
from .config import CFG, Cfg
from .metrics import MetricsEngine
from .particles import Animator
from .scoring import protection_level, protection_score
from .state import ConfigStore
from .surface import Surface

log = logging.getLogger("dashsim.simulation")


class SimState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class Simulation:
    def __init__(self, store: Optional[ConfigStore] = None, surface: Optional[Surface] = None,
                 cfg: Cfg = CFG, rng: Optional[random.Random] = None):
        self.cfg = cfg
        self.store = store if store is not None else ConfigStore()
        self.surface = surface
        rng = rng or random.Random()
        self.engine = MetricsEngine(cfg, rng)
        self.animator = Animator(surface, cfg, rng)
        self.state = SimState.IDLE
        self._t_metrics: Optional[asyncio.Task] = None
        self._t_anim: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self.state is SimState.RUNNING

    def start(self):
        if self.state is SimState.RUNNING:
            return
        self._enter_running()
        self.state = SimState.RUNNING
        log.info("[SIM] started")

    def stop(self):
        if self.state is SimState.IDLE:
            return
        self._exit_running()
        self.state = SimState.IDLE
        log.info("[SIM] stopped")

    def _enter_running(self):
        self.engine.reset()
        self.animator.allocate(self.store.snapshot)
        self._t_metrics = asyncio.create_task(self.engine.run(self.store))
        if self.surface is not None and self.surface.available:
            self._t_anim = asyncio.create_task(self.animator.run(self.store))
        else:
            log.warning("[ANIM] no drawing surface, animator not started")

    def _exit_running(self):
        for name in ("_t_metrics", "_t_anim"):
            t = getattr(self, name)
            if t:
                t.cancel()
            setattr(self, name, None)
        self.engine.reset()
        self.animator.discard()

    def active_tasks(self) -> int:
        return sum(1 for t in (self._t_metrics, self._t_anim) if t is not None and not t.done())

    def frame(self) -> dict:
        snap = self.store.snapshot
        d = self.engine.derived
        return {
            "state": self.state.value,
            "config": snap.as_dict(),
            "protection_level": protection_level(snap.security),
            "protection_score": protection_score(snap.security),
            "history": self.engine.history.values(),
            "server_load_percent": d.server_load_percent,
            "legitimate_traffic_percent": d.legitimate_traffic_percent,
            "malicious_traffic_percent": d.malicious_traffic_percent,
            "status": load_status(d.server_load_percent, self.cfg),
        }
