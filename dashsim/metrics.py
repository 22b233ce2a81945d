import asyncio, time, random, logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from .config import CFG, Cfg
from .state import ConfigSnapshot, ConfigStore, ServerConfiguration
from .scoring import protection_level

log = logging.getLogger("dashsim.metrics")

def _now_mono(): return time.monotonic()
def _now_wall(): return time.time()

def clamp(v: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return lo if v < lo else hi if v > hi else v


@dataclass(frozen=True)
class MetricPoint:
    timestamp: float   # wall clock, seconds
    value: float


class MetricHistory:
    """Most recent N samples, oldest dropped on overflow."""
    def __init__(self, maxlen: int):
        self._dq: Deque[MetricPoint] = deque(maxlen=maxlen)
        self.maxlen = maxlen
    def append(self, p: MetricPoint):
        self._dq.append(p)
    def clear(self):
        self._dq.clear()
    def values(self) -> List[float]:
        return [p.value for p in self._dq]
    def points(self) -> List[MetricPoint]:
        return list(self._dq)
    def __len__(self):
        return len(self._dq)
    def __iter__(self):
        return iter(self._dq)


@dataclass(frozen=True)
class DerivedState:
    server_load_percent: float = 0.0
    legitimate_traffic_percent: float = 0.0
    malicious_traffic_percent: float = 0.0

ZERO = DerivedState()


def base_load(attack_intensity: int, level: int, cfg: Cfg = CFG) -> float:
    # multiplicative mitigation: each measure removes 15% of the attack's own magnitude
    return attack_intensity * (1 - level * cfg.mitigation_per_measure)

def server_capacity(server: ServerConfiguration) -> float:
    return (server.cpu * 10 + server.ram_gb * 2 + server.bandwidth_mbps / 100) / 3

def server_load(sample: float, capacity: float, cfg: Cfg = CFG) -> float:
    return clamp(sample / max(capacity, cfg.capacity_floor) * 100)

def malicious_traffic(attack_intensity: int, level: int, cfg: Cfg = CFG) -> float:
    total = attack_intensity * 2
    blocked = total * (level * cfg.block_per_measure)
    return clamp(total - blocked)


class MetricsEngine:
    """Computes one load sample per tick and derives load/traffic split."""

    def __init__(self, cfg: Cfg = CFG, rng: Optional[random.Random] = None):
        self.cfg = cfg
        self.rng = rng or random.Random()
        self.history = MetricHistory(cfg.history_len)
        self.derived: DerivedState = ZERO
        self.ticks = 0

    def reset(self):
        self.history.clear()
        self.derived = ZERO
        self.ticks = 0

    def tick(self, snap: ConfigSnapshot, ts_wall: Optional[float] = None) -> MetricPoint:
        cfg = self.cfg
        level = protection_level(snap.security)

        base = base_load(snap.attack_intensity, level, cfg)
        # jitter resampled every tick, no smoothing
        sample = clamp(base + self.rng.uniform(-cfg.jitter, cfg.jitter))
        point = MetricPoint(ts_wall if ts_wall is not None else _now_wall(), sample)
        self.history.append(point)

        cap = server_capacity(snap.server)
        legit = clamp(cfg.legit_base + self.rng.uniform(0, cfg.legit_spread))
        self.derived = DerivedState(
            server_load_percent=server_load(sample, cap, cfg),
            legitimate_traffic_percent=legit,
            malicious_traffic_percent=malicious_traffic(snap.attack_intensity, level, cfg),
        )
        self.ticks += 1
        return point

    async def run(self, store: ConfigStore):
        tick_s = self.cfg.tick_s
        next_t = _now_mono() + tick_s
        log.info("[METRICS] running, tick=%.3fs", tick_s)

        while True:
            now = _now_mono()
            if now < next_t:
                await asyncio.sleep(next_t - now)
                continue

            self.tick(store.snapshot)

            # late timer: skip missed ticks, never catch up
            next_t += tick_s
            if next_t <= _now_mono():
                next_t = _now_mono() + tick_s
