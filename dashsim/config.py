import os
from dataclasses import dataclass

@dataclass(frozen=True)
class Cfg:
    host_http:  str = os.getenv("DASHSIM_HOST", "127.0.0.1")
    port_http:  int = int(os.getenv("DASHSIM_PORT", "8087"))

    tick_s:     float = float(os.getenv("DASHSIM_TICK_SEC", "1.0"))    # metrics cadence
    fps:        int = int(os.getenv("DASHSIM_FPS", "60"))               # animator frame rate
    history_len: int = int(os.getenv("DASHSIM_HISTORY", "31"))         # sliding window

    particle_count: int = int(os.getenv("DASHSIM_PARTICLES", "100"))
    surface_w:  int = int(os.getenv("DASHSIM_SURFACE_W", "400"))
    surface_h:  int = int(os.getenv("DASHSIM_SURFACE_H", "300"))

    # load model
    jitter:     float = float(os.getenv("DASHSIM_JITTER", "10"))       # sample += U(-j, j)
    mitigation_per_measure: float = float(os.getenv("DASHSIM_MITIGATION", "0.15"))
    block_per_measure:      float = float(os.getenv("DASHSIM_BLOCK", "0.2"))
    capacity_floor: float = 1e-6

    # illustrative traffic constants
    legit_base:   float = float(os.getenv("DASHSIM_LEGIT_BASE", "50"))
    legit_spread: float = float(os.getenv("DASHSIM_LEGIT_SPREAD", "20"))
    legit_ratio:  float = float(os.getenv("DASHSIM_LEGIT_RATIO", "0.3"))  # share of legitimate particles

    warn_load:      float = float(os.getenv("DASHSIM_WARN_LOAD", "70"))
    saturated_load: float = float(os.getenv("DASHSIM_SATURATED_LOAD", "90"))

    def __post_init__(self):
        if self.tick_s <= 0 or self.fps <= 0:
            raise ValueError("tick_s and fps must be positive")
        if self.history_len < 1 or self.particle_count < 0:
            raise ValueError("history_len must be >= 1 and particle_count >= 0")
        if self.surface_w < 1 or self.surface_h < 1:
            raise ValueError("surface must be at least 1x1")
        if not 0.0 <= self.legit_ratio <= 1.0:
            raise ValueError("legit_ratio must lie in [0, 1]")

    @property
    def frame_s(self) -> float:
        return 1.0 / self.fps

CFG = Cfg()
FRAME_S = 0.1  # WebSocket 10Hz push
