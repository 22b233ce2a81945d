from .config import CFG, Cfg
from .simulation import Simulation, SimState
from .state import ConfigSnapshot, ConfigStore, InvalidConfiguration

__version__ = "0.1.0"
