"""User-editable configuration, published as immutable snapshots.

The metrics loop and the animator only ever read ``ConfigStore.snapshot``;
every edit builds a new ``ConfigSnapshot`` and swaps the reference, so a
reader sees either the old or the new configuration as a whole.
"""
from dataclasses import dataclass, field, fields, replace
from typing import Dict, Tuple

MEASURES: Tuple[str, ...] = ("fail2ban", "pfsense", "cloudflare", "load_balancer", "waf")

# (min, max) per slider
SERVER_BOUNDS: Dict[str, Tuple[int, int]] = {
    "cpu":            (1, 32),
    "ram_gb":         (1, 128),
    "bandwidth_mbps": (1, 10000),
    "storage_gb":     (1, 2000),
}
ATTACK_BOUNDS = (0, 100)


class InvalidConfiguration(ValueError):
    """User input outside of the declared slider/flag domains."""


def _check_int(name: str, value, lo: int, hi: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if not lo <= value <= hi:
        raise InvalidConfiguration(f"{name}={value} outside [{lo}, {hi}]")
    return value


@dataclass(frozen=True)
class ServerConfiguration:
    cpu: int = 4
    ram_gb: int = 16
    bandwidth_mbps: int = 1000
    storage_gb: int = 500

    def __post_init__(self):
        for name, (lo, hi) in SERVER_BOUNDS.items():
            _check_int(name, getattr(self, name), lo, hi)


@dataclass(frozen=True)
class SecurityMeasures:
    fail2ban: bool = False
    pfsense: bool = False
    cloudflare: bool = False
    load_balancer: bool = False
    waf: bool = False

    def __post_init__(self):
        for name in MEASURES:
            if not isinstance(getattr(self, name), bool):
                raise InvalidConfiguration(f"{name} must be a boolean")

    def enabled(self) -> Tuple[str, ...]:
        return tuple(n for n in MEASURES if getattr(self, n))

    def as_dict(self) -> Dict[str, bool]:
        return {n: getattr(self, n) for n in MEASURES}


@dataclass(frozen=True)
class ConfigSnapshot:
    server: ServerConfiguration = field(default_factory=ServerConfiguration)
    security: SecurityMeasures = field(default_factory=SecurityMeasures)
    attack_intensity: int = 50

    def __post_init__(self):
        _check_int("attack_intensity", self.attack_intensity, *ATTACK_BOUNDS)

    def as_dict(self) -> dict:
        return {
            "server": {f.name: getattr(self.server, f.name) for f in fields(self.server)},
            "security": self.security.as_dict(),
            "attack_intensity": self.attack_intensity,
        }


class ConfigStore:
    """Single writer (user actions), many readers (periodic activities)."""

    def __init__(self, initial: ConfigSnapshot = None):
        self._snap = initial if initial is not None else ConfigSnapshot()

    @property
    def snapshot(self) -> ConfigSnapshot:
        return self._snap

    def _publish(self, snap: ConfigSnapshot) -> ConfigSnapshot:
        self._snap = snap
        return snap

    def update_server(self, **values) -> ConfigSnapshot:
        unknown = set(values) - set(SERVER_BOUNDS)
        if unknown:
            raise InvalidConfiguration(f"unknown server field(s): {sorted(unknown)}")
        server = replace(self._snap.server, **values)
        return self._publish(replace(self._snap, server=server))

    def set_security(self, **flags) -> ConfigSnapshot:
        unknown = set(flags) - set(MEASURES)
        if unknown:
            raise InvalidConfiguration(f"unknown measure(s): {sorted(unknown)}")
        security = replace(self._snap.security, **flags)
        return self._publish(replace(self._snap, security=security))

    def toggle(self, measure: str) -> ConfigSnapshot:
        if measure not in MEASURES:
            raise InvalidConfiguration(f"unknown measure: {measure}")
        current = getattr(self._snap.security, measure)
        return self.set_security(**{measure: not current})

    def set_attack_intensity(self, value: int) -> ConfigSnapshot:
        return self._publish(replace(self._snap, attack_intensity=value))
