from typing import List, Tuple

from .config import CFG, Cfg
from .metrics import DerivedState, server_capacity
from .scoring import protection_level, protection_score
from .state import ConfigSnapshot, SecurityMeasures, ServerConfiguration

DESCRIPTIONS = {
    "fail2ban":      "Fail2ban: blocks malicious access attempts",
    "pfsense":       "pfSense: traffic filtering and intrusion detection",
    "cloudflare":    "Cloudflare: DDoS protection and CDN",
    "load_balancer": "Load Balancer: load distribution and high availability",
    "waf":           "WAF: protection against web attacks",
}

STABLE, ELEVATED, SATURATED = "stable", "elevated", "saturated"

def load_status(load_percent: float, cfg: Cfg = CFG) -> str:
    if load_percent > cfg.saturated_load:
        return SATURATED
    if load_percent > cfg.warn_load:
        return ELEVATED
    return STABLE

def capacity_percent(server: ServerConfiguration) -> float:
    return min(100.0, server_capacity(server))

def active_measures(security: SecurityMeasures) -> List[Tuple[str, str]]:
    return [(name, DESCRIPTIONS[name]) for name in security.enabled()]

def system_report(snap: ConfigSnapshot, derived: DerivedState, cfg: Cfg = CFG) -> dict:
    return {
        "measures": [{"name": n, "description": d} for n, d in active_measures(snap.security)],
        "capacity_percent": capacity_percent(snap.server),
        "protection_level": protection_level(snap.security),
        "protection_score": protection_score(snap.security),
        "server_load_percent": derived.server_load_percent,
        "status": load_status(derived.server_load_percent, cfg),
    }
