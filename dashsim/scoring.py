from .state import MEASURES, SecurityMeasures

MAX_LEVEL = len(MEASURES)

def protection_level(security: SecurityMeasures) -> int:
    return len(security.enabled())

def protection_score(security: SecurityMeasures) -> float:
    """Percentage of enabled measures, 0..100."""
    return protection_level(security) / MAX_LEVEL * 100.0
