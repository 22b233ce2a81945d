import itertools

import pytest

from dashsim.scoring import protection_level, protection_score
from dashsim.state import MEASURES, SecurityMeasures


@pytest.mark.parametrize("flags", list(itertools.product([False, True], repeat=5)))
def test_score_matches_level(flags):
    sec = SecurityMeasures(**dict(zip(MEASURES, flags)))
    level = protection_level(sec)
    assert 0 <= level <= 5
    assert level == sum(flags)
    assert protection_score(sec) == pytest.approx(level / 5 * 100)


def test_extremes():
    assert protection_score(SecurityMeasures()) == 0
    assert protection_score(SecurityMeasures(**{m: True for m in MEASURES})) == pytest.approx(100)
