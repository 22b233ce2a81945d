import pytest

from dashsim.analysis import (active_measures, capacity_percent, load_status,
                              system_report)
from dashsim.metrics import DerivedState
from dashsim.state import ConfigSnapshot, SecurityMeasures, ServerConfiguration


@pytest.mark.parametrize("load,status", [
    (0, "stable"), (70, "stable"), (70.1, "elevated"), (90, "elevated"), (90.5, "saturated"),
])
def test_load_status(load, status):
    assert load_status(load) == status


def test_capacity_percent_is_capped():
    assert capacity_percent(ServerConfiguration()) == pytest.approx(82 / 3)
    assert capacity_percent(ServerConfiguration(cpu=32, ram_gb=128)) == 100


def test_active_measures_in_fixed_order():
    names = [n for n, _ in active_measures(SecurityMeasures(waf=True, fail2ban=True))]
    assert names == ["fail2ban", "waf"]


def test_system_report():
    snap = ConfigSnapshot(security=SecurityMeasures(cloudflare=True))
    r = system_report(snap, DerivedState(server_load_percent=95))
    assert r["status"] == "saturated"
    assert r["protection_level"] == 1
    assert r["protection_score"] == pytest.approx(20)
    assert r["measures"][0]["name"] == "cloudflare"
