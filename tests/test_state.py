import pytest

from dashsim.state import (ConfigSnapshot, ConfigStore, InvalidConfiguration,
                           SecurityMeasures, ServerConfiguration)


def test_defaults():
    snap = ConfigStore().snapshot
    assert snap.server == ServerConfiguration(cpu=4, ram_gb=16, bandwidth_mbps=1000, storage_gb=500)
    assert snap.security.enabled() == ()
    assert snap.attack_intensity == 50


@pytest.mark.parametrize("field,value", [
    ("cpu", 0), ("cpu", 33), ("ram_gb", 129), ("bandwidth_mbps", 0),
    ("storage_gb", 2001), ("cpu", 2.5), ("cpu", True),
])
def test_server_bounds(field, value):
    with pytest.raises(InvalidConfiguration):
        ConfigStore().update_server(**{field: value})


def test_failed_edit_keeps_previous_snapshot():
    store = ConfigStore()
    before = store.snapshot
    with pytest.raises(InvalidConfiguration):
        store.set_attack_intensity(101)
    with pytest.raises(InvalidConfiguration):
        store.update_server(gpu=2)
    assert store.snapshot is before


def test_edits_publish_new_snapshots():
    store = ConfigStore()
    old = store.snapshot
    new = store.update_server(cpu=8)
    assert new is store.snapshot and new is not old
    assert old.server.cpu == 4 and new.server.cpu == 8
    assert new.server.ram_gb == 16


def test_toggle_and_set_security():
    store = ConfigStore()
    store.toggle("waf")
    assert store.snapshot.security.waf is True
    store.toggle("waf")
    assert store.snapshot.security.waf is False
    store.set_security(fail2ban=True, cloudflare=True)
    assert store.snapshot.security.enabled() == ("fail2ban", "cloudflare")
    with pytest.raises(InvalidConfiguration):
        store.toggle("antivirus")
    with pytest.raises(InvalidConfiguration):
        store.set_security(waf="yes")


def test_snapshot_is_frozen():
    snap = ConfigSnapshot()
    with pytest.raises(AttributeError):
        snap.attack_intensity = 10
    assert snap.as_dict()["security"] == SecurityMeasures().as_dict()
