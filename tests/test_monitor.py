import pytest

from geovisits.errors import PermissionDenied, PlatformError
from geovisits.monitor import SimulatedRegionMonitor, TransitionKind
from geovisits.services.geo import offset_north


@pytest.fixture()
def events():
    return []


@pytest.fixture()
def sim(events):
    monitor = SimulatedRegionMonitor(max_regions=2)
    monitor.add_listener(lambda zone_id, kind: events.append((zone_id, kind)))
    return monitor


def test_register_requires_permission(sim):
    sim.background_permission = False
    with pytest.raises(PermissionDenied):
        sim.register(1, 0.0, 0.0, 20)


def test_register_enforces_quota_but_allows_replace(sim):
    sim.register(1, 0.0, 0.0, 20)
    sim.register(2, 1.0, 1.0, 20)
    sim.register(1, 0.0, 0.0, 40)
    with pytest.raises(PlatformError):
        sim.register(3, 2.0, 2.0, 20)
    assert sim.registered_ids() == [1, 2]
    assert sim.region(1).radius == 40


def test_position_reports_emit_crossings_once(sim, events):
    sim.register(1, 10.0, 10.0, 30)
    inside = offset_north(10.0, 10.0, 5)
    outside = offset_north(10.0, 10.0, 60)

    sim.report_position(*inside)
    sim.report_position(*inside)
    sim.report_position(*outside)
    sim.report_position(*outside)

    assert events == [(1, TransitionKind.ENTER), (1, TransitionKind.EXIT)]


def test_initial_trigger_on_register(sim, events):
    sim.report_position(10.0, 10.0)
    sim.register(1, 10.0, 10.0, 30)
    sim.register(2, 20.0, 20.0, 30)
    assert events == [(1, TransitionKind.ENTER)]


def test_unregister_and_forget(sim, events):
    sim.unregister(99)
    sim.register(1, 10.0, 10.0, 30)
    sim.unregister(1)
    sim.report_position(10.0, 10.0)
    assert events == []

    sim.register(2, 10.0, 10.0, 30)
    sim.forget_all()
    assert sim.registered_ids() == []


def test_transition_kind_parse():
    assert TransitionKind.parse('Enter') is TransitionKind.ENTER
    assert TransitionKind.parse(TransitionKind.EXIT) is TransitionKind.EXIT
    assert TransitionKind.EXIT.label == 'Exited'
    with pytest.raises(ValueError):
        TransitionKind.parse('dwell')
