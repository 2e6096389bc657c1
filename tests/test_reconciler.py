import time

from geovisits.errors import LocationUnavailable
from geovisits.models import Visit
from geovisits.services.geo import Position, haversine_m, offset_north
from geovisits.services.reconciler import EditReconciler, geometry_tightened

CENTER = (37.77, -122.41)


def _edit(radius, latitude=CENTER[0], longitude=CENTER[1]):
    return {'name': 'Office', 'latitude': latitude, 'longitude': longitude, 'radius': radius}


def test_shrink_with_device_outside_closes_visit(services, make_zone, location, clock):
    zone = make_zone(name='Office', radius=50)
    services.transitions.deliver(zone.id, 'enter')

    location.position = offset_north(CENTER[0], CENTER[1], 20)
    clock.now = 9000
    _, _, closed = services.zone_service.update_zone(zone.id, _edit(15))

    assert closed is not None
    visit = Visit.query.one()
    assert visit.exit_time == 9000
    assert visit.duration == 9000 - 1000


def test_shrink_with_device_inside_leaves_visit_open(services, make_zone, location, clock):
    zone = make_zone(name='Office', radius=50)
    services.transitions.deliver(zone.id, 'enter')

    location.position = offset_north(CENTER[0], CENTER[1], 10)
    clock.now = 9000
    _, _, closed = services.zone_service.update_zone(zone.id, _edit(15))

    assert closed is None
    assert Visit.query.one().is_open


def test_widening_never_checks_position(services, make_zone, location):
    zone = make_zone(name='Office', radius=20)
    services.transitions.deliver(zone.id, 'enter')
    location.position = offset_north(CENTER[0], CENTER[1], 500)

    services.zone_service.update_zone(zone.id, _edit(40))

    assert location.calls == 0
    assert Visit.query.one().is_open


def test_widening_does_not_open_a_visit(services, make_zone, location):
    zone = make_zone(name='Office', radius=20)
    location.position = offset_north(CENTER[0], CENTER[1], 30)
    services.zone_service.update_zone(zone.id, _edit(40))
    assert Visit.query.count() == 0


def test_move_center_closes_visit_when_outside(services, make_zone, location):
    zone = make_zone(name='Office', radius=30)
    services.transitions.deliver(zone.id, 'enter')
    location.position = Position(*CENTER)

    moved = offset_north(CENTER[0], CENTER[1], 200)
    _, _, closed = services.zone_service.update_zone(
        zone.id, _edit(30, moved.latitude, moved.longitude))

    assert closed is not None
    assert not Visit.query.one().is_open


def test_location_unavailable_skips_close(services, make_zone, location):
    zone = make_zone(name='Office', radius=50)
    services.transitions.deliver(zone.id, 'enter')
    location.position = None

    updated, _, closed = services.zone_service.update_zone(zone.id, _edit(15))

    assert closed is None
    assert updated.radius == 15
    assert Visit.query.one().is_open


def test_synthesized_exit_is_silent(services, make_zone, location, notifier):
    zone = make_zone(name='Office', radius=50)
    services.transitions.deliver(zone.id, 'enter')
    location.position = offset_north(CENTER[0], CENTER[1], 40)

    services.zone_service.update_zone(zone.id, _edit(15))
    assert notifier.sent == [('Entered: Office', None)]


def test_close_if_outside_on_request(services, make_zone, location):
    zone = make_zone(name='Office', radius=30)
    services.transitions.deliver(zone.id, 'enter')

    location.position = offset_north(CENTER[0], CENTER[1], 25)
    assert services.zone_service.close_if_outside(zone.id) is None

    location.position = offset_north(CENTER[0], CENTER[1], 35)
    assert services.zone_service.close_if_outside(zone.id) is not None
    assert not Visit.query.one().is_open


def test_slow_location_times_out(services, make_zone):
    class SlowLocation:
        def current_position(self, timeout=None):
            time.sleep(0.5)
            return Position(0.0, 0.0)

    zone = make_zone(name='Office', radius=50)
    services.transitions.deliver(zone.id, 'enter')
    reconciler = EditReconciler(services.transitions, SlowLocation(), timeout=0.05)

    started = time.monotonic()
    assert reconciler.close_if_outside(zone.id, CENTER[0], CENTER[1], 15) is None
    assert time.monotonic() - started < 0.4
    assert Visit.query.one().is_open


def test_overrunning_read_does_not_delay_the_next(services, make_zone, clock):
    class StallsOnce:
        def __init__(self):
            self.calls = 0

        def current_position(self, timeout=None):
            self.calls += 1
            if self.calls == 1:
                time.sleep(0.5)
            return offset_north(CENTER[0], CENTER[1], 100)

    zone = make_zone(name='Office', radius=50)
    services.transitions.deliver(zone.id, 'enter')
    reconciler = EditReconciler(services.transitions, StallsOnce(), timeout=0.1)

    assert reconciler.close_if_outside(zone.id, CENTER[0], CENTER[1], 15) is None
    assert Visit.query.one().is_open

    clock.now = 9000
    closed = reconciler.close_if_outside(zone.id, CENTER[0], CENTER[1], 15)
    assert closed is not None
    assert closed.exit_time == 9000


def test_provider_errors_surface_as_unavailable(services, make_zone):
    class BrokenLocation:
        def current_position(self, timeout=None):
            raise LocationUnavailable('gps off')

    zone = make_zone(name='Office', radius=50)
    reconciler = EditReconciler(services.transitions, BrokenLocation(), timeout=1)
    assert reconciler.close_if_outside(zone.id, CENTER[0], CENTER[1], 15) is None


def test_geometry_tightened(make_zone):
    zone = make_zone(radius=30)
    assert not geometry_tightened(zone, CENTER[0], CENTER[1], 30)
    assert not geometry_tightened(zone, CENTER[0], CENTER[1], 45)
    assert geometry_tightened(zone, CENTER[0], CENTER[1], 20)
    assert geometry_tightened(zone, 37.771, CENTER[1], 45)


def test_offset_north_distance():
    point = offset_north(CENTER[0], CENTER[1], 20)
    assert abs(haversine_m(CENTER[0], CENTER[1], point.latitude, point.longitude) - 20) < 0.01
