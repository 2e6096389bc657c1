import pytest

from geovisits import create_app
from geovisits.config import TestConfig
from geovisits.container import get_services
from geovisits.errors import LocationUnavailable
from geovisits.extensions import db
from geovisits.monitor import SimulatedRegionMonitor
from geovisits.services.clock import FixedClock

HOME = {'name': 'Home', 'latitude': 37.77, 'longitude': -122.41, 'radius': 30}


class RecordingNotifier:
    def __init__(self):
        self.sent = []
        self.fail = False

    def notify(self, zone_name, event_kind, message=None):
        if self.fail:
            raise RuntimeError('notification permission missing')
        self.sent.append((f'{event_kind.label}: {zone_name}', message))


class StubLocation:
    """Location sink whose answer the test controls."""

    def __init__(self):
        self.position = None
        self.calls = 0

    def current_position(self, timeout=None):
        self.calls += 1
        if self.position is None:
            raise LocationUnavailable('no fix')
        return self.position


@pytest.fixture()
def clock():
    return FixedClock(1000)


@pytest.fixture()
def monitor():
    return SimulatedRegionMonitor()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def location():
    return StubLocation()


@pytest.fixture()
def app(monitor, location, notifier, clock):
    app = create_app(TestConfig, monitor=monitor, location=location,
                     notifier=notifier, clock=clock)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def services(app):
    return get_services(app)


@pytest.fixture()
def make_zone(services):
    def _make(**overrides):
        data = dict(HOME, **overrides)
        zone, _ = services.zone_service.create_zone(data)
        return zone
    return _make
