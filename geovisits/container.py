"""
Composition root

Builds the Zone Store, Visit Ledger and region monitor once per application
and hands each service only the collaborators it uses. Services are reached
through ``get_services()`` rather than module-level singletons.
"""

import logging

from flask import current_app, has_app_context

from geovisits.monitor import SimulatedRegionMonitor
from geovisits.services import (
    EditReconciler,
    HttpLocationProvider,
    LastKnownLocationProvider,
    LifecycleCoordinator,
    LogNotifier,
    TransitionHandler,
    WebhookNotifier,
    ZoneService,
    now_millis,
)
from geovisits.store import VisitLedger, ZoneStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'geovisits'


class Services:
    """Everything the blueprints and CLI commands need, wired together."""

    def __init__(self, zones, ledger, monitor, location, notifier, clock):
        self.zones = zones
        self.ledger = ledger
        self.monitor = monitor
        self.location = location
        self.notifier = notifier
        self.clock = clock
        self.coordinator = None
        self.transitions = None
        self.reconciler = None
        self.zone_service = None


def _default_location(config, monitor):
    if config.get('LOCATION_PROVIDER') == 'http' and config.get('LOCATION_URL'):
        return HttpLocationProvider(config['LOCATION_URL'], timeout=config['LOCATION_TIMEOUT'])
    return LastKnownLocationProvider(monitor)


def _default_notifier(config):
    if config.get('NOTIFY_WEBHOOK_URL'):
        return WebhookNotifier(config['NOTIFY_WEBHOOK_URL'], timeout=config['NOTIFY_TIMEOUT'])
    return LogNotifier()


def _transition_listener(app, transitions):
    """Adapt monitor callbacks, which may arrive on any thread, to the handler."""
    def listener(zone_id, kind):
        try:
            if has_app_context():
                transitions.deliver(zone_id, kind)
            else:
                with app.app_context():
                    transitions.deliver(zone_id, kind)
        except Exception:
            logger.exception('Handling %s for zone %s failed', kind.value, zone_id)
    return listener


def build_services(app, monitor=None, location=None, notifier=None, clock=None):
    config = app.config
    if monitor is None:
        monitor = SimulatedRegionMonitor(
            background_permission=config['MONITOR_BACKGROUND_PERMISSION'],
            max_regions=config['MONITOR_MAX_REGIONS'],
        )
    if location is None:
        location = _default_location(config, monitor)
    if notifier is None:
        notifier = _default_notifier(config)
    if clock is None:
        clock = now_millis

    services = Services(ZoneStore(), VisitLedger(), monitor, location, notifier, clock)
    services.coordinator = LifecycleCoordinator(monitor, services.zones)
    services.transitions = TransitionHandler(services.zones, services.ledger, notifier, clock=clock)
    services.reconciler = EditReconciler(services.transitions, location,
                                         timeout=config['LOCATION_TIMEOUT'])
    services.zone_service = ZoneService(
        services.zones,
        services.coordinator,
        services.reconciler,
        clock=clock,
        radius_min=config['ZONE_RADIUS_MIN'],
        radius_max=config['ZONE_RADIUS_MAX'],
        default_icon=config['DEFAULT_ZONE_ICON'],
    )
    monitor.add_listener(_transition_listener(app, services.transitions))

    app.extensions[EXTENSION_KEY] = services
    return services


def get_services(app=None):
    return (app or current_app).extensions[EXTENSION_KEY]
