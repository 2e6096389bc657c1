"""
Services Package

Exports all services for easy importing.
"""

from geovisits.services.geo import Position, haversine_m
from geovisits.services.clock import now_millis, FixedClock
from geovisits.services.notifier import LogNotifier, WebhookNotifier
from geovisits.services.location import LastKnownLocationProvider, HttpLocationProvider
from geovisits.services.lifecycle import LifecycleCoordinator, RegistrationResult
from geovisits.services.transitions import TransitionHandler
from geovisits.services.reconciler import EditReconciler
from geovisits.services.zones import ZoneService

__all__ = [
    'Position',
    'haversine_m',
    'now_millis',
    'FixedClock',
    'LogNotifier',
    'WebhookNotifier',
    'LastKnownLocationProvider',
    'HttpLocationProvider',
    'LifecycleCoordinator',
    'RegistrationResult',
    'TransitionHandler',
    'EditReconciler',
    'ZoneService',
]
