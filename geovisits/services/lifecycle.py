"""
Lifecycle Coordinator

Keeps the region monitor's registrations in step with the Zone Store. None
of these calls are transactional with storage; a crash between a store write
and a monitor call leaves the monitor stale until the next reregister_all().
"""

import logging
from collections import namedtuple

from geovisits.errors import GeofenceError, PermissionDenied, PlatformError

logger = logging.getLogger(__name__)

RegistrationResult = namedtuple('RegistrationResult', ['zone_id', 'monitored', 'error'])


class LifecycleCoordinator:

    def __init__(self, monitor, zones):
        self.monitor = monitor
        self.zones = zones

    def register_zone(self, zone):
        """Register the zone's current geometry.

        Permission and platform failures leave the zone persisted but
        unmonitored; the result says so instead of raising.
        """
        zone_id, lat, lng, radius = zone.id, zone.latitude, zone.longitude, zone.radius
        try:
            self.monitor.register(zone_id, lat, lng, radius)
        except PermissionDenied as e:
            logger.warning('Zone %s saved but not monitored: %s', zone_id, e)
            return RegistrationResult(zone_id, False, f'permission_denied: {e}')
        except PlatformError as e:
            logger.warning('Monitor rejected zone %s: %s', zone_id, e)
            return RegistrationResult(zone_id, False, f'platform_error: {e}')
        logger.debug('Zone %s registered', zone_id)
        return RegistrationResult(zone_id, True, None)

    def unregister_zone(self, zone_id):
        try:
            self.monitor.unregister(zone_id)
        except GeofenceError as e:
            # already gone
            logger.debug('Unregister of zone %s ignored: %s', zone_id, e)

    def refresh_zone(self, zone):
        """Swap a zone's registration for its current geometry."""
        self.unregister_zone(zone.id)
        return self.register_zone(zone)

    def reregister_all(self):
        """Register every persisted zone; safe to repeat.

        Runs at process start and on a boot signal. One zone failing does
        not stop the rest.
        """
        results = []
        for zone in self.zones.all():
            try:
                results.append(self.register_zone(zone))
            except Exception as e:
                logger.exception('Re-registering zone %s failed', zone.id)
                results.append(RegistrationResult(zone.id, False, str(e)))
        failed = [r.zone_id for r in results if not r.monitored]
        logger.info('Re-registered %d zone(s), %d failed %s',
                    len(results) - len(failed), len(failed), failed if failed else '')
        return results

    def status(self):
        persisted = sorted(zone.id for zone in self.zones.all())
        active = list(self.monitor.registered_ids())
        return {
            'persisted': persisted,
            'registered': active,
            'unmonitored': [zid for zid in persisted if zid not in active],
            'orphaned': [zid for zid in active if zid not in persisted],
        }
