"""
Edit Reconciler

The monitor does not re-evaluate a region that already fired ENTER when its
geometry changes, so a shrink or move can leave a visit open while the
device is outside. A one-shot position check closes it. Widening never opens
a visit.
"""

import logging
import threading
from concurrent.futures import Future, TimeoutError as FutureTimeout

from geovisits.errors import LocationUnavailable
from geovisits.services.geo import haversine_m

logger = logging.getLogger(__name__)


def geometry_tightened(zone, latitude, longitude, radius):
    """True when an edit could invalidate an open visit."""
    moved = (latitude, longitude) != (zone.latitude, zone.longitude)
    return moved or radius < zone.radius


class EditReconciler:

    def __init__(self, transitions, location, timeout=5.0):
        self.transitions = transitions
        self.location = location
        self.timeout = timeout

    def _read_position(self, future):
        try:
            future.set_result(self.location.current_position(self.timeout))
        except Exception as e:
            future.set_exception(e)

    def _current_position(self):
        # One daemon thread per read, so a provider that never returns
        # only ever stalls its own read
        future = Future()
        threading.Thread(target=self._read_position, args=(future,),
                         name='location', daemon=True).start()
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout:
            raise LocationUnavailable(f'No position within {self.timeout}s') from None

    def close_if_outside(self, zone_id, latitude, longitude, radius):
        """Close the zone's open visit if the device is outside the given circle."""
        try:
            position = self._current_position()
        except LocationUnavailable as e:
            logger.info('Skipping outside check for zone %s: %s', zone_id, e)
            return None

        distance = haversine_m(position.latitude, position.longitude, latitude, longitude)
        if distance <= radius:
            logger.debug('Device %.1fm from zone %s center, inside %.1fm', distance, zone_id, radius)
            return None

        logger.info('Device %.1fm from zone %s center, outside %.1fm; closing open visit',
                    distance, zone_id, radius)
        return self.transitions.handle_exit(zone_id, notify=False)

    def reconcile_edit(self, zone, latitude, longitude, radius):
        """Run before persisting new geometry for ``zone``."""
        if not geometry_tightened(zone, latitude, longitude, radius):
            return None
        return self.close_if_outside(zone.id, latitude, longitude, radius)
