"""
Simulated Region Monitor

Stands in for the platform geofencing client: keeps registrations in
memory, enforces the permission flag and region quota, and turns position
reports into ENTER/EXIT transitions.
"""

import logging
import threading

from geovisits.errors import PermissionDenied, PlatformError
from geovisits.monitor.base import Region, RegionMonitor, TransitionKind
from geovisits.services.geo import Position, is_inside

logger = logging.getLogger(__name__)


class SimulatedRegionMonitor(RegionMonitor):

    def __init__(self, background_permission=True, max_regions=100):
        super().__init__()
        self.background_permission = background_permission
        self.max_regions = max_regions
        self.last_position = None
        self._regions = {}
        self._inside = set()
        self._lock = threading.Lock()

    def register(self, zone_id, latitude, longitude, radius):
        if not self.background_permission:
            raise PermissionDenied('Location permissions not granted')
        with self._lock:
            if zone_id not in self._regions and len(self._regions) >= self.max_regions:
                raise PlatformError(f'Too many regions registered (max {self.max_regions})')
            # Re-adding an id replaces the previous geometry
            self._regions[zone_id] = Region(zone_id, latitude, longitude, radius)
            self._inside.discard(zone_id)
            position = self.last_position
        logger.debug('Region registered: id=%s lat=%s lng=%s radius=%s',
                     zone_id, latitude, longitude, radius)
        # Initial trigger: already inside at registration time
        if position is not None and is_inside(position, latitude, longitude, radius):
            with self._lock:
                self._inside.add(zone_id)
            self.emit(zone_id, TransitionKind.ENTER)

    def unregister(self, zone_id):
        with self._lock:
            self._regions.pop(zone_id, None)
            self._inside.discard(zone_id)

    def registered_ids(self):
        with self._lock:
            return sorted(self._regions)

    def region(self, zone_id):
        with self._lock:
            return self._regions.get(zone_id)

    def forget_all(self):
        """Drop every registration, as the OS does across a reboot."""
        with self._lock:
            self._regions.clear()
            self._inside.clear()
        logger.info('All region registrations dropped')

    def report_position(self, latitude, longitude):
        """Evaluate every region against a new fix and emit crossings."""
        position = Position(latitude, longitude)
        transitions = []
        with self._lock:
            self.last_position = position
            for region in self._regions.values():
                inside = is_inside(position, region.latitude, region.longitude, region.radius)
                was_inside = region.zone_id in self._inside
                if inside and not was_inside:
                    self._inside.add(region.zone_id)
                    transitions.append((region.zone_id, TransitionKind.ENTER))
                elif was_inside and not inside:
                    self._inside.discard(region.zone_id)
                    transitions.append((region.zone_id, TransitionKind.EXIT))
        for zone_id, kind in transitions:
            self.emit(zone_id, kind)
        return transitions
