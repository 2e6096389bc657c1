"""
Zone Service

Create, edit and delete flows. Each flow writes the Zone Store and then
brings the region monitor in line through the Lifecycle Coordinator.
"""

import logging
import math

from geovisits.errors import ValidationError, ZoneNotFound
from geovisits.models import Zone
from geovisits.services.clock import now_millis

logger = logging.getLogger(__name__)


def _number(data, key, low, high):
    value = data.get(key)
    if isinstance(value, bool) or value is None or value == '':
        raise ValidationError(f'{key} is required')
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{key} must be a number') from None
    if math.isnan(value) or not low <= value <= high:
        raise ValidationError(f'{key} must be between {low:g} and {high:g}')
    return value


class ZoneService:

    def __init__(self, zones, coordinator, reconciler, clock=now_millis,
                 radius_min=10.0, radius_max=50.0, default_icon='\U0001F4CD'):
        self.zones = zones
        self.coordinator = coordinator
        self.reconciler = reconciler
        self.clock = clock
        self.radius_min = radius_min
        self.radius_max = radius_max
        self.default_icon = default_icon

    def validate(self, data):
        """Normalize a full zone definition; raises ValidationError."""
        if not isinstance(data, dict):
            raise ValidationError('Zone definition must be an object')
        name = str(data.get('name') or '').strip()
        if not name:
            raise ValidationError('Zone name is required')
        icon = str(data.get('icon') or '').strip() or self.default_icon
        return {
            'name': name,
            'latitude': _number(data, 'latitude', -90, 90),
            'longitude': _number(data, 'longitude', -180, 180),
            'radius': _number(data, 'radius', self.radius_min, self.radius_max),
            'icon': icon,
            'entry_message': str(data.get('entry_message') or ''),
            'exit_message': str(data.get('exit_message') or ''),
        }

    def list_zones(self):
        return self.zones.all()

    def get_zone(self, zone_id):
        zone = self.zones.get(zone_id)
        if zone is None:
            raise ZoneNotFound(f'Zone {zone_id} not found')
        return zone

    def create_zone(self, data):
        fields = self.validate(data)
        zone = self.zones.save(Zone(created_at=self.clock(), **fields))
        logger.info('Zone %s "%s" created', zone.id, zone.name)
        result = self.coordinator.register_zone(zone)
        return zone, result

    def update_zone(self, zone_id, data):
        """Replace a zone by id, closing an open visit the new geometry excludes."""
        zone = self.get_zone(zone_id)
        fields = self.validate(data)

        closed = self.reconciler.reconcile_edit(
            zone, fields['latitude'], fields['longitude'], fields['radius'])

        zone = self.zones.save(Zone(id=zone.id, created_at=zone.created_at, **fields))
        logger.info('Zone %s "%s" updated', zone.id, zone.name)
        result = self.coordinator.refresh_zone(zone)
        return zone, result, closed

    def close_if_outside(self, zone_id):
        zone = self.get_zone(zone_id)
        return self.reconciler.close_if_outside(zone.id, zone.latitude, zone.longitude, zone.radius)

    def delete_zone(self, zone_id):
        """Unregister first, then delete; visits keep their name snapshot."""
        zone = self.get_zone(zone_id)
        self.coordinator.unregister_zone(zone.id)
        self.zones.delete(zone)
        logger.info('Zone %s deleted', zone_id)
