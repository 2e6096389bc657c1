"""
Geodesy helpers
"""

import math
from collections import namedtuple

EARTH_RADIUS_M = 6371000.0

Position = namedtuple('Position', ['latitude', 'longitude'])


def haversine_m(lat1, lng1, lat2, lng2):
    """Great-circle distance in meters between two WGS84 points."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = math.sin(d_lat / 2) ** 2 + \
        math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def offset_north(lat, lng, meters):
    """Point ``meters`` due north of (lat, lng); handy for placing test fixes."""
    return Position(lat + math.degrees(meters / EARTH_RADIUS_M), lng)


def is_inside(position, lat, lng, radius):
    return haversine_m(position.latitude, position.longitude, lat, lng) <= radius
