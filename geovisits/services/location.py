"""
Location sinks

One-shot, best-effort reads of the device position. Each provider raises
LocationUnavailable instead of returning a partial answer.
"""

import logging

import requests

from geovisits.errors import LocationUnavailable
from geovisits.services.geo import Position

logger = logging.getLogger(__name__)


class LastKnownLocationProvider:
    """Serves the most recent position reported to the region monitor."""

    def __init__(self, monitor):
        self.monitor = monitor

    def current_position(self, timeout=None):
        position = self.monitor.last_position
        if position is None:
            raise LocationUnavailable('No position has been reported yet')
        return position


class HttpLocationProvider:
    """Reads ``{"latitude": .., "longitude": ..}`` from a location endpoint."""

    def __init__(self, url, timeout=5):
        self.url = url
        self.timeout = timeout

    def current_position(self, timeout=None):
        timeout = timeout if timeout is not None else self.timeout
        try:
            resp = requests.get(self.url, timeout=timeout)
            if resp.status_code != 200:
                raise LocationUnavailable(f'Location endpoint error {resp.status_code}')
            data = resp.json()
            return Position(float(data['latitude']), float(data['longitude']))
        except requests.exceptions.Timeout:
            raise LocationUnavailable('Location request timed out') from None
        except (requests.exceptions.RequestException, KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable(str(e)) from e
