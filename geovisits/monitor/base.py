"""
Region Monitor Adapter contract
"""

import enum
import logging
from collections import namedtuple

logger = logging.getLogger(__name__)

Region = namedtuple('Region', ['zone_id', 'latitude', 'longitude', 'radius'])


class TransitionKind(enum.Enum):
    ENTER = 'enter'
    EXIT = 'exit'

    @property
    def label(self):
        return 'Entered' if self is TransitionKind.ENTER else 'Exited'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f'Unknown transition kind: {value!r}') from None


class RegionMonitor:
    """Wraps an OS-level boundary monitoring service.

    Implementations:
    - ``register`` raises PermissionDenied or PlatformError
    - ``unregister`` never raises for an unknown id
    - transitions are pushed to listeners as ``(zone_id, TransitionKind)``,
      with no ordering or delivery guarantee and no deduplication
    """

    def __init__(self):
        self._listeners = []

    def add_listener(self, listener):
        self._listeners.append(listener)

    def emit(self, zone_id, kind):
        kind = TransitionKind.parse(kind)
        logger.debug('Transition %s for zone %s', kind.value, zone_id)
        for listener in list(self._listeners):
            listener(zone_id, kind)

    def register(self, zone_id, latitude, longitude, radius):
        raise NotImplementedError

    def unregister(self, zone_id):
        raise NotImplementedError

    def registered_ids(self):
        raise NotImplementedError
