"""
Transition Handler

Turns ENTER/EXIT events into visit rows. State lives in the Visit Ledger, not
in memory, so the machine survives restarts:

- ENTER with an open visit: ignored (GPS jitter duplicates)
- ENTER otherwise: open a visit with a snapshot of the zone name
- EXIT with no open visit: ignored (stray exit, e.g. after reinstall)
- EXIT otherwise: close the visit, duration = exit - entry

A missed ENTER followed by its EXIT therefore records nothing.
"""

import logging

from geovisits.models import Visit
from geovisits.monitor.base import TransitionKind
from geovisits.services.clock import now_millis
from geovisits.services.locks import KeyedLocks

logger = logging.getLogger(__name__)


class TransitionHandler:

    def __init__(self, zones, ledger, notifier, clock=now_millis, locks=None):
        self.zones = zones
        self.ledger = ledger
        self.notifier = notifier
        self.clock = clock
        self.locks = locks or KeyedLocks()

    def deliver(self, zone_id, kind):
        """Single entry point for every transition source."""
        kind = TransitionKind.parse(kind)
        if kind is TransitionKind.ENTER:
            return self.handle_enter(zone_id)
        return self.handle_exit(zone_id)

    def handle_enter(self, zone_id):
        with self.locks.hold(zone_id):
            if self.ledger.open_visit_for_zone(zone_id) is not None:
                logger.debug('Duplicate ENTER for zone %s ignored', zone_id)
                return None

            zone = self.zones.get(zone_id)
            if zone is None:
                # a detached row could never be matched by a later EXIT
                logger.warning('ENTER for unknown zone %s ignored', zone_id)
                return None
            visit = Visit(zone_id=zone_id, zone_name=zone.name, entry_time=self.clock())
            message = zone.entry_message
            self.ledger.insert(visit)
            logger.info('Visit %s opened for zone %s', visit.id, zone_id)

        self._notify(visit.zone_name, TransitionKind.ENTER, message)
        return visit

    def handle_exit(self, zone_id, notify=True):
        with self.locks.hold(zone_id):
            visit = self.ledger.open_visit_for_zone(zone_id)
            if visit is None:
                logger.debug('EXIT for zone %s without open visit ignored', zone_id)
                return None

            visit.close(self.clock())
            self.ledger.update(visit)
            logger.info('Visit %s closed for zone %s after %sms', visit.id, zone_id, visit.duration)
            zone = self.zones.get(zone_id)

        if notify:
            self._notify(visit.zone_name, TransitionKind.EXIT,
                         zone.exit_message if zone is not None else None)
        return visit

    def _notify(self, zone_name, kind, message):
        try:
            self.notifier.notify(zone_name, kind, message or None)
        except Exception:
            logger.warning('%s notification for %s failed', kind.label, zone_name, exc_info=True)
