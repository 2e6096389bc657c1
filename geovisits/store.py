"""
Zone Store and Visit Ledger

Thin data-access classes over the shared SQLAlchemy session. The Zone Store
is CRUD plus a change stream; the Visit Ledger is CRUD plus the two reads the
transition state machine and the history view need.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from geovisits.extensions import db
from geovisits.models import Zone, Visit

logger = logging.getLogger(__name__)


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


class ZoneStore:
    """Persisted geofence definitions."""

    def __init__(self):
        self._listeners = []

    def subscribe(self, listener):
        """Call ``listener(zones)`` with the full zone list after every change."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _publish(self):
        if not self._listeners:
            return
        zones = self.all()
        for listener in list(self._listeners):
            try:
                listener(zones)
            except Exception:
                logger.exception('Zone change listener failed')

    def all(self):
        return Zone.query.order_by(Zone.created_at.desc(), Zone.id.desc()).all()

    def get(self, zone_id):
        return db.session.get(Zone, zone_id)

    def save(self, zone):
        """Insert, or replace the row with the same id."""
        zone = db.session.merge(zone)
        _commit()
        self._publish()
        return zone

    def delete(self, zone):
        """Delete a zone; its visits survive with ``zone_id`` set to NULL."""
        db.session.delete(zone)
        _commit()
        self._publish()


class VisitLedger:
    """Persisted visit intervals."""

    def get(self, visit_id):
        return db.session.get(Visit, visit_id)

    def open_visit_for_zone(self, zone_id):
        return Visit.query.filter(
            Visit.zone_id == zone_id,
            Visit.exit_time.is_(None),
        ).order_by(Visit.entry_time.desc()).first()

    def insert(self, visit):
        db.session.add(visit)
        _commit()
        return visit

    def update(self, visit):
        db.session.add(visit)
        _commit()
        return visit

    def all_with_zone(self):
        """Every visit paired with its zone (None once deleted), newest entry first."""
        return db.session.query(Visit, Zone) \
            .outerjoin(Zone, Visit.zone_id == Zone.id) \
            .order_by(Visit.entry_time.desc(), Visit.id.desc()) \
            .all()

    def delete(self, visit):
        db.session.delete(visit)
        _commit()

    def clear(self):
        count = Visit.query.delete()
        _commit()
        return count
