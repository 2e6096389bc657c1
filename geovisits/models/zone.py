"""
Zone Model
"""

import sqlite3

from sqlalchemy import event
from sqlalchemy.engine import Engine

from geovisits.extensions import db


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE clauses unless foreign keys are switched on."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


class Zone(db.Model):
    """A named circular region the device is monitored against"""
    __tablename__ = 'zones'
    
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    radius = db.Column(db.Float, nullable=False)  # meters, 10-50
    created_at = db.Column(db.BigInteger, nullable=False)  # epoch millis
    icon = db.Column(db.String(16), nullable=False, default='\U0001F4CD',
                     server_default='\U0001F4CD')
    entry_message = db.Column(db.Text, nullable=False, default='', server_default='')
    exit_message = db.Column(db.Text, nullable=False, default='', server_default='')
    
    # Visits outlive their zone; deleting a zone nulls visits.zone_id
    visits = db.relationship('Visit', backref='zone', lazy=True)
    
    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'radius': self.radius,
            'created_at': self.created_at,
            'icon': self.icon,
            'entry_message': self.entry_message,
            'exit_message': self.exit_message,
        }
    
    def __repr__(self):
        return f'<Zone {self.id}:{self.name}>'
