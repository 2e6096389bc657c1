"""
Visit Model
"""

from datetime import datetime, timezone

from geovisits.extensions import db


def format_duration(duration_ms):
    """Render a duration in milliseconds as HH:MM:SS, or '--' while open."""
    if duration_ms is None:
        return '--'
    seconds = (duration_ms // 1000) % 60
    minutes = (duration_ms // (1000 * 60)) % 60
    hours = duration_ms // (1000 * 60 * 60)
    return f'{hours:02d}:{minutes:02d}:{seconds:02d}'


def _iso(millis):
    if millis is None:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).isoformat()


class Visit(db.Model):
    """A recorded interval of presence inside a zone"""
    __tablename__ = 'visits'
    
    id = db.Column(db.Integer, primary_key=True)
    zone_id = db.Column(db.Integer, db.ForeignKey('zones.id', ondelete='SET NULL'),
                        nullable=True, index=True)
    # Snapshot taken at entry; never updated
    zone_name = db.Column(db.String(100), nullable=False)
    entry_time = db.Column(db.BigInteger, nullable=False, index=True)
    exit_time = db.Column(db.BigInteger, nullable=True)
    duration = db.Column(db.BigInteger, nullable=True)  # millis
    
    @property
    def is_open(self):
        return self.exit_time is None
    
    def close(self, exit_time):
        """Fill exit time and duration; the only mutation a visit ever sees."""
        self.exit_time = exit_time
        self.duration = exit_time - self.entry_time
    
    def to_dict(self):
        return {
            'id': self.id,
            'zone_id': self.zone_id,
            'zone_name': self.zone_name,
            'entry_time': self.entry_time,
            'exit_time': self.exit_time,
            'duration': self.duration,
            'entered_at': _iso(self.entry_time),
            'exited_at': _iso(self.exit_time),
            'formatted_duration': format_duration(self.duration),
            'in_progress': self.is_open,
        }
    
    def __repr__(self):
        return f'<Visit {self.id} Zone:{self.zone_id} {self.entry_time}-{self.exit_time}>'
