"""
Schema evolution for existing SQLite databases

db.create_all() only creates missing tables, so databases written by older
releases are upgraded in place. Every step follows the same recipe:
add the column with a default, backfill it with a read-then-write pass, and
rebuild the table when a constraint has to change.
"""

import logging

from sqlalchemy import text

from geovisits.models.visit import Visit

logger = logging.getLogger(__name__)

DEFAULT_ICON = '\U0001F4CD'
UNKNOWN_ZONE_NAME = 'Unknown'

VISITS_DDL = """
CREATE TABLE visits_new (
    id INTEGER NOT NULL PRIMARY KEY,
    zone_id INTEGER REFERENCES zones (id) ON DELETE SET NULL,
    zone_name VARCHAR(100) NOT NULL,
    entry_time BIGINT NOT NULL,
    exit_time BIGINT,
    duration BIGINT
)
"""


def _columns(conn, table):
    res = conn.execute(text(f"PRAGMA table_info('{table}');"))
    return {r[1]: r for r in res.fetchall()}


def _visit_fk_on_delete(conn):
    res = conn.execute(text("PRAGMA foreign_key_list('visits');"))
    for row in res.fetchall():
        # (id, seq, table, from, to, on_update, on_delete, match)
        if row[2] == 'zones' and row[3] == 'zone_id':
            return row[6]
    return None


def add_zone_icon(conn):
    cols = _columns(conn, 'zones')
    changed = False
    if 'icon' not in cols:
        conn.execute(text(f"ALTER TABLE zones ADD COLUMN icon TEXT NOT NULL DEFAULT '{DEFAULT_ICON}';"))
        logger.info('Added icon column to zones table')
        changed = True
    for column in ('entry_message', 'exit_message'):
        if column not in cols:
            conn.execute(text(f"ALTER TABLE zones ADD COLUMN {column} TEXT NOT NULL DEFAULT '';"))
            logger.info('Added %s column to zones table', column)
            changed = True
    return changed


def add_visit_zone_name(conn):
    if 'zone_name' in _columns(conn, 'visits'):
        return False
    conn.execute(text(
        f"ALTER TABLE visits ADD COLUMN zone_name VARCHAR(100) NOT NULL DEFAULT '{UNKNOWN_ZONE_NAME}';"))

    names = dict(conn.execute(text('SELECT id, name FROM zones;')).fetchall())
    visits = conn.execute(text('SELECT id, zone_id FROM visits;')).fetchall()
    for visit_id, zone_id in visits:
        conn.execute(text('UPDATE visits SET zone_name = :name WHERE id = :id;'),
                     {'name': names.get(zone_id, UNKNOWN_ZONE_NAME), 'id': visit_id})
    logger.info('Added zone_name to visits table, backfilled %d row(s)', len(visits))
    return True


def rebuild_visits_set_null(conn):
    """Recreate visits so deleting a zone nulls zone_id instead of cascading."""
    zone_id = _columns(conn, 'visits').get('zone_id')
    nullable = zone_id is not None and not zone_id[3]
    if _visit_fk_on_delete(conn) == 'SET NULL' and nullable:
        return False

    conn.execute(text(VISITS_DDL))
    conn.execute(text(
        'INSERT INTO visits_new (id, zone_id, zone_name, entry_time, exit_time, duration) '
        'SELECT id, zone_id, zone_name, entry_time, exit_time, duration FROM visits;'))
    conn.execute(text('DROP TABLE visits;'))
    conn.execute(text('ALTER TABLE visits_new RENAME TO visits;'))
    for index in Visit.__table__.indexes:
        index.create(conn, checkfirst=True)
    logger.info('Rebuilt visits table with ON DELETE SET NULL')
    return True


STEPS = (add_zone_icon, add_visit_zone_name, rebuild_visits_set_null)


def upgrade_schema(engine):
    """Bring an existing database up to the current model; returns applied step names."""
    if engine.dialect.name != 'sqlite':
        return []

    applied = []
    with engine.connect() as conn:
        # Table rebuilds must not trip foreign key actions
        conn.execute(text('PRAGMA foreign_keys=OFF;'))
        # pysqlite autocommits DDL; an explicit BEGIN keeps ALTER TABLE undoable
        conn.exec_driver_sql('BEGIN')
        try:
            for step in STEPS:
                if step(conn):
                    applied.append(step.__name__)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.execute(text('PRAGMA foreign_keys=ON;'))
            conn.commit()
    return applied
