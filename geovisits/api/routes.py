"""
API Routes
"""

import logging

from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from geovisits.api import api_bp
from geovisits.container import get_services
from geovisits.errors import ValidationError, VisitNotFound, ZoneNotFound
from geovisits.services.geo import Position

logger = logging.getLogger(__name__)


def _error(message, status):
    return jsonify({'error': True, 'message': message}), status


@api_bp.errorhandler(ValidationError)
def handle_validation_error(e):
    return _error(str(e), 400)


@api_bp.errorhandler(ZoneNotFound)
@api_bp.errorhandler(VisitNotFound)
def handle_not_found(e):
    return _error(str(e), 404)


@api_bp.errorhandler(SQLAlchemyError)
def handle_storage_error(e):
    logger.exception('Storage error')
    return _error('Storage error', 500)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _zone_payload(zone, result=None):
    data = zone.to_dict()
    if result is not None:
        data['monitored'] = result.monitored
        if not result.monitored:
            data['monitor_error'] = result.error
    return data


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------

@api_bp.route('/zones', methods=['GET'])
def list_zones():
    zones = get_services().zone_service.list_zones()
    return jsonify([z.to_dict() for z in zones])


@api_bp.route('/zones', methods=['POST'])
def create_zone():
    zone, result = get_services().zone_service.create_zone(_json_body())
    return jsonify(_zone_payload(zone, result)), 201


@api_bp.route('/zones/<int:zone_id>', methods=['GET'])
def get_zone(zone_id):
    zone = get_services().zone_service.get_zone(zone_id)
    return jsonify(zone.to_dict())


@api_bp.route('/zones/<int:zone_id>', methods=['PUT'])
def update_zone(zone_id):
    """Full replace of a zone definition."""
    zone, result, closed = get_services().zone_service.update_zone(zone_id, _json_body())
    data = _zone_payload(zone, result)
    data['closed_visit'] = closed.to_dict() if closed is not None else None
    return jsonify(data)


@api_bp.route('/zones/<int:zone_id>', methods=['DELETE'])
def delete_zone(zone_id):
    get_services().zone_service.delete_zone(zone_id)
    return jsonify({'deleted': zone_id})


@api_bp.route('/zones/<int:zone_id>/close-if-outside', methods=['POST'])
def close_if_outside(zone_id):
    closed = get_services().zone_service.close_if_outside(zone_id)
    return jsonify({'closed_visit': closed.to_dict() if closed is not None else None})


# ---------------------------------------------------------------------------
# Visits
# ---------------------------------------------------------------------------

@api_bp.route('/visits', methods=['GET'])
def list_visits():
    rows = get_services().ledger.all_with_zone()
    return jsonify([
        dict(visit.to_dict(), zone=zone.to_dict() if zone is not None else None)
        for visit, zone in rows
    ])


@api_bp.route('/visits/<int:visit_id>', methods=['DELETE'])
def delete_visit(visit_id):
    ledger = get_services().ledger
    visit = ledger.get(visit_id)
    if visit is None:
        raise VisitNotFound(f'Visit {visit_id} not found')
    ledger.delete(visit)
    return jsonify({'deleted': visit_id})


@api_bp.route('/visits', methods=['DELETE'])
def clear_visits():
    count = get_services().ledger.clear()
    return jsonify({'deleted': count})


# ---------------------------------------------------------------------------
# Transition sources
# ---------------------------------------------------------------------------

@api_bp.route('/transitions', methods=['POST'])
def post_transition():
    """Deliver one ENTER/EXIT event, e.g. forwarded from a platform callback."""
    data = _json_body()
    try:
        zone_id = int(data.get('zone_id'))
    except (TypeError, ValueError):
        raise ValidationError('zone_id must be an integer') from None
    try:
        visit = get_services().transitions.deliver(zone_id, data.get('kind'))
    except ValueError as e:
        raise ValidationError(str(e)) from None
    return jsonify({
        'applied': visit is not None,
        'visit': visit.to_dict() if visit is not None else None,
    })


@api_bp.route('/positions', methods=['POST'])
def post_position():
    """Feed a position fix to the simulated monitor."""
    data = _json_body()
    try:
        position = Position(float(data['latitude']), float(data['longitude']))
    except (KeyError, TypeError, ValueError):
        raise ValidationError('latitude and longitude are required numbers') from None
    monitor = get_services().monitor
    if not hasattr(monitor, 'report_position'):
        return _error('Monitor does not accept position reports', 409)
    transitions = monitor.report_position(position.latitude, position.longitude)
    return jsonify({
        'transitions': [{'zone_id': zid, 'kind': kind.value} for zid, kind in transitions],
    })


# ---------------------------------------------------------------------------
# Monitor maintenance
# ---------------------------------------------------------------------------

@api_bp.route('/monitor/reregister', methods=['POST'])
def reregister():
    """Boot / health-check hook."""
    results = get_services().coordinator.reregister_all()
    return jsonify({
        'registered': [r.zone_id for r in results if r.monitored],
        'failed': {str(r.zone_id): r.error for r in results if not r.monitored},
    })


@api_bp.route('/monitor/status', methods=['GET'])
def monitor_status():
    return jsonify(get_services().coordinator.status())
