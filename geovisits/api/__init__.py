"""
API Blueprint

JSON endpoints for zones, visit history, transition ingestion and monitor
maintenance.
"""

from flask import Blueprint

api_bp = Blueprint('api', __name__)

from geovisits.api import routes  # noqa: E402, F401
