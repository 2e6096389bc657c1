"""
Geofence Visit Ledger - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os

from flask import Flask
from geovisits.extensions import db
from geovisits.config import Config


def create_app(config_class=Config, monitor=None, location=None, notifier=None, clock=None):
    """Create and configure the Flask application.
    
    Args:
        config_class: Configuration class to use (default: Config)
        monitor, location, notifier, clock: optional collaborators; defaults
            are built from configuration
    
    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    logging.getLogger('geovisits').setLevel(app.config['LOG_LEVEL'])
    
    # Initialize extensions
    db.init_app(app)
    
    # Register blueprints and commands
    from geovisits.api import api_bp
    from geovisits.commands import register_commands
    
    app.register_blueprint(api_bp, url_prefix='/api')
    register_commands(app)
    
    from geovisits.container import build_services
    services = build_services(app, monitor=monitor, location=location,
                              notifier=notifier, clock=clock)
    
    # Create and upgrade database tables
    with app.app_context():
        from geovisits import models  # noqa: F401
        from geovisits.migrations import upgrade_schema
        
        if db.engine.url.database and db.engine.url.database != ':memory:':
            os.makedirs(os.path.dirname(os.path.abspath(db.engine.url.database)), exist_ok=True)
        db.create_all()
        applied = upgrade_schema(db.engine)
        if applied:
            app.logger.info('Schema upgraded: %s', ', '.join(applied))
        
        # Registrations do not survive a restart of the monitoring service
        if app.config['REREGISTER_ON_START']:
            services.coordinator.reregister_all()
    
    return app
