"""
Configuration settings for the geofence visit ledger
"""
import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Flask application configuration"""
    
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'
    
    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'geovisits.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # Zone constraints
    ZONE_RADIUS_MIN = 10.0
    ZONE_RADIUS_MAX = 50.0
    DEFAULT_ZONE_ICON = '\U0001F4CD'
    
    # Region monitor
    MONITOR_BACKGROUND_PERMISSION = _env_flag('MONITOR_BACKGROUND_PERMISSION', True)
    MONITOR_MAX_REGIONS = int(os.environ.get('MONITOR_MAX_REGIONS', 100))
    REREGISTER_ON_START = _env_flag('REREGISTER_ON_START', True)
    
    # Location sink: 'last_known' or 'http'
    LOCATION_PROVIDER = os.environ.get('LOCATION_PROVIDER') or 'last_known'
    LOCATION_URL = os.environ.get('LOCATION_URL')
    LOCATION_TIMEOUT = float(os.environ.get('LOCATION_TIMEOUT', 5))
    
    # Notifications are logged unless a webhook is configured
    NOTIFY_WEBHOOK_URL = os.environ.get('NOTIFY_WEBHOOK_URL')
    NOTIFY_TIMEOUT = float(os.environ.get('NOTIFY_TIMEOUT', 5))
    
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    LOCATION_TIMEOUT = 1.0
    LOG_LEVEL = 'DEBUG'
