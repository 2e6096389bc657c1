"""
Error taxonomy for the geofence subsystem

Monitor and location failures are recoverable: callers log them and carry
on, relying on the next reconciliation to repair monitor state. The
validation and lookup errors surface to the caller as client errors.
"""


class GeofenceError(Exception):
    """Base class for recoverable geofence failures."""


class PermissionDenied(GeofenceError):
    """Continuous/background location authorization is missing."""


class PlatformError(GeofenceError):
    """The region monitoring service rejected the request."""


class LocationUnavailable(GeofenceError):
    """No current position could be obtained in time."""


class NotFound(GeofenceError):
    """The monitor has no registration for the requested id."""


class ValidationError(GeofenceError):
    """Zone input is outside the accepted ranges."""


class ZoneNotFound(GeofenceError):
    """No zone with the requested id exists in the Zone Store."""


class VisitNotFound(GeofenceError):
    """No visit with the requested id exists in the Visit Ledger."""
