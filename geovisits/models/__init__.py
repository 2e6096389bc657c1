"""
Models Package

Exports all models for easy importing.
"""

from geovisits.models.zone import Zone
from geovisits.models.visit import Visit

__all__ = ['Zone', 'Visit']
