"""
Region Monitor Package

Adapter contract for the external boundary-monitoring service and a
process-local simulation of it.
"""

from geovisits.monitor.base import RegionMonitor, Region, TransitionKind
from geovisits.monitor.simulated import SimulatedRegionMonitor

__all__ = ['RegionMonitor', 'Region', 'TransitionKind', 'SimulatedRegionMonitor']
