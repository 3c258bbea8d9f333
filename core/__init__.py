"""
Core Data Models and Logic
"""
from .rover_data import (
    MotionState,
    LevelStatus,
    AlertType,
    SensorSnapshot,
    AlertRecord,
    UltrasonicServoSettings
)
from .view_state import DashboardState
from .chart_history import ChartHistory

__all__ = [
    'MotionState',
    'LevelStatus',
    'AlertType',
    'SensorSnapshot',
    'AlertRecord',
    'UltrasonicServoSettings',
    'DashboardState',
    'ChartHistory'
]
