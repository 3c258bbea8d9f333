"""
Rover Data Models and Status Logic
Sensor snapshots and alert records as published by the ToxiRover firmware
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


# Dashboard classification thresholds
GAS_WARNING_PPM = 200
GAS_DANGER_PPM = 500
GAS_BAR_MAX_PPM = 1000
DISTANCE_DANGER_CM = 20
DISTANCE_WARNING_CM = 50
DISTANCE_CIRCLE_MAX_CM = 200

SERVO_MIN_ANGLE = 0
SERVO_MAX_ANGLE = 180
SERVO_CENTER_ANGLE = 90
SERVO_FINE_STEP = 10
SERVO_PRESETS = (0, 90, 180)
GAS_DISPERSAL_SEQUENCE = (180, 0, 180, 90)
GAS_DISPERSAL_STEP_SECONDS = 1.0

# Colors shared by the desktop and browser renderers
RED = "#ef4444"
YELLOW = "#f59e0b"
GREEN = "#10b981"
GRAY = "#6b7280"
BLUE = "#3b82f6"


class MotionState(Enum):
    """Drivetrain motion states"""
    FORWARD = "FORWARD"
    BACKWARD = "BACKWARD"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    STOP = "STOP"


class LevelStatus(Enum):
    """Status levels for gas and distance readings"""
    SAFE = "SAFE"
    WARNING = "WARNING"
    DANGER = "DANGER"
    ERROR = "ERROR"


class AlertType(Enum):
    """Alert tags written to the alerts node"""
    HIGH_GAS_LEVEL = "HIGH_GAS_LEVEL"
    OBSTACLE_DETECTED = "OBSTACLE_DETECTED"
    SYSTEM_STARTUP = "SYSTEM_STARTUP"
    CONNECTION_LOST = "CONNECTION_LOST"
    INFO = "INFO"


ALERT_TITLES = {
    AlertType.HIGH_GAS_LEVEL: "High Gas Level Detected",
    AlertType.OBSTACLE_DETECTED: "Obstacle Detected",
    AlertType.SYSTEM_STARTUP: "System Started",
    AlertType.CONNECTION_LOST: "Connection Lost",
}


def _number(value, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _enum_value(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        return default


@dataclass
class SensorSnapshot:
    """Latest sensor values from the sensor_data node"""
    gas_concentration: float = 0.0
    distance: float = 0.0
    motion: MotionState = MotionState.STOP
    servo_angle: float = SERVO_CENTER_ANGLE
    ultrasonic_servo_distance: float = 0.0
    ultrasonic_servo_status: LevelStatus = LevelStatus.SAFE
    obstacle_detected: bool = False
    received_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_store(cls, data: dict) -> "SensorSnapshot":
        """Build a snapshot from the raw store value, filling defaults"""
        data = data or {}
        return cls(
            gas_concentration=_number(data.get("gas_concentration"), 0.0),
            distance=_number(data.get("distance"), 0.0),
            motion=_enum_value(MotionState, data.get("motion"), MotionState.STOP),
            # Only a missing angle falls back to center; 0 is a real position
            servo_angle=_number(data.get("servo_angle"), SERVO_CENTER_ANGLE),
            ultrasonic_servo_distance=_number(data.get("ultrasonic_servo_distance"), 0.0),
            ultrasonic_servo_status=_enum_value(
                LevelStatus, data.get("ultrasonic_servo_status"), LevelStatus.SAFE
            ),
            obstacle_detected=bool(data.get("obstacle_detected") or False),
        )

    def to_dict(self) -> dict:
        """Store-shaped representation"""
        return {
            "gas_concentration": self.gas_concentration,
            "distance": self.distance,
            "motion": self.motion.value,
            "servo_angle": self.servo_angle,
            "ultrasonic_servo_distance": self.ultrasonic_servo_distance,
            "ultrasonic_servo_status": self.ultrasonic_servo_status.value,
            "obstacle_detected": self.obstacle_detected,
        }


@dataclass
class AlertRecord:
    """Represents an alert seen on the alerts node"""
    alert_type: Union[AlertType, str]
    message: str
    gas_level: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)
    rover_millis: Optional[int] = None

    @classmethod
    def from_alert_node(cls, data: dict) -> "AlertRecord":
        data = data or {}
        raw_type = data.get("last_alert") or AlertType.INFO.value
        try:
            alert_type = AlertType(raw_type)
        except ValueError:
            alert_type = str(raw_type)
        gas_level = _number(data.get("gas_level"), 0.0)
        millis = data.get("last_timestamp")
        try:
            millis = int(millis) if millis is not None else None
        except (TypeError, ValueError):
            millis = None
        return cls(
            alert_type=alert_type,
            message=f"Gas level: {gas_level:g} PPM",
            gas_level=gas_level,
            rover_millis=millis,
        )

    @property
    def type_name(self) -> str:
        if isinstance(self.alert_type, AlertType):
            return self.alert_type.value
        return self.alert_type

    @property
    def title(self) -> str:
        return ALERT_TITLES.get(self.alert_type, "System Alert")

    @property
    def severity(self) -> str:
        if self.alert_type == AlertType.HIGH_GAS_LEVEL:
            return "danger"
        if self.alert_type == AlertType.OBSTACLE_DETECTED:
            return "warning"
        return "info"

    def to_dict(self) -> dict:
        return {
            "type": self.type_name,
            "title": self.title,
            "severity": self.severity,
            "message": self.message,
            "gas_level": self.gas_level,
            "timestamp": self.timestamp.isoformat(),
        }


def gas_status(ppm: float) -> LevelStatus:
    if ppm > GAS_DANGER_PPM:
        return LevelStatus.DANGER
    if ppm > GAS_WARNING_PPM:
        return LevelStatus.WARNING
    return LevelStatus.SAFE


def distance_status(cm: float) -> LevelStatus:
    if cm < DISTANCE_DANGER_CM:
        return LevelStatus.DANGER
    if cm < DISTANCE_WARNING_CM:
        return LevelStatus.WARNING
    return LevelStatus.SAFE


def gas_level_percent(ppm: float) -> float:
    """Fill level of the gas bar (1000 PPM is full scale)"""
    return max(0.0, min(ppm / GAS_BAR_MAX_PPM * 100, 100.0))


def gas_bar_color(percent: float) -> str:
    if percent > 80:
        return RED
    if percent > 60:
        return YELLOW
    return GREEN


def distance_circle_size(cm: float) -> float:
    """Diameter in pixels of the distance indicator, 60-100"""
    percentage = max(0.0, min(cm / DISTANCE_CIRCLE_MAX_CM * 100, 100.0))
    return 60 + percentage * 0.4


def gas_chart_color(ppm: Optional[float]) -> str:
    if not ppm:
        return GRAY
    if ppm > 1000:
        return RED
    if ppm > 500:
        return YELLOW
    return GREEN


def distance_chart_color(cm: Optional[float]) -> str:
    if not cm:
        return GRAY
    if cm < DISTANCE_DANGER_CM:
        return RED
    if cm < DISTANCE_WARNING_CM:
        return YELLOW
    return GREEN


def status_color(status) -> str:
    """Color for a status pill; accepts LevelStatus or a raw string"""
    name = status.value if isinstance(status, LevelStatus) else str(status or "").upper()
    return {
        "DANGER": RED,
        "WARNING": YELLOW,
        "SAFE": GREEN,
        "ERROR": GRAY,
    }.get(name, BLUE)


def _finite(value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Value must be a finite number, got {value}")
    return value


def clamp_servo_angle(angle: float) -> int:
    return int(max(SERVO_MIN_ANGLE, min(SERVO_MAX_ANGLE, round(_finite(angle)))))


def step_servo_angle(current: float, delta: int) -> int:
    """Fine control: move by delta degrees without leaving 0-180"""
    return clamp_servo_angle(current + delta)


def _clamp(value: float, low: int, high: int) -> int:
    return int(max(low, min(high, round(_finite(value)))))


@dataclass
class UltrasonicServoSettings:
    """Tunables of the obstacle auto-response, as set from the dashboard"""
    threshold: int = 20
    motor_speed: int = 255
    rotation_duration: int = 500

    THRESHOLD_RANGE = (10, 50)
    MOTOR_SPEED_RANGE = (100, 255)
    ROTATION_DURATION_RANGE = (200, 1000)
    ROTATION_DURATION_STEP = 100

    def __post_init__(self):
        self.threshold = _clamp(self.threshold, *self.THRESHOLD_RANGE)
        self.motor_speed = _clamp(self.motor_speed, *self.MOTOR_SPEED_RANGE)
        step = self.ROTATION_DURATION_STEP
        # Halfway values round up
        snapped = int(_finite(self.rotation_duration) / step + 0.5) * step
        self.rotation_duration = _clamp(snapped, *self.ROTATION_DURATION_RANGE)

    def to_dict(self) -> dict:
        return {
            "threshold": self.threshold,
            "motor_speed": self.motor_speed,
            "rotation_duration": self.rotation_duration,
        }
