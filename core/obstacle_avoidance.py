"""
Obstacle Auto-Response Logic
The loop the rover runs against the ultrasonic sensor: when something comes
closer than the threshold it spins the motor and swings the servo once, then
waits out a cooldown before it may respond again.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.rover_data import LevelStatus, SERVO_CENTER_ANGLE, SERVO_MAX_ANGLE


WARNING_THRESHOLD_CM = 50
SAFE_DISTANCE_CM = 100
ACTION_COOLDOWN_MS = 2000


class AvoidanceAction(Enum):
    NONE = "NONE"
    RESPOND = "RESPOND"
    CLEAR = "CLEAR"


@dataclass
class ActuatorCommand:
    """What the drivetrain and servo should do after one check"""
    action: AvoidanceAction
    motor_speed: int = 0
    duration_ms: int = 0
    servo_angle: int = SERVO_CENTER_ANGLE
    servo_return_angle: int = SERVO_CENTER_ANGLE


class ObstacleAvoidance:
    """Threshold/cooldown state machine of the ultrasonic servo unit"""

    def __init__(self, threshold: int = 20, motor_speed: int = 255,
                 rotation_duration: int = 500, cooldown_ms: int = ACTION_COOLDOWN_MS):
        self.threshold = threshold
        self.motor_speed = motor_speed
        self.rotation_duration = rotation_duration
        self.cooldown_ms = cooldown_ms
        self.obstacle_detected = False
        self.last_distance = 0.0
        self.last_action_time: Optional[int] = None

    def _in_cooldown(self, now_ms: int) -> bool:
        if self.last_action_time is None:
            return False
        return now_ms - self.last_action_time < self.cooldown_ms

    def check_and_act(self, distance: float, now_ms: int) -> ActuatorCommand:
        """Feed one distance reading (negative means no echo)"""
        self.last_distance = distance

        if self._in_cooldown(now_ms):
            return ActuatorCommand(AvoidanceAction.NONE)

        if 0 < distance < self.threshold:
            if self.obstacle_detected:
                return ActuatorCommand(AvoidanceAction.NONE)
            self.obstacle_detected = True
            self.last_action_time = now_ms
            return ActuatorCommand(
                AvoidanceAction.RESPOND,
                motor_speed=self.motor_speed,
                duration_ms=self.rotation_duration,
                servo_angle=SERVO_MAX_ANGLE,
                servo_return_angle=SERVO_CENTER_ANGLE,
            )

        if distance >= self.threshold:
            self.obstacle_detected = False
            return ActuatorCommand(AvoidanceAction.CLEAR)

        return ActuatorCommand(AvoidanceAction.NONE)

    def distance_status(self) -> LevelStatus:
        if self.last_distance < 0:
            return LevelStatus.ERROR
        if self.last_distance < self.threshold:
            return LevelStatus.DANGER
        if self.last_distance < WARNING_THRESHOLD_CM:
            return LevelStatus.WARNING
        return LevelStatus.SAFE

    def is_warning_distance(self) -> bool:
        return 0 < self.last_distance < WARNING_THRESHOLD_CM

    def is_safe_distance(self) -> bool:
        return self.last_distance >= SAFE_DISTANCE_CM

    def emergency_stop(self, now_ms: int) -> ActuatorCommand:
        self.obstacle_detected = False
        self.last_action_time = now_ms
        return ActuatorCommand(AvoidanceAction.CLEAR)

    def reset(self):
        self.obstacle_detected = False
        self.last_action_time = None

    def set_obstacle_threshold(self, threshold: int):
        self.threshold = threshold

    def set_motor_speed(self, speed: int):
        self.motor_speed = speed

    def set_rotation_duration(self, duration: int):
        self.rotation_duration = duration
