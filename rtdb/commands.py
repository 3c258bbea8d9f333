"""
Command writes consumed by the rover firmware

Writes are fire-and-forget: the firmware polls these nodes, applies the value
and deletes the request. Each operation returns a CommandResult that the UI
shows as a toast.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from core.rover_data import MotionState, UltrasonicServoSettings, clamp_servo_angle
from rtdb.firebase_client import FirebaseClient, FirebaseError

logger = logging.getLogger(__name__)

MOTION_REQUEST_PATH = "motion_command/request"
SERVO_REQUEST_PATH = "servo/request"
EMERGENCY_STOP_PATH = "emergency_stop"
ULTRASONIC_SERVO_PATH = "ultrasonic_servo"
ULTRASONIC_RESET_PATH = "ultrasonic_servo/reset"

# Nodes written by the rover
SENSOR_DATA_PATH = "sensor_data"
ALERTS_PATH = "alerts"

SUCCESS = "success"
ERROR = "error"
INFO = "info"


@dataclass
class CommandResult:
    success: bool
    message: str
    level: str = SUCCESS

    def to_dict(self) -> dict:
        return {"success": self.success, "message": self.message, "level": self.level}


def parse_motion(command: Union[str, MotionState]) -> MotionState:
    if isinstance(command, MotionState):
        return command
    try:
        return MotionState(str(command).upper())
    except ValueError:
        raise ValueError(f"Unknown motion command: {command}")


class CommandWriter:
    """Writes dashboard commands to the store; client None means demo mode"""

    def __init__(self, client: Optional[FirebaseClient]):
        self.client = client

    @property
    def demo_mode(self) -> bool:
        return self.client is None

    def send_motion_command(self, command: Union[str, MotionState]) -> CommandResult:
        motion = parse_motion(command)
        if self.demo_mode:
            return CommandResult(True, "Demo mode: Motion command simulated", INFO)
        try:
            self.client.set(MOTION_REQUEST_PATH, motion.value)
        except FirebaseError as e:
            logger.error("Error sending motion command: %s", e)
            return CommandResult(False, "Failed to send motion command", ERROR)
        return CommandResult(True, f"Motion command sent: {motion.value}")

    def send_servo_command(self, angle: float) -> CommandResult:
        angle = clamp_servo_angle(angle)
        if self.demo_mode:
            return CommandResult(True, "Demo mode: Servo command simulated", INFO)
        try:
            self.client.set(SERVO_REQUEST_PATH, angle)
        except FirebaseError as e:
            logger.error("Error sending servo command: %s", e)
            return CommandResult(False, "Failed to send servo command", ERROR)
        return CommandResult(True, f"Servo command sent: {angle}°")

    def send_emergency_stop(self) -> CommandResult:
        if self.demo_mode:
            return CommandResult(True, "Demo mode: Emergency stop simulated", INFO)
        try:
            self.client.set(EMERGENCY_STOP_PATH, True)
            self.client.set(MOTION_REQUEST_PATH, MotionState.STOP.value)
        except FirebaseError as e:
            logger.error("Error sending emergency stop: %s", e)
            return CommandResult(False, "Failed to send emergency stop", ERROR)
        return CommandResult(True, "Emergency stop activated!", ERROR)

    def send_ultrasonic_setting(self, name: str, value: int) -> CommandResult:
        if name not in ("threshold", "motor_speed", "rotation_duration"):
            raise ValueError(f"Unknown UltrasonicServo setting: {name}")
        if self.demo_mode:
            return CommandResult(True, f"Demo mode: UltrasonicServo {name} simulated", INFO)
        try:
            self.client.set(f"{ULTRASONIC_SERVO_PATH}/{name}", value)
        except FirebaseError as e:
            logger.error("Error updating UltrasonicServo %s: %s", name, e)
            return CommandResult(False, f"Failed to update {name}", ERROR)
        return CommandResult(True, f"UltrasonicServo {name} updated")

    def apply_ultrasonic_settings(self, settings: UltrasonicServoSettings) -> list:
        """Apply Settings writes all three values, one result each"""
        return [self.send_ultrasonic_setting(name, value)
                for name, value in settings.to_dict().items()]

    def reset_ultrasonic_servo(self) -> CommandResult:
        if self.demo_mode:
            return CommandResult(True, "Demo mode: UltrasonicServo reset simulated", INFO)
        try:
            self.client.set(ULTRASONIC_RESET_PATH, True)
        except FirebaseError as e:
            logger.error("Error resetting UltrasonicServo: %s", e)
            return CommandResult(False, "Failed to reset UltrasonicServo", ERROR)
        return CommandResult(True, "UltrasonicServo reset")
