#!/usr/bin/env python3
"""
ToxiRover Simulator
Stands in for the rover firmware: publishes sensor data to the store, consumes
the dashboard's command nodes and runs the obstacle auto-response.
"""
import argparse
import logging
import random
import signal
import sys
import threading
import time
from typing import Optional

from core.config import ConfigError, load_config
from core.obstacle_avoidance import AvoidanceAction, ObstacleAvoidance
from core.rover_data import (
    SERVO_CENTER_ANGLE,
    SERVO_MAX_ANGLE,
    SERVO_MIN_ANGLE,
    AlertType,
    LevelStatus,
    MotionState,
    UltrasonicServoSettings,
)
from rtdb.commands import (
    ALERTS_PATH,
    EMERGENCY_STOP_PATH,
    MOTION_REQUEST_PATH,
    SENSOR_DATA_PATH,
    SERVO_REQUEST_PATH,
    ULTRASONIC_RESET_PATH,
    ULTRASONIC_SERVO_PATH,
)
from rtdb.firebase_client import FirebaseClient, FirebaseError, client_from_config

logger = logging.getLogger(__name__)

UPDATE_INTERVAL = 2.0
COMMAND_INTERVAL = 0.5

# Firmware gas classification (differs from the dashboard's)
FIRMWARE_GAS_WARNING_PPM = 300
FIRMWARE_GAS_DANGER_PPM = 500

GAS_DATA_PPM_PATH = "gas_data/ppm"
DISTANCE_MIRROR_PATH = "ultrasonic_distance"
MOTION_CURRENT_PATH = "motion_command/current"
SERVO_ANGLE_PATH = "servo/angle"
STATUS_PATH = "status"


def firmware_gas_status(ppm: float) -> LevelStatus:
    if ppm >= FIRMWARE_GAS_DANGER_PPM:
        return LevelStatus.DANGER
    if ppm >= FIRMWARE_GAS_WARNING_PPM:
        return LevelStatus.WARNING
    return LevelStatus.SAFE


class SensorModel:
    """Random-walk gas and distance readings"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.gas = 150.0
        self.distance = 120.0
        self.spike_cooldown = 0

    def next_gas(self) -> float:
        if self.spike_cooldown > 0:
            self.spike_cooldown -= 1
        elif self.rng.random() < 0.05:
            # Occasional leak
            self.spike_cooldown = 10
            self.gas = self.rng.uniform(500, 900)
            return round(self.gas, 1)

        # Drift back toward ambient
        self.gas += (150.0 - self.gas) * 0.2 + self.rng.uniform(-20, 20)
        self.gas = max(0.0, self.gas)
        return round(self.gas, 1)

    def next_distance(self, motion: MotionState) -> float:
        if motion == MotionState.FORWARD:
            self.distance -= self.rng.uniform(5, 25)
        elif motion == MotionState.BACKWARD:
            self.distance += self.rng.uniform(5, 25)
        else:
            self.distance += self.rng.uniform(-3, 3)

        if self.distance < 5:
            self.distance = self.rng.uniform(100, 250)
        self.distance = min(self.distance, 400.0)
        return round(self.distance, 1)


class RoverSimulator:
    """Firmware loop against the store"""

    def __init__(self, client: FirebaseClient, interval: float = UPDATE_INTERVAL,
                 command_interval: float = COMMAND_INTERVAL,
                 sensors: Optional[SensorModel] = None):
        self.client = client
        self.interval = interval
        self.command_interval = command_interval
        self.sensors = sensors or SensorModel()
        self.avoidance = ObstacleAvoidance()

        self.gas = 0.0
        self.distance = 0.0
        self.motion = MotionState.STOP
        self.servo_angle = SERVO_CENTER_ANGLE
        self.gas_status = LevelStatus.SAFE

        self.running = False
        self.stop_event = threading.Event()
        self.started_at = time.monotonic()

    def millis(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)

    def startup(self):
        self.client.update(SENSOR_DATA_PATH, {
            "gas_concentration": 0,
            "distance": 0,
            "motion": MotionState.STOP.value,
            "servo_angle": SERVO_CENTER_ANGLE,
            "timestamp": self.millis(),
        })
        self.client.set(STATUS_PATH, "ONLINE")
        self.send_alert(AlertType.SYSTEM_STARTUP, "ToxiRover online")

    def send_alert(self, alert_type: AlertType, message: str, gas_level: Optional[float] = None):
        now = self.millis()
        # One PATCH so the dashboard sees a single change per alert
        latest = {
            f"log_{int(time.time() * 1000)}": {
                "type": alert_type.value,
                "message": message,
                "timestamp": now,
            },
            "last_alert": alert_type.value,
            "last_message": message,
            "last_timestamp": str(now),
        }
        if gas_level is not None:
            latest["gas_level"] = gas_level
        self.client.update(ALERTS_PATH, latest)
        logger.info("Alert sent: %s", alert_type.value)

    def read_sensors(self):
        self.gas = self.sensors.next_gas()
        self.distance = self.sensors.next_distance(self.motion)

        status = firmware_gas_status(self.gas)
        if status == LevelStatus.DANGER and self.gas_status != LevelStatus.DANGER:
            self.send_alert(AlertType.HIGH_GAS_LEVEL,
                            f"Gas concentration {self.gas:g} ppm", gas_level=self.gas)
        self.gas_status = status

        command = self.avoidance.check_and_act(self.distance, self.millis())
        if command.action == AvoidanceAction.RESPOND:
            self.motion = MotionState.STOP
            self.servo_angle = command.servo_return_angle
            self.send_alert(AlertType.OBSTACLE_DETECTED,
                            f"Obstacle at {self.distance:g} cm, auto-response triggered")

    def publish(self):
        """Write sensor_data and the flat mirror nodes"""
        self.client.update(SENSOR_DATA_PATH, {
            "gas_concentration": self.gas,
            "distance": self.distance,
            "motion": self.motion.value,
            "servo_angle": self.servo_angle,
            "ultrasonic_servo_distance": self.distance,
            "ultrasonic_servo_status": self.avoidance.distance_status().value,
            "obstacle_detected": self.avoidance.obstacle_detected,
            "timestamp": self.millis(),
        })
        self.client.set(GAS_DATA_PPM_PATH, self.gas)
        self.client.set(DISTANCE_MIRROR_PATH, self.distance)
        self.client.set(MOTION_CURRENT_PATH, self.motion.value)
        self.client.set(SERVO_ANGLE_PATH, self.servo_angle)

    def process_commands(self):
        """Consume pending command nodes"""
        request = self.client.get(MOTION_REQUEST_PATH)
        if request:
            try:
                self.motion = MotionState(str(request).upper())
                logger.info("Motion command received: %s", self.motion.value)
            except ValueError:
                logger.warning("Ignoring unknown motion command: %s", request)
            self.client.delete(MOTION_REQUEST_PATH)

        angle = self.client.get(SERVO_REQUEST_PATH)
        if isinstance(angle, (int, float)) and not isinstance(angle, bool) \
                and SERVO_MIN_ANGLE <= angle <= SERVO_MAX_ANGLE:
            self.servo_angle = int(angle)
            logger.info("Servo command received: %s", self.servo_angle)
            self.client.delete(SERVO_REQUEST_PATH)

        if self.client.get(EMERGENCY_STOP_PATH):
            self.avoidance.emergency_stop(self.millis())
            self.motion = MotionState.STOP
            self.client.set(EMERGENCY_STOP_PATH, False)
            logger.warning("Emergency stop")

        self.apply_ultrasonic_settings(self.client.get(ULTRASONIC_SERVO_PATH))

    def apply_ultrasonic_settings(self, node):
        if not isinstance(node, dict):
            return
        if node.get("reset"):
            self.avoidance.reset()
            self.client.delete(ULTRASONIC_RESET_PATH)
            logger.info("UltrasonicServo reset")

        current = UltrasonicServoSettings(
            threshold=node.get("threshold", self.avoidance.threshold),
            motor_speed=node.get("motor_speed", self.avoidance.motor_speed),
            rotation_duration=node.get("rotation_duration", self.avoidance.rotation_duration),
        )
        self.avoidance.set_obstacle_threshold(current.threshold)
        self.avoidance.set_motor_speed(current.motor_speed)
        self.avoidance.set_rotation_duration(current.rotation_duration)

    def run(self):
        self.running = True
        self.startup()
        next_update = time.monotonic()
        while self.running and not self.stop_event.is_set():
            try:
                self.process_commands()
                if time.monotonic() >= next_update:
                    self.read_sensors()
                    self.publish()
                    next_update = time.monotonic() + self.interval
            except FirebaseError as e:
                logger.error("Store error: %s", e)
            self.stop_event.wait(self.command_interval)

    def stop(self):
        self.running = False
        self.stop_event.set()


def main():
    parser = argparse.ArgumentParser(
        description='ToxiRover Simulator - publish simulated rover data to Firebase',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  toxirover-simulator
  toxirover-simulator --interval 1 --config config/config.json
        """
    )
    parser.add_argument('--interval', type=float, default=UPDATE_INTERVAL,
                        help='Seconds between sensor updates (default: 2)')
    parser.add_argument('--config', default=None,
                        help='Path to config.json')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    client = client_from_config(config)
    if client is None:
        print("Error: firebase.database_url is not configured in config.json")
        sys.exit(1)

    simulator = RoverSimulator(client, interval=args.interval)

    def signal_handler(sig, frame):
        print("\nStopping simulator...")
        simulator.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    print(f"ToxiRover simulator publishing to {client.database_url}")
    print("Press Ctrl+C to stop")
    try:
        simulator.run()
    finally:
        client.close()


if __name__ == "__main__":
    main()
