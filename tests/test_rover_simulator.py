"""
Unit tests for the rover simulator
"""
import random

from core.rover_data import LevelStatus, MotionState
from simulators.rover_simulator import RoverSimulator, SensorModel, firmware_gas_status


class MemoryClient:
    """In-memory stand-in for the store"""

    def __init__(self, data=None):
        self.data = data or {}
        self.deleted = []

    def _node(self, path, create=False):
        keys = [k for k in path.split("/") if k]
        node = self.data
        for key in keys[:-1]:
            if key not in node or not isinstance(node[key], dict):
                if not create:
                    return None, keys[-1]
                node[key] = {}
            node = node[key]
        return node, keys[-1]

    def get(self, path):
        node, key = self._node(path)
        return node.get(key) if node is not None else None

    def set(self, path, value):
        node, key = self._node(path, create=True)
        node[key] = value

    def update(self, path, values):
        node, key = self._node(path, create=True)
        node.setdefault(key, {}).update(values)

    def delete(self, path):
        self.deleted.append(path)
        node, key = self._node(path)
        if node is not None:
            node.pop(key, None)


class FixedSensors(SensorModel):
    def __init__(self, readings):
        super().__init__(random.Random(0))
        self.readings = list(readings)

    def next_gas(self):
        return self.readings[0][0]

    def next_distance(self, motion):
        return self.readings.pop(0)[1]


class TestFirmwareRules:
    """Test firmware classification"""

    def test_gas_status(self):
        """Test firmware thresholds are inclusive"""
        assert firmware_gas_status(299) == LevelStatus.SAFE
        assert firmware_gas_status(300) == LevelStatus.WARNING
        assert firmware_gas_status(500) == LevelStatus.DANGER

    def test_sensor_model_ranges(self):
        """Test generated readings stay plausible"""
        model = SensorModel(random.Random(42))
        for _ in range(200):
            assert model.next_gas() >= 0
            assert 0 < model.next_distance(MotionState.FORWARD) <= 400


class TestSimulator:
    """Test one simulator cycle against an in-memory store"""

    def test_startup(self):
        """Test startup writes status and a startup alert"""
        client = MemoryClient()
        RoverSimulator(client).startup()
        assert client.data["status"] == "ONLINE"
        assert client.data["alerts"]["last_alert"] == "SYSTEM_STARTUP"
        assert client.data["sensor_data"]["motion"] == "STOP"

    def test_publish_writes_mirrors(self):
        """Test sensor_data and the flat mirrors"""
        client = MemoryClient()
        simulator = RoverSimulator(client, sensors=FixedSensors([(120.0, 80.0)]))
        simulator.read_sensors()
        simulator.publish()
        assert client.data["sensor_data"]["gas_concentration"] == 120.0
        assert client.data["sensor_data"]["distance"] == 80.0
        assert client.data["sensor_data"]["ultrasonic_servo_status"] == "SAFE"
        assert client.data["gas_data"]["ppm"] == 120.0
        assert client.data["ultrasonic_distance"] == 80.0
        assert client.data["motion_command"]["current"] == "STOP"
        assert client.data["servo"]["angle"] == 90

    def test_gas_alert_on_danger(self):
        """Test crossing into DANGER raises one alert"""
        client = MemoryClient()
        simulator = RoverSimulator(client, sensors=FixedSensors([(650.0, 80.0), (650.0, 80.0)]))
        simulator.read_sensors()
        assert client.data["alerts"]["last_alert"] == "HIGH_GAS_LEVEL"
        assert client.data["alerts"]["gas_level"] == 650.0
        client.data["alerts"]["last_alert"] = "SEEN"
        simulator.read_sensors()
        assert client.data["alerts"]["last_alert"] == "SEEN"

    def test_obstacle_alert(self):
        """Test an obstacle triggers the auto-response alert"""
        client = MemoryClient()
        simulator = RoverSimulator(client, sensors=FixedSensors([(100.0, 12.0)]))
        simulator.motion = MotionState.FORWARD
        simulator.read_sensors()
        assert client.data["alerts"]["last_alert"] == "OBSTACLE_DETECTED"
        assert simulator.motion == MotionState.STOP
        assert simulator.avoidance.obstacle_detected

    def test_consumes_commands(self):
        """Test motion and servo requests are applied and deleted"""
        client = MemoryClient({
            "motion_command": {"request": "LEFT"},
            "servo": {"request": 45},
        })
        simulator = RoverSimulator(client)
        simulator.process_commands()
        assert simulator.motion == MotionState.LEFT
        assert simulator.servo_angle == 45
        assert "motion_command/request" in client.deleted
        assert "servo/request" in client.deleted

    def test_out_of_range_servo_ignored(self):
        """Test servo requests outside 0-180 are not applied"""
        client = MemoryClient({"servo": {"request": 270}})
        simulator = RoverSimulator(client)
        simulator.process_commands()
        assert simulator.servo_angle == 90

    def test_emergency_stop(self):
        """Test the emergency stop flag stops the rover and is cleared"""
        client = MemoryClient({"emergency_stop": True})
        simulator = RoverSimulator(client)
        simulator.motion = MotionState.FORWARD
        simulator.process_commands()
        assert simulator.motion == MotionState.STOP
        assert client.data["emergency_stop"] is False

    def test_ultrasonic_settings_and_reset(self):
        """Test tunables apply and reset is consumed"""
        client = MemoryClient({"ultrasonic_servo": {
            "threshold": 35, "motor_speed": 180, "rotation_duration": 700, "reset": True
        }})
        simulator = RoverSimulator(client)
        simulator.avoidance.obstacle_detected = True
        simulator.process_commands()
        assert simulator.avoidance.threshold == 35
        assert simulator.avoidance.motor_speed == 180
        assert simulator.avoidance.rotation_duration == 700
        assert not simulator.avoidance.obstacle_detected
        assert "ultrasonic_servo/reset" in client.deleted
