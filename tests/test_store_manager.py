"""
Unit tests for the store manager signals
"""
from core.view_state import CONNECTED, DEMO, ERROR
from rtdb.store_manager import RoverStoreManager


class RecordingClient:
    def __init__(self):
        self.writes = []

    def set(self, path, value):
        self.writes.append((path, value))


def collect(signal):
    values = []
    signal.connect(values.append)
    return values


class TestDemoMode:
    """Test the manager without a configured store"""

    def test_connect_in_demo_mode(self):
        """Test demo mode is announced instead of subscribing"""
        manager = RoverStoreManager({"firebase": {"database_url": ""}})
        statuses = collect(manager.connection_status_changed)
        results = collect(manager.command_result)
        assert manager.connect() is False
        assert manager.demo_mode
        assert statuses == [DEMO]
        assert results[0].message == "Running in demo mode. Configure Firebase for real data."
        assert not manager.is_listening()

    def test_commands_are_emitted(self):
        """Test each command result is emitted"""
        manager = RoverStoreManager({}, client=None)
        results = collect(manager.command_result)
        manager.start_moving()
        manager.send_servo_command(30)
        assert [r.message for r in results] == [
            "Demo mode: Motion command simulated",
            "Demo mode: Servo command simulated",
        ]


class TestStoreCallbacks:
    """Test subscription callbacks"""

    def test_sensor_data(self):
        """Test sensor values update state, history and listeners"""
        manager = RoverStoreManager({}, client=RecordingClient())
        snapshots = collect(manager.snapshot_received)
        statuses = collect(manager.connection_status_changed)
        manager._on_sensor_data({"gas_concentration": 300, "distance": 25})
        manager._on_sensor_data({"gas_concentration": 310, "distance": 24})
        assert len(snapshots) == 2
        assert statuses == [CONNECTED]
        assert manager.history.gas_values() == [300, 310]
        assert manager.state.snapshot.distance == 24

    def test_empty_sensor_data(self):
        """Test empty values are ignored"""
        manager = RoverStoreManager({}, client=RecordingClient())
        snapshots = collect(manager.snapshot_received)
        manager._on_sensor_data(None)
        assert snapshots == []
        assert len(manager.history) == 0

    def test_alerts(self):
        """Test alert values are emitted"""
        manager = RoverStoreManager({}, client=RecordingClient())
        alerts = collect(manager.alert_received)
        manager._on_alerts({"last_alert": "HIGH_GAS_LEVEL", "gas_level": 700})
        assert alerts[0].severity == "danger"

    def test_sensor_error(self):
        """Test subscription failures set the error status"""
        manager = RoverStoreManager({}, client=RecordingClient())
        results = collect(manager.command_result)
        manager._on_sensor_error(RuntimeError("offline"))
        assert manager.state.connection_status == ERROR
        assert results[0].message == "Failed to connect to sensor data"
        assert not results[0].success

    def test_writes_go_to_store(self):
        """Test commands reach the client"""
        client = RecordingClient()
        manager = RoverStoreManager({}, client=client)
        manager.send_emergency_stop()
        assert client.writes == [("emergency_stop", True), ("motion_command/request", "STOP")]
