"""
Rover Store Manager
Owns the store subscriptions and the command writer for the dashboard.
Subscription callbacks run on worker threads; they only update the shared
view state and emit signals, the GUI thread does the rendering.
"""
import logging
from typing import Dict, List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from core.chart_history import ChartHistory
from core.rover_data import MotionState, UltrasonicServoSettings
from core.view_state import CONNECTED, CONNECTING, DEMO, ERROR, DashboardState
from rtdb.commands import ALERTS_PATH, SENSOR_DATA_PATH, CommandResult, CommandWriter
from rtdb.firebase_client import FirebaseClient, client_from_config
from rtdb.stream import StoreSubscription

logger = logging.getLogger(__name__)


class RoverStoreManager(QObject):
    """Store -> view state, and user input -> command writes"""
    snapshot_received = pyqtSignal(object)  # SensorSnapshot
    alert_received = pyqtSignal(object)  # AlertRecord
    connection_status_changed = pyqtSignal(str)
    command_result = pyqtSignal(object)  # CommandResult

    def __init__(self, config: dict, client: Optional[FirebaseClient] = None,
                 state: Optional[DashboardState] = None,
                 history: Optional[ChartHistory] = None):
        super().__init__()
        self.config = config
        self.client = client if client is not None else client_from_config(config)
        self.state = state or DashboardState()
        self.history = history or ChartHistory(config.get("chart", {}).get("default_range", "1m"))
        self.commands = CommandWriter(self.client)
        self.subscriptions: Dict[str, StoreSubscription] = {}

    @property
    def demo_mode(self) -> bool:
        return self.client is None

    def connect(self) -> bool:
        """Start listening to sensor data and alerts"""
        if self.demo_mode:
            self._set_status(DEMO)
            self.command_result.emit(CommandResult(
                True, "Running in demo mode. Configure Firebase for real data.", "info"))
            return False

        self._set_status(CONNECTING)
        reconnect_delay = float(self.config.get("firebase", {}).get("reconnect_delay", 1.0))
        sensor_sub = StoreSubscription(self.client, SENSOR_DATA_PATH, reconnect_delay)
        sensor_sub.register_callback(self._on_sensor_data)
        sensor_sub.register_error_callback(self._on_sensor_error)
        alerts_sub = StoreSubscription(self.client, ALERTS_PATH, reconnect_delay)
        alerts_sub.register_callback(self._on_alerts)
        alerts_sub.register_error_callback(self._on_alerts_error)

        self.subscriptions = {SENSOR_DATA_PATH: sensor_sub, ALERTS_PATH: alerts_sub}
        for sub in self.subscriptions.values():
            sub.start()
        return True

    def disconnect(self):
        for sub in self.subscriptions.values():
            sub.stop()
        self.subscriptions = {}
        if not self.demo_mode:
            self._set_status(CONNECTING)

    def is_listening(self) -> bool:
        return any(sub.running for sub in self.subscriptions.values())

    def get_connection_status(self) -> Dict[str, bool]:
        return {path: sub.is_connected for path, sub in self.subscriptions.items()}

    def _set_status(self, status: str):
        if self.state.connection_status != status:
            self.state.set_connection_status(status)
            self.connection_status_changed.emit(status)

    def _on_sensor_data(self, value):
        was_connected = self.state.connection_status == CONNECTED
        snapshot = self.state.apply_sensor_data(value)
        if snapshot is None:
            return
        self.history.add(snapshot.gas_concentration, snapshot.distance)
        if not was_connected:
            self.connection_status_changed.emit(CONNECTED)
        self.snapshot_received.emit(snapshot)

    def _on_alerts(self, value):
        alert = self.state.apply_alert_node(value)
        if alert is not None:
            self.alert_received.emit(alert)

    def _on_sensor_error(self, error: Exception):
        logger.error("Error reading sensor data: %s", error)
        self._set_status(ERROR)
        self.command_result.emit(CommandResult(False, "Failed to connect to sensor data", "error"))

    def _on_alerts_error(self, error: Exception):
        logger.error("Error reading alerts: %s", error)

    def _emit(self, result: CommandResult) -> CommandResult:
        self.command_result.emit(result)
        return result

    def send_motion_command(self, command) -> CommandResult:
        return self._emit(self.commands.send_motion_command(command))

    def send_servo_command(self, angle) -> CommandResult:
        return self._emit(self.commands.send_servo_command(angle))

    def send_emergency_stop(self) -> CommandResult:
        return self._emit(self.commands.send_emergency_stop())

    def apply_ultrasonic_settings(self, settings: UltrasonicServoSettings) -> List[CommandResult]:
        return [self._emit(r) for r in self.commands.apply_ultrasonic_settings(settings)]

    def reset_ultrasonic_servo(self) -> CommandResult:
        return self._emit(self.commands.reset_ultrasonic_servo())

    def start_moving(self) -> CommandResult:
        return self.send_motion_command(MotionState.FORWARD)
