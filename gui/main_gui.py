"""
ToxiRover Dashboard - main window
"""
import sys
import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from PyQt5.QtWidgets import (QApplication, QMainWindow, QWidget, QVBoxLayout,
                             QHBoxLayout, QGridLayout, QLabel, QMessageBox, QScrollArea)
from PyQt5.QtCore import QTimer

from core.config import ConfigError, load_config
from core.rover_data import AlertRecord, MotionState, SensorSnapshot
from core.view_state import CONNECTED, DEMO, ERROR
from rtdb.commands import ERROR as ERROR_LEVEL, INFO as INFO_LEVEL, CommandResult
from rtdb.store_manager import RoverStoreManager
from services.alert_notifications import NotificationManager
from services.http_server import DashboardHTTPServer
from services.remote_console import RemoteConsoleServer
from .alert_panel import AlertPanel
from .components import AlertClearHelper
from .controls import MotionControls, ServoControl, UltrasonicServoControl
from .data_chart import DataChart
from .sensor_card import SensorCard, StatusCard

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TOAST_MS = 3000
TOAST_COLORS = {ERROR_LEVEL: "#dc2626", INFO_LEVEL: "#2563eb"}
CONNECTION_COLORS = {CONNECTED: "#16a34a", ERROR: "#dc2626", DEMO: "#2563eb"}


class MainWindow(QMainWindow):
    """Main application window"""

    def __init__(self, config: dict = None, manager: RoverStoreManager = None):
        super().__init__()
        self.setWindowTitle("ToxiRover Dashboard")
        self.setGeometry(100, 100, 1400, 900)

        self.config = config if config is not None else load_config()

        self.manager = manager or RoverStoreManager(self.config)
        self.state = self.manager.state
        self.history = self.manager.history

        # Store writes block on HTTP; keep them off the GUI thread
        self.executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="rover-cmd")

        # Signals are delivered on the GUI thread
        self.manager.snapshot_received.connect(self.on_snapshot)
        self.manager.alert_received.connect(self.on_alert)
        self.manager.connection_status_changed.connect(self.on_connection_status)
        self.manager.command_result.connect(self.show_toast)

        self.notification_manager = NotificationManager(self.config, executor=self.executor)
        self.manager.alert_received.connect(self.notification_manager.send_notification)

        self.alert_clear_helper = AlertClearHelper(self._do_clear_alerts)

        self.remote_console = None
        self.console_thread = None
        self.console_loop = None
        self.http_server = None
        self.start_remote_console()
        self.start_http_server()

        self.setup_ui()

        update_rate = self.config.get("update_rate", 0.5)
        self.update_timer = QTimer()
        self.update_timer.timeout.connect(self.update_display)
        self.update_timer.start(int(update_rate * 1000))

        self.manager.connect()
        self.on_connection_status(self.state.connection_status)

    def setup_ui(self):
        central_widget = QWidget()
        central_widget.setStyleSheet("background-color: #f5f5f5;")
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(central_widget)
        self.setCentralWidget(scroll)

        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(20)

        header_layout = QHBoxLayout()
        title_label = QLabel("ToxiRover Dashboard")
        title_label.setStyleSheet("font-size: 24px; font-weight: bold; color: #333;")
        header_layout.addWidget(title_label)
        header_layout.addStretch()

        self.obstacle_badge = QLabel("⚠️ Obstacle Detected")
        self.obstacle_badge.setStyleSheet(
            "background-color: #fee2e2; color: #dc2626; padding: 6px 12px; "
            "border-radius: 12px; font-weight: bold;")
        self.obstacle_badge.hide()
        header_layout.addWidget(self.obstacle_badge)

        self.connection_dot = QLabel("●")
        header_layout.addWidget(self.connection_dot)
        self.connection_label = QLabel()
        self.connection_label.setStyleSheet("font-size: 14px; font-weight: bold;")
        header_layout.addWidget(self.connection_label)
        layout.addLayout(header_layout)

        cards = QGridLayout()
        cards.setSpacing(20)
        self.gas_card = SensorCard("Gas Concentration", "PPM", "gas")
        self.distance_card = SensorCard("Distance Sensor", "cm", "distance")
        self.status_card = StatusCard()
        cards.addWidget(self.gas_card, 0, 0)
        cards.addWidget(self.distance_card, 0, 1)
        cards.addWidget(self.status_card, 0, 2)
        layout.addLayout(cards)

        controls = QGridLayout()
        controls.setSpacing(20)
        self.motion_controls = MotionControls()
        self.motion_controls.motion_requested.connect(self.send_motion_command)
        self.motion_controls.emergency_stop_requested.connect(self.send_emergency_stop)
        self.servo_control = ServoControl()
        self.servo_control.angle_requested.connect(self.send_servo_command)
        self.ultrasonic_control = UltrasonicServoControl()
        self.ultrasonic_control.emergency_stop_requested.connect(self.send_emergency_stop)
        self.ultrasonic_control.reset_requested.connect(self.reset_ultrasonic_servo)
        self.ultrasonic_control.settings_applied.connect(self.apply_ultrasonic_settings)
        controls.addWidget(self.motion_controls, 0, 0)
        controls.addWidget(self.servo_control, 0, 1)
        controls.addWidget(self.ultrasonic_control, 0, 2)
        layout.addLayout(controls)

        bottom = QHBoxLayout()
        bottom.setSpacing(20)
        self.data_chart = DataChart(self.history)
        self.alert_panel = AlertPanel()
        self.alert_panel.clear_requested.connect(self.clear_alerts)
        bottom.addWidget(self.data_chart, 2)
        bottom.addWidget(self.alert_panel, 1)
        layout.addLayout(bottom)

        self.statusBar().showMessage("Ready")

    # Commands run on the executor; results come back through command_result

    def _submit(self, func, *args):
        self.executor.submit(func, *args)

    def send_motion_command(self, motion: MotionState):
        self._submit(self.manager.send_motion_command, motion)

    def send_servo_command(self, angle: int):
        self._submit(self.manager.send_servo_command, angle)

    def send_emergency_stop(self):
        self._submit(self.manager.send_emergency_stop)

    def apply_ultrasonic_settings(self, settings):
        self._submit(self.manager.apply_ultrasonic_settings, settings)

    def reset_ultrasonic_servo(self):
        self._submit(self.manager.reset_ultrasonic_servo)

    def show_toast(self, result: CommandResult):
        color = TOAST_COLORS.get(result.level, "#16a34a")
        self.statusBar().setStyleSheet(f"color: {color}; font-weight: bold;")
        self.statusBar().showMessage(result.message, TOAST_MS)

    def on_snapshot(self, snapshot: SensorSnapshot):
        self._broadcast(self.remote_console.broadcast_sensor_update(snapshot)
                        if self.remote_console else None)

    def on_alert(self, alert: AlertRecord):
        logger.info("Alert: %s - %s", alert.title, alert.message)
        self._broadcast(self.remote_console.broadcast_alert(alert)
                        if self.remote_console else None)

    def on_connection_status(self, status: str):
        color = CONNECTION_COLORS.get(status, "#ca8a04")
        self.connection_dot.setStyleSheet(f"color: {color}; font-size: 16px;")
        self.connection_label.setText(self.state.connection_label)
        self.connection_label.setStyleSheet(f"font-size: 14px; font-weight: bold; color: {color};")

        enabled = status in (CONNECTED, DEMO)
        self.motion_controls.set_enabled(enabled)
        self.servo_control.set_enabled(enabled)
        self._broadcast(self.remote_console.broadcast_connection_status(status)
                        if self.remote_console else None)

    def _broadcast(self, coro):
        if coro is None:
            return
        if self.console_loop is None or not self.console_loop.is_running():
            coro.close()
            return
        asyncio.run_coroutine_threadsafe(coro, self.console_loop)

    def update_display(self):
        """Render the shared view state"""
        snapshot = self.state.snapshot
        self.gas_card.update_reading(snapshot.gas_concentration, self.state.gas_status())
        self.distance_card.update_reading(snapshot.distance, self.state.distance_status(), snapshot)
        self.status_card.update_snapshot(snapshot)
        self.motion_controls.set_current_motion(snapshot.motion)
        self.servo_control.set_current_angle(snapshot.servo_angle)
        self.ultrasonic_control.update_status(
            snapshot.ultrasonic_servo_distance,
            snapshot.ultrasonic_servo_status,
            snapshot.obstacle_detected)
        self.obstacle_badge.setVisible(snapshot.obstacle_detected)

        self.data_chart.refresh()
        self.alert_panel.set_alerts(self.state.recent_alerts(), self.state.alert_summary())

    def clear_alerts(self):
        """Clear the alert list (called from the GUI button)"""
        self.state.clear_alerts()
        self.update_display()

    def clear_alerts_from_remote(self):
        """Called on the console thread; the state is already cleared there"""
        self.alert_clear_helper.clear_requested.emit()

    def _do_clear_alerts(self):
        self.update_display()

    def start_remote_console(self):
        """Start the browser console websocket server in its own event loop thread"""
        console_config = self.config.get("remote_console", {})
        if not console_config.get("enabled", True):
            logger.info("Remote console is disabled in config.json")
            return

        host = console_config.get("host", "localhost")
        port = console_config.get("port", 8765)
        self.remote_console = RemoteConsoleServer(self.state, self.manager, host=host, port=port)
        self.remote_console.set_clear_alerts_callback(self.clear_alerts_from_remote)
        self.console_loop = asyncio.new_event_loop()

        def run_console():
            asyncio.set_event_loop(self.console_loop)
            try:
                self.console_loop.run_until_complete(self.remote_console.start())
            except OSError as e:
                logger.error("Remote console error: %s", e)
            except RuntimeError:
                # Event loop stopped on shutdown
                pass

        self.console_thread = threading.Thread(target=run_console, daemon=True)
        self.console_thread.start()

    def start_http_server(self):
        console_config = self.config.get("remote_console", {})
        if not console_config.get("enabled", True):
            return
        host = console_config.get("host", "localhost")
        ws_url = f"ws://{host}:{console_config.get('port', 8765)}"
        self.http_server = DashboardHTTPServer(console_config.get("http_port", 8080), ws_url)
        if not self.http_server.start():
            self.http_server = None

    def closeEvent(self, event):
        self.update_timer.stop()
        self.manager.disconnect()
        self.executor.shutdown(wait=False)

        if self.http_server:
            self.http_server.stop()

        if self.console_loop and self.console_loop.is_running():
            self.console_loop.call_soon_threadsafe(self.console_loop.stop)
        event.accept()


def main():
    """Main entry point"""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    app = QApplication(sys.argv)

    try:
        config = load_config()
    except ConfigError as e:
        QMessageBox.critical(None, "Config Error", str(e))
        sys.exit(1)

    window = MainWindow(config)
    window.show()

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
