"""
Sensor Cards for the Dashboard
"""
from PyQt5.QtWidgets import QVBoxLayout, QHBoxLayout, QLabel, QFrame
from PyQt5.QtCore import Qt

from core.rover_data import (
    LevelStatus,
    MotionState,
    SensorSnapshot,
    gas_bar_color,
    gas_level_percent,
    status_color,
)
from .circular_progress import CircularProgressWidget, DistanceCircleWidget


CARD_STYLE = """
    QFrame#card {
        background-color: white;
        border-radius: 10px;
        border: 1px solid #e0e0e0;
    }
"""


def pill_style(status) -> str:
    return (f"background-color: {status_color(status)}; color: white; "
            "border-radius: 9px; padding: 2px 10px; font-size: 11px; font-weight: bold;")


class StatusPill(QLabel):
    """Rounded status label colored by level"""

    def __init__(self, parent=None):
        super().__init__("NORMAL", parent)
        self.setAlignment(Qt.AlignCenter)
        self.set_status(None)

    def set_status(self, status):
        text = status.value if isinstance(status, LevelStatus) else (status or "NORMAL")
        self.setText(text)
        self.setStyleSheet(pill_style(status))


class SensorCard(QFrame):
    """Card with title, status pill, big value and a visual indicator"""

    def __init__(self, title, unit, kind, parent=None):
        super().__init__(parent)
        self.title = title
        self.unit = unit
        self.kind = kind  # "gas" or "distance"
        self.setObjectName("card")
        self.setStyleSheet(CARD_STYLE)
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(10)

        header = QHBoxLayout()
        title_label = QLabel(self.title)
        title_label.setStyleSheet("font-size: 16px; font-weight: bold; color: #333;")
        header.addWidget(title_label)
        header.addStretch()
        self.status_pill = StatusPill()
        header.addWidget(self.status_pill)
        layout.addLayout(header)

        self.value_label = QLabel(f"0 {self.unit}")
        self.value_label.setStyleSheet("font-size: 28px; font-weight: bold; color: #111;")
        layout.addWidget(self.value_label)

        if self.kind == "gas":
            self.gauge = CircularProgressWidget(self)
            layout.addWidget(self.gauge, alignment=Qt.AlignCenter)
        else:
            self.gauge = DistanceCircleWidget(self)
            layout.addWidget(self.gauge, alignment=Qt.AlignCenter)
            self._setup_ultrasonic_panel(layout)

        layout.addStretch()

    def _setup_ultrasonic_panel(self, layout):
        panel = QFrame()
        panel.setStyleSheet("background-color: #f9fafb; border-radius: 8px;")
        panel_layout = QVBoxLayout(panel)

        row = QHBoxLayout()
        name = QLabel("UltrasonicServo")
        name.setStyleSheet("font-size: 13px; font-weight: bold; color: #374151;")
        row.addWidget(name)
        row.addStretch()
        self.us_status_pill = StatusPill()
        row.addWidget(self.us_status_pill)
        panel_layout.addLayout(row)

        self.us_distance_label = QLabel("0.0 cm")
        self.us_distance_label.setStyleSheet("font-size: 16px; font-weight: bold; color: #1f2937;")
        panel_layout.addWidget(self.us_distance_label)

        self.obstacle_label = QLabel("⚠️ Obstacle detected - Auto-response active")
        self.obstacle_label.setStyleSheet("font-size: 11px; color: #dc2626; font-weight: bold;")
        self.obstacle_label.hide()
        panel_layout.addWidget(self.obstacle_label)

        layout.addWidget(panel)

    def update_reading(self, value, status, snapshot: SensorSnapshot = None):
        self.value_label.setText(f"{value:g} {self.unit}")
        self.status_pill.set_status(status)

        if self.kind == "gas":
            percent = gas_level_percent(value)
            self.gauge.set_color(gas_bar_color(percent))
            self.gauge.set_value(percent, f"{percent:.0f}%")
        else:
            self.gauge.set_distance(value)
            if snapshot is not None:
                self.us_status_pill.set_status(snapshot.ultrasonic_servo_status)
                self.us_distance_label.setText(f"{snapshot.ultrasonic_servo_distance:.1f} cm")
                self.obstacle_label.setVisible(snapshot.obstacle_detected)


class StatusCard(QFrame):
    """Current motion, servo angle and ultrasonic servo status"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("card")
        self.setStyleSheet(CARD_STYLE)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        title = QLabel("Current Status")
        title.setStyleSheet("font-size: 16px; font-weight: bold; color: #333;")
        layout.addWidget(title)

        self.motion_label = self._add_row(layout, "Motion:")
        self.servo_label = self._add_row(layout, "Servo Angle:")
        self.us_status_label = self._add_row(layout, "UltrasonicServo:")
        layout.addStretch()

    def _add_row(self, layout, caption):
        row = QHBoxLayout()
        caption_label = QLabel(caption)
        caption_label.setStyleSheet("color: #4b5563;")
        row.addWidget(caption_label)
        row.addStretch()
        value = QLabel("--")
        value.setStyleSheet("font-weight: bold;")
        row.addWidget(value)
        layout.addLayout(row)
        return value

    def update_snapshot(self, snapshot: SensorSnapshot):
        motion_color = "#dc2626" if snapshot.motion == MotionState.STOP else "#16a34a"
        self.motion_label.setText(snapshot.motion.value)
        self.motion_label.setStyleSheet(f"font-weight: bold; color: {motion_color};")

        self.servo_label.setText(f"{snapshot.servo_angle:g}°")
        self.servo_label.setStyleSheet("font-weight: bold; color: #2563eb;")

        status = snapshot.ultrasonic_servo_status
        color = {"DANGER": "#dc2626", "WARNING": "#ca8a04"}.get(status.value, "#16a34a")
        self.us_status_label.setText(status.value)
        self.us_status_label.setStyleSheet(f"font-weight: bold; color: {color};")
