"""
Control Panels - motion pad, servo control and ultrasonic servo settings
Panels only emit requests; the main window routes them to the store manager.
"""
from PyQt5.QtWidgets import (QFrame, QVBoxLayout, QHBoxLayout, QGridLayout,
                             QLabel, QPushButton, QSlider, QWidget)
from PyQt5.QtCore import Qt, pyqtSignal, QTimer

from core.rover_data import (
    GAS_DISPERSAL_SEQUENCE,
    GAS_DISPERSAL_STEP_SECONDS,
    SERVO_FINE_STEP,
    SERVO_MAX_ANGLE,
    SERVO_MIN_ANGLE,
    LevelStatus,
    MotionState,
    UltrasonicServoSettings,
    step_servo_angle,
)
from .sensor_card import CARD_STYLE, StatusPill


BUTTON_STYLE = """
    QPushButton {
        background-color: #374151;
        color: white;
        border: none;
        padding: 10px;
        border-radius: 5px;
        font-weight: bold;
    }
    QPushButton:hover { background-color: #4b5563; }
    QPushButton:disabled { background-color: #9ca3af; }
"""
ACTIVE_BUTTON_STYLE = BUTTON_STYLE.replace("#374151", "#2563eb")
DANGER_BUTTON_STYLE = BUTTON_STYLE.replace("#374151", "#dc2626")
DISCONNECTED_TEXT = "⚠️ Disconnected from ToxiRover"


def _card_title(text):
    label = QLabel(text)
    label.setStyleSheet("font-size: 16px; font-weight: bold; color: #333;")
    return label


def _disconnected_label():
    label = QLabel(DISCONNECTED_TEXT)
    label.setStyleSheet("color: #dc2626; font-size: 12px;")
    label.hide()
    return label


class MotionControls(QFrame):
    """Direction pad with quick actions"""
    motion_requested = pyqtSignal(object)  # MotionState
    emergency_stop_requested = pyqtSignal()

    PAD = [
        (MotionState.FORWARD, "▲", 0, 1),
        (MotionState.LEFT, "◀", 1, 0),
        (MotionState.STOP, "■", 1, 1),
        (MotionState.RIGHT, "▶", 1, 2),
        (MotionState.BACKWARD, "▼", 2, 1),
    ]

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("card")
        self.setStyleSheet(CARD_STYLE)
        self.current_motion = MotionState.STOP
        self.buttons = {}
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.addWidget(_card_title("Motion Controls"))

        self.current_label = QLabel(self.current_motion.value)
        self.current_label.setAlignment(Qt.AlignCenter)
        self.current_label.setStyleSheet("font-size: 20px; font-weight: bold;")
        layout.addWidget(self.current_label)

        grid = QGridLayout()
        for motion, text, row, col in self.PAD:
            btn = QPushButton(text)
            btn.setFixedSize(56, 56)
            btn.setToolTip(motion.value.title())
            btn.clicked.connect(lambda _, m=motion: self.motion_requested.emit(m))
            grid.addWidget(btn, row, col)
            self.buttons[motion] = btn
        layout.addLayout(grid)

        quick = QHBoxLayout()
        self.start_btn = QPushButton("Start")
        self.start_btn.setStyleSheet(BUTTON_STYLE.replace("#374151", "#16a34a"))
        self.start_btn.clicked.connect(lambda: self.motion_requested.emit(MotionState.FORWARD))
        quick.addWidget(self.start_btn)
        self.estop_btn = QPushButton("Emergency Stop")
        self.estop_btn.setStyleSheet(DANGER_BUTTON_STYLE)
        self.estop_btn.clicked.connect(self.emergency_stop_requested.emit)
        quick.addWidget(self.estop_btn)
        layout.addLayout(quick)

        self.moving_label = QLabel("⏹️ Stopped")
        self.moving_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.moving_label)

        self.disconnected_label = _disconnected_label()
        layout.addWidget(self.disconnected_label)
        self.refresh_buttons()

    def refresh_buttons(self):
        for motion, btn in self.buttons.items():
            btn.setStyleSheet(ACTIVE_BUTTON_STYLE if motion == self.current_motion else BUTTON_STYLE)

    def set_current_motion(self, motion: MotionState):
        self.current_motion = motion
        self.current_label.setText(motion.value)
        moving = motion != MotionState.STOP
        self.moving_label.setText("▶️ Moving" if moving else "⏹️ Stopped")
        self.moving_label.setStyleSheet(
            "color: #15803d; font-weight: bold;" if moving else "color: #4b5563; font-weight: bold;")
        self.refresh_buttons()

    def set_enabled(self, enabled: bool):
        for btn in list(self.buttons.values()) + [self.start_btn, self.estop_btn]:
            btn.setEnabled(enabled)
        self.disconnected_label.setVisible(not enabled)


class ServoControl(QFrame):
    """0-180 slider sent on release, presets, fine steps and gas dispersal"""
    angle_requested = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("card")
        self.setStyleSheet(CARD_STYLE)
        self.current_angle = 90
        self.dispersal_timers = []
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.addWidget(_card_title("Servo Control"))

        self.angle_label = QLabel("90°")
        self.angle_label.setAlignment(Qt.AlignCenter)
        self.angle_label.setStyleSheet("font-size: 28px; font-weight: bold; color: #2563eb;")
        layout.addWidget(self.angle_label)

        layout.addWidget(QLabel("Angle Control (0° - 180°)"))
        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(SERVO_MIN_ANGLE, SERVO_MAX_ANGLE)
        self.slider.setValue(self.current_angle)
        self.slider.sliderReleased.connect(lambda: self.request_angle(self.slider.value()))
        layout.addWidget(self.slider)

        presets = QHBoxLayout()
        for text, angle in (("Left (0°)", 0), ("Center (90°)", 90), ("Right (180°)", 180)):
            btn = QPushButton(text)
            btn.setStyleSheet(BUTTON_STYLE)
            btn.clicked.connect(lambda _, a=angle: self.request_angle(a))
            presets.addWidget(btn)
        layout.addLayout(presets)

        fine = QHBoxLayout()
        minus = QPushButton(f"-{SERVO_FINE_STEP}°")
        minus.setStyleSheet(BUTTON_STYLE)
        minus.clicked.connect(lambda: self.request_angle(
            step_servo_angle(self.current_angle, -SERVO_FINE_STEP)))
        plus = QPushButton(f"+{SERVO_FINE_STEP}°")
        plus.setStyleSheet(BUTTON_STYLE)
        plus.clicked.connect(lambda: self.request_angle(
            step_servo_angle(self.current_angle, SERVO_FINE_STEP)))
        fine.addWidget(minus)
        fine.addWidget(plus)
        layout.addLayout(fine)

        self.dispersal_btn = QPushButton("💨 Activate Gas Dispersal")
        self.dispersal_btn.setStyleSheet(BUTTON_STYLE.replace("#374151", "#7c3aed"))
        self.dispersal_btn.clicked.connect(self.start_gas_dispersal)
        layout.addWidget(self.dispersal_btn)

        self.disconnected_label = _disconnected_label()
        layout.addWidget(self.disconnected_label)

    def request_angle(self, angle: int):
        self.slider.setValue(angle)
        self.angle_requested.emit(angle)

    def start_gas_dispersal(self):
        """Sweep 180 -> 0 -> 180 -> 90, one step per second"""
        step_ms = int(GAS_DISPERSAL_STEP_SECONDS * 1000)
        for i, angle in enumerate(GAS_DISPERSAL_SEQUENCE):
            QTimer.singleShot(i * step_ms, lambda a=angle: self.request_angle(a))

    def set_current_angle(self, angle):
        self.current_angle = int(angle)
        self.angle_label.setText(f"{angle:g}°")
        if not self.slider.isSliderDown():
            self.slider.setValue(self.current_angle)

    def set_enabled(self, enabled: bool):
        for child in self.findChildren((QPushButton, QSlider)):
            child.setEnabled(enabled)
        self.disconnected_label.setVisible(not enabled)


class UltrasonicServoControl(QFrame):
    """Auto-response status, emergency stop/reset and tunables"""
    emergency_stop_requested = pyqtSignal()
    reset_requested = pyqtSignal()
    settings_applied = pyqtSignal(object)  # UltrasonicServoSettings

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("card")
        self.setStyleSheet(CARD_STYLE)
        self.settings = UltrasonicServoSettings()
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)

        header = QHBoxLayout()
        header.addWidget(_card_title("UltrasonicServo"))
        header.addStretch()
        self.settings_btn = QPushButton("⚙")
        self.settings_btn.setFixedSize(28, 28)
        self.settings_btn.setCheckable(True)
        self.settings_btn.toggled.connect(self.toggle_settings)
        header.addWidget(self.settings_btn)
        layout.addLayout(header)

        status_row = QHBoxLayout()
        self.distance_label = QLabel("0.0 cm")
        self.distance_label.setStyleSheet("font-size: 22px; font-weight: bold;")
        status_row.addWidget(self.distance_label)
        status_row.addStretch()
        self.status_pill = StatusPill()
        status_row.addWidget(self.status_pill)
        layout.addLayout(status_row)

        self.obstacle_label = QLabel("⚠️ Obstacle Detected")
        self.obstacle_label.setStyleSheet("color: #dc2626; font-weight: bold;")
        self.obstacle_label.hide()
        layout.addWidget(self.obstacle_label)

        buttons = QHBoxLayout()
        estop = QPushButton("Emergency Stop")
        estop.setStyleSheet(DANGER_BUTTON_STYLE)
        estop.clicked.connect(self.emergency_stop_requested.emit)
        buttons.addWidget(estop)
        reset = QPushButton("Reset")
        reset.setStyleSheet(BUTTON_STYLE)
        reset.clicked.connect(self.reset_requested.emit)
        buttons.addWidget(reset)
        layout.addLayout(buttons)

        self.settings_panel = QWidget()
        panel_layout = QVBoxLayout(self.settings_panel)
        panel_layout.setContentsMargins(0, 0, 0, 0)
        self.threshold_slider = self._add_slider(
            panel_layout, "Obstacle Threshold (cm)", UltrasonicServoSettings.THRESHOLD_RANGE,
            self.settings.threshold, "cm")
        self.speed_slider = self._add_slider(
            panel_layout, "Motor Speed", UltrasonicServoSettings.MOTOR_SPEED_RANGE,
            self.settings.motor_speed, "")
        self.duration_slider = self._add_slider(
            panel_layout, "Rotation Duration (ms)", UltrasonicServoSettings.ROTATION_DURATION_RANGE,
            self.settings.rotation_duration, "ms", step=UltrasonicServoSettings.ROTATION_DURATION_STEP)
        apply_btn = QPushButton("Apply Settings")
        apply_btn.setStyleSheet(ACTIVE_BUTTON_STYLE)
        apply_btn.clicked.connect(self.apply_settings)
        panel_layout.addWidget(apply_btn)
        self.settings_panel.hide()
        layout.addWidget(self.settings_panel)

        self.info_label = QLabel()
        self.info_label.setWordWrap(True)
        self.info_label.setStyleSheet("color: #6b7280; font-size: 11px;")
        layout.addWidget(self.info_label)
        self._update_info()

    def _add_slider(self, layout, caption, value_range, value, unit, step=1):
        layout.addWidget(QLabel(caption))
        row = QHBoxLayout()
        low, high = value_range
        slider = QSlider(Qt.Horizontal)
        slider.setRange(low, high)
        slider.setSingleStep(step)
        slider.setPageStep(step)
        slider.setValue(value)
        value_label = QLabel(f"{value}{unit}")
        slider.valueChanged.connect(lambda v: value_label.setText(f"{v}{unit}"))
        row.addWidget(QLabel(f"{low}{unit}"))
        row.addWidget(slider)
        row.addWidget(QLabel(f"{high}{unit}"))
        row.addWidget(value_label)
        layout.addLayout(row)
        return slider

    def toggle_settings(self, visible: bool):
        self.settings_panel.setVisible(visible)

    def current_settings(self) -> UltrasonicServoSettings:
        return UltrasonicServoSettings(
            threshold=self.threshold_slider.value(),
            motor_speed=self.speed_slider.value(),
            rotation_duration=self.duration_slider.value(),
        )

    def apply_settings(self):
        self.settings = self.current_settings()
        self.duration_slider.setValue(self.settings.rotation_duration)
        self._update_info()
        self.settings_applied.emit(self.settings)

    def _update_info(self):
        self.info_label.setText(
            f"• Automatically detects obstacles within {self.settings.threshold}cm\n"
            "• Triggers motor rotation and servo movement\n"
            "• Cooldown period prevents rapid responses")

    def update_status(self, distance: float, status: LevelStatus, obstacle_detected: bool):
        self.distance_label.setText(f"{distance:.1f} cm")
        self.status_pill.set_status(status)
        self.obstacle_label.setVisible(obstacle_detected)
