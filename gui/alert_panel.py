"""
System Alerts panel
"""
from typing import Dict, List

from PyQt5.QtWidgets import QFrame, QVBoxLayout, QHBoxLayout, QLabel, QPushButton
from PyQt5.QtCore import Qt, pyqtSignal

from core.rover_data import AlertRecord, BLUE, RED, YELLOW
from .sensor_card import CARD_STYLE

SEVERITY_COLORS = {"danger": RED, "warning": YELLOW, "info": BLUE}
SEVERITY_ICONS = {"danger": "🚨", "warning": "⚠️", "info": "ℹ️"}
VISIBLE_ALERTS = 5


class AlertPanel(QFrame):
    """Last few alerts, newest first, with per-severity counts"""
    clear_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("card")
        self.setStyleSheet(CARD_STYLE)
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)

        header = QHBoxLayout()
        title = QLabel("System Alerts")
        title.setStyleSheet("font-size: 16px; font-weight: bold; color: #333;")
        header.addWidget(title)
        header.addStretch()
        self.clear_btn = QPushButton("Clear All")
        self.clear_btn.setStyleSheet("color: #6b7280; border: none;")
        self.clear_btn.clicked.connect(self.clear_requested.emit)
        header.addWidget(self.clear_btn)
        layout.addLayout(header)

        self.list_layout = QVBoxLayout()
        layout.addLayout(self.list_layout)

        self.empty_label = QLabel("No active alerts\nAll systems operating normally")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("color: #9ca3af; padding: 20px;")
        layout.addWidget(self.empty_label)

        self.summary_label = QLabel()
        self.summary_label.setStyleSheet("color: #4b5563; font-size: 12px;")
        layout.addWidget(self.summary_label)
        layout.addStretch()

        self.set_alerts([], {"danger": 0, "warning": 0, "info": 0})

    def _alert_row(self, alert: AlertRecord) -> QFrame:
        color = SEVERITY_COLORS.get(alert.severity, BLUE)
        row = QFrame()
        row.setStyleSheet(f"border-left: 4px solid {color}; background-color: #fafafa;")
        row_layout = QVBoxLayout(row)
        row_layout.setContentsMargins(8, 4, 8, 4)

        head = QLabel(f"{SEVERITY_ICONS.get(alert.severity, '')} <b>{alert.title}</b> "
                      f"<span style='color:#6b7280'>{alert.timestamp.strftime('%H:%M:%S')}</span>")
        row_layout.addWidget(head)
        message = QLabel(alert.message)
        message.setWordWrap(True)
        message.setStyleSheet("color: #374151; border: none;")
        row_layout.addWidget(message)
        return row

    def set_alerts(self, alerts: List[AlertRecord], summary: Dict[str, int]):
        while self.list_layout.count():
            item = self.list_layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

        for alert in alerts[:VISIBLE_ALERTS]:
            self.list_layout.addWidget(self._alert_row(alert))

        self.empty_label.setVisible(not alerts)
        self.clear_btn.setEnabled(bool(alerts))
        self.summary_label.setText(
            f"🚨 {summary['danger']} danger   ⚠️ {summary['warning']} warning   ℹ️ {summary['info']} info")
