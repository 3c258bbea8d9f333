"""
Sensor Data Chart - gas and distance history plotted with pyqtgraph
"""
import time

import pyqtgraph as pg
from PyQt5.QtWidgets import QFrame, QVBoxLayout, QHBoxLayout, QLabel, QPushButton

from core.chart_history import TIME_RANGES, ChartHistory
from core.rover_data import gas_chart_color, distance_chart_color
from .sensor_card import CARD_STYLE

RANGE_BUTTON_STYLE = "padding: 4px 10px; border-radius: 4px; background-color: {bg}; color: {fg};"


class DataChart(QFrame):
    """Two stacked plots over the selected time range"""

    def __init__(self, history: ChartHistory, parent=None):
        super().__init__(parent)
        self.history = history
        self.setObjectName("card")
        self.setStyleSheet(CARD_STYLE)
        self.range_buttons = {}
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)

        header = QHBoxLayout()
        title = QLabel("Sensor Data Chart")
        title.setStyleSheet("font-size: 16px; font-weight: bold; color: #333;")
        header.addWidget(title)
        header.addStretch()
        for name in TIME_RANGES:
            btn = QPushButton(name)
            btn.clicked.connect(lambda _, n=name: self.set_time_range(n))
            header.addWidget(btn)
            self.range_buttons[name] = btn
        layout.addLayout(header)

        values = QHBoxLayout()
        self.gas_value_label = QLabel("Gas: -- PPM")
        self.distance_value_label = QLabel("Distance: -- cm")
        values.addWidget(self.gas_value_label)
        values.addWidget(self.distance_value_label)
        values.addStretch()
        layout.addLayout(values)

        self.gas_plot = self._make_plot("Gas Concentration (PPM)")
        self.gas_curve = self.gas_plot.plot(
            [], [], pen=pg.mkPen(color="#ef4444", width=2),
            fillLevel=0, brush=pg.mkBrush(239, 68, 68, 60))
        layout.addWidget(self.gas_plot)

        self.distance_plot = self._make_plot("Distance (cm)")
        self.distance_curve = self.distance_plot.plot(
            [], [], pen=pg.mkPen(color="#3b82f6", width=2))
        layout.addWidget(self.distance_plot)

        self.points_label = QLabel("Data points: 0")
        self.points_label.setStyleSheet("color: #6b7280; font-size: 11px;")
        layout.addWidget(self.points_label)

        self._style_range_buttons()

    def _make_plot(self, label):
        plot = pg.PlotWidget()
        plot.setBackground('w')
        plot.setLabel('left', label)
        plot.setLabel('bottom', 'Seconds ago')
        plot.setMouseEnabled(x=False, y=False)
        plot.showGrid(x=True, y=True, alpha=0.3)
        plot.setMinimumHeight(150)
        return plot

    def _style_range_buttons(self):
        for name, btn in self.range_buttons.items():
            active = name == self.history.time_range
            btn.setStyleSheet(RANGE_BUTTON_STYLE.format(
                bg="#2563eb" if active else "#e5e7eb",
                fg="white" if active else "#374151"))

    def set_time_range(self, name):
        self.history.set_time_range(name)
        self._style_range_buttons()
        self.refresh()

    def refresh(self):
        now = time.time()
        points = self.history.points()
        xs = [t - now for t, _, _ in points]
        self.gas_curve.setData(xs, [g for _, g, _ in points])
        self.distance_curve.setData(xs, [d for _, _, d in points])
        window = self.history.window_seconds
        self.gas_plot.setXRange(-window, 0, padding=0)
        self.distance_plot.setXRange(-window, 0, padding=0)

        if points:
            _, gas, distance = points[-1]
            self.gas_value_label.setText(f"Gas: {gas:g} PPM")
            self.gas_value_label.setStyleSheet(f"font-weight: bold; color: {gas_chart_color(gas)};")
            self.distance_value_label.setText(f"Distance: {distance:g} cm")
            self.distance_value_label.setStyleSheet(
                f"font-weight: bold; color: {distance_chart_color(distance)};")
        self.points_label.setText(f"Data points: {len(points)}")
