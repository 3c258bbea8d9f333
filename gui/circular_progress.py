"""
Circular Gauge Widgets for the sensor cards
"""
from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QRectF, QPointF
from PyQt5.QtGui import QPainter, QColor, QFont, QPen, QBrush

from core.rover_data import distance_circle_size, distance_chart_color


class CircularProgressWidget(QWidget):
    """Ring gauge filled from the top, clockwise, with a caption in the middle"""

    def __init__(self, parent=None, size=160, line_width=18):
        super().__init__(parent)
        self.size = size
        self.line_width = line_width
        self.value = 0  # 0-100
        self.text = "0"
        self.color = QColor("#10b981")
        self.setMinimumSize(size, size)
        self.setMaximumSize(size, size)

    def set_value(self, value, text=None):
        """Set fill percentage (0-100) and optional caption"""
        self.value = max(0, min(100, value))
        self.text = text if text is not None else f"{int(self.value)}%"
        self.update()

    def set_color(self, color):
        self.color = QColor(color)
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        rect = QRectF(0, 0, self.width(), self.height())
        center = rect.center()
        radius = min(rect.width(), rect.height()) / 2 - self.line_width / 2

        painter.setPen(QPen(QColor(230, 230, 230), self.line_width))
        painter.drawEllipse(center, radius, radius)

        if self.value > 0:
            progress_pen = QPen(self.color, self.line_width)
            progress_pen.setCapStyle(Qt.RoundCap)
            painter.setPen(progress_pen)
            # Qt angles are in 1/16th degree, 90 deg is the top
            painter.drawArc(
                int(center.x() - radius),
                int(center.y() - radius),
                int(radius * 2),
                int(radius * 2),
                90 * 16,
                -int(self.value * 3.6 * 16)
            )

        font = QFont()
        font.setPointSize(16)
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(self.color)
        painter.drawText(rect, Qt.AlignCenter, self.text)


class DistanceCircleWidget(QWidget):
    """Filled circle that grows with distance (60-100 px)"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.distance = 0.0
        self.setMinimumSize(110, 110)
        self.setMaximumSize(110, 110)

    def set_distance(self, distance):
        self.distance = distance
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        diameter = distance_circle_size(self.distance)
        color = QColor(distance_chart_color(self.distance) if self.distance else "#ef4444")
        fill = QColor(color)
        fill.setAlpha(50)

        center = QPointF(self.width() / 2, self.height() / 2)
        painter.setPen(QPen(color, 4))
        painter.setBrush(QBrush(fill))
        painter.drawEllipse(center, diameter / 2, diameter / 2)
