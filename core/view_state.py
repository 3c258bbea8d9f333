"""
Dashboard View State
Shared by the desktop window and the browser console. Store callbacks arrive
on worker threads, so every mutation happens under the lock.
"""
import threading
from collections import deque
from typing import Dict, List, Optional

from core.rover_data import (
    AlertRecord,
    LevelStatus,
    MotionState,
    SensorSnapshot,
    distance_status,
    gas_status,
)


CONNECTING = "connecting"
CONNECTED = "connected"
ERROR = "error"
DEMO = "demo"

CONNECTION_LABELS = {
    CONNECTED: "Connected",
    ERROR: "Connection Error",
    DEMO: "Demo Mode",
    CONNECTING: "Connecting...",
}

MAX_ALERTS = 10


class DashboardState:
    """Latest snapshot, connection status and recent alerts"""

    def __init__(self, max_alerts: int = MAX_ALERTS):
        self.connection_status = CONNECTING
        self.snapshot = SensorSnapshot()
        self.alerts: deque = deque(maxlen=max_alerts)  # newest first
        self.lock = threading.Lock()

    def apply_sensor_data(self, data: Optional[dict]) -> Optional[SensorSnapshot]:
        """Apply a sensor_data value; empty values are ignored"""
        if not data:
            return None
        snapshot = SensorSnapshot.from_store(data)
        with self.lock:
            self.snapshot = snapshot
            self.connection_status = CONNECTED
        return snapshot

    def apply_alert_node(self, data: Optional[dict]) -> Optional[AlertRecord]:
        """Every non-empty alerts value becomes one new alert"""
        if not data:
            return None
        alert = AlertRecord.from_alert_node(data)
        with self.lock:
            self.alerts.appendleft(alert)
        return alert

    def set_connection_status(self, status: str):
        with self.lock:
            self.connection_status = status

    @property
    def connection_label(self) -> str:
        return CONNECTION_LABELS.get(self.connection_status, "Connecting...")

    @property
    def is_connected(self) -> bool:
        return self.connection_status == CONNECTED

    def gas_status(self) -> LevelStatus:
        return gas_status(self.snapshot.gas_concentration)

    def distance_status(self) -> LevelStatus:
        return distance_status(self.snapshot.distance)

    def is_moving(self) -> bool:
        return self.snapshot.motion != MotionState.STOP

    def all_alerts(self) -> List[AlertRecord]:
        with self.lock:
            return list(self.alerts)

    def recent_alerts(self, limit: int = 5) -> List[AlertRecord]:
        return self.all_alerts()[:limit]

    def alert_summary(self) -> Dict[str, int]:
        summary = {"danger": 0, "warning": 0, "info": 0}
        for alert in self.all_alerts():
            summary[alert.severity] += 1
        return summary

    def clear_alerts(self) -> int:
        with self.lock:
            count = len(self.alerts)
            self.alerts.clear()
        return count

    def to_dict(self) -> dict:
        """Full state for the browser console"""
        with self.lock:
            snapshot = self.snapshot
            status = self.connection_status
            alerts = list(self.alerts)
        return {
            "connection_status": status,
            "sensor": snapshot.to_dict(),
            "gas_status": gas_status(snapshot.gas_concentration).value,
            "distance_status": distance_status(snapshot.distance).value,
            "alerts": [a.to_dict() for a in alerts],
            "alert_summary": self.alert_summary(),
        }
