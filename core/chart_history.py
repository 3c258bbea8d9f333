"""
Rolling gas/distance history for the live charts
"""
import threading
import time
from collections import deque
from typing import List, Optional, Tuple


TIME_RANGES = {
    "1m": 60,
    "5m": 300,
    "15m": 900,
}


class ChartHistory:
    """Keeps only the points that fall inside the selected time range"""

    def __init__(self, time_range: str = "1m"):
        if time_range not in TIME_RANGES:
            raise ValueError(f"Unknown time range: {time_range}")
        self.time_range = time_range
        self._points: deque = deque()  # (timestamp, gas, distance)
        self.lock = threading.Lock()

    @property
    def window_seconds(self) -> int:
        return TIME_RANGES[self.time_range]

    def add(self, gas: float, distance: float, timestamp: Optional[float] = None):
        now = time.time() if timestamp is None else timestamp
        with self.lock:
            self._points.append((now, gas, distance))
            self._prune(now)

    def set_time_range(self, time_range: str, now: Optional[float] = None):
        if time_range not in TIME_RANGES:
            raise ValueError(f"Unknown time range: {time_range}")
        with self.lock:
            self.time_range = time_range
            self._prune(time.time() if now is None else now)

    def _prune(self, now: float):
        cutoff = now - self.window_seconds
        while self._points and self._points[0][0] <= cutoff:
            self._points.popleft()

    def points(self) -> List[Tuple[float, float, float]]:
        with self.lock:
            return list(self._points)

    def times(self) -> List[float]:
        return [p[0] for p in self.points()]

    def gas_values(self) -> List[float]:
        return [p[1] for p in self.points()]

    def distance_values(self) -> List[float]:
        return [p[2] for p in self.points()]

    def clear(self):
        with self.lock:
            self._points.clear()

    def __len__(self):
        with self.lock:
            return len(self._points)
