"""
Unit tests for the chart history window
"""
import pytest
from core.chart_history import TIME_RANGES, ChartHistory


class TestChartHistory:
    """Test ChartHistory"""

    def test_ranges(self):
        """Test the selectable ranges"""
        assert TIME_RANGES == {"1m": 60, "5m": 300, "15m": 900}

    def test_unknown_range(self):
        """Test unknown ranges are rejected"""
        with pytest.raises(ValueError):
            ChartHistory("2h")
        history = ChartHistory()
        with pytest.raises(ValueError):
            history.set_time_range("30s")

    def test_add_and_read(self):
        """Test points are returned oldest first"""
        history = ChartHistory()
        history.add(100, 50, timestamp=1000.0)
        history.add(120, 45, timestamp=1002.0)
        assert history.points() == [(1000.0, 100, 50), (1002.0, 120, 45)]
        assert history.gas_values() == [100, 120]
        assert history.distance_values() == [50, 45]
        assert history.times() == [1000.0, 1002.0]
        assert len(history) == 2

    def test_old_points_pruned(self):
        """Test points at or before the cutoff are dropped"""
        history = ChartHistory("1m")
        history.add(1, 1, timestamp=1000.0)
        history.add(2, 2, timestamp=1030.0)
        history.add(3, 3, timestamp=1060.0)
        # cutoff is 1000.0, the first point is exactly on it
        assert history.gas_values() == [2, 3]

    def test_narrowing_range_prunes(self):
        """Test switching to a shorter range drops older points"""
        history = ChartHistory("15m")
        history.add(1, 1, timestamp=1000.0)
        history.add(2, 2, timestamp=1500.0)
        history.add(3, 3, timestamp=1600.0)
        assert len(history) == 3
        history.set_time_range("1m", now=1600.0)
        assert history.time_range == "1m"
        assert history.gas_values() == [3]

    def test_clear(self):
        """Test clearing the history"""
        history = ChartHistory()
        history.add(1, 1, timestamp=1000.0)
        history.clear()
        assert len(history) == 0
