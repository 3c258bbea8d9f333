"""
Unit tests for the browser dashboard page server
"""
from services.http_server import WEB_DIR, render_dashboard_page


class TestDashboardPage:
    """Test websocket URL injection"""

    def test_default_page_exists(self):
        """Test the packaged page is found"""
        assert (WEB_DIR / "dashboard.html").exists()

    def test_ws_url_injected(self):
        """Test the configured websocket URL replaces the default"""
        html = render_dashboard_page("ws://rover-host:9000")
        assert 'const wsUrl = "ws://rover-host:9000";' in html
        assert "ws://localhost:8765" not in html

    def test_custom_web_dir(self, tmp_path):
        """Test pages from another directory"""
        (tmp_path / "dashboard.html").write_text(
            "<script>const wsUrl = 'ws://old:1';</script>", encoding="utf-8")
        html = render_dashboard_page("ws://new:2", tmp_path)
        assert html == '<script>const wsUrl = "ws://new:2";</script>'
