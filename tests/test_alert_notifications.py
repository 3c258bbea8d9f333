"""
Unit tests for alert notifications
"""
import requests
from core.rover_data import AlertRecord
from services import alert_notifications
from services.alert_notifications import NotificationManager


class FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code


def make_manager(monkeypatch, **settings):
    monkeypatch.setattr(alert_notifications.shutil, "which", lambda name: None)
    return NotificationManager({"alert_settings": settings})


class TestFormatting:
    """Test message and payload formatting"""

    def test_format_alert_message(self):
        """Test the desktop message text"""
        alert = AlertRecord.from_alert_node({"last_alert": "HIGH_GAS_LEVEL", "gas_level": 650})
        message = NotificationManager.format_alert_message(alert)
        assert "ALERT: High Gas Level Detected" in message
        assert "Type: HIGH_GAS_LEVEL" in message
        assert "Gas level: 650 PPM" in message

    def test_webhook_payload(self, monkeypatch):
        """Test the webhook JSON body"""
        manager = make_manager(monkeypatch)
        alert = AlertRecord.from_alert_node({"last_alert": "OBSTACLE_DETECTED"})
        payload = manager.build_webhook_payload(alert)
        assert payload["event_type"] == "rover_alert"
        assert payload["alert_type"] == "OBSTACLE_DETECTED"
        assert payload["severity"] == "warning"


class TestWebhook:
    """Test webhook delivery"""

    def test_success(self, monkeypatch):
        """Test a 2xx response counts as sent"""
        calls = []

        def fake_post(url, json=None, timeout=None):
            calls.append((url, json, timeout))
            return FakeResponse(202)

        monkeypatch.setattr(alert_notifications.requests, "post", fake_post)
        manager = make_manager(monkeypatch, webhook_url="http://hooks.local/rover")
        assert manager.send_webhook(AlertRecord.from_alert_node({"last_alert": "INFO"}))
        assert calls[0][0] == "http://hooks.local/rover"
        assert calls[0][2] == 5

    def test_failure_status(self, monkeypatch):
        """Test other statuses are failures"""
        monkeypatch.setattr(alert_notifications.requests, "post",
                            lambda url, json=None, timeout=None: FakeResponse(500))
        manager = make_manager(monkeypatch, webhook_url="http://hooks.local/rover")
        assert not manager.send_webhook(AlertRecord.from_alert_node({"last_alert": "INFO"}))

    def test_network_error(self, monkeypatch):
        """Test request errors are reported as failures"""
        def fake_post(url, json=None, timeout=None):
            raise requests.ConnectionError("down")

        monkeypatch.setattr(alert_notifications.requests, "post", fake_post)
        manager = make_manager(monkeypatch, webhook_url="http://hooks.local/rover")
        assert not manager.send_webhook(AlertRecord.from_alert_node({"last_alert": "INFO"}))

    def test_send_notification_emits(self, monkeypatch):
        """Test the notification_sent signal reports the webhook result"""
        monkeypatch.setattr(alert_notifications.requests, "post",
                            lambda url, json=None, timeout=None: FakeResponse(200))
        manager = make_manager(monkeypatch, enable_notifications=True,
                               enable_desktop_notifications=False,
                               webhook_url="http://hooks.local/rover")
        results = []
        manager.notification_sent.connect(lambda message, ok: results.append((message, ok)))
        manager.send_notification(AlertRecord.from_alert_node({"last_alert": "INFO"}))
        assert results == [("Sent 1 notification(s)", True)]

    def test_webhook_runs_on_executor(self, monkeypatch):
        """Test the webhook is handed to the executor instead of posting inline"""
        class RecordingExecutor:
            def __init__(self):
                self.jobs = []

            def submit(self, func, *args):
                self.jobs.append((func, args))

        posts = []
        monkeypatch.setattr(alert_notifications.requests, "post",
                            lambda url, json=None, timeout=None: posts.append(url) or FakeResponse(200))
        monkeypatch.setattr(alert_notifications.shutil, "which", lambda name: None)
        executor = RecordingExecutor()
        manager = NotificationManager({"alert_settings": {
            "enable_notifications": True,
            "enable_desktop_notifications": False,
            "webhook_url": "http://hooks.local/rover",
        }}, executor=executor)
        alert = AlertRecord.from_alert_node({"last_alert": "INFO"})

        manager.send_notification(alert)
        assert posts == []
        assert len(executor.jobs) == 1

        func, args = executor.jobs[0]
        func(*args)
        assert posts == ["http://hooks.local/rover"]
