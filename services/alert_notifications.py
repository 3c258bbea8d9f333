"""
Alert Notification System - Webhook and desktop notifications for rover alerts
"""
import logging
import shutil
import subprocess
from concurrent.futures import Executor
from typing import Dict, Optional

import requests
from PyQt5.QtCore import QObject, pyqtSignal
from PyQt5.QtWidgets import QApplication, QSystemTrayIcon

from core.rover_data import AlertRecord

logger = logging.getLogger(__name__)


class NotificationManager(QObject):
    """Sends every new rover alert to the enabled channels"""
    notification_sent = pyqtSignal(str, bool)  # message, success

    def __init__(self, config: Dict, executor: Optional[Executor] = None):
        super().__init__()
        # Runs webhook posts off the caller thread when given
        self.executor = executor
        self.config = config.get("alert_settings", {})
        self.enabled = self.config.get("enable_notifications", False)
        self.desktop_enabled = self.config.get("enable_desktop_notifications", True)
        self.webhook_url = self.config.get("webhook_url", "")

        self.tray_icon = None
        self.use_system_notify = False

        # Tray icon needs a running QApplication
        app = QApplication.instance()
        if app is not None and QSystemTrayIcon.isSystemTrayAvailable():
            self.tray_icon = QSystemTrayIcon()
            self.tray_icon.show()

        if not self.tray_icon and shutil.which("notify-send"):
            self.use_system_notify = True
            logger.info("Using notify-send for desktop notifications")

    def send_notification(self, alert: AlertRecord):
        """Send all enabled notifications for an alert"""
        message = self.format_alert_message(alert)

        if self.desktop_enabled:
            self.send_desktop_notification(alert, message)

        if not self.enabled:
            return

        if self.executor is not None:
            self.executor.submit(self.send_remote_notifications, alert)
        else:
            self.send_remote_notifications(alert)

    def send_remote_notifications(self, alert: AlertRecord):
        success_count = 0
        if self.webhook_url and self.send_webhook(alert):
            success_count += 1

        self.notification_sent.emit(f"Sent {success_count} notification(s)", success_count > 0)

    @staticmethod
    def format_alert_message(alert: AlertRecord) -> str:
        return (f"ALERT: {alert.title}\n"
                f"Type: {alert.type_name}\n"
                f"{alert.message}\n"
                f"Time: {alert.timestamp.strftime('%Y-%m-%d %H:%M:%S')}")

    def build_webhook_payload(self, alert: AlertRecord) -> dict:
        return {
            "event_type": "rover_alert",
            "timestamp": alert.timestamp.isoformat(),
            "alert_type": alert.type_name,
            "severity": alert.severity,
            "message": alert.message,
            "gas_level": alert.gas_level,
        }

    def send_webhook(self, alert: AlertRecord) -> bool:
        """POST the alert to the configured webhook"""
        try:
            response = requests.post(
                self.webhook_url,
                json=self.build_webhook_payload(alert),
                timeout=5
            )
        except requests.RequestException as e:
            logger.error("Webhook notification error: %s", e)
            return False
        return response.status_code in [200, 201, 202]

    def send_desktop_notification(self, alert: AlertRecord, message: str):
        """Tray balloon, then notify-send, then the log"""
        title = f"ToxiRover: {alert.title}"
        body = f"{alert.message}\nTime: {alert.timestamp.strftime('%H:%M:%S')}"

        if self.tray_icon:
            icon = (QSystemTrayIcon.Critical if alert.severity == "danger"
                    else QSystemTrayIcon.Warning if alert.severity == "warning"
                    else QSystemTrayIcon.Information)
            self.tray_icon.showMessage(title, body, icon, 5000)
            return

        if self.use_system_notify:
            urgency = "critical" if alert.severity == "danger" else "normal"
            try:
                subprocess.run([
                    "notify-send",
                    f"--urgency={urgency}",
                    "--expire-time=5000",
                    title,
                    body
                ], check=False)
                return
            except OSError as e:
                logger.error("notify-send failed: %s", e)

        logger.warning("DESKTOP NOTIFICATION: %s", message.replace("\n", " | "))
