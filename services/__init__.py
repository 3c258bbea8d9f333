"""
Services
Alert notifications, browser dashboard console and its HTTP server
"""
from .alert_notifications import NotificationManager
from .remote_console import RemoteConsoleServer
from .http_server import DashboardHTTPServer

__all__ = [
    'NotificationManager',
    'RemoteConsoleServer',
    'DashboardHTTPServer'
]
