"""
HTTP server for the browser dashboard page

Serves web/dashboard.html with the websocket URL from config.json injected.
"""
import http.server
import logging
import re
import socketserver
import threading
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

WEB_DIR = Path(__file__).resolve().parent.parent / "web"
DASHBOARD_PAGE = "dashboard.html"
WS_URL_PATTERN = re.compile(r'const wsUrl = ["\']ws://[^"\']+["\'];')


def render_dashboard_page(ws_url: str, web_dir: Path = WEB_DIR) -> str:
    """Dashboard HTML with its websocket URL replaced"""
    html = (web_dir / DASHBOARD_PAGE).read_text(encoding="utf-8")
    return WS_URL_PATTERN.sub(f'const wsUrl = "{ws_url}";', html)


def make_handler(ws_url: str, web_dir: Path = WEB_DIR):
    class DashboardRequestHandler(http.server.SimpleHTTPRequestHandler):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, directory=str(web_dir), **kwargs)

        def end_headers(self):
            self.send_header('Access-Control-Allow-Origin', '*')
            super().end_headers()

        def log_message(self, format, *args):
            logger.debug("%s - %s", self.address_string(), format % args)

        def do_GET(self):
            if self.path == '/favicon.ico':
                self.send_response(204)
                self.end_headers()
                return

            if self.path in ('/', '/index.html', f'/{DASHBOARD_PAGE}'):
                body = render_dashboard_page(ws_url, web_dir).encode('utf-8')
                self.send_response(200)
                self.send_header('Content-type', 'text/html; charset=utf-8')
                self.send_header('Content-Length', str(len(body)))
                self.end_headers()
                try:
                    self.wfile.write(body)
                except (BrokenPipeError, ConnectionResetError):
                    pass
                return

            super().do_GET()

    return DashboardRequestHandler


class _DashboardTCPServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True


class DashboardHTTPServer:
    """Background HTTP server thread"""

    def __init__(self, port: int, ws_url: str, web_dir: Path = WEB_DIR):
        self.port = port
        self.ws_url = ws_url
        self.web_dir = web_dir
        self.httpd: Optional[socketserver.TCPServer] = None
        self.thread: Optional[threading.Thread] = None

    def start(self) -> bool:
        try:
            self.httpd = _DashboardTCPServer(
                ("", self.port), make_handler(self.ws_url, self.web_dir))
        except OSError as e:
            logger.error("HTTP server could not bind port %s: %s", self.port, e)
            self.httpd = None
            return False

        self.thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)
        self.thread.start()
        logger.info("Browser dashboard: http://localhost:%s/", self.port)
        return True

    def stop(self):
        if self.httpd:
            self.httpd.shutdown()
            self.httpd.server_close()
            self.httpd = None
