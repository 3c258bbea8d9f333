"""
Firebase Realtime Database REST client

Every node is addressed as <database_url>/<path>.json. Writes are plain
HTTP verbs: PUT replaces a node, PATCH merges children, POST appends under a
generated key and DELETE removes the node.
"""
import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

PLACEHOLDER_HOSTS = ("your-project",)


class FirebaseError(Exception):
    """A store request failed"""

    def __init__(self, message: str, path: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.status_code = status_code


def is_configured(database_url: Optional[str]) -> bool:
    """False for an empty URL or the placeholder from the sample config"""
    if not database_url:
        return False
    return not any(p in database_url for p in PLACEHOLDER_HOSTS)


class FirebaseClient:
    """Thin wrapper around the REST API with a shared requests session"""

    def __init__(self, database_url: str, auth: str = "", timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.database_url = database_url.rstrip("/")
        self.auth = auth
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, path: str) -> str:
        path = path.strip("/")
        if not path:
            return f"{self.database_url}/.json"
        return f"{self.database_url}/{path}.json"

    def params(self) -> dict:
        return {"auth": self.auth} if self.auth else {}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self.url_for(path)
        try:
            response = self.session.request(
                method, url, params=self.params(), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise FirebaseError(f"{method} {path} failed: {e}", path=path) from e

        if response.status_code not in (200, 201, 202, 204):
            raise FirebaseError(
                f"{method} {path} returned HTTP {response.status_code}: {response.text}",
                path=path,
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    def set(self, path: str, value: Any) -> Any:
        logger.debug("PUT %s = %r", path, value)
        return self._request("PUT", path, json=value)

    def update(self, path: str, values: dict) -> Any:
        logger.debug("PATCH %s <- %r", path, values)
        return self._request("PATCH", path, json=values)

    def push(self, path: str, value: Any) -> Optional[str]:
        """Append under a generated key and return the key"""
        result = self._request("POST", path, json=value)
        if isinstance(result, dict):
            return result.get("name")
        return None

    def delete(self, path: str):
        self._request("DELETE", path)

    def open_stream(self, path: str) -> requests.Response:
        """Open the server-sent events stream of a node"""
        url = self.url_for(path)
        try:
            response = self.session.get(
                url,
                params=self.params(),
                headers={"Accept": "text/event-stream"},
                stream=True,
                timeout=(self.timeout, None),
            )
        except requests.RequestException as e:
            raise FirebaseError(f"stream {path} failed: {e}", path=path) from e
        if response.status_code != 200:
            response.close()
            raise FirebaseError(
                f"stream {path} returned HTTP {response.status_code}",
                path=path,
                status_code=response.status_code,
            )
        return response

    def close(self):
        self.session.close()


def client_from_config(config: dict) -> Optional[FirebaseClient]:
    """Client for the configured database, or None in demo mode"""
    firebase = config.get("firebase", {})
    database_url = firebase.get("database_url", "")
    if not is_configured(database_url):
        logger.warning("Firebase not configured. Running in demo mode.")
        return None
    return FirebaseClient(
        database_url,
        auth=firebase.get("auth", ""),
        timeout=float(firebase.get("timeout", 10.0)),
    )
