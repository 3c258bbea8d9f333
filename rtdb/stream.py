"""
Realtime subscription to a store node

Firebase streams node changes as server-sent events. A `put` event carries
{"path": ..., "data": ...} and replaces the value at that path (relative to
the subscribed node); a `patch` event merges children. The subscription keeps
a local mirror of the node and hands the whole value to callbacks after
every change, the same contract as the browser SDK's onValue.
"""
import copy
import json
import logging
import threading
import time
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple

from rtdb.firebase_client import FirebaseClient, FirebaseError

logger = logging.getLogger(__name__)


def iter_sse_events(lines: Iterable[str]) -> Iterator[Tuple[str, Any]]:
    """Group raw stream lines into (event, decoded data) pairs"""
    event = None
    data_lines: List[str] = []
    for raw in lines:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        line = raw.rstrip("\r")
        if not line:
            if event is not None:
                payload = "\n".join(data_lines)
                try:
                    data = json.loads(payload) if payload else None
                except json.JSONDecodeError:
                    logger.warning("Undecodable %s event: %r", event, payload)
                    data = None
                yield event, data
            event = None
            data_lines = []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        value = value[1:] if value.startswith(" ") else value
        if field == "event":
            event = value
        elif field == "data":
            data_lines.append(value)


def _split(path: str) -> List[str]:
    return [p for p in path.split("/") if p]


def _merge_children(node: Any, values: dict) -> Any:
    node = node if isinstance(node, dict) else {}
    for key, value in values.items():
        node = _set_at(node, _split(key), value)
    return node


def _set_at(node: Any, keys: List[str], value: Any) -> Any:
    """Return node with value stored under keys; None deletes"""
    if not keys:
        return value
    node = node if isinstance(node, dict) else {}
    head, rest = keys[0], keys[1:]
    child = _set_at(node.get(head), rest, value)
    if child is None or child == {}:
        node.pop(head, None)
    else:
        node[head] = child
    return node if node else None


def apply_event(tree: Any, path: str, data: Any, patch: bool = False) -> Any:
    """Merge one put/patch event into the mirrored value and return it"""
    tree = copy.deepcopy(tree)
    keys = _split(path)
    if patch:
        if not isinstance(data, dict):
            return tree
        if not keys:
            merged = _merge_children(tree, data)
            return merged if merged else None
        parent = tree
        for key in keys:
            parent = parent.get(key) if isinstance(parent, dict) else None
        return _set_at(tree, keys, _merge_children(copy.deepcopy(parent), data) or None)
    return _set_at(tree, keys, data)


class StoreSubscription:
    """Worker thread that follows one node and reports its value"""

    def __init__(self, client: FirebaseClient, path: str, reconnect_delay: float = 1.0):
        self.client = client
        self.path = path
        self.reconnect_delay = reconnect_delay
        self.value: Any = None
        self.has_value = False
        self.running = False
        self.connected = False
        self.worker_thread: Optional[threading.Thread] = None
        self.callbacks: List[Callable[[Any], None]] = []
        self.error_callbacks: List[Callable[[Exception], None]] = []
        self._response = None
        self.lock = threading.Lock()

    def register_callback(self, callback: Callable[[Any], None]):
        with self.lock:
            self.callbacks.append(callback)

    def register_error_callback(self, callback: Callable[[Exception], None]):
        with self.lock:
            self.error_callbacks.append(callback)

    @property
    def is_connected(self) -> bool:
        return self.running and self.connected

    def start(self):
        if self.running:
            return
        self.running = True
        self.worker_thread = threading.Thread(
            target=self._worker_loop, name=f"rtdb-{self.path}", daemon=True
        )
        self.worker_thread.start()

    def stop(self):
        self.running = False
        response = self._response
        if response is not None:
            response.close()
        if self.worker_thread and self.worker_thread is not threading.current_thread():
            self.worker_thread.join(timeout=2.0)
        self.connected = False

    def _notify(self, value: Any):
        with self.lock:
            callbacks = list(self.callbacks)
        for callback in callbacks:
            try:
                callback(value)
            except Exception:
                logger.exception("Subscription callback failed for %s", self.path)

    def _notify_error(self, error: Exception):
        with self.lock:
            callbacks = list(self.error_callbacks)
        for callback in callbacks:
            try:
                callback(error)
            except Exception:
                logger.exception("Error callback failed for %s", self.path)

    def handle_event(self, event: str, data: Any) -> bool:
        """Apply one stream event; False means the stream must end"""
        if event in ("put", "patch"):
            if not isinstance(data, dict) or "path" not in data:
                logger.warning("Malformed %s event on %s: %r", event, self.path, data)
                return True
            value = apply_event(self.value, data["path"], data.get("data"),
                                patch=(event == "patch"))
            # A reconnect replays the whole node; only report real changes
            if self.has_value and value == self.value:
                return True
            self.value = value
            self.has_value = True
            self._notify(self.value)
            return True
        if event == "keep-alive":
            return True
        if event in ("cancel", "auth_revoked"):
            self._notify_error(FirebaseError(f"stream {event}: {data}", path=self.path))
            return False
        logger.debug("Ignoring %s event on %s", event, self.path)
        return True

    def _worker_loop(self):
        while self.running:
            try:
                self._response = self.client.open_stream(self.path)
                self.connected = True
                logger.info("Subscribed to /%s", self.path)
                lines = self._response.iter_lines(decode_unicode=True)
                for event, data in iter_sse_events(lines):
                    if not self.running or not self.handle_event(event, data):
                        break
                else:
                    if self.running:
                        raise FirebaseError("stream closed by server", path=self.path)
            except Exception as e:
                if self.running:
                    logger.error("Subscription to /%s failed: %s", self.path, e)
                    self._notify_error(e)
            finally:
                self.connected = False
                if self._response is not None:
                    self._response.close()
                    self._response = None

            if self.running:
                time.sleep(self.reconnect_delay)
