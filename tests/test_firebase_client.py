"""
Unit tests for the Firebase REST client
"""
import pytest
import requests
from rtdb.firebase_client import FirebaseClient, FirebaseError, client_from_config, is_configured


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=b"x"):
        self.status_code = status_code
        self.payload = payload
        self.content = content if payload is not None or status_code != 204 else b""
        self.text = str(payload)
        self.closed = False

    def json(self):
        return self.payload

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(payload=None, content=b"")
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        self.calls.append(("STREAM", url, kwargs))
        if self.error:
            raise self.error
        return self.response

    def close(self):
        pass


def make_client(**kwargs):
    session = FakeSession(**kwargs)
    client = FirebaseClient("https://rover.firebaseio.com/", auth="token", session=session)
    return client, session


class TestConfiguration:
    """Test demo mode detection"""

    def test_is_configured(self):
        """Test empty and placeholder URLs are not configured"""
        assert not is_configured("")
        assert not is_configured(None)
        assert not is_configured("https://your-project-default-rtdb.firebaseio.com")
        assert is_configured("https://rover-1234.firebaseio.com")

    def test_client_from_config(self):
        """Test a client is only built for a real URL"""
        assert client_from_config({"firebase": {"database_url": ""}}) is None
        client = client_from_config({"firebase": {"database_url": "https://rover.firebaseio.com",
                                                  "auth": "abc", "timeout": 3}})
        assert client.auth == "abc"
        assert client.timeout == 3.0


class TestRequests:
    """Test REST verbs"""

    def test_url_for(self):
        """Test node URLs end in .json"""
        client, _ = make_client()
        assert client.url_for("sensor_data") == "https://rover.firebaseio.com/sensor_data.json"
        assert client.url_for("/servo/request/") == "https://rover.firebaseio.com/servo/request.json"
        assert client.url_for("") == "https://rover.firebaseio.com/.json"

    def test_set_is_put(self):
        """Test set writes with PUT and the auth parameter"""
        client, session = make_client(response=FakeResponse(payload="FORWARD"))
        client.set("motion_command/request", "FORWARD")
        method, url, kwargs = session.calls[0]
        assert method == "PUT"
        assert url.endswith("/motion_command/request.json")
        assert kwargs["json"] == "FORWARD"
        assert kwargs["params"] == {"auth": "token"}

    def test_update_is_patch(self):
        """Test update writes with PATCH"""
        client, session = make_client(response=FakeResponse(payload={"a": 1}))
        client.update("sensor_data", {"a": 1})
        assert session.calls[0][0] == "PATCH"

    def test_get(self):
        """Test get returns the decoded value"""
        client, _ = make_client(response=FakeResponse(payload={"distance": 12}))
        assert client.get("sensor_data") == {"distance": 12}

    def test_push_returns_key(self):
        """Test push returns the generated key"""
        client, session = make_client(response=FakeResponse(payload={"name": "-Nabc"}))
        assert client.push("alerts", {"type": "INFO"}) == "-Nabc"
        assert session.calls[0][0] == "POST"

    def test_delete(self):
        """Test delete issues DELETE"""
        client, session = make_client(response=FakeResponse(status_code=200, payload=None))
        client.delete("servo/request")
        assert session.calls[0][0] == "DELETE"

    def test_http_error(self):
        """Test non-success statuses raise FirebaseError"""
        client, _ = make_client(response=FakeResponse(status_code=401, payload={"error": "denied"}))
        with pytest.raises(FirebaseError) as exc_info:
            client.get("sensor_data")
        assert exc_info.value.status_code == 401
        assert exc_info.value.path == "sensor_data"

    def test_network_error(self):
        """Test request exceptions are wrapped"""
        client, _ = make_client(error=requests.ConnectionError("offline"))
        with pytest.raises(FirebaseError):
            client.set("emergency_stop", True)


class TestStream:
    """Test opening event streams"""

    def test_open_stream(self):
        """Test the stream request headers"""
        response = FakeResponse(payload=None)
        client, session = make_client(response=response)
        assert client.open_stream("alerts") is response
        _, url, kwargs = session.calls[0]
        assert url.endswith("/alerts.json")
        assert kwargs["headers"] == {"Accept": "text/event-stream"}
        assert kwargs["stream"] is True

    def test_open_stream_error_status(self):
        """Test a refused stream raises and closes the response"""
        response = FakeResponse(status_code=403, payload=None)
        client, _ = make_client(response=response)
        with pytest.raises(FirebaseError):
            client.open_stream("alerts")
        assert response.closed
