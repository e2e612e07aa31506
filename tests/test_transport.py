"""
ThorClient - Transport Tests
==============================
Unit tests for the HTTP transport (requests session stubbed).
"""

import json

import pytest
import requests

from thor_client.config import override_settings
from thor_client.constants import USER_AGENT
from thor_client.errors import ClientIOError
from thor_client.network.transport import BODY_EXCERPT_LENGTH, HttpTransport


class StubResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self.text = text if text is not None else ("" if payload is None else json.dumps(payload))

    def json(self):
        return json.loads(self.text)


class StubSession:
    """requests.Session minimale: registra le richieste, risponde in ordine"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []
        self.headers = {}
        self.closed = False

    def request(self, method, url, params=None, json=None, timeout=None):
        self.requests.append({"method": method, "url": url, "params": params, "json": json, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


class TestHttpTransport:
    """Test HttpTransport"""

    def test_get(self):
        session = StubSession(StubResponse(payload={"number": 1}))
        transport = HttpTransport("http://localhost:8669/", timeout=5, session=session)

        assert transport.get("/blocks/best") == {"number": 1}
        request = session.requests[0]
        assert request["method"] == "GET"
        assert request["url"] == "http://localhost:8669/blocks/best"
        assert request["timeout"] == 5
        assert session.headers["User-Agent"] == USER_AGENT

    def test_post_with_params(self):
        session = StubSession(StubResponse(payload={"id": "0x01"}))
        transport = HttpTransport("http://localhost:8669", session=session)

        transport.post("/accounts/0xabc", {"value": "0x0"}, {"revision": "best", "caller": None})

        request = session.requests[0]
        assert request["json"] == {"value": "0x0"}
        assert request["params"] == {"revision": "best"}

    def test_bool_params(self):
        session = StubSession(StubResponse(payload={}))
        HttpTransport("http://localhost:8669", session=session).get("/transactions/0x01", {"raw": True})

        assert session.requests[0]["params"] == {"raw": "true"}

    def test_null_body(self):
        session = StubSession(StubResponse(text="null\n"), StubResponse(text=""))
        transport = HttpTransport("http://localhost:8669", session=session)

        assert transport.get("/transactions/0x01/receipt") is None
        assert transport.get("/transactions/0x01/receipt") is None

    def test_http_error(self):
        body = "bad tx: " + "x" * 1000
        session = StubSession(StubResponse(status_code=400, text=body))
        transport = HttpTransport("http://localhost:8669", session=session)

        with pytest.raises(ClientIOError) as exc:
            transport.post("/transactions", {"raw": "0x"})

        assert exc.value.code == "HTTP_ERROR"
        assert exc.value.status_code == 400
        assert exc.value.details["body"] == body[:BODY_EXCERPT_LENGTH]

    def test_timeout(self):
        session = StubSession(requests.Timeout("slow"))
        transport = HttpTransport("http://localhost:8669", session=session)

        with pytest.raises(ClientIOError) as exc:
            transport.get("/blocks/best")
        assert exc.value.code == "TIMEOUT"
        assert isinstance(exc.value.__cause__, requests.Timeout)

    def test_connection_refused(self):
        session = StubSession(requests.ConnectionError("refused"))

        with pytest.raises(ClientIOError) as exc:
            HttpTransport("http://localhost:8669", session=session).get("/blocks/best")
        assert exc.value.code == "CONNECTION_ERROR"
        assert exc.value.status_code is None

    def test_invalid_json(self):
        session = StubSession(StubResponse(text="<html>"))

        with pytest.raises(ClientIOError) as exc:
            HttpTransport("http://localhost:8669", session=session).get("/blocks/best")
        assert exc.value.code == "INVALID_JSON"

    def test_invalid_url(self):
        with pytest.raises(ClientIOError):
            HttpTransport("localhost:8669")

    def test_from_settings(self):
        settings = override_settings(node_url="https://node.example:8669/", request_timeout=12)
        transport = HttpTransport.from_settings(settings)

        assert transport.base_url == "https://node.example:8669"
        assert transport.timeout == 12

    def test_context_manager_closes(self):
        session = StubSession()
        with HttpTransport("http://localhost:8669", session=session):
            pass
        assert session.closed
