# -*- coding: utf-8 -*-
"""
Test del trasporto JSON-RPC: requests.post viene sostituito con monkeypatch.
"""

import logging

import pytest
import requests

from multichain_client.sdk import jsonrpc_transport
from multichain_client.sdk.jsonrpc_transport import (
    AccessDeniedError,
    ApiError,
    ConnectionFailureError,
    JsonRpcTransport,
    RpcError,
)

URL = "http://127.0.0.1:8570"


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else repr(body)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


@pytest.fixture
def posted(monkeypatch):
    """Registra le chiamate a requests.post e risponde con la risposta in coda."""
    state = {"calls": [], "response": FakeResponse(body={"result": None, "error": None, "id": 1})}

    def fake_post(url, **kwargs):
        state["calls"].append((url, kwargs))
        return state["response"]

    monkeypatch.setattr(jsonrpc_transport.requests, "post", fake_post)
    return state


def test_execute_builds_jsonrpc_envelope(posted):
    posted["response"] = FakeResponse(body={"result": {"chainname": "chain1"}, "error": None, "id": 1})
    transport = JsonRpcTransport(URL, "multichainrpc", "secret", timeout=5)

    result = transport.execute("liststreams", ["*", False])

    assert result == {"chainname": "chain1"}
    url, kwargs = posted["calls"][0]
    assert url == URL
    assert kwargs["json"] == {"jsonrpc": "2.0", "method": "liststreams", "id": 1, "params": ["*", False]}
    assert kwargs["auth"] == ("multichainrpc", "secret")
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert "User-Agent" in kwargs["headers"]


def test_empty_params_are_not_sent(posted):
    transport = JsonRpcTransport(URL)
    transport.execute("getinfo", [])
    transport.execute("getinfo")
    for _, kwargs in posted["calls"]:
        assert "params" not in kwargs["json"]


def test_request_ids_increase(posted):
    transport = JsonRpcTransport(URL)
    transport.execute("getinfo")
    transport.execute("getinfo")
    ids = [kwargs["json"]["id"] for _, kwargs in posted["calls"]]
    assert ids == [1, 2]


def test_no_auth_without_credentials(posted):
    JsonRpcTransport(URL).execute("getinfo")
    assert posted["calls"][0][1]["auth"] is None


def test_extra_headers_are_merged():
    transport = JsonRpcTransport(URL, headers={"X-Chain": "chain1"})
    assert transport.headers["X-Chain"] == "chain1"
    assert transport.headers["Content-Type"] == "application/json"


def test_node_error_raises_rpc_error_with_code(posted):
    posted["response"] = FakeResponse(
        status_code=500,
        body={"result": None, "error": {"code": -708, "message": "Stream with this name not found: s1"}, "id": 1},
    )
    with pytest.raises(RpcError) as exc_info:
        JsonRpcTransport(URL).execute("liststreamitems", ["s1"])

    assert str(exc_info.value) == "Stream with this name not found: s1"
    assert exc_info.value.code == -708
    assert exc_info.value.method == "liststreamitems"


@pytest.mark.parametrize("status", [401, 403])
def test_rejected_credentials_raise_access_denied(posted, status):
    posted["response"] = FakeResponse(status_code=status, text="")
    with pytest.raises(AccessDeniedError) as exc_info:
        JsonRpcTransport(URL, "user", "wrong").execute("getinfo")
    assert exc_info.value.method == "getinfo"
    assert exc_info.value.code == status


def test_connection_failure(monkeypatch):
    def refuse(url, **kwargs):
        raise requests.ConnectionError("Connection refused")

    monkeypatch.setattr(jsonrpc_transport.requests, "post", refuse)

    with pytest.raises(ConnectionFailureError, match="Connection refused") as exc_info:
        JsonRpcTransport(URL).execute("getinfo")
    assert exc_info.value.method == "getinfo"
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def test_non_json_body_raises_api_error(posted):
    posted["response"] = FakeResponse(status_code=502, body=None, text="Bad Gateway")
    with pytest.raises(ApiError, match="Bad Gateway"):
        JsonRpcTransport(URL).execute("getinfo")


def test_debug_logs_calls(posted, caplog):
    transport = JsonRpcTransport(URL, "multichainrpc", "secret").set_debug(True)
    with caplog.at_level(logging.DEBUG, logger=jsonrpc_transport.__name__):
        transport.execute("getaddresses", [True])

    assert "getaddresses" in caplog.text
    assert "secret" not in caplog.text


def test_debug_disabled_logs_nothing(posted, caplog):
    with caplog.at_level(logging.DEBUG, logger=jsonrpc_transport.__name__):
        JsonRpcTransport(URL).execute("getaddresses", [True])
    assert caplog.records == []


def test_debug_writes_calls_to_stderr(posted, capsys):
    transport = JsonRpcTransport(URL, "multichainrpc", "secret", debug=True)
    transport.execute("getinfo")

    err = capsys.readouterr().err
    assert "RPC -> %s getinfo" % URL in err
    assert "RPC <- getinfo HTTP 200" in err
    assert "secret" not in err


def test_enabling_debug_raises_logger_level_once():
    JsonRpcTransport(URL).set_debug(True)
    JsonRpcTransport(URL, debug=True)

    assert jsonrpc_transport.logger.isEnabledFor(logging.DEBUG)
    handlers = [h for h in jsonrpc_transport.logger.handlers if isinstance(h, logging.StreamHandler)]
    assert len(handlers) == 1


def test_http_error_with_null_error_field_raises_api_error(posted):
    posted["response"] = FakeResponse(status_code=503, body={"result": None, "error": None, "id": 1}, text="busy")
    with pytest.raises(ApiError, match="HTTP 503 su getinfo: busy") as exc_info:
        JsonRpcTransport(URL).execute("getinfo")
    assert not isinstance(exc_info.value, RpcError)
    assert exc_info.value.method == "getinfo"


def test_response_without_result_raises_api_error(posted):
    posted["response"] = FakeResponse(status_code=200, body={"error": None, "id": 1}, text="{}")
    with pytest.raises(ApiError, match="Risposta JSON-RPC non valida da getinfo") as exc_info:
        JsonRpcTransport(URL).execute("getinfo")
    assert exc_info.value.method == "getinfo"
