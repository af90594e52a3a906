import asyncio
import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from tidestudio import viewport
from tidestudio.client import CONNECTION, CONNECTION_TITLE, ExecutionClient, Transport
from tidestudio.errors import ConnectionFailure
from tidestudio.gate import AvailabilityGate


def _http(status, body=b"", content_type="application/json"):
    head = (
        f"HTTP/1.1 {status}\r\n"
        f"Content-Type: {content_type}\r\n"
        f"Content-Length: {len(body)}\r\n"
        "Connection: close\r\n\r\n"
    )
    return head.encode("ascii") + body


@pytest.fixture
def backend():
    """Local HTTP server answering each path with canned raw bytes."""
    replies = {}

    class Handler(BaseHTTPRequestHandler):
        def _reply(self):
            length = int(self.headers.get("Content-Length") or 0)
            if length:
                self.rfile.read(length)
            self.wfile.write(replies[self.path])
            self.wfile.flush()
            self.close_connection = True

        do_GET = _reply
        do_POST = _reply

        def log_message(self, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    yield Transport(f"http://{host}:{port}", timeout=5), replies
    server.shutdown()
    server.server_close()


def test_json_object_reply(backend):
    transport, replies = backend
    replies["/api/config-check"] = _http("200 OK", b'{"exists": true}')
    assert transport.get_json("/api/config-check") == {"exists": True}


def test_error_status_with_json_body_is_returned(backend):
    transport, replies = backend
    body = json.dumps({"success": False, "error": "boom"}).encode()
    replies["/api/execute"] = _http("500 Internal Server Error", body)
    assert transport.post_json("/api/execute", {"command": "db status"}) == {
        "success": False, "error": "boom",
    }


def test_error_status_without_body(backend):
    transport, replies = backend
    replies["/api/execute"] = _http("502 Bad Gateway")
    with pytest.raises(ConnectionFailure, match="HTTP 502"):
        transport.post_json("/api/execute", {"command": "db status"})


@pytest.mark.parametrize("reply", [
    _http("200 OK", b"<html><body>hi</body></html>", "text/html"),
    _http("200 OK", b"\xff\xfe"),
    _http("200 OK", b"[1, 2, 3]"),
    b"NOT-HTTP garbage\r\n\r\n",
], ids=["html", "invalid-utf8", "json-list", "bad-status-line"])
def test_malformed_replies_become_connection_failures(backend, reply):
    transport, replies = backend
    replies["/api/config-check"] = reply
    with pytest.raises(ConnectionFailure):
        transport.get_json("/api/config-check")


def test_connection_refused():
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    with pytest.raises(ConnectionFailure):
        Transport(f"http://127.0.0.1:{port}", timeout=5).get_json("/api/config-check")


def test_gate_closes_on_undecodable_config_check(backend, notifications):
    transport, replies = backend
    replies["/api/config-check"] = _http("200 OK", b"\xff\xfe")
    gate = AvailabilityGate(transport, notifications)
    state = asyncio.run(gate.probe())
    assert state.present is False
    assert not gate.is_available()


def test_query_against_garbage_reply_reports_connection_error(backend, view, notifications):
    transport, replies = backend
    replies["/api/query"] = b"NOT-HTTP garbage\r\n\r\n"
    gate = AvailabilityGate(transport, notifications)
    client = ExecutionClient(transport, gate, view, notifications)

    outcome = asyncio.run(client.run_query("SELECT 1"))

    assert outcome.failure == CONNECTION
    assert view.output(viewport.QUERY_RESULTS).startswith("Connection Error:")
    assert view.status(viewport.QUERY_RESULTS) == viewport.ERROR
    assert view.output(viewport.QUERY_TIME).startswith("Executed in")
    assert [e.title for e in notifications.visible] == [CONNECTION_TITLE]
