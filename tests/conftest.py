"""Pytest configuration - loads .env for integration tests and provides a stub API server."""

import threading
from dataclasses import dataclass, field
from email.message import Message
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest
from dotenv import load_dotenv

from bambou import Session, SessionConfig

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


# =============================================================================
# Stub Server
# =============================================================================


@dataclass
class RecordedRequest:
    """A request received by the stub server."""

    method: str
    path: str
    headers: Message
    body: str


@dataclass
class StubServer:
    """Canned responses keyed by (method, path), plus a log of received requests."""

    url: str = ""
    routes: dict[tuple[str, str], tuple[int, bytes, list[tuple[str, str]]]] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: str | bytes = "",
        headers: list[tuple[str, str]] | None = None,
    ) -> None:
        data = body.encode("utf-8") if isinstance(body, str) else body
        self.routes[(method, path)] = (status, data, headers or [])

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


class _StubHandler(BaseHTTPRequestHandler):
    server: "ThreadingHTTPServer"

    def _handle(self) -> None:
        stub: StubServer = self.server.stub  # type: ignore[attr-defined]
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode("utf-8") if length else ""
        stub.requests.append(RecordedRequest(self.command, self.path, self.headers, body))

        status, data, extra_headers = stub.routes.get((self.command, self.path), (404, b"no route", []))
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        for name, value in extra_headers:
            self.send_header(name, value)
        self.end_headers()
        if data:
            self.wfile.write(data)

    do_GET = _handle
    do_PUT = _handle
    do_POST = _handle
    do_DELETE = _handle

    def log_message(self, format, *args):
        pass


@pytest.fixture
def stub_server():
    """Run a stub API server on a free local port."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _StubHandler)
    stub = StubServer(url=f"http://127.0.0.1:{server.server_address[1]}")
    server.stub = stub  # type: ignore[attr-defined]

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield stub
    finally:
        server.shutdown()
        server.server_close()
        thread.join()


@pytest.fixture
def config(stub_server):
    return SessionConfig(
        url=stub_server.url,
        username="admin",
        password="p1",
        organization="acme",
    )


@pytest.fixture
def session(config):
    return Session(config)
