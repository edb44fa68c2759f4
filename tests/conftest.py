"""Pytest configuration - loads .env and provides a local API server per test."""

import json
import threading
import urllib.parse
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from contentchef.core.client import APIClient

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

TARGET_DATE = datetime(2030, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

Handler = Callable[[BaseHTTPRequestHandler], None]


@dataclass
class RecordedRequest:
    """A request received by the mock server."""

    method: str
    path: str
    query: dict[str, list[str]]
    headers: dict[str, str]


def respond(handler: BaseHTTPRequestHandler, status: int, body: Any = b"", content_type: str = "application/json") -> None:
    """Write a complete response. Dicts and lists are sent as JSON."""
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    handler.send_response(status)
    handler.send_header("Content-Type", content_type)
    handler.send_header("Content-Length", str(len(body)))
    handler.end_headers()
    handler.wfile.write(body)


@dataclass
class MockServer:
    """A local HTTP server with per-path handlers."""

    routes: dict[str, Handler] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)

    def __post_init__(self) -> None:
        server = self

        class RequestHandler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                parts = urllib.parse.urlsplit(self.path)
                server.requests.append(
                    RecordedRequest(
                        method=self.command,
                        path=parts.path,
                        query=urllib.parse.parse_qs(parts.query, keep_blank_values=True),
                        headers={k.lower(): v for k, v in self.headers.items()},
                    )
                )
                route = server.routes.get(parts.path)
                if route is None:
                    respond(self, 404, "404 page not found\n", content_type="text/plain")
                    return
                route(self)

            def log_message(self, format: str, *args: Any) -> None:
                pass

        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), RequestHandler)
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def handle(self, path: str, handler: Handler) -> None:
        self.routes[path] = handler

    def start(self) -> None:
        self._thread.start()

    def close(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join()


@pytest.fixture
def server() -> Iterator[MockServer]:
    """A fresh mock API server, shut down after the test."""
    mock = MockServer()
    mock.start()
    yield mock
    mock.close()


@pytest.fixture
def client(server: MockServer) -> APIClient:
    """An APIClient pointed at the mock server with a preview target date."""
    return APIClient(base_url=server.url + "/", space_id="my_space", target_date=TARGET_DATE)
