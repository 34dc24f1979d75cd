"""Web surfaces that can host a Sankey document.

A surface loads HTML and routes messages posted by the page to the receiver
registered for their channel. ``LocalWebSurface`` does this over HTTP for a
regular browser: the page is served at ``/`` and taps come back as
``POST /bridge/<channel>`` with a JSON body.
"""

from __future__ import annotations

import json
import logging
import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Protocol, runtime_checkable

from sankeyview.bridge import HTTP_BRIDGE_PREFIX, BridgeTransport, ScriptMessage, TapMessageReceiver

logger = logging.getLogger(__name__)

_MAX_BODY_BYTES = 64 * 1024


@runtime_checkable
class WebSurface(Protocol):
    """What SankeyView needs from an embedded browser."""

    transport: BridgeTransport

    def load_html(self, html: str) -> None: ...

    def add_message_handler(self, name: str, receiver: TapMessageReceiver) -> None: ...

    def handler_for(self, name: str) -> TapMessageReceiver | None: ...


class _SurfaceRequestHandler(BaseHTTPRequestHandler):
    """Serve the current document and accept bridge posts."""

    surface: LocalWebSurface

    def do_GET(self) -> None:  # noqa: N802 - required by BaseHTTPRequestHandler
        if self.path in {"/", "/index.html"}:
            body = self.surface.html.encode("utf-8")
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Cache-Control", "no-store")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
            return
        self.send_error(HTTPStatus.NOT_FOUND, "Not Found")

    def do_POST(self) -> None:  # noqa: N802 - required by BaseHTTPRequestHandler
        if not self.path.startswith(HTTP_BRIDGE_PREFIX):
            self.send_error(HTTPStatus.NOT_FOUND, "Not Found")
            return
        name = self.path[len(HTTP_BRIDGE_PREFIX):]
        receiver = self.surface.handler_for(name)
        if receiver is None:
            self.send_error(HTTPStatus.NOT_FOUND, f"No handler for channel {name!r}")
            return

        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            length = -1
        if length < 0:
            self.send_error(HTTPStatus.BAD_REQUEST, "Invalid Content-Length")
            return
        if length > _MAX_BODY_BYTES:
            self.send_error(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "Message too large")
            return
        raw = self.rfile.read(length)
        try:
            body = json.loads(raw)
        except ValueError:
            logger.debug("Rejecting %r message with undecodable body", name)
            self.send_error(HTTPStatus.BAD_REQUEST, "Body is not JSON")
            return
        receiver.did_receive(ScriptMessage(name, body))
        self.send_response(HTTPStatus.NO_CONTENT)
        self.end_headers()

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002 - match base class
        logger.debug("%s - %s", self.address_string(), format % args)


class LocalWebSurface:
    """Serve a document to a browser over loopback HTTP.

    Example:
        >>> with LocalWebSurface() as surface:
        ...     view.make_surface(surface)
        ...     webbrowser.open(surface.url)
    """

    transport = BridgeTransport.HTTP

    def __init__(self, host: str = "127.0.0.1", port: int = 0) -> None:
        self.host = host
        self.port = port
        self.html = ""
        self._handlers: dict[str, TapMessageReceiver] = {}
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}/"

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def load_html(self, html: str) -> None:
        """Replace the served document; browsers pick it up on next load."""
        self.html = html

    def add_message_handler(self, name: str, receiver: TapMessageReceiver) -> None:
        self._handlers[name] = receiver

    def handler_for(self, name: str) -> TapMessageReceiver | None:
        return self._handlers.get(name)

    def start(self) -> None:
        if self.running:
            return

        bound = self

        class Handler(_SurfaceRequestHandler):
            surface = bound

        httpd = ThreadingHTTPServer((self.host, self.port), Handler)
        httpd.daemon_threads = True
        self._server = httpd
        self.port = httpd.server_port

        self._thread = threading.Thread(target=httpd.serve_forever, daemon=True)
        self._thread.start()
        logger.info("Sankey surface available at %s", self.url)

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._server = None
        self._thread = None

    def __enter__(self) -> LocalWebSurface:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"LocalWebSurface({self.url!r})"
