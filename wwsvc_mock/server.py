"""HTTP runtime serving the mocked WWSVC endpoints."""

from __future__ import annotations

import json
import re
import socketserver
import threading
from dataclasses import dataclass
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import unquote

import structlog

from . import handlers
from .config import ServiceContext
from .envelope import ServiceResponse

LOGGER = structlog.get_logger("wwsvc_mock.server")

EXEC_PATHS = frozenset({"/WWSVC/EXECJSON", "/WWSVC/EXECJSON/"})
EXEC_METHODS = frozenset({"PUT", "POST", "DELETE"})
REGISTER_PATH = re.compile(r"^/WWSVC/WWSERVICE/REGISTER/([^/]+)/([^/]+)/([^/]+)/([^/]+)/$")
DEREGISTER_PATH = re.compile(r"^/WWSVC/WWSERVICE/DEREGISTER/([^/]+)/$")


@dataclass
class IncomingRequest:
    method: str
    path: str
    headers: dict[str, str]
    body: bytes


class ThreadedHTTPServer(socketserver.ThreadingMixIn, HTTPServer):
    daemon_threads = True


class DebugInterceptor:
    """Logs raw request and response bodies around a handler when enabled."""

    def __init__(self, enabled: bool, logger: Any | None = None) -> None:
        self.enabled = enabled
        self._logger = logger or LOGGER

    def before(self, request: IncomingRequest) -> None:
        if not self.enabled:
            return
        self._logger.debug(
            "request_trace",
            direction="-->",
            method=request.method,
            path=request.path,
            body=request.body.decode("utf-8", errors="replace"),
        )

    def after(self, request: IncomingRequest, status: int, body: bytes) -> None:
        if not self.enabled:
            return
        self._logger.debug(
            "response_trace",
            direction="<--",
            method=request.method,
            path=request.path,
            status=status,
            body=body.decode("utf-8", errors="replace"),
        )


def route_request(context: ServiceContext, request: IncomingRequest) -> ServiceResponse | HTTPStatus:
    """Dispatch to a handler; an ``HTTPStatus`` means no handler accepts the request."""

    if request.path in EXEC_PATHS:
        if request.method not in EXEC_METHODS:
            return HTTPStatus.METHOD_NOT_ALLOWED
        return handlers.exec_json(context, request.body)

    register_match = REGISTER_PATH.match(request.path)
    if register_match:
        if request.method != "GET":
            return HTTPStatus.METHOD_NOT_ALLOWED
        vendor_hash, app_hash, secret, revision = (unquote(part) for part in register_match.groups())
        return handlers.handle_register(context, vendor_hash, app_hash, secret, revision)

    deregister_match = DEREGISTER_PATH.match(request.path)
    if deregister_match:
        if request.method != "GET":
            return HTTPStatus.METHOD_NOT_ALLOWED
        return handlers.handle_deregister(context, unquote(deregister_match.group(1)), request.headers)

    return HTTPStatus.NOT_FOUND


class WebserviceServer:
    """Runs the mock WEBSERVICE on a background thread."""

    def __init__(self, context: ServiceContext, host: str = "127.0.0.1", port: int = 0) -> None:
        self._context = context
        self._host = host
        self._port = port
        self._httpd: ThreadedHTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._ready = threading.Event()
        self._logger = LOGGER.bind(resources=len(context.catalog), debug=context.debug)

    @property
    def address(self) -> tuple[str, int]:
        if self._httpd is None:
            return self._host, self._port
        host, port = self._httpd.server_address[:2]
        return str(host), int(port)

    @property
    def base_url(self) -> str:
        host, port = self.address
        return f"http://{host}:{port}/"

    def start(self) -> None:
        handler_factory = self._build_handler_factory()
        self._logger.info("server_starting", host=self._host, port=self._port)
        httpd = ThreadedHTTPServer((self._host, self._port), handler_factory)
        self._httpd = httpd
        self._thread = threading.Thread(target=httpd.serve_forever, daemon=True)
        self._thread.start()
        self._ready.set()
        host, port = self.address
        self._logger = self._logger.bind(host=host, port=port)
        self._logger.info("server_started")

    def stop(self) -> None:
        if not self._httpd:
            return
        self._logger.info("server_stopping")
        try:
            self._httpd.shutdown()
            self._httpd.server_close()
        finally:
            if self._thread:
                self._thread.join(timeout=2)
            self._httpd = None
            self._ready.clear()
        self._logger.info("server_stopped")

    def wait_until_ready(self, timeout: float = 1.0) -> bool:
        return self._ready.wait(timeout=timeout)

    def console_summary(self) -> list[str]:
        return server_console_summary(self._context, self.base_url)

    def _build_handler_factory(self) -> type[BaseHTTPRequestHandler]:
        context = self._context
        handler_logger = LOGGER.bind(component="http")
        interceptor = DebugInterceptor(context.debug, handler_logger)

        class Handler(BaseHTTPRequestHandler):
            def log_message(self, format: str, *args: Any) -> None:  # pragma: no cover - avoid stderr
                handler_logger.debug(
                    "http_trace",
                    client_ip=self.client_address[0],
                    message=format % args,
                )

            def do_GET(self) -> None:  # noqa: N802 (BaseHTTPRequestHandler requirement)
                self._handle()

            def do_POST(self) -> None:  # noqa: N802
                self._handle()

            def do_PUT(self) -> None:  # noqa: N802
                self._handle()

            def do_DELETE(self) -> None:  # noqa: N802
                self._handle()

            def do_PATCH(self) -> None:  # noqa: N802
                self._handle()

            def do_HEAD(self) -> None:  # noqa: N802
                self._handle(head_only=True)

            def _handle(self, *, head_only: bool = False) -> None:
                request = IncomingRequest(
                    method=self.command,
                    path=self.path.split("?", 1)[0],
                    headers={key: value for key, value in self.headers.items()},
                    body=self.rfile.read(int(self.headers.get("Content-Length", 0) or 0)),
                )
                request_logger = handler_logger.bind(method=request.method, path=request.path)
                request_logger.info("request_received", content_length=len(request.body))
                interceptor.before(request)
                try:
                    outcome = route_request(context, request)
                except Exception:
                    request_logger.exception("request_failed")
                    self._send_error(request, HTTPStatus.INTERNAL_SERVER_ERROR, "mock failure", head_only)
                    return
                if isinstance(outcome, HTTPStatus):
                    request_logger.warning("request_unmatched", status=outcome.value)
                    message = "No route matched" if outcome is HTTPStatus.NOT_FOUND else "Method not allowed"
                    self._send_error(request, outcome, message, head_only)
                    return
                status = outcome.http_status
                self._send(request, status, outcome.to_json(), head_only)
                request_logger.info("request_served", status=status)

            def _send_error(
                self,
                request: IncomingRequest,
                status: HTTPStatus,
                message: str,
                head_only: bool,
            ) -> None:
                body = json.dumps({"error": message}).encode("utf-8")
                self._send(request, status.value, body, head_only)

            def _send(self, request: IncomingRequest, status: int, body: bytes, head_only: bool) -> None:
                self.send_response(status)
                self.send_header("Content-Type", "application/json; charset=utf-8")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                if not head_only:
                    self.wfile.write(body)
                interceptor.after(request, status, body)

        return Handler

    def __enter__(self) -> "WebserviceServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - context helper
        self.stop()


def server_console_summary(context: ServiceContext, base_url: str) -> list[str]:
    identity = context.identity
    credentials = context.credentials
    lines = [
        "----- WEBWARE Mock Server -----",
        f"Server listening on: {base_url}",
        f"Mocked Resources: {len(context.catalog)}",
    ]
    lines.extend(f"    - {resource.describe()}" for resource in context.catalog)
    lines.extend(
        [
            f"Vendor Hash: {identity.vendor_hash}",
            f"Application Hash: {identity.application_hash}",
            f"Revision: {identity.version}",
            f"Application Secret: {identity.application_secret}",
            "--------- Credentials ---------",
            f"Service Pass: {credentials.service_pass}",
            f"Application ID: {credentials.application_id}",
            "-------------------------------",
        ]
    )
    return lines
