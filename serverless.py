"""Base request handler for the Vercel serverless functions in api/."""

import json
import logging
from http.server import BaseHTTPRequestHandler

from config import configure_logging, get_settings
from routing import WRITE_ERROR_MESSAGE, error_reply, handle_request
from stores import build_store

logger = logging.getLogger(__name__)


def parse_content_length(value) -> int:
    try:
        return max(int(value or 0), 0)
    except ValueError:
        return 0


class FunctionHandler(BaseHTTPRequestHandler):
    # Route this function serves; set by each api/ module
    route = "/"

    def _read_json_body(self):
        content_length = parse_content_length(self.headers.get("Content-Length"))
        raw = self.rfile.read(content_length) if content_length else b""
        try:
            return json.loads(raw) if raw else {}
        except (json.JSONDecodeError, ValueError):
            return {}

    def _dispatch(self):
        settings = get_settings()
        configure_logging(settings.LOG_LEVEL)

        body = None
        if self.command in ("POST", "PUT", "PATCH"):
            body = self._read_json_body()

        # A fresh store per invocation; credentials are only checked on first use
        try:
            reply = handle_request(
                self.command,
                self.route,
                body,
                lambda: build_store(settings),
                settings.SHEET_TITLE,
            )
        except Exception:
            logger.exception(f"Unhandled error in {self.command} {self.route}")
            reply = error_reply(500, WRITE_ERROR_MESSAGE)
        self._json_response(reply.status, reply.payload, reply.headers)

    do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = do_OPTIONS = _dispatch

    def _json_response(self, status, data, headers):
        payload = json.dumps(data).encode()
        self.send_response(status)
        for key, value in headers.items():
            self.send_header(key, value)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)
