"""
Core HTTP transport for the bambou client.

Handles request headers, request/response round trips and status code
classification. Everything above this layer works with ``Response`` values
and ``BambouError`` subclasses.
"""

import base64
import http.client
import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from email.message import Message
from http import HTTPStatus
from typing import Any

from bambou.core.errors import ParseError, RequestFailed, TransportError
from bambou.core.logging import get_logger

# Configuration
DEFAULT_TIMEOUT = 60
ORGANIZATION_HEADER = "X-Nuage-Organization"
CONTENT_TYPE = "application/json; charset=utf-8"

logger = get_logger(__name__)


def build_headers(username: str, password: str, organization: str, api_key: str | None = None) -> dict[str, str]:
    """
    Build the headers sent with every request.

    The Basic credential uses the API key once one is known, and falls back
    to the password otherwise.

    Args:
        username: Login name
        password: Login password
        organization: Tenant the request is scoped to
        api_key: API key obtained from the bootstrap exchange, if any

    Returns:
        Header mapping for one request

    """
    secret = api_key if api_key is not None else password
    token = base64.b64encode(f"{username}:{secret}".encode()).decode("ascii")
    return {
        ORGANIZATION_HEADER: organization,
        "Content-Type": CONTENT_TYPE,
        "Authorization": f"Basic {token}",
    }


def _redact(headers: dict[str, str]) -> dict[str, str]:
    return {k: ("<redacted>" if k.lower() == "authorization" else v) for k, v in headers.items()}


@dataclass
class Response:
    """A fully read HTTP response."""

    status: int
    content: bytes = b""
    headers: Message = field(default_factory=Message)

    @property
    def body(self) -> str:
        """The body decoded as UTF-8."""
        try:
            return self.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Response body is not valid UTF-8: {e}") from e

    def json(self) -> Any:
        """Decode the body as JSON."""
        try:
            return json.loads(self.body)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON response: {e}") from e


def _error_text(content: bytes) -> str:
    """Decode a failure body for reporting; bytes that are not UTF-8 are read as Latin-1."""
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content.decode("latin-1")


class HTTPTransport:
    """
    Thin shim over a shared urllib opener.

    Handles:
    - TLS configuration (through the opener's HTTPS handler)
    - HTTP methods (GET, PUT, POST, DELETE) with their expected status codes
    - Separating transport failures from server-reported failures
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, ssl_context: ssl.SSLContext | None = None):
        """
        Initialize the transport.

        Args:
            timeout: Request timeout in seconds
            ssl_context: TLS context for HTTPS requests (system defaults if None)

        """
        handlers: list[urllib.request.BaseHandler] = []
        if ssl_context is not None:
            handlers.append(urllib.request.HTTPSHandler(context=ssl_context))
        self._opener = urllib.request.build_opener(*handlers)
        self.timeout = timeout

    def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | None = None,
    ) -> Response:
        """
        Send one request and read the whole response.

        Non-2xx answers come back as a ``Response`` like any other; only
        failures to talk to the server raise.

        Raises:
            TransportError: On connection, TLS, timeout or URL errors

        """
        data = body.encode("utf-8") if body is not None else None

        try:
            req = urllib.request.Request(url, data=data, headers=headers, method=method)
            with self._opener.open(req, timeout=self.timeout) as resp:
                return Response(status=resp.status, content=resp.read(), headers=resp.headers)

        except urllib.error.HTTPError as e:
            return Response(
                status=e.code,
                content=e.read(),
                headers=e.headers if e.headers is not None else Message(),
            )

        except urllib.error.URLError as e:
            raise TransportError(f"Connection error: {e.reason}", {"url": url}) from e

        except TimeoutError as e:
            raise TransportError(f"Request timed out after {self.timeout} seconds", {"url": url}) from e

        # Header values must be Latin-1 on the wire
        except UnicodeError as e:
            raise TransportError(f"Cannot encode request: {e}", {"url": url}) from e

        except ValueError as e:
            raise TransportError(f"Invalid URL: {e}", {"url": url}) from e

        except (http.client.HTTPException, OSError) as e:
            raise TransportError(f"HTTP error: {e}", {"url": url}) from e

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        expected: HTTPStatus,
        body: str | None = None,
    ) -> Response:
        """
        Make an HTTP request and check its status code.

        Args:
            method: HTTP method (GET, PUT, POST, DELETE)
            url: Absolute request URL
            headers: Request headers
            expected: The only status code treated as success
            body: JSON request body for PUT/POST

        Returns:
            The response

        Raises:
            TransportError: When the server could not be reached
            RequestFailed: When the status code is not the expected one

        """
        logger.info("HTTP request", method=method, url=url)
        logger.debug("HTTP request detail", method=method, headers=_redact(headers), body=body)

        resp = self._send(method, url, headers, body)

        logger.info("HTTP response", method=method, url=url, status_code=resp.status)
        logger.debug("HTTP response detail", method=method, headers=resp.headers.items(), content=resp.content)

        if resp.status != expected:
            logger.warning("HTTP request failed", method=method, url=url, status_code=resp.status)
            raise RequestFailed(_error_text(resp.content), resp.status, content=resp.content)
        return resp

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(self, url: str, headers: dict[str, str]) -> Response:
        """Make a GET request, expecting 200 OK."""
        return self.request("GET", url, headers, HTTPStatus.OK)

    def put(self, url: str, headers: dict[str, str], body: str) -> Response:
        """Make a PUT request, expecting 200 OK."""
        return self.request("PUT", url, headers, HTTPStatus.OK, body)

    def post(self, url: str, headers: dict[str, str], body: str) -> Response:
        """Make a POST request, expecting 201 Created."""
        return self.request("POST", url, headers, HTTPStatus.CREATED, body)

    def delete(self, url: str, headers: dict[str, str]) -> Response:
        """Make a DELETE request, expecting 204 No Content."""
        return self.request("DELETE", url, headers, HTTPStatus.NO_CONTENT)
