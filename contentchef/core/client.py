"""
Core HTTP client for the ContentChef delivery API.

Handles request construction, authentication, response decoding and error
classification. Channels build on top of APIClient.get().
"""

import http.client
import json
import os
import shutil
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

from contentchef.core.context import Context
from contentchef.core.errors import APIError, ConfigurationError, DecodeError, EncodingError, TransportError
from contentchef.core.query import QueryOptions, add_options, format_timestamp

# Configuration
LIBRARY_VERSION = "0.1.0"
USER_AGENT = f"contentchef-python/{LIBRARY_VERSION}"
MEDIA_TYPE = "application/json"
API_KEY_HEADER = "X-SPACE-D-API-Key"
DEFAULT_TIMEOUT = 60

# Returns the preview target date as an ISO-8601 string
TargetDateResolver = Callable[[], str]


class Transport(Protocol):
    """Anything that can execute a urllib request, e.g. urllib.request.OpenerDirector."""

    def open(self, fullurl: urllib.request.Request, data: bytes | None = None, timeout: float | None = ...) -> Any: ...


def check_response(request: urllib.request.Request, response: Any) -> None:
    """
    Raise APIError unless the response status is 2xx.

    The message is the `message` field of a JSON object body, or the raw
    body text otherwise (empty when there is no body).
    """
    status = response.status
    if 200 <= status <= 299:
        return

    body = response.read().decode("utf-8", errors="replace")
    message = body
    details: dict[str, Any] = {}
    if body:
        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            details = data
            if "message" in data:
                message = str(data["message"] or "")

    raise APIError(
        message,
        method=request.get_method(),
        url=request.full_url,
        status=status,
        reason=getattr(response, "reason", "") or "",
        details=details,
    )


class APIClient:
    """
    Low-level HTTP client for the ContentChef delivery API.

    Handles:
    - Request building against the base URL
    - Authentication via per-channel API key
    - Response decoding and error classification
    """

    def __init__(
        self,
        base_url: str | None = None,
        space_id: str | None = None,
        transport: Transport | None = None,
        target_date: datetime | None = None,
        target_date_resolver: TargetDateResolver | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Absolute API base URL (or CONTENTCHEF_BASE_URL env var)
            space_id: ContentChef space ID (or CONTENTCHEF_SPACE_ID env var)
            transport: Custom transport, defaults to a urllib opener
            target_date: Date at which preview channels look at content
            target_date_resolver: Callable returning the preview target date as ISO-8601,
                takes precedence over target_date
            timeout: Default timeout in seconds for background_context()

        Raises:
            ConfigurationError: If the base URL is not absolute or the space ID is empty

        """
        self.base_url = base_url or os.environ.get("CONTENTCHEF_BASE_URL", "")
        try:
            parts = urllib.parse.urlsplit(self.base_url)
        except ValueError as e:
            raise ConfigurationError(f"Invalid base URL {self.base_url!r}: {e}") from e
        if not parts.scheme or not parts.netloc:
            raise ConfigurationError(f"Base URL must be absolute, got {self.base_url!r}")

        self.space_id = space_id or os.environ.get("CONTENTCHEF_SPACE_ID", "")
        if not self.space_id:
            raise ConfigurationError("Space ID required. Set CONTENTCHEF_SPACE_ID env var or pass space_id")

        self.transport = transport or urllib.request.build_opener()
        self.target_date = target_date
        self.target_date_resolver = target_date_resolver
        self.timeout = timeout

    def background_context(self) -> Context:
        """A context bounded by the client's default timeout."""
        return Context.with_timeout(self.timeout)

    def resolve_target_date(self) -> str | None:
        """The preview target date as ISO-8601, or None when none is configured."""
        if self.target_date_resolver is not None:
            return self.target_date_resolver() or None
        if self.target_date is not None:
            return format_timestamp(self.target_date)
        return None

    # =========================================================================
    # Requests
    # =========================================================================

    def new_request(self, method: str, path: str, body: Any = None) -> urllib.request.Request:
        """
        Build a request for `path` resolved against the base URL.

        Args:
            method: HTTP method
            path: Path relative to the base URL (or an absolute URL)
            body: Value to send as a JSON body

        Returns:
            A request ready for the transport

        Raises:
            EncodingError: On an invalid URL or a body that cannot be serialized

        """
        try:
            url = urllib.parse.urljoin(self.base_url, path)
        except ValueError as e:
            raise EncodingError(f"Invalid path {path!r}: {e}") from e
        if any(ch <= " " or ch == "\x7f" for ch in url):
            raise EncodingError(f"Invalid URL {url!r}: whitespace and control characters must be escaped")

        data = None
        headers = {
            "Accept": MEDIA_TYPE,
            "User-Agent": USER_AGENT,
        }
        if body is not None:
            try:
                data = json.dumps(body).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise EncodingError(f"Cannot encode request body: {e}") from e
            headers["Content-Type"] = MEDIA_TYPE

        try:
            return urllib.request.Request(url, data=data, headers=headers, method=method)
        except ValueError as e:
            raise EncodingError(f"Invalid URL {url!r}: {e}") from e

    def do(
        self,
        ctx: Context | None,
        request: urllib.request.Request,
        target: Any = None,
    ) -> Any:
        """
        Execute a request and decode the response.

        Args:
            ctx: Call context, required
            request: Request from new_request()
            target: Writable object receiving the raw body, a parser called with the
                decoded JSON, or None to return the decoded JSON as is

        Returns:
            Parsed result (None when writing to a raw sink)

        Raises:
            ConfigurationError: If ctx is None
            TransportError: On connection errors, cancellation or an expired deadline
            APIError: On non-2xx responses
            DecodeError: On an invalid JSON body

        """
        if ctx is None:
            raise ConfigurationError("A call context is required")
        ctx_err = ctx.error()
        if ctx_err is not None:
            raise ctx_err

        try:
            response = self.transport.open(request, timeout=ctx.remaining())
        except urllib.error.HTTPError as e:
            # urllib reports redirect loops as HTTPError
            if e.msg and e.msg.startswith(urllib.request.HTTPRedirectHandler.inf_msg):
                self._raise_transport_error(ctx, e)
            response = e
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            self._raise_transport_error(ctx, e)

        with response:
            try:
                check_response(request, response)
                if hasattr(target, "write"):
                    shutil.copyfileobj(response, target)
                    return None
                body = response.read()
            except (http.client.HTTPException, OSError) as e:
                self._raise_transport_error(ctx, e)

        try:
            data = json.loads(body) if body else {}
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Invalid JSON response: {e}") from e

        if target is None:
            return data
        # a JSON null decodes to a zero-valued result, like an empty body
        if data is None:
            data = {}
        try:
            return target(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DecodeError(f"Unexpected response structure: {e}") from e

    def _raise_transport_error(self, ctx: Context, error: Exception) -> None:
        ctx_err = ctx.error()
        if ctx_err is not None:
            raise ctx_err from error
        reason = getattr(error, "reason", None) or error
        raise TransportError(f"Connection error: {reason}") from error

    def get(
        self,
        ctx: Context | None,
        path: str,
        api_key: str,
        options: QueryOptions | None = None,
        target: Any = None,
    ) -> Any:
        """Make an authenticated GET request with encoded query options."""
        path = add_options(path, options)
        request = self.new_request("GET", path)
        request.add_header(API_KEY_HEADER, api_key)
        return self.do(ctx, request, target)
