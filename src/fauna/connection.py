"""
HTTP connection to the Fauna REST service.

Defines the Transport protocol consumed by the cache and a Connection
implementation backed by httpx. Bodies are JSON (orjson); connect-phase
failures are retried with tenacity, everything else surfaces as a typed
TransportError.
"""

from __future__ import annotations

import time
from typing import Any, Mapping, Protocol, runtime_checkable

import httpx
import orjson
from pydantic import ValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from fauna import __version__
from fauna.config import get_settings
from fauna.exceptions import (
    BadRequest,
    ConfigurationError,
    Invalid,
    NotFound,
    PermissionDenied,
    ServerError,
    TransportError,
    Unauthorized,
)
from fauna.logging import get_logger
from fauna.types import Method, Reference, Response

logger = get_logger(__name__)

TRANSACTIONS_PATH = "transactions"

STATUS_ERRORS: dict[int, type[TransportError]] = {
    400: BadRequest,
    401: Unauthorized,
    403: PermissionDenied,
    404: NotFound,
    422: Invalid,
}


@runtime_checkable
class Transport(Protocol):
    """Protocol for the transport the cache talks through."""

    def get(self, ref: Reference, params: Mapping[str, Any] | None = None) -> Response:
        """Fetch the resource at `ref`."""
        ...

    def post(self, ref: Reference, body: Mapping[str, Any] | None = None) -> Response:
        """Create a resource under `ref`."""
        ...

    def put(self, ref: Reference, body: Mapping[str, Any] | None = None) -> Response:
        """Replace the resource at `ref`."""
        ...

    def patch(self, ref: Reference, body: Mapping[str, Any] | None = None) -> Response:
        """Partially update the resource at `ref`."""
        ...

    def delete(self, ref: Reference, body: Mapping[str, Any] | None = None) -> None:
        """Delete the resource at `ref`."""
        ...

    def post_transaction(self, body: Mapping[str, Any]) -> Response:
        """Submit a compiled transaction as one batch."""
        ...

    def close(self) -> None:
        """Close any open connections."""
        ...


class Connection:
    """Transport backed by an httpx client.

    Settings not passed explicitly are read from get_settings(). The secret
    is sent as the basic-auth username.
    """

    def __init__(
        self,
        secret: str | None = None,
        domain: str | None = None,
        scheme: str | None = None,
        port: int | None = None,
        version: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the connection.

        Args:
            secret: Key or token secret. Defaults to FAUNA_SECRET.
            domain: Service host. Defaults to FAUNA_DOMAIN.
            scheme: http or https. Defaults to FAUNA_SCHEME.
            port: Service port. Defaults to FAUNA_PORT.
            version: API version prefix. Defaults to FAUNA_API_VERSION.
            timeout: Request timeout in seconds. Defaults to FAUNA_TIMEOUT.
            max_retries: Connection attempts per request. Defaults to FAUNA_MAX_RETRIES.
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests).
        """
        try:
            settings = get_settings()
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid Fauna client settings",
                context={"errors": [err["loc"][0] for err in e.errors() if err["loc"]]},
            ) from e

        self.secret = secret if secret is not None else settings.FAUNA_SECRET
        self.domain = domain or settings.FAUNA_DOMAIN
        self.scheme = scheme or settings.FAUNA_SCHEME
        self.port = port if port is not None else settings.FAUNA_PORT
        self.version = (version or settings.FAUNA_API_VERSION).strip("/")
        self.timeout = timeout if timeout is not None else settings.FAUNA_TIMEOUT
        self.max_retries = max_retries if max_retries is not None else settings.FAUNA_MAX_RETRIES
        self.retry_wait: wait_base = wait_exponential(multiplier=0.5, min=0.5, max=8)

        if not self.secret:
            logger.warning("FAUNA_SECRET not set - requests will be unauthenticated")

        host = self.domain if self.port is None else f"{self.domain}:{self.port}"
        self.base_url = f"{self.scheme}://{host}/{self.version}/"

        self._client = httpx.Client(
            base_url=self.base_url,
            auth=(self.secret, "") if self.secret else None,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": f"fauna-client-python/{__version__}",
            },
            timeout=self.timeout,
            transport=transport,
        )

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def get(self, ref: Reference, params: Mapping[str, Any] | None = None) -> Response:
        response = self._request(Method.GET, ref, params=params)
        return Response.from_body(self._decode(Method.GET, ref, response))

    def post(self, ref: Reference, body: Mapping[str, Any] | None = None) -> Response:
        response = self._request(Method.POST, ref, body=body)
        return Response.from_body(self._decode(Method.POST, ref, response))

    def put(self, ref: Reference, body: Mapping[str, Any] | None = None) -> Response:
        response = self._request(Method.PUT, ref, body=body)
        return Response.from_body(self._decode(Method.PUT, ref, response))

    def patch(self, ref: Reference, body: Mapping[str, Any] | None = None) -> Response:
        response = self._request(Method.PATCH, ref, body=body)
        return Response.from_body(self._decode(Method.PATCH, ref, response))

    def delete(self, ref: Reference, body: Mapping[str, Any] | None = None) -> None:
        self._request(Method.DELETE, ref, body=body)

    def post_transaction(self, body: Mapping[str, Any]) -> Response:
        return self.post(TRANSACTIONS_PATH, body)

    def _request(
        self,
        method: Method,
        ref: Reference,
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request, retrying only when the connection could not be opened.

        Raises:
            TransportError: If the request fails or the service returns an error status.
        """
        content = orjson.dumps(dict(body)) if body else None
        retrying = Retrying(
            retry=retry_if_exception_type((httpx.ConnectError, httpx.ConnectTimeout)),
            stop=stop_after_attempt(self.max_retries),
            wait=self.retry_wait,
            reraise=True,
        )

        logger.debug("Sending request", method=method.value, ref=ref)
        started = time.monotonic()

        try:
            response = retrying(
                self._client.request,
                method.value,
                ref,
                params=dict(params) if params else None,
                content=content,
            )
        except httpx.RequestError as e:
            logger.warning("Request failed", method=method.value, ref=ref, error=str(e))
            raise TransportError(
                f"{method.value} {ref} failed: {e}",
                context={"method": method.value, "ref": ref, "error": str(e)},
            ) from e

        logger.debug(
            "Received response",
            method=method.value,
            ref=ref,
            status_code=response.status_code,
            elapsed_ms=int((time.monotonic() - started) * 1000),
        )

        if response.is_error:
            raise self._error_for(method, ref, response)
        return response

    def _error_for(self, method: Method, ref: Reference, response: httpx.Response) -> TransportError:
        status = response.status_code
        if status in STATUS_ERRORS:
            error_cls = STATUS_ERRORS[status]
        elif status >= 500:
            error_cls = ServerError
        else:
            error_cls = TransportError

        reason: Any = None
        try:
            payload = orjson.loads(response.content) if response.content else None
        except orjson.JSONDecodeError:
            payload = None
        if isinstance(payload, dict):
            reason = payload.get("reason") or payload.get("error")
        if reason is None and response.text:
            reason = response.text[:500]

        message = f"{method.value} {ref} returned {status}"
        if reason:
            message = f"{message}: {reason}"

        logger.warning("Service returned an error", method=method.value, ref=ref, status_code=status)
        return error_cls(
            message,
            context={"method": method.value, "ref": ref, "status_code": status},
        )

    def _decode(
        self, method: Method, ref: Reference, response: httpx.Response
    ) -> Mapping[str, Any] | None:
        if not response.content:
            return None
        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise TransportError(
                f"Failed to parse response for {method.value} {ref}",
                context={"method": method.value, "ref": ref, "error": str(e)},
            ) from e

        if not isinstance(payload, Mapping):
            raise TransportError(
                f"Expected a JSON object in response to {method.value} {ref}",
                context={"method": method.value, "ref": ref, "type": type(payload).__name__},
            )
        return payload
