"""
Request gateway for the KGiTON API.

Every outbound call goes through :class:`HttpClient`, which injects
credentials, traces requests when ``debug`` is on, turns failures into
:mod:`kgiton.errors` types and retries transient failures.
"""

import asyncio
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from kgiton.config import GatewayConfig, get_config
from kgiton.errors import ApiError, from_response, from_transport_error
from kgiton.logging import get_logger, sanitize_headers, set_sdk_log_level
from kgiton.models import ApiResponse
from kgiton.retry import RetryConfig, SleepFunc, execute_with_retry

API_KEY_HEADER = "x-api-key"
AUTHORIZATION_HEADER = "Authorization"

BASE_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def quote_segment(value: Any) -> str:
    """Percent-encode a single path segment."""
    return quote(str(value), safe="")


class HttpClient:
    """Client for the KGiTON REST API.

    Usage:
        async with HttpClient(api_key="kgiton_xxx") as client:
            response = await client.get("/api/user/profile")
            profile = response.data
    """

    def __init__(self, config: Optional[GatewayConfig] = None, *,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 sleep: SleepFunc = asyncio.sleep,
                 **overrides: Any):
        """Initialize the gateway.

        Args:
            config: Full configuration. Defaults and ``KGITON_*`` environment
                variables are used when omitted.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
            sleep: Awaitable used for backoff waits.
            **overrides: Individual configuration fields layered on top.
        """
        if config is None:
            self._config = get_config(**overrides)
        else:
            self._config = config.merged(**overrides)

        self._sleep = sleep
        self._client = httpx.AsyncClient(transport=transport)
        self.logger = get_logger("kgiton.http_client")
        if self._config.debug:
            set_sdk_log_level("debug")

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying httpx client and release connections."""
        await self._client.aclose()

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def debug(self) -> bool:
        return self._config.debug

    # ------------------------------------------------------------------
    # Credential slot
    # ------------------------------------------------------------------

    def update_config(self, **changes: Any) -> None:
        """Shallow-merge configuration fields; ``None`` values are ignored."""
        self._config = self._config.merged(**changes)
        if "debug" in changes or "log_level" in changes:
            set_sdk_log_level("debug" if self._config.debug else self._config.log_level)

    def set_api_key(self, api_key: str) -> None:
        self._config = self._config.model_copy(update={"api_key": api_key})

    def set_access_token(self, access_token: str) -> None:
        self._config = self._config.model_copy(update={"access_token": access_token})

    def clear_auth(self) -> None:
        """Remove both credentials. Subsequent requests are unauthenticated."""
        self._config = self._config.without_credentials()

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------

    def build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def build_headers(self, overrides: Optional[Mapping[str, str]] = None) -> httpx.Headers:
        """Assemble headers for one attempt.

        Base headers, then configured extra headers, then per-call headers.
        Credentials are applied last and cannot be removed or replaced by
        any caller-supplied header.
        """
        headers = httpx.Headers(BASE_HEADERS)
        headers.update(self._config.headers)
        if overrides:
            headers.update(overrides)

        for name in (API_KEY_HEADER, AUTHORIZATION_HEADER):
            if name in headers:
                del headers[name]

        if self._config.api_key:
            headers[API_KEY_HEADER] = self._config.api_key
        elif self._config.access_token:
            headers[AUTHORIZATION_HEADER] = f"Bearer {self._config.access_token}"

        return headers

    @staticmethod
    def _serialize_body(data: Any) -> Any:
        if isinstance(data, BaseModel):
            return data.model_dump(mode="json", exclude_none=True)
        return data

    async def _send(self, method: str, path: str, body: Any,
                    params: Optional[Dict[str, Any]],
                    headers: Optional[Mapping[str, str]],
                    timeout_ms: Optional[int]) -> httpx.Response:
        """Perform a single attempt and classify failures."""
        request_headers = self.build_headers(headers)
        if timeout_ms is None:
            timeout = httpx.Timeout(self._config.timeout_seconds)
        else:
            timeout = httpx.Timeout(timeout_ms / 1000.0)

        if self._config.debug:
            self.logger.debug(
                "Sending request",
                method=method,
                path=path,
                params=params,
                headers=sanitize_headers(request_headers),
                body=body
            )

        try:
            response = await self._client.request(
                method,
                self.build_url(path),
                json=body,
                params=params,
                headers=request_headers,
                timeout=timeout
            )
        except httpx.RequestError as e:
            error = from_transport_error(e)
            if self._config.debug:
                self.logger.debug("Request failed", method=method, path=path, error=error.message)
            raise error from e

        if self._config.debug:
            self.logger.debug(
                "Received response",
                method=method,
                path=path,
                status_code=response.status_code,
                body=_response_body(response)
            )

        if not response.is_success:
            raise from_response(response)

        return response

    async def request(self, method: str, path: str, data: Any = None, *,
                      params: Optional[Dict[str, Any]] = None,
                      headers: Optional[Mapping[str, str]] = None,
                      timeout_ms: Optional[int] = None) -> ApiResponse:
        """Send a request through the retry policy and parse the envelope.

        Raises:
            KGiTONError: The last attempt's classified error, or the first
                non-retryable one.
            ValueError: ``timeout_ms`` is not positive.
        """
        if timeout_ms is not None and timeout_ms <= 0:
            raise ValueError("timeout_ms must be greater than 0")

        method = method.upper()
        body = self._serialize_body(data)
        retry_config = RetryConfig.from_gateway_config(self._config)

        async def _attempt() -> httpx.Response:
            return await self._send(method, path, body, params, headers, timeout_ms)

        response = await execute_with_retry(
            _attempt,
            retry_config,
            sleep=self._sleep,
            name=f"{method} {path}",
            log_attempts=self._config.debug
        )
        return self._parse_envelope(response)

    @staticmethod
    def _parse_envelope(response: httpx.Response) -> ApiResponse:
        if not response.content:
            envelope = ApiResponse(success=True)
        else:
            try:
                payload = response.json()
            except ValueError:
                raise ApiError(
                    "Response body is not valid JSON",
                    response.status_code,
                    details={"raw": response.text}
                )
            if not isinstance(payload, dict):
                raise ApiError(
                    "Response body is not an envelope object",
                    response.status_code,
                    details=payload
                )
            try:
                envelope = ApiResponse.model_validate(payload)
            except PydanticValidationError as e:
                raise ApiError(
                    "Response body is not an envelope object",
                    response.status_code,
                    details={"body": payload, "errors": e.errors(include_url=False)}
                )

        envelope._status_code = response.status_code
        return envelope

    async def get(self, path: str, *, params: Optional[Dict[str, Any]] = None,
                  headers: Optional[Mapping[str, str]] = None,
                  timeout_ms: Optional[int] = None) -> ApiResponse:
        return await self.request("GET", path, params=params, headers=headers, timeout_ms=timeout_ms)

    async def post(self, path: str, data: Any = None, *, params: Optional[Dict[str, Any]] = None,
                   headers: Optional[Mapping[str, str]] = None,
                   timeout_ms: Optional[int] = None) -> ApiResponse:
        return await self.request("POST", path, data, params=params, headers=headers, timeout_ms=timeout_ms)

    async def put(self, path: str, data: Any = None, *, params: Optional[Dict[str, Any]] = None,
                  headers: Optional[Mapping[str, str]] = None,
                  timeout_ms: Optional[int] = None) -> ApiResponse:
        return await self.request("PUT", path, data, params=params, headers=headers, timeout_ms=timeout_ms)

    async def patch(self, path: str, data: Any = None, *, params: Optional[Dict[str, Any]] = None,
                    headers: Optional[Mapping[str, str]] = None,
                    timeout_ms: Optional[int] = None) -> ApiResponse:
        return await self.request("PATCH", path, data, params=params, headers=headers, timeout_ms=timeout_ms)

    async def delete(self, path: str, *, params: Optional[Dict[str, Any]] = None,
                     headers: Optional[Mapping[str, str]] = None,
                     timeout_ms: Optional[int] = None) -> ApiResponse:
        return await self.request("DELETE", path, params=params, headers=headers, timeout_ms=timeout_ms)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


__all__ = ["HttpClient", "quote_segment"]
