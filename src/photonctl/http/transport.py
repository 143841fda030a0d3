"""HTTP transport for Photon Controller API calls."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from photonctl.config.models import RetryConfig
from photonctl.errors import APIError, RequestError
from photonctl.http.retry import RetryPolicy

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]
UploadFiles = Mapping[str, tuple[str, Any, str]]


def _api_error(response: httpx.Response, fallback: str) -> APIError:
    """Build an `APIError` from a Photon `{code, message, data}` error body.

    The decoded body is kept on the error: failed task calls attach the
    partially completed task there.
    """

    text = response.text.strip()
    try:
        decoded = response.json() if text else None
    except ValueError:
        decoded = None
    payload = decoded if isinstance(decoded, dict) else None

    code = payload.get("code") if payload else None
    message = payload.get("message") if payload else None
    if isinstance(message, str) and message:
        return APIError(
            status_code=response.status_code,
            message=message,
            code=code if isinstance(code, str) else None,
            payload=payload,
        )
    return APIError(
        status_code=response.status_code,
        message=fallback,
        code=code if isinstance(code, str) else None,
        body=text or None,
        payload=payload,
    )


def _decode(response: httpx.Response) -> dict[str, Any]:
    if response.status_code == 204 or not response.text.strip():
        return {}
    try:
        decoded = response.json()
    except ValueError as exc:
        raise RequestError("response was not valid JSON") from exc
    if not isinstance(decoded, dict):
        raise RequestError("response payload must be a JSON object")
    return decoded


class PhotonTransport:
    """Sends authenticated requests to one Photon endpoint and retries transient failures."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float,
        verify_tls: bool,
        retry_config: RetryConfig,
        token_provider: TokenProvider,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.retry = RetryPolicy(retry_config)
        self._token_provider = token_provider
        self._owns_http_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            verify=verify_tls,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._client.aclose()

    def _headers(self, extra: Mapping[str, str] | None) -> dict[str, str]:
        headers = {"Accept": "application/json", **(extra or {})}
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str | int | float | bool] | None = None,
        json_data: Mapping[str, Any] | None = None,
        files: UploadFiles | None = None,
        form_data: Mapping[str, Any] | None = None,
        extra_headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        verb = method.upper()
        # Upload bodies are streamed once and cannot be replayed.
        attempts = 1 if files is not None else self.retry.attempts

        attempt = 0
        while True:
            attempt += 1
            retries_left = attempt < attempts
            logger.debug(f"API request: {verb} {path} (attempt {attempt}/{attempts})")
            try:
                response = await self._client.request(
                    verb,
                    path,
                    params=params,
                    json=json_data,
                    files=files,
                    data=form_data,
                    headers=self._headers(extra_headers),
                )
            except httpx.HTTPError as exc:
                if retries_left and self.retry.retryable_error(exc):
                    logger.debug(f"API network error, retrying: {verb} {path} - {exc}")
                    await self.retry.pause(attempt)
                    continue
                logger.error(f"API network error: {verb} {path} - {exc}")
                raise RequestError(f"{verb} {path} failed: {exc}") from exc

            if response.status_code < 400:
                return _decode(response)

            if retries_left and self.retry.retryable_status(response.status_code):
                logger.debug(f"API transient status {response.status_code}, retrying: {verb} {path}")
                await self.retry.pause(attempt, response)
                continue

            error = _api_error(response, "request failed")
            logger.error(f"API error: {verb} {path} -> {error}")
            raise error
