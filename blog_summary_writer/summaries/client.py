"""Thin wrapper around the external summary-completion endpoint."""
from __future__ import annotations

import random
import time
from typing import Any, Dict, Mapping, Optional

import httpx


class SummaryEndpointError(RuntimeError):
    """Base error raised for summary endpoint failures."""


class AuthenticationError(SummaryEndpointError):
    """Raised when the endpoint rejects the credential."""


class TransientError(SummaryEndpointError):
    """Raised for timeouts, network failures and retryable statuses exceeding retry limits."""


class ClientConfigurationError(SummaryEndpointError):
    """Raised when the endpoint returns an unexpected payload."""


class SummaryEndpointClient:
    """Posts article text to the configured endpoint and returns its ``summary`` field.

    ASCII credentials travel as a bearer token. Header values must be byte-safe, so
    a credential with non-ASCII characters is sent as ``apiKey`` in the JSON body
    instead.
    """

    _DEFAULT_TIMEOUT = 30.0
    _DEFAULT_MAX_RETRIES = 1
    _RETRY_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}

    def __init__(
        self,
        endpoint: str,
        api_key: str = "",
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        max_retries: int = _DEFAULT_MAX_RETRIES,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not endpoint:
            raise ClientConfigurationError("Summary endpoint URL is required")

        self.endpoint = endpoint
        self.api_key = api_key or ""
        self.timeout = timeout
        self.max_retries = max(0, max_retries)

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key and self.api_key.isascii():
            headers["Authorization"] = f"Bearer {self.api_key}"

        self._client = httpx.Client(headers=headers, timeout=self.timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "SummaryEndpointClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def build_payload(self, title: str, content: str, word_limit: int) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"title": title, "content": content, "wordLimit": word_limit}
        if self.api_key and not self.api_key.isascii():
            payload["apiKey"] = self.api_key
        return payload

    def request_summary(self, title: str, content: str, word_limit: int) -> str:
        """Return the stripped ``summary`` string from the endpoint response."""

        data = self._post_with_retries(self.build_payload(title, content, word_limit))
        summary = data.get("summary")
        if not isinstance(summary, str):
            raise ClientConfigurationError("Summary endpoint response missing string 'summary'")
        return summary.strip()

    # ------------------------------
    # HTTP helpers
    # ------------------------------
    def _post_with_retries(self, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                response = self._client.post(self.endpoint, json=payload)
            except httpx.HTTPError as exc:  # network issues and timeouts
                last_error = exc
                if attempt < self.max_retries:
                    time.sleep(self._backoff_seconds(attempt))
                continue

            if response.status_code in (401, 403):
                raise AuthenticationError(
                    f"Summary endpoint rejected the credential ({response.status_code})"
                )

            if response.status_code in self._RETRY_STATUS_CODES and attempt < self.max_retries:
                time.sleep(self._backoff_seconds(attempt, response))
                continue

            if response.status_code >= 500 or response.status_code in self._RETRY_STATUS_CODES:
                raise TransientError(f"Summary endpoint server error ({response.status_code})")
            if not response.is_success:
                raise SummaryEndpointError(f"Summary endpoint request failed ({response.status_code})")

            return self._safe_json(response)

        # Retries exhausted
        if isinstance(last_error, httpx.TimeoutException):
            raise TransientError("Summary endpoint timed out after retries") from last_error
        raise TransientError("Summary endpoint request failed after retries") from last_error

    def _safe_json(self, response: httpx.Response) -> Mapping[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise ClientConfigurationError("Summary endpoint returned a non-JSON response") from exc
        if not isinstance(data, Mapping):
            raise ClientConfigurationError("Summary endpoint response was not a JSON object")
        return data

    def _backoff_seconds(self, attempt: int, response: Optional[httpx.Response] = None) -> float:
        base = min(2 ** attempt, 8)
        jitter = random.uniform(0.5, 1.5)
        retry_after = 0.0
        if response is not None:
            retry_after_header = response.headers.get("Retry-After")
            if retry_after_header:
                try:
                    retry_after = min(float(retry_after_header), 10.0)
                except ValueError:
                    pass
        return max(0.5, base * jitter + retry_after)
