"""Outbound HTTP client shared by every provider adapter.

Responsibilities:
  1. one attempt per call with a fixed timeout
  2. translate timeouts, transport errors, non-2xx and non-JSON bodies into
     ExternalServiceUnavailable
  3. scrub API keys from error messages
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from travel_planner.security.redact import redact_sensitive
from travel_planner.shared.exceptions import ExternalServiceUnavailable

_logger = logging.getLogger("travel-planner.http")


class SecureHttpClient:
    """Thin httpx wrapper with error translation and redaction."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        service_name: str = "http",
        client: Optional[httpx.Client] = None,
    ):
        self._timeout = timeout
        self._service_name = service_name
        self._client = client

    @property
    def timeout(self) -> float:
        return self._timeout

    def get_json(
        self,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """GET ``url`` and return the decoded JSON body."""
        sender = self._client if self._client is not None else httpx
        try:
            resp = sender.get(url, params=params, headers=headers, timeout=self._timeout)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            safe_msg = redact_sensitive(str(e))
            _logger.error("%s returned HTTP %s: %s", self._service_name, e.response.status_code, safe_msg)
            raise ExternalServiceUnavailable(
                self._service_name, f"HTTP {e.response.status_code}"
            ) from None
        except httpx.TimeoutException:
            _logger.error("%s timed out after %ss", self._service_name, self._timeout)
            raise ExternalServiceUnavailable(
                self._service_name, f"request timed out after {self._timeout}s"
            ) from None
        except httpx.HTTPError as e:
            safe_msg = redact_sensitive(str(e))
            _logger.error("%s transport error: %s", self._service_name, safe_msg)
            raise ExternalServiceUnavailable(self._service_name, "network request failed") from None
        except ValueError:
            _logger.error("%s returned a non-JSON body", self._service_name)
            raise ExternalServiceUnavailable(self._service_name, "malformed response body") from None
