"""Outbound HTTP and redaction helpers."""

from travel_planner.security.http_client import SecureHttpClient
from travel_planner.security.redact import redact_sensitive

__all__ = ["SecureHttpClient", "redact_sensitive"]
