"""Shared (non-domain) exceptions."""


class ExternalServiceUnavailable(Exception):
    """External provider call failed (timeout, transport error, non-2xx or bad payload)."""

    code = "SERVICE_UNAVAILABLE"

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"[{service}] {message}")
