"""Structured logging: one JSON object per line, credentials redacted."""

from __future__ import annotations

import json
import sys
import time
import uuid
from typing import Any, Optional

from travel_planner.security.redact import redact_sensitive


class StructuredLogger:
    """Emits provider and fallback events as JSON lines."""

    def __init__(self, trace_id: Optional[str] = None, output=None):
        self.trace_id = trace_id or str(uuid.uuid4())[:8]
        self._output = output or sys.stderr

    def _emit(self, data: dict[str, Any]) -> None:
        data["trace_id"] = self.trace_id
        data["timestamp"] = time.time()
        try:
            line = json.dumps(data, ensure_ascii=False, default=str)
            self._output.write(redact_sensitive(line) + "\n")
            self._output.flush()
        except (OSError, TypeError, ValueError) as exc:
            fallback = {
                "event": "logger_internal_error",
                "trace_id": self.trace_id,
                "timestamp": time.time(),
                "error": str(exc),
            }
            sys.stderr.write(json.dumps(fallback, ensure_ascii=False, default=str) + "\n")

    def provider_call(self, provider: str, **extra: Any) -> None:
        self._emit({"event": "provider_call", "provider": provider, **extra})

    def fallback(self, component: str, strategy: str, reason: str, **extra: Any) -> None:
        self._emit({"event": "fallback", "component": component, "strategy": strategy, "reason": reason, **extra})

    def warning(self, component: str, message: str, **extra: Any) -> None:
        self._emit({"event": "warning", "component": component, "message": message, **extra})

    def error(self, component: str, error: str, **extra: Any) -> None:
        self._emit({"event": "error", "component": component, "error": error, **extra})


_logger: Optional[StructuredLogger] = None


def get_logger(trace_id: Optional[str] = None) -> StructuredLogger:
    global _logger
    if _logger is None or (trace_id and _logger.trace_id != trace_id):
        _logger = StructuredLogger(trace_id=trace_id)
    return _logger
