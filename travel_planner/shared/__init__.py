"""Shared cross-layer types and exceptions."""

from travel_planner.shared.exceptions import ExternalServiceUnavailable

__all__ = ["ExternalServiceUnavailable"]
