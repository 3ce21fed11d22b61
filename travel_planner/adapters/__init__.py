"""Concrete provider adapters."""
