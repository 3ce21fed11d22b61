"""Runtime configuration helpers."""

from travel_planner.config.settings import AppSettings, ProviderConfig, load_settings

__all__ = ["AppSettings", "ProviderConfig", "load_settings"]
