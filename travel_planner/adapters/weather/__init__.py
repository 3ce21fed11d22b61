"""Weather adapters."""

from travel_planner.adapters.weather.openweather import OpenWeatherProvider

__all__ = ["OpenWeatherProvider"]
