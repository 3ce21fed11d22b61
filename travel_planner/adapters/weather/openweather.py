"""Weather adapter backed by the OpenWeatherMap current-weather API."""

from __future__ import annotations

import logging
from typing import Any, Optional

from travel_planner.config.settings import ProviderConfig
from travel_planner.domain.models import WeatherSnapshot
from travel_planner.security.http_client import SecureHttpClient
from travel_planner.tools.interfaces import Coordinates, ExternalServiceUnavailable

_SERVICE = "weather"
_logger = logging.getLogger("travel-planner.weather")


def _number(section: Any, key: str, cast):
    if not isinstance(section, dict):
        return None
    value = section.get(key)
    if value is None:
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ExternalServiceUnavailable(_SERVICE, f"malformed field '{key}'") from None


def _to_snapshot(city_name: str, data: Any) -> WeatherSnapshot:
    if not isinstance(data, dict) or not data:
        raise ExternalServiceUnavailable(_SERVICE, "empty response from weather service")

    main = data.get("main")
    wind = data.get("wind")
    conditions = data.get("weather")

    description = ""
    icon = ""
    if isinstance(conditions, list) and conditions and isinstance(conditions[0], dict):
        description = str(conditions[0].get("description") or "")
        icon = str(conditions[0].get("icon") or "")

    return WeatherSnapshot(
        city_name=city_name,
        temperature=_number(main, "temp", float),
        feels_like=_number(main, "feels_like", float),
        humidity=_number(main, "humidity", int),
        description=description,
        icon=icon,
        wind_speed=_number(wind, "speed", float),
        pressure=_number(main, "pressure", int),
    )


class OpenWeatherProvider:
    """Current conditions keyed by latitude/longitude."""

    def __init__(self, config: ProviderConfig, http: Optional[SecureHttpClient] = None):
        self._config = config
        self._http = http or SecureHttpClient(timeout=config.timeout_seconds, service_name=_SERVICE)

    def current_weather(self, location: Coordinates) -> WeatherSnapshot:
        params = {
            "lat": location.latitude,
            "lon": location.longitude,
            "appid": self._config.api_key,
            "units": "metric",
        }
        _logger.info("Fetching weather for %s (%s, %s)", location.label, location.latitude, location.longitude)
        data = self._http.get_json(self._config.url("/weather"), params=params)
        return _to_snapshot(location.label, data)
