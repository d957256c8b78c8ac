# path: trip-briefing-api/app/services/weather.py

from __future__ import annotations

from app.models.progress_models import Weather


DEFAULT_WEATHER = Weather(temperature=72, condition="Sunny", humidity=45, wind_speed=8)


class StaticWeatherSource:
    """Returns a fixed snapshot. There is no live weather feed behind this yet."""

    def __init__(self, weather: Weather = DEFAULT_WEATHER):
        self._weather = weather

    def current(self) -> Weather:
        return self._weather.model_copy()
