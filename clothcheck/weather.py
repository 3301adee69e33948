"""OpenWeatherMap client used to resolve today's temperature for a postal code."""

from __future__ import annotations

import logging
import math

import requests

from clothcheck.errors import WeatherLookupError

logger = logging.getLogger(__name__)

WEATHER_PATH = '/data/2.5/weather'
REQUEST_TIMEOUT = 10


class WeatherClient:
    def __init__(
        self,
        api_key: str,
        country: str = 'JP',
        base_url: str = 'https://api.openweathermap.org',
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.country = country
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()

    def current_temperature(self, postal_code: str) -> int:
        """Return the current temperature in Celsius, floored to an integer.

        Raises:
            WeatherLookupError: on a non-2xx response or a body without
                `main.temp`.
            requests.RequestException: on network failures.
        """
        params = {
            'zip': f"{postal_code},{self.country}",
            'units': 'metric',
            'appid': self.api_key,
        }
        response = self.session.get(f"{self.base_url}{WEATHER_PATH}", params=params, timeout=REQUEST_TIMEOUT)
        if not 200 <= response.status_code < 300:
            logger.error("Weather lookup failed - status=%s body=%s", response.status_code, response.text)
            raise WeatherLookupError(f"weather API returned {response.status_code} for {postal_code}")

        try:
            temp = response.json()['main']['temp']
            temperature = math.floor(float(temp))
        except (ValueError, KeyError, TypeError) as exc:
            raise WeatherLookupError(f"weather API returned no temperature for {postal_code}") from exc

        logger.info("Current temperature for %s is %s (raw %s)", postal_code, temperature, temp)
        return temperature
