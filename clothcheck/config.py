"""Environment-driven configuration for the ClothCheck bot.

Secrets stay out of the code: the LINE channel token, the OpenWeatherMap
key and the photo bucket must be provided as environment variables (in
Lambda configuration, or in a `.env` file for `local_runner.py`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from clothcheck.errors import ConfigurationError


DEFAULT_POSTAL_CODE_TABLE = 'ClothCheckPostalCodeForUser'
DEFAULT_TEMPERATURE_TABLE = 'ClothCheckTempForUser'
DEFAULT_REGION = 'ap-northeast-1'


def _require_env(name: str) -> str:
    value = os.getenv(name, '').strip()
    if not value:
        raise ConfigurationError(f"Missing required environment variable: {name}")
    return value


@dataclass(frozen=True)
class Settings:
    line_channel_access_token: str
    openweather_api_key: str
    image_bucket: str
    postal_code_table: str = DEFAULT_POSTAL_CODE_TABLE
    temperature_table: str = DEFAULT_TEMPERATURE_TABLE
    weather_country: str = 'JP'
    weather_base_url: str = 'https://api.openweathermap.org'
    signed_url_expires: int = 3600
    aws_region: str = DEFAULT_REGION
    log_level: str = 'INFO'


def load_settings() -> Settings:
    """Read settings from the environment.

    Raises:
        ConfigurationError: if a required variable is unset or a numeric
            variable cannot be parsed.
    """
    expires = os.getenv('SIGNED_URL_EXPIRES', '3600').strip()
    try:
        signed_url_expires = int(expires)
    except ValueError as exc:
        raise ConfigurationError(f"SIGNED_URL_EXPIRES must be an integer, got {expires!r}") from exc

    return Settings(
        line_channel_access_token=_require_env('LINE_CHANNEL_ACCESS_TOKEN'),
        openweather_api_key=_require_env('OPENWEATHER_API_KEY'),
        image_bucket=_require_env('IMAGE_BUCKET'),
        postal_code_table=os.getenv('POSTAL_CODE_TABLE', DEFAULT_POSTAL_CODE_TABLE),
        temperature_table=os.getenv('TEMPERATURE_TABLE', DEFAULT_TEMPERATURE_TABLE),
        weather_country=os.getenv('WEATHER_COUNTRY', 'JP'),
        weather_base_url=os.getenv('WEATHER_BASE_URL', 'https://api.openweathermap.org').rstrip('/'),
        signed_url_expires=signed_url_expires,
        aws_region=os.getenv('AWS_REGION', DEFAULT_REGION),
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    )
