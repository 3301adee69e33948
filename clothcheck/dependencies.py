"""Construction of the external collaborators used by the handlers.

Clients are built once per process by the entry point (Lambda or the
local Flask runner) and passed to every handler call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import boto3
from linebot.v3.messaging import ApiClient, Configuration, MessagingApi, MessagingApiBlob

from clothcheck.config import Settings
from clothcheck.weather import WeatherClient


@dataclass
class Dependencies:
    messaging_api: Any
    blob_api: Any
    postal_code_table: Any
    temperature_table: Any
    s3_client: Any
    weather: WeatherClient
    image_bucket: str
    signed_url_expires: int = 3600


def build_dependencies(settings: Settings) -> Dependencies:
    """Create the LINE, DynamoDB, S3 and weather clients from settings."""
    dynamodb = boto3.resource('dynamodb', region_name=settings.aws_region)
    s3_client = boto3.client('s3', region_name=settings.aws_region)

    api_client = ApiClient(Configuration(access_token=settings.line_channel_access_token))

    return Dependencies(
        messaging_api=MessagingApi(api_client),
        blob_api=MessagingApiBlob(api_client),
        postal_code_table=dynamodb.Table(settings.postal_code_table),
        temperature_table=dynamodb.Table(settings.temperature_table),
        s3_client=s3_client,
        weather=WeatherClient(
            settings.openweather_api_key,
            country=settings.weather_country,
            base_url=settings.weather_base_url,
        ),
        image_bucket=settings.image_bucket,
        signed_url_expires=settings.signed_url_expires,
    )
