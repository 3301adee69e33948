"""DynamoDB and S3 access for the ClothCheck bot.

Two tables are used:

* the postal code table, keyed by LINE user id (`id`), holding the user's
  normalized postal code;
* the temperature table, keyed by (`id`, `temperature`), holding the
  impression the user gave at that floored temperature and the S3 key of
  the clothing photo they uploaded.

All boto3 resources are passed in as parameters so the functions can be
exercised against moto in tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONTENT_TYPE_EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/gif': 'gif',
    'image/webp': 'webp',
}
DEFAULT_IMAGE_EXTENSION = 'jpg'


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class TemperatureRecord:
    """A user's impression and photo at one floored temperature."""

    user_id: str
    temperature: int
    result: Optional[str] = None
    image: Optional[str] = None
    timestamp: Optional[str] = None

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> 'TemperatureRecord':
        # DynamoDB numbers come back as Decimal
        return cls(
            user_id=item['id'],
            temperature=int(item['temperature']),
            result=item.get('result') or None,
            image=item.get('image') or None,
            timestamp=item.get('timestamp'),
        )


def get_postal_code(table, user_id: str) -> Optional[str]:
    """Return the registered postal code of a user, or None."""
    response = table.get_item(Key={'id': user_id})
    item = response.get('Item')
    if not item:
        return None
    return item.get('postalCode') or None


def store_postal_code(table, user_id: str, postal_code: str) -> Dict[str, Any]:
    """Create or overwrite the postal code record of a user.

    Args:
        table: The postal code DynamoDB Table resource.
        user_id: LINE user id.
        postal_code: Postal code already normalized to `NNN-NNNN`.

    Returns:
        The item that was written.
    """
    item = {
        'id': user_id,
        'postalCode': postal_code,
        'timestamp': _now(),
    }
    table.put_item(Item=item)
    logger.info("Stored postal code %s for user %s", postal_code, user_id)
    return item


def get_temperature_record(table, user_id: str, temperature: int) -> Optional[TemperatureRecord]:
    response = table.get_item(Key={'id': user_id, 'temperature': temperature})
    item = response.get('Item')
    if not item:
        return None
    return TemperatureRecord.from_item(item)


def _update_temperature_record(table, user_id: str, temperature: int, field: str, value: str) -> None:
    # update_item creates the record when it does not exist yet and leaves
    # the other writer's field untouched
    table.update_item(
        Key={'id': user_id, 'temperature': temperature},
        UpdateExpression='SET #field = :value, #ts = :ts',
        ExpressionAttributeNames={'#field': field, '#ts': 'timestamp'},
        ExpressionAttributeValues={':value': value, ':ts': _now()},
    )


def store_impression(table, user_id: str, temperature: int, label: str) -> None:
    """Record the impression label a user chose for a temperature."""
    _update_temperature_record(table, user_id, temperature, 'result', label)
    logger.info("Stored impression %s at %s for user %s", label, temperature, user_id)


def store_image_key(table, user_id: str, temperature: int, key: str) -> None:
    """Attach an uploaded photo to the user's record for a temperature."""
    _update_temperature_record(table, user_id, temperature, 'image', key)
    logger.info("Stored image %s at %s for user %s", key, temperature, user_id)


def image_extension(content_type: Optional[str]) -> str:
    if not content_type:
        return DEFAULT_IMAGE_EXTENSION
    return CONTENT_TYPE_EXTENSIONS.get(content_type.split(';')[0].strip().lower(), DEFAULT_IMAGE_EXTENSION)


def image_key(temperature: int, user_id: str, extension: str = DEFAULT_IMAGE_EXTENSION) -> str:
    """Build the S3 object key of a photo, e.g. `5U1234.jpg`."""
    return f"{temperature}{user_id}.{extension}"


def upload_image(s3_client, bucket: str, key: str, body: bytes, content_type: str = 'image/jpeg') -> None:
    """Upload a photo held in memory to S3."""
    s3_client.put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)
    logger.info("Uploaded %d bytes to s3://%s/%s", len(body), bucket, key)


def generate_image_url(s3_client, bucket: str, key: str, expires_in: int = 3600) -> str:
    """Return a presigned GET URL for a stored photo."""
    return s3_client.generate_presigned_url(
        'get_object',
        Params={'Bucket': bucket, 'Key': key},
        ExpiresIn=expires_in,
    )
