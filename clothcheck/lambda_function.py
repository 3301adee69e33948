"""AWS Lambda handler for the ClothCheck LINE bot.


This module contains the entry point used by AWS Lambda. API Gateway
forwards LINE Messaging API webhook POSTs here; the handler extracts the
event batch, dispatches each event to the text, image or postback handler
in `handlers.py` and returns a small JSON envelope.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os

from typing import Any, Dict, List

from clothcheck.config import load_settings
from clothcheck.dependencies import build_dependencies
from clothcheck.errors import ConfigurationError
from clothcheck.handlers import dispatch_events


logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

# Initialize clients outside of handler for reuse between invocations
try:
    settings = load_settings()
except ConfigurationError as exc:
    logger.warning("ClothCheck is not configured: %s", exc)
    settings = None

deps = build_dependencies(settings) if settings else None


def parse_webhook_events(event: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Extract the LINE webhook events from a Lambda event.

    API Gateway proxy integrations pass the webhook JSON as a string in
    `body` (base64 encoded when `isBase64Encoded` is set). Direct
    invocations may carry `events` at the top level.

    Raises:
        ValueError: if the body is not JSON or `events` is not a list.
    """
    if 'body' not in event:
        payload = event
    else:
        body = event.get('body') or '{}'
        if event.get('isBase64Encoded'):
            try:
                body = base64.b64decode(body).decode('utf-8')
            except (binascii.Error, UnicodeDecodeError) as exc:
                raise ValueError("body is not valid base64") from exc
        payload = json.loads(body) if isinstance(body, str) else body

    if not isinstance(payload, dict):
        raise ValueError("webhook payload must be a JSON object")
    events = payload.get('events', [])
    if not isinstance(events, list):
        raise ValueError("'events' must be a list")
    return events


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Lambda entry point for processing LINE webhook events.

    Args:
        event: The incoming event from API Gateway.
        context: The Lambda context object (unused).

    Returns:
        A dictionary with `statusCode` and `body` keys.

    Raises:
        Any failure of the store, weather or LINE calls is logged and
        re-raised so the invocation is reported as failed.
    """
    logger.info("Received event: %s", json.dumps(event, ensure_ascii=False, default=str))

    try:
        events = parse_webhook_events(event)
    except ValueError as exc:
        logger.warning("Rejected webhook body: %s", exc)
        return {
            'statusCode': 400,
            'body': json.dumps({'error': str(exc)}),
        }

    if deps is None:
        raise ConfigurationError(
            "LINE_CHANNEL_ACCESS_TOKEN, OPENWEATHER_API_KEY and IMAGE_BUCKET must be set."
        )

    try:
        handled = dispatch_events(deps, events)
    except Exception:
        logger.exception("Failed to handle webhook events")
        raise

    logger.info("Handled %d of %d events", handled, len(events))
    return {
        'statusCode': 200,
        'body': json.dumps('OK'),
    }
