"""Webhook event dispatcher and the per-event handlers.

Each LINE webhook event is handled to completion, including every store,
weather and S3 call, before its single reply is sent. Failures propagate
to the caller; nothing here swallows an exception.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from linebot.v3.messaging import Message, ReplyMessageRequest

from clothcheck.conversation import ResponseKind, decode_postback, parse_postal_code, resolve_response
from clothcheck.dependencies import Dependencies
from clothcheck.messages import (
    build_messages,
    image_registered_message,
    impression_recorded_message,
    postal_code_registered_message,
)
from clothcheck.storage import (
    generate_image_url,
    get_postal_code,
    get_temperature_record,
    image_extension,
    image_key,
    store_image_key,
    store_impression,
    store_postal_code,
    upload_image,
)

logger = logging.getLogger(__name__)


def reply(deps: Dependencies, reply_token: str, messages: List[Message]) -> None:
    deps.messaging_api.reply_message(ReplyMessageRequest(reply_token=reply_token, messages=messages))


def resolve_messages(deps: Dependencies, user_id: str) -> List[Message]:
    """Look up what is stored for the user and build the matching reply."""
    postal_code = get_postal_code(deps.postal_code_table, user_id)
    if not postal_code:
        return build_messages(resolve_response(None))

    temperature = deps.weather.current_temperature(postal_code)
    record = get_temperature_record(deps.temperature_table, user_id, temperature)
    response = resolve_response(postal_code, temperature, record)
    logger.info("Resolved %s for user %s at %s", response.kind.value, user_id, temperature)

    image_url = None
    if response.kind is ResponseKind.SHOW_OUTFIT:
        image_url = generate_image_url(
            deps.s3_client, deps.image_bucket, record.image, deps.signed_url_expires
        )
    return build_messages(response, image_url)


def handle_text_message(deps: Dependencies, event: Dict[str, Any]) -> None:
    user_id = event['source']['userId']
    text = event['message'].get('text', '')

    postal_code = parse_postal_code(text)
    if postal_code:
        store_postal_code(deps.postal_code_table, user_id, postal_code)
        reply(deps, event['replyToken'], [postal_code_registered_message(postal_code)])
        return

    reply(deps, event['replyToken'], resolve_messages(deps, user_id))


def handle_image_message(deps: Dependencies, event: Dict[str, Any]) -> None:
    """Store an uploaded photo against the user's current temperature.

    The photo is downloaded, uploaded to S3 and attached to the record
    before the acknowledgment is sent.
    """
    user_id = event['source']['userId']
    postal_code = get_postal_code(deps.postal_code_table, user_id)
    if not postal_code:
        reply(deps, event['replyToken'], build_messages(resolve_response(None)))
        return

    temperature = deps.weather.current_temperature(postal_code)

    content = deps.blob_api.get_message_content_with_http_info(event['message']['id'])
    headers = content.headers or {}
    content_type = headers.get('Content-Type') or headers.get('content-type') or 'image/jpeg'
    key = image_key(temperature, user_id, image_extension(content_type))

    upload_image(deps.s3_client, deps.image_bucket, key, bytes(content.data), content_type)
    store_image_key(deps.temperature_table, user_id, temperature, key)

    reply(deps, event['replyToken'], [image_registered_message()])


def handle_postback(deps: Dependencies, event: Dict[str, Any]) -> None:
    user_id = event['source']['userId']
    temperature, impression = decode_postback(event.get('postback', {}).get('data'))

    store_impression(deps.temperature_table, user_id, temperature, impression.label)
    reply(deps, event['replyToken'], [impression_recorded_message(temperature, impression)])


MESSAGE_HANDLERS = {
    'text': handle_text_message,
    'image': handle_image_message,
}


def _select_handler(event: Dict[str, Any]) -> Optional[Any]:
    event_type = event.get('type')
    if event_type == 'postback':
        return handle_postback
    if event_type == 'message':
        return MESSAGE_HANDLERS.get(event.get('message', {}).get('type'))
    return None


def dispatch_events(deps: Dependencies, events: Iterable[Dict[str, Any]]) -> int:
    """Handle webhook events one after another, in order.

    Events of unsupported kinds, and events without a reply token or user
    id, are logged and skipped.

    Returns:
        The number of events that were handled.
    """
    handled = 0
    for event in events:
        handler = _select_handler(event)
        if handler is None:
            logger.info(
                "Skipping unsupported event type=%s message_type=%s",
                event.get('type'),
                (event.get('message') or {}).get('type'),
            )
            continue
        if not event.get('replyToken') or not (event.get('source') or {}).get('userId'):
            logger.warning("Skipping %s event without replyToken or userId", event.get('type'))
            continue

        handler(deps, event)
        handled += 1
    return handled
