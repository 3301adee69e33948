"""Conversation rules of the ClothCheck bot.

This module holds the parts of the bot that do not talk to any external
service:

* recognising and normalizing postal codes typed by the user;
* the closed set of temperature impressions and the postback payload
  format that carries them (`"<temperature>&<label>"`);
* `resolve_response`, which decides which of the five replies to send
  given what is stored for the user.
"""

from __future__ import annotations

import enum
import re
import unicodedata
from dataclasses import dataclass
from typing import Optional, Tuple

from clothcheck.errors import InvalidPostbackError
from clothcheck.storage import TemperatureRecord


POSTAL_CODE_PATTERN = re.compile(r'^[0-9]{3}-[0-9]{4}$|^[0-9]{7}$')
POSTAL_CODE_MAX_LENGTH = 8
POSTBACK_SEPARATOR = '&'


def parse_postal_code(text: Optional[str]) -> Optional[str]:
    """Return `text` as a `NNN-NNNN` postal code, or None if it is not one.

    Full-width digits and hyphens are accepted and converted to ASCII.
    """
    if not text:
        return None
    candidate = unicodedata.normalize('NFKC', text).strip()
    # NFKC leaves U+2212 and U+30FC alone
    candidate = candidate.replace('−', '-').replace('ー', '-')
    if len(candidate) > POSTAL_CODE_MAX_LENGTH or not POSTAL_CODE_PATTERN.match(candidate):
        return None
    if '-' not in candidate:
        candidate = f"{candidate[:3]}-{candidate[3:]}"
    return candidate


class Impression(enum.Enum):
    HOT = 'HOT'
    COLD = 'COLD'
    GOOD = 'GOOD'

    @property
    def label(self) -> str:
        return IMPRESSION_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> 'Impression':
        for impression, impression_label in IMPRESSION_LABELS.items():
            if impression_label == label:
                return impression
        raise InvalidPostbackError(f"unknown impression label: {label!r}")


IMPRESSION_LABELS = {
    Impression.HOT: 'あつい',
    Impression.COLD: 'さむい',
    Impression.GOOD: 'ちょうどいい',
}


def encode_postback(temperature: int, impression: Impression) -> str:
    return f"{temperature}{POSTBACK_SEPARATOR}{impression.label}"


def decode_postback(data: Optional[str]) -> Tuple[int, Impression]:
    """Parse a postback payload such as `"5&あつい"`.

    Raises:
        InvalidPostbackError: if the payload is missing, has no separator,
            carries a non-integer temperature or an unknown label.
    """
    if not data or POSTBACK_SEPARATOR not in data:
        raise InvalidPostbackError(f"malformed postback data: {data!r}")
    raw_temperature, label = data.split(POSTBACK_SEPARATOR, 1)
    try:
        temperature = int(raw_temperature)
    except ValueError as exc:
        raise InvalidPostbackError(f"malformed postback temperature: {raw_temperature!r}") from exc
    return temperature, Impression.from_label(label)


class ResponseKind(enum.Enum):
    ASK_POSTAL_CODE = 'ask_postal_code'
    ASK_IMPRESSION = 'ask_impression'
    ASK_PHOTO = 'ask_photo'
    SHOW_OUTFIT = 'show_outfit'


@dataclass(frozen=True)
class Response:
    kind: ResponseKind
    temperature: Optional[int] = None
    record: Optional[TemperatureRecord] = None


def resolve_response(
    postal_code: Optional[str],
    temperature: Optional[int] = None,
    record: Optional[TemperatureRecord] = None,
) -> Response:
    """Pick the reply for a user from their stored state.

    Rules are evaluated in order and the first match wins:

    1. no postal code: ask for it;
    2. no record for today's temperature, or a record without an
       impression: ask how the temperature felt;
    3. an impression but no photo: ask for a photo;
    4. both: show the photo, the impression and the buttons again so the
       user can overwrite the impression.
    """
    if not postal_code:
        return Response(ResponseKind.ASK_POSTAL_CODE)
    if temperature is None:
        raise ValueError("temperature is required once a postal code is known")
    if record is None or not record.result:
        return Response(ResponseKind.ASK_IMPRESSION, temperature, record)
    if not record.image:
        return Response(ResponseKind.ASK_PHOTO, temperature, record)
    return Response(ResponseKind.SHOW_OUTFIT, temperature, record)
