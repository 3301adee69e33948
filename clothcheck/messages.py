"""LINE reply messages sent by the ClothCheck bot."""

from __future__ import annotations

from typing import List, Optional

from linebot.v3.messaging import (
    ButtonsTemplate,
    CameraAction,
    CameraRollAction,
    ImageMessage,
    Message,
    PostbackAction,
    QuickReply,
    QuickReplyItem,
    TemplateMessage,
    TextMessage,
)

from clothcheck.conversation import Impression, Response, ResponseKind, encode_postback


ASK_POSTAL_CODE_TEXT = '郵便番号を教えてください（例：100-0004）'
ASK_PHOTO_TEXT = '今日の服装の写真を送ってください。'
IMAGE_REGISTERED_TEXT = '画像登録が完了しました。'


def photo_quick_reply() -> QuickReply:
    return QuickReply(items=[
        QuickReplyItem(action=CameraRollAction(label='フォト')),
        QuickReplyItem(action=CameraAction(label='カメラ起動')),
    ])


def text_message(text: str) -> TextMessage:
    return TextMessage(text=text)


def postal_code_registered_message(postal_code: str) -> TextMessage:
    return TextMessage(text=f"{postal_code}で郵便番号情報を登録しました。")


def impression_prompt_message(temperature: int) -> TemplateMessage:
    """Buttons asking how `temperature` felt, one postback per impression."""
    question = f"今日の{temperature}℃はどうでしたか？"
    actions = [
        PostbackAction(label=impression.label, data=encode_postback(temperature, impression), display_text=impression.label)
        for impression in Impression
    ]
    return TemplateMessage(alt_text=question, template=ButtonsTemplate(text=question, actions=actions))


def photo_request_message(text: str = ASK_PHOTO_TEXT) -> TextMessage:
    return TextMessage(text=text, quick_reply=photo_quick_reply())


def impression_recorded_message(temperature: int, impression: Impression) -> TextMessage:
    return photo_request_message(f"{temperature}℃を{impression.label}で登録しました。服装の写真も送ってください。")


def image_registered_message() -> TextMessage:
    return TextMessage(text=IMAGE_REGISTERED_TEXT)


def outfit_messages(temperature: int, result: str, image_url: str) -> List[Message]:
    """The stored photo, a summary of the impression and the buttons again."""
    return [
        ImageMessage(original_content_url=image_url, preview_image_url=image_url),
        TextMessage(text=f"{temperature}℃は{result}と感じました。そのときの服装はこちらです。"),
        impression_prompt_message(temperature),
    ]


def build_messages(response: Response, image_url: Optional[str] = None) -> List[Message]:
    """Turn a resolved response into the messages of a single reply.

    Args:
        response: The output of `resolve_response`.
        image_url: Signed URL of the stored photo; required for
            `ResponseKind.SHOW_OUTFIT`.
    """
    if response.kind is ResponseKind.ASK_POSTAL_CODE:
        return [text_message(ASK_POSTAL_CODE_TEXT)]
    if response.kind is ResponseKind.ASK_IMPRESSION:
        return [impression_prompt_message(response.temperature)]
    if response.kind is ResponseKind.ASK_PHOTO:
        return [photo_request_message()]
    if not image_url:
        raise ValueError("image_url is required to show a stored outfit")
    return outfit_messages(response.temperature, response.record.result, image_url)
