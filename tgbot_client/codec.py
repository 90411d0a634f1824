from __future__ import annotations

import dataclasses
from typing import Any, Callable, Mapping, Optional, TypeVar

from .api_models import (
    MESSAGE_UPDATE_KINDS,
    ApiEnvelope,
    Chat,
    Dice,
    LinkPreviewOptions,
    Location,
    Message,
    MessageEntity,
    Poll,
    PollOption,
    Update,
    User,
)
from .errors import ResponseDecodeError, TransportError

T = TypeVar("T")

# Python attribute names that cannot match their JSON key.
_FIELD_TO_JSON_KEY = {"from_user": "from"}


def _json_key(field_name: str) -> str:
    return _FIELD_TO_JSON_KEY.get(field_name, field_name)


def _encode_value(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            _json_key(item.name): _encode_value(getattr(value, item.name))
            for item in dataclasses.fields(value)
            if getattr(value, item.name) is not None
        }
    if isinstance(value, Mapping):
        return {str(key): _encode_value(item) for key, item in value.items() if item is not None}
    if isinstance(value, (list, tuple)):
        return [_encode_value(item) for item in value]
    return value


def encode_request(params: Any) -> Optional[dict[str, Any]]:
    """Turn a request dataclass (or plain mapping) into a JSON object, dropping unset fields."""
    if params is None:
        return None
    encoded = _encode_value(params)
    if not isinstance(encoded, dict):
        raise TypeError(f"request params must encode to a JSON object, got {type(params).__name__}")
    return encoded


def decode_envelope(payload: Any, *, method: str = "") -> ApiEnvelope:
    if not isinstance(payload, Mapping):
        raise TransportError(
            "response body is not a JSON object",
            reason_code="INVALID_PAYLOAD",
            method=method,
        )
    ok = payload.get("ok")
    if not isinstance(ok, bool):
        raise TransportError(
            "response envelope is missing a boolean 'ok'",
            reason_code="INVALID_PAYLOAD",
            method=method,
        )
    error_code = payload.get("error_code")
    if isinstance(error_code, bool) or not isinstance(error_code, int):
        error_code = None
    description = payload.get("description")
    return ApiEnvelope(
        ok=ok,
        error_code=error_code,
        description=str(description) if description is not None else None,
        result=payload.get("result"),
    )


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ResponseDecodeError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def _required_int(data: Mapping[str, Any], key: str, what: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ResponseDecodeError(f"{what}.{key} must be an integer")
    return value


def _optional_int(data: Mapping[str, Any], key: str, what: str) -> Optional[int]:
    if data.get(key) is None:
        return None
    return _required_int(data, key, what)


def _required_float(data: Mapping[str, Any], key: str, what: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ResponseDecodeError(f"{what}.{key} must be a number")
    return float(value)


def _optional_float(data: Mapping[str, Any], key: str, what: str) -> Optional[float]:
    if data.get(key) is None:
        return None
    return _required_float(data, key, what)


def _optional_str(data: Mapping[str, Any], key: str, what: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ResponseDecodeError(f"{what}.{key} must be a string")
    return value


def _required_str(data: Mapping[str, Any], key: str, what: str) -> str:
    value = _optional_str(data, key, what)
    if value is None:
        raise ResponseDecodeError(f"{what}.{key} is required")
    return value


def _flag(data: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _optional_flag(data: Mapping[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    return value if isinstance(value, bool) else None


def _optional_object(
    data: Mapping[str, Any],
    key: str,
    parser: Callable[[Any], T],
) -> Optional[T]:
    value = data.get(key)
    if value is None:
        return None
    return parser(value)


def _object_list(
    data: Mapping[str, Any],
    key: str,
    parser: Callable[[Any], T],
    what: str,
) -> tuple[T, ...]:
    value = data.get(key)
    if value is None:
        return tuple()
    if not isinstance(value, list):
        raise ResponseDecodeError(f"{what}.{key} must be a JSON array")
    return tuple(parser(item) for item in value)


def parse_user(value: Any) -> User:
    data = _require_mapping(value, "user")
    return User(
        id=_required_int(data, "id", "user"),
        is_bot=_flag(data, "is_bot"),
        first_name=_optional_str(data, "first_name", "user") or "",
        last_name=_optional_str(data, "last_name", "user"),
        username=_optional_str(data, "username", "user"),
        language_code=_optional_str(data, "language_code", "user"),
        is_premium=_flag(data, "is_premium"),
        added_to_attachment_menu=_flag(data, "added_to_attachment_menu"),
        can_join_groups=_flag(data, "can_join_groups"),
        can_read_all_group_messages=_flag(data, "can_read_all_group_messages"),
        supports_inline_queries=_flag(data, "supports_inline_queries"),
    )


def parse_chat(value: Any) -> Chat:
    data = _require_mapping(value, "chat")
    usernames = data.get("active_usernames")
    return Chat(
        id=_required_int(data, "id", "chat"),
        type=_optional_str(data, "type", "chat") or "",
        title=_optional_str(data, "title", "chat"),
        username=_optional_str(data, "username", "chat"),
        first_name=_optional_str(data, "first_name", "chat"),
        last_name=_optional_str(data, "last_name", "chat"),
        is_forum=_flag(data, "is_forum"),
        active_usernames=tuple(str(item) for item in usernames) if isinstance(usernames, list) else tuple(),
        bio=_optional_str(data, "bio", "chat"),
        description=_optional_str(data, "description", "chat"),
    )


def parse_message_entity(value: Any) -> MessageEntity:
    data = _require_mapping(value, "message_entity")
    return MessageEntity(
        type=_required_str(data, "type", "message_entity"),
        offset=_required_int(data, "offset", "message_entity"),
        length=_required_int(data, "length", "message_entity"),
        url=_optional_str(data, "url", "message_entity"),
        user=_optional_object(data, "user", parse_user),
    )


def parse_link_preview_options(value: Any) -> LinkPreviewOptions:
    data = _require_mapping(value, "link_preview_options")
    return LinkPreviewOptions(
        is_disabled=_optional_flag(data, "is_disabled"),
        url=_optional_str(data, "url", "link_preview_options"),
        prefer_small_media=_optional_flag(data, "prefer_small_media"),
        prefer_large_media=_optional_flag(data, "prefer_large_media"),
        show_above_text=_optional_flag(data, "show_above_text"),
    )


def parse_location(value: Any) -> Location:
    data = _require_mapping(value, "location")
    return Location(
        latitude=_required_float(data, "latitude", "location"),
        longitude=_required_float(data, "longitude", "location"),
        horizontal_accuracy=_optional_float(data, "horizontal_accuracy", "location"),
        live_period=_optional_int(data, "live_period", "location"),
        heading=_optional_int(data, "heading", "location"),
        proximity_alert_radius=_optional_int(data, "proximity_alert_radius", "location"),
    )


def parse_dice(value: Any) -> Dice:
    data = _require_mapping(value, "dice")
    return Dice(
        emoji=_required_str(data, "emoji", "dice"),
        value=_required_int(data, "value", "dice"),
    )


def parse_poll_option(value: Any) -> PollOption:
    data = _require_mapping(value, "poll_option")
    return PollOption(
        text=_required_str(data, "text", "poll_option"),
        voter_count=_optional_int(data, "voter_count", "poll_option") or 0,
    )


def parse_poll(value: Any) -> Poll:
    data = _require_mapping(value, "poll")
    return Poll(
        id=_required_str(data, "id", "poll"),
        question=_required_str(data, "question", "poll"),
        options=_object_list(data, "options", parse_poll_option, "poll"),
        total_voter_count=_optional_int(data, "total_voter_count", "poll") or 0,
        is_closed=_flag(data, "is_closed"),
        is_anonymous=_flag(data, "is_anonymous", default=True),
        type=_optional_str(data, "type", "poll") or "regular",
        allows_multiple_answers=_flag(data, "allows_multiple_answers"),
        correct_option_id=_optional_int(data, "correct_option_id", "poll"),
        explanation=_optional_str(data, "explanation", "poll"),
        open_period=_optional_int(data, "open_period", "poll"),
        close_date=_optional_int(data, "close_date", "poll"),
    )


def parse_message(value: Any) -> Message:
    data = _require_mapping(value, "message")
    return Message(
        message_id=_required_int(data, "message_id", "message"),
        date=_optional_int(data, "date", "message") or 0,
        chat=_optional_object(data, "chat", parse_chat),
        message_thread_id=_optional_int(data, "message_thread_id", "message"),
        from_user=_optional_object(data, "from", parse_user),
        sender_chat=_optional_object(data, "sender_chat", parse_chat),
        is_topic_message=_flag(data, "is_topic_message"),
        is_automatic_forward=_flag(data, "is_automatic_forward"),
        reply_to_message=_optional_object(data, "reply_to_message", parse_message),
        via_bot=_optional_object(data, "via_bot", parse_user),
        edit_date=_optional_int(data, "edit_date", "message"),
        has_protected_content=_flag(data, "has_protected_content"),
        media_group_id=_optional_str(data, "media_group_id", "message"),
        author_signature=_optional_str(data, "author_signature", "message"),
        text=_optional_str(data, "text", "message"),
        entities=_object_list(data, "entities", parse_message_entity, "message"),
        link_preview_options=_optional_object(data, "link_preview_options", parse_link_preview_options),
        caption=_optional_str(data, "caption", "message"),
        caption_entities=_object_list(data, "caption_entities", parse_message_entity, "message"),
        has_media_spoiler=_flag(data, "has_media_spoiler"),
        dice=_optional_object(data, "dice", parse_dice),
        poll=_optional_object(data, "poll", parse_poll),
        location=_optional_object(data, "location", parse_location),
        new_chat_members=_object_list(data, "new_chat_members", parse_user, "message"),
        left_chat_member=_optional_object(data, "left_chat_member", parse_user),
        new_chat_title=_optional_str(data, "new_chat_title", "message"),
        delete_chat_photo=_flag(data, "delete_chat_photo"),
        group_chat_created=_flag(data, "group_chat_created"),
    )


def parse_update(value: Any) -> Update:
    data = _require_mapping(value, "update")
    update_id = _required_int(data, "update_id", "update")
    for kind in MESSAGE_UPDATE_KINDS:
        payload = data.get(kind)
        if payload is not None:
            return Update(
                update_id=update_id,
                kind=kind,  # type: ignore[arg-type]
                message=parse_message(payload),
                raw=dict(data),
            )
    return Update(update_id=update_id, kind="unsupported", raw=dict(data))


def _parse_batch_item(value: Any) -> Update:
    try:
        return parse_update(value)
    except ResponseDecodeError as exc:
        # Without an id the update cannot be acknowledged, so the batch fails.
        data = _require_mapping(value, "update")
        update_id = _required_int(data, "update_id", "update")
        return Update(
            update_id=update_id,
            kind="unsupported",
            raw=dict(data),
            decode_error=str(exc),
        )


def parse_updates(value: Any) -> tuple[Update, ...]:
    """Decode a getUpdates result.

    An update whose payload does not decode still comes back, as ``unsupported``
    with ``decode_error`` set, so one bad item never holds back the rest of the
    batch or the polling cursor.
    """
    if not isinstance(value, list):
        raise ResponseDecodeError(f"updates result must be a JSON array, got {type(value).__name__}")
    return tuple(_parse_batch_item(item) for item in value)


def parse_bool_result(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ResponseDecodeError(f"result must be a boolean, got {type(value).__name__}")
    return value
