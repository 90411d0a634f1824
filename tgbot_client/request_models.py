from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Sequence, Union

from .api_models import LinkPreviewOptions, MessageEntity, ReplyParameters

ChatId = Union[int, str]
ParseMode = Literal["MarkdownV2", "Markdown", "HTML"]
PollType = Literal["regular", "quiz"]


@dataclass(frozen=True)
class SendMessageRequest:
    chat_id: ChatId
    text: str
    message_thread_id: Optional[int] = None
    parse_mode: Optional[ParseMode] = None
    entities: Optional[Sequence[MessageEntity]] = None
    link_preview_options: Optional[LinkPreviewOptions] = None
    disable_notification: Optional[bool] = None
    protect_content: Optional[bool] = None
    reply_parameters: Optional[ReplyParameters] = None


@dataclass(frozen=True)
class AnswerCallbackQueryRequest:
    callback_query_id: str
    text: Optional[str] = None
    show_alert: Optional[bool] = None
    url: Optional[str] = None
    cache_time: Optional[int] = None


@dataclass(frozen=True)
class GetUpdatesRequest:
    offset: int = 0
    limit: int = 100
    timeout: int = 0
    allowed_updates: Optional[Sequence[str]] = None


@dataclass(frozen=True)
class ForwardMessageRequest:
    chat_id: ChatId
    from_chat_id: ChatId
    message_id: int
    message_thread_id: Optional[int] = None
    disable_notification: Optional[bool] = None
    protect_content: Optional[bool] = None


@dataclass(frozen=True)
class SendLocationRequest:
    chat_id: ChatId
    latitude: float
    longitude: float
    message_thread_id: Optional[int] = None
    horizontal_accuracy: Optional[float] = None
    live_period: Optional[int] = None
    heading: Optional[int] = None
    proximity_alert_radius: Optional[int] = None
    disable_notification: Optional[bool] = None
    protect_content: Optional[bool] = None
    reply_parameters: Optional[ReplyParameters] = None


@dataclass(frozen=True)
class SendPollRequest:
    chat_id: ChatId
    question: str
    options: Sequence[str]
    message_thread_id: Optional[int] = None
    is_anonymous: Optional[bool] = None
    type: Optional[PollType] = None
    allows_multiple_answers: Optional[bool] = None
    correct_option_id: Optional[int] = None
    explanation: Optional[str] = None
    explanation_parse_mode: Optional[ParseMode] = None
    explanation_entities: Optional[Sequence[MessageEntity]] = None
    open_period: Optional[int] = None
    close_date: Optional[int] = None
    is_closed: Optional[bool] = None
    disable_notification: Optional[bool] = None
    protect_content: Optional[bool] = None
    reply_parameters: Optional[ReplyParameters] = None


@dataclass(frozen=True)
class SendDiceRequest:
    chat_id: ChatId
    emoji: Optional[str] = None
    message_thread_id: Optional[int] = None
    disable_notification: Optional[bool] = None
    protect_content: Optional[bool] = None
    reply_parameters: Optional[ReplyParameters] = None
