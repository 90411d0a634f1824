from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional, Sequence, Union

UpdateKind = Literal[
    "message",
    "edited_message",
    "channel_post",
    "edited_channel_post",
    "unsupported",
]

# Order matters: the first key present in an update selects its kind.
MESSAGE_UPDATE_KINDS: tuple[str, ...] = (
    "message",
    "edited_message",
    "channel_post",
    "edited_channel_post",
)


@dataclass(frozen=True)
class ApiEnvelope:
    ok: bool
    error_code: Optional[int] = None
    description: Optional[str] = None
    result: Any = None


@dataclass(frozen=True)
class User:
    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None
    is_premium: bool = False
    added_to_attachment_menu: bool = False
    can_join_groups: bool = False
    can_read_all_group_messages: bool = False
    supports_inline_queries: bool = False


@dataclass(frozen=True)
class Chat:
    id: int
    type: str = ""
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_forum: bool = False
    active_usernames: Sequence[str] = field(default_factory=tuple)
    bio: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class MessageEntity:
    type: str
    offset: int
    length: int
    url: Optional[str] = None
    user: Optional[User] = None


@dataclass(frozen=True)
class LinkPreviewOptions:
    is_disabled: Optional[bool] = None
    url: Optional[str] = None
    prefer_small_media: Optional[bool] = None
    prefer_large_media: Optional[bool] = None
    show_above_text: Optional[bool] = None


@dataclass(frozen=True)
class ReplyParameters:
    message_id: int
    chat_id: Optional[Union[int, str]] = None
    allow_sending_without_reply: Optional[bool] = None
    quote: Optional[str] = None
    quote_parse_mode: Optional[str] = None
    quote_entities: Optional[Sequence[MessageEntity]] = None
    quote_position: Optional[int] = None


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    horizontal_accuracy: Optional[float] = None
    live_period: Optional[int] = None
    heading: Optional[int] = None
    proximity_alert_radius: Optional[int] = None


@dataclass(frozen=True)
class Dice:
    emoji: str
    value: int


@dataclass(frozen=True)
class PollOption:
    text: str
    voter_count: int = 0


@dataclass(frozen=True)
class Poll:
    id: str
    question: str
    options: Sequence[PollOption] = field(default_factory=tuple)
    total_voter_count: int = 0
    is_closed: bool = False
    is_anonymous: bool = True
    type: str = "regular"
    allows_multiple_answers: bool = False
    correct_option_id: Optional[int] = None
    explanation: Optional[str] = None
    open_period: Optional[int] = None
    close_date: Optional[int] = None


@dataclass(frozen=True)
class Message:
    message_id: int
    date: int = 0
    chat: Optional[Chat] = None
    message_thread_id: Optional[int] = None
    from_user: Optional[User] = None
    sender_chat: Optional[Chat] = None
    is_topic_message: bool = False
    is_automatic_forward: bool = False
    reply_to_message: Optional["Message"] = None
    via_bot: Optional[User] = None
    edit_date: Optional[int] = None
    has_protected_content: bool = False
    media_group_id: Optional[str] = None
    author_signature: Optional[str] = None
    text: Optional[str] = None
    entities: Sequence[MessageEntity] = field(default_factory=tuple)
    link_preview_options: Optional[LinkPreviewOptions] = None
    caption: Optional[str] = None
    caption_entities: Sequence[MessageEntity] = field(default_factory=tuple)
    has_media_spoiler: bool = False
    dice: Optional[Dice] = None
    poll: Optional[Poll] = None
    location: Optional[Location] = None
    new_chat_members: Sequence[User] = field(default_factory=tuple)
    left_chat_member: Optional[User] = None
    new_chat_title: Optional[str] = None
    delete_chat_photo: bool = False
    group_chat_created: bool = False


@dataclass(frozen=True)
class Update:
    """One event from getUpdates.

    ``kind`` tags which payload the update carried. Every message-bearing kind
    holds exactly one ``message``; ``unsupported`` updates hold none and keep
    the decoded JSON object in ``raw``. An update whose payload was malformed is
    also ``unsupported``, with the reason in ``decode_error``.
    """

    update_id: int
    kind: UpdateKind
    message: Optional[Message] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)
    decode_error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind in MESSAGE_UPDATE_KINDS:
            if self.message is None:
                raise ValueError(f"update kind {self.kind} requires a message payload")
            if self.decode_error is not None:
                raise ValueError("a decoded message update cannot carry a decode error")
        elif self.kind == "unsupported":
            if self.message is not None:
                raise ValueError("unsupported update must not carry a message payload")
        else:
            raise ValueError(f"unknown update kind: {self.kind}")
