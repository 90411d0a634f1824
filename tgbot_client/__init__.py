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
    ReplyParameters,
    Update,
    UpdateKind,
    User,
)
from .client import BotClient
from .codec import (
    decode_envelope,
    encode_request,
    parse_message,
    parse_update,
    parse_updates,
    parse_user,
)
from .config import (
    API_BASE_URL_DEFAULT,
    POLL_LIMIT_DEFAULT,
    POLL_TIMEOUT_SECONDS_DEFAULT,
    REQUEST_TIMEOUT_SECONDS_DEFAULT,
    BotSettings,
    load_bot_settings,
)
from .errors import BotApiError, RemoteError, ResponseDecodeError, TransportError
from .event_logging import StructuredLogEvent, log_structured_event, mask_token, redact, register_secret
from .polling import start_polling
from .polling_models import PollingSummary, UpdateHandler
from .request_models import (
    AnswerCallbackQueryRequest,
    ForwardMessageRequest,
    GetUpdatesRequest,
    SendDiceRequest,
    SendLocationRequest,
    SendMessageRequest,
    SendPollRequest,
)

__version__ = "0.1.0"

__all__ = [
    "API_BASE_URL_DEFAULT",
    "MESSAGE_UPDATE_KINDS",
    "POLL_LIMIT_DEFAULT",
    "POLL_TIMEOUT_SECONDS_DEFAULT",
    "REQUEST_TIMEOUT_SECONDS_DEFAULT",
    "AnswerCallbackQueryRequest",
    "ApiEnvelope",
    "BotApiError",
    "BotClient",
    "BotSettings",
    "Chat",
    "Dice",
    "ForwardMessageRequest",
    "GetUpdatesRequest",
    "LinkPreviewOptions",
    "Location",
    "Message",
    "MessageEntity",
    "Poll",
    "PollOption",
    "PollingSummary",
    "RemoteError",
    "ReplyParameters",
    "ResponseDecodeError",
    "SendDiceRequest",
    "SendLocationRequest",
    "SendMessageRequest",
    "SendPollRequest",
    "StructuredLogEvent",
    "TransportError",
    "Update",
    "UpdateHandler",
    "UpdateKind",
    "User",
    "decode_envelope",
    "encode_request",
    "load_bot_settings",
    "log_structured_event",
    "mask_token",
    "parse_message",
    "parse_update",
    "parse_updates",
    "parse_user",
    "redact",
    "register_secret",
    "start_polling",
]
