from __future__ import annotations

import threading
from typing import Any, Callable, Optional, Sequence, TypeVar

import requests

from .api_models import Message, Update, User
from .codec import (
    decode_envelope,
    encode_request,
    parse_bool_result,
    parse_message,
    parse_updates,
    parse_user,
)
from .config import API_BASE_URL_DEFAULT, REQUEST_TIMEOUT_SECONDS_DEFAULT, BotSettings
from .errors import BotApiError, RemoteError, ResponseDecodeError, TransportError
from .event_logging import (
    LOG_FIELD_EMPTY,
    StructuredLogEvent,
    log_structured_event,
    mask_token,
    redact,
    register_secret,
)
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

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"
# Extra room on top of the server-side long-poll window for getUpdates.
LONG_POLL_TIMEOUT_MARGIN_SECONDS = 10


def _log_client_event(
    *,
    event: str,
    input_data: str,
    decision: str,
    result: str,
    failure_reason: str = LOG_FIELD_EMPTY,
    **context: object,
) -> None:
    log_structured_event(
        StructuredLogEvent(
            component="bot_client",
            event=event,
            input_data=input_data,
            decision=decision,
            result=result,
            failure_reason=failure_reason,
        ),
        **context,
    )


def _normalize_method(method: str) -> str:
    text = str(method or "").strip()
    if not text:
        raise ValueError("method must not be empty")
    return text if text.startswith("/") else f"/{text}"


class BotClient:
    """Blocking Telegram Bot API client.

    Every operation is one POST to ``<api_base_url>/bot<token>/<method>``. The
    client keeps no per-call state, so a single instance can be shared across
    threads as long as the injected transport is thread-safe.
    """

    def __init__(
        self,
        settings: BotSettings,
        *,
        session: Optional[requests.Session] = None,
        request_post: Optional[Callable[..., requests.Response]] = None,
    ) -> None:
        token = str(settings.bot_token or "").strip()
        if not token:
            raise ValueError("bot token is required")
        register_secret(token)
        self._settings = settings
        self._token = token
        self._base_url = (settings.api_base_url or API_BASE_URL_DEFAULT).rstrip("/")
        if request_post is not None:
            self._request_post = request_post
        elif session is not None:
            self._request_post = session.post
        else:
            self._request_post = requests.post

    @classmethod
    def from_token(cls, bot_token: str, **kwargs: Any) -> "BotClient":
        return cls(BotSettings(bot_token=bot_token), **kwargs)

    @property
    def settings(self) -> BotSettings:
        return self._settings

    def build_url(self, method: str) -> str:
        return f"{self._base_url}/bot{self._token}{_normalize_method(method)}"

    def _masked_url(self, method: str) -> str:
        return f"{self._base_url}/bot{mask_token(self._token)}{_normalize_method(method)}"

    def _timeout_for(self, params: Any) -> int:
        timeout = int(self._settings.request_timeout_seconds or REQUEST_TIMEOUT_SECONDS_DEFAULT)
        if isinstance(params, GetUpdatesRequest):
            timeout = max(timeout, int(params.timeout) + LONG_POLL_TIMEOUT_MARGIN_SECONDS)
        return max(1, timeout)

    def _post(self, method: str, params: Any) -> Any:
        body = encode_request(params)
        kwargs: dict[str, Any] = {
            "headers": {"content-type": JSON_CONTENT_TYPE},
            "timeout": self._timeout_for(params),
        }
        if body is not None:
            kwargs["json"] = body

        try:
            response = self._request_post(self.build_url(method), **kwargs)
        except requests.RequestException as exc:
            # requests puts the full URL, token included, into its messages, so
            # the original exception is not chained.
            detail = redact(f"{type(exc).__name__}: {exc}", self._token)
            raise TransportError(
                f"request to {method} failed: {detail}",
                reason_code="REQUEST_FAILED",
                method=method,
            ) from None

        status_code = int(getattr(response, "status_code", 0) or 0)
        try:
            payload = response.json()
        except ValueError as exc:
            if 200 <= status_code < 300:
                raise TransportError(
                    f"response from {method} is not valid JSON",
                    reason_code="INVALID_JSON",
                    method=method,
                ) from exc
            raise TransportError(
                f"response from {method} has status {status_code} and no JSON body",
                reason_code="HTTP_STATUS_ERROR",
                method=method,
            ) from exc

        envelope = decode_envelope(payload, method=method)
        if not envelope.ok:
            raise RemoteError(envelope.error_code, envelope.description, method=method)
        return envelope.result

    def invoke(self, method: str, params: Any = None) -> Any:
        """Call ``method`` and return the still-untyped ``result`` of a successful envelope.

        Raises ``TransportError`` when no usable envelope came back and
        ``RemoteError`` when the envelope reported ``ok=false``.
        """
        path = _normalize_method(method)
        try:
            result = self._post(path, params)
        except BotApiError as exc:
            _log_client_event(
                event="invoke",
                input_data=f"url={self._masked_url(path)}",
                decision="post_json_and_decode_envelope",
                result=exc.reason_code,
                failure_reason=str(exc),
                method=path,
                has_params=params is not None,
            )
            raise
        _log_client_event(
            event="invoke",
            input_data=f"url={self._masked_url(path)}",
            decision="post_json_and_decode_envelope",
            result="OK",
            method=path,
            has_params=params is not None,
        )
        return result

    def _call(self, method: str, params: Any, parser: Callable[[Any], T]) -> T:
        result = self.invoke(method, params)
        try:
            return parser(result)
        except ResponseDecodeError as exc:
            exc.method = method
            _log_client_event(
                event="decode_result",
                input_data=f"method={method}",
                decision="decode_typed_result",
                result=exc.reason_code,
                failure_reason=str(exc),
            )
            raise

    def get_me(self) -> User:
        return self._call("/getMe", None, parse_user)

    def send_message(self, request: SendMessageRequest) -> Message:
        return self._call("/sendMessage", request, parse_message)

    def answer_callback_query(
        self,
        callback_query_id: str,
        text: Optional[str] = None,
        *,
        show_alert: Optional[bool] = None,
        url: Optional[str] = None,
        cache_time: Optional[int] = None,
    ) -> bool:
        request = AnswerCallbackQueryRequest(
            callback_query_id=callback_query_id,
            text=text,
            show_alert=show_alert,
            url=url,
            cache_time=cache_time,
        )
        return self._call("/answerCallbackQuery", request, parse_bool_result)

    def get_updates(self, request: Optional[GetUpdatesRequest] = None) -> tuple[Update, ...]:
        return self._call("/getUpdates", request or GetUpdatesRequest(), parse_updates)

    def forward_message(self, request: ForwardMessageRequest) -> Message:
        return self._call("/forwardMessage", request, parse_message)

    def send_location(self, request: SendLocationRequest) -> Message:
        return self._call("/sendLocation", request, parse_message)

    def send_poll(self, request: SendPollRequest) -> Message:
        return self._call("/sendPoll", request, parse_message)

    def send_dice(self, request: SendDiceRequest) -> Message:
        return self._call("/sendDice", request, parse_message)

    def start_polling(
        self,
        stop_event: threading.Event,
        on_update: UpdateHandler,
        *,
        limit: Optional[int] = None,
        timeout: Optional[int] = None,
        allowed_updates: Optional[Sequence[str]] = None,
        error_backoff_seconds: float = 0.0,
        loop_label: str = "loop",
    ) -> PollingSummary:
        return start_polling(
            self,
            stop_event,
            on_update,
            limit=self._settings.poll_limit if limit is None else limit,
            timeout=self._settings.poll_timeout_seconds if timeout is None else timeout,
            allowed_updates=allowed_updates,
            error_backoff_seconds=error_backoff_seconds,
            loop_label=loop_label,
        )
