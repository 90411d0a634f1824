from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .event_logging import LOG_FIELD_EMPTY, StructuredLogEvent, log_structured_event, mask_token

API_BASE_URL_DEFAULT = "https://api.telegram.org"
# Must stay above the long-poll window or getUpdates times out client-side.
REQUEST_TIMEOUT_SECONDS_DEFAULT = 90
POLL_LIMIT_DEFAULT = 100
POLL_LIMIT_MAX = 100
POLL_TIMEOUT_SECONDS_DEFAULT = 60

BOT_TOKEN_ENV = "TGBOT_TOKEN"
API_BASE_URL_ENV = "TGBOT_API_BASE_URL"
REQUEST_TIMEOUT_SECONDS_ENV = "TGBOT_REQUEST_TIMEOUT_SECONDS"
POLL_LIMIT_ENV = "TGBOT_POLL_LIMIT"
POLL_TIMEOUT_SECONDS_ENV = "TGBOT_POLL_TIMEOUT_SECONDS"


@dataclass(frozen=True)
class BotSettings:
    bot_token: str
    api_base_url: str = API_BASE_URL_DEFAULT
    request_timeout_seconds: int = REQUEST_TIMEOUT_SECONDS_DEFAULT
    poll_limit: int = POLL_LIMIT_DEFAULT
    poll_timeout_seconds: int = POLL_TIMEOUT_SECONDS_DEFAULT


def _log_config_event(
    event: str,
    input_data: str,
    decision: str,
    result: str,
    *,
    state_before: str = LOG_FIELD_EMPTY,
    state_after: str = LOG_FIELD_EMPTY,
    failure_reason: str = LOG_FIELD_EMPTY,
    **context: object,
) -> None:
    log_structured_event(
        StructuredLogEvent(
            component="config",
            event=event,
            input_data=input_data,
            decision=decision,
            result=result,
            state_before=state_before,
            state_after=state_after,
            failure_reason=failure_reason,
        ),
        **context,
    )


def _read_str(env: Mapping[str, str], key: str, default: str, *, secret: bool = False) -> str:
    raw = env.get(key)
    value = str(raw).strip() if raw is not None else ""
    if not value:
        _log_config_event(
            "setting_default_used",
            input_data=f"{key}=<missing>",
            decision="use_default",
            result=f"value={mask_token(default) if secret else default or LOG_FIELD_EMPTY}",
            state_before="loading",
            state_after="loading",
            key=key,
        )
        return default
    _log_config_event(
        "setting_loaded",
        input_data=f"{key}={mask_token(value) if secret else value}",
        decision="accept_input",
        result="loaded",
        state_before="loading",
        state_after="loading",
        key=key,
    )
    return value


def _read_int(
    env: Mapping[str, str],
    key: str,
    default: int,
    *,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    raw = env.get(key)
    if raw is None:
        _log_config_event(
            "setting_default_used",
            input_data=f"{key}=<missing>",
            decision="use_default",
            result=f"value={default}",
            state_before="loading",
            state_after="loading",
            key=key,
            value=default,
        )
        return default
    try:
        value = int(raw)
    except ValueError:
        _log_config_event(
            "setting_parse_failed",
            input_data=f"{key}={raw}",
            decision="fallback_to_default",
            result=f"value={default}",
            state_before="loading",
            state_after="loading",
            failure_reason="invalid_int",
            key=key,
            raw=raw,
            fallback=default,
        )
        return default
    if minimum is not None and value < minimum:
        _log_config_event(
            "setting_below_minimum",
            input_data=f"{key}={value}",
            decision="fallback_to_default",
            result=f"value={default}",
            state_before="loading",
            state_after="loading",
            failure_reason="below_minimum",
            key=key,
            raw=value,
            minimum=minimum,
            fallback=default,
        )
        return default
    if maximum is not None and value > maximum:
        _log_config_event(
            "setting_above_maximum",
            input_data=f"{key}={value}",
            decision="fallback_to_default",
            result=f"value={default}",
            state_before="loading",
            state_after="loading",
            failure_reason="above_maximum",
            key=key,
            raw=value,
            maximum=maximum,
            fallback=default,
        )
        return default
    _log_config_event(
        "setting_loaded",
        input_data=f"{key}={raw}",
        decision="accept_input",
        result=f"value={value}",
        state_before="loading",
        state_after="loading",
        key=key,
        value=value,
    )
    return value


def load_bot_settings(env: Optional[Mapping[str, str]] = None) -> BotSettings:
    source = env if env is not None else os.environ
    _log_config_event(
        "settings_load_started",
        input_data=f"env_source={'custom' if env is not None else 'os.environ'}",
        decision="begin_settings_load",
        result="started",
        state_before="idle",
        state_after="loading",
    )

    settings = BotSettings(
        bot_token=_read_str(source, BOT_TOKEN_ENV, "", secret=True),
        api_base_url=_read_str(source, API_BASE_URL_ENV, API_BASE_URL_DEFAULT).rstrip("/"),
        request_timeout_seconds=_read_int(
            source,
            REQUEST_TIMEOUT_SECONDS_ENV,
            REQUEST_TIMEOUT_SECONDS_DEFAULT,
            minimum=1,
        ),
        poll_limit=_read_int(
            source,
            POLL_LIMIT_ENV,
            POLL_LIMIT_DEFAULT,
            minimum=1,
            maximum=POLL_LIMIT_MAX,
        ),
        poll_timeout_seconds=_read_int(
            source,
            POLL_TIMEOUT_SECONDS_ENV,
            POLL_TIMEOUT_SECONDS_DEFAULT,
            minimum=0,
        ),
    )
    _log_config_event(
        "settings_load_completed",
        input_data="all_settings_processed",
        decision="finalize_settings",
        result="settings_ready" if settings.bot_token else "token_missing",
        state_before="loading",
        state_after="loaded",
        bot_token=mask_token(settings.bot_token),
        api_base_url=settings.api_base_url,
        request_timeout_seconds=settings.request_timeout_seconds,
        poll_limit=settings.poll_limit,
        poll_timeout_seconds=settings.poll_timeout_seconds,
    )
    return settings
