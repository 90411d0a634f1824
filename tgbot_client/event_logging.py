from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from .logging_utils import write_log_line

LOG_FIELD_EMPTY = "-"

_SECRETS_LOCK = threading.Lock()
_SECRETS: set[str] = set()


def mask_token(token: str) -> str:
    """Return a log-safe form of a bot token, keeping only its edges."""
    text = str(token or "").strip()
    if not text:
        return LOG_FIELD_EMPTY
    if len(text) <= 8:
        return "***"
    return f"{text[:3]}***{text[-3:]}"


def register_secret(secret: str) -> None:
    """Mask ``secret`` wherever it shows up in text passed through ``redact``."""
    text = str(secret or "").strip()
    if not text:
        return
    with _SECRETS_LOCK:
        _SECRETS.add(text)


def redact(text: str, *secrets: str) -> str:
    """Replace registered secrets, plus any given ``secrets``, with their masked form."""
    with _SECRETS_LOCK:
        known = set(_SECRETS)
    known.update(item for item in secrets if item)
    # Longest first so a secret that contains another is masked whole.
    for secret in sorted(known, key=len, reverse=True):
        if secret in text:
            text = text.replace(secret, mask_token(secret))
    return text


def _field(value: Any) -> str:
    if value is None:
        return LOG_FIELD_EMPTY
    text = " ".join(redact(str(value)).split())
    return text or LOG_FIELD_EMPTY


@dataclass(frozen=True)
class StructuredLogEvent:
    component: str
    event: str
    input_data: str = LOG_FIELD_EMPTY
    decision: str = LOG_FIELD_EMPTY
    result: str = LOG_FIELD_EMPTY
    state_before: str = LOG_FIELD_EMPTY
    state_after: str = LOG_FIELD_EMPTY
    failure_reason: str = LOG_FIELD_EMPTY

    @property
    def state_transition(self) -> str:
        before, after = _field(self.state_before), _field(self.state_after)
        if before == LOG_FIELD_EMPTY and after == LOG_FIELD_EMPTY:
            return LOG_FIELD_EMPTY
        return f"{before}->{after}"


def format_structured_event(event: StructuredLogEvent, **context: Any) -> str:
    """Render ``event`` as one ``key=value`` line; context keys follow in sorted order."""
    pairs: list[tuple[str, Any]] = [
        ("component", event.component),
        ("event", event.event),
        ("input", event.input_data),
        ("decision", event.decision),
        ("result", event.result),
        ("state_transition", event.state_transition),
        ("failure_reason", event.failure_reason),
    ]
    pairs.extend(sorted(context.items()))
    return " ".join(f"{key}={_field(value)}" for key, value in pairs)


def log_structured_event(event: StructuredLogEvent, **context: Any) -> None:
    write_log_line(format_structured_event(event, **context))
