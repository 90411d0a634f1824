"""Long-polling loop over getUpdates.

The loop is synchronous: each getUpdates call blocks for up to ``timeout``
seconds server-side before the next iteration starts. Cancellation is checked
once per iteration, before the fetch, so a stop requested during an in-flight
long-poll takes effect only after that fetch returns and its batch has been
delivered. Stop latency is therefore bounded by the long-poll timeout.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional, Sequence

from .config import POLL_LIMIT_DEFAULT, POLL_LIMIT_MAX, POLL_TIMEOUT_SECONDS_DEFAULT
from .errors import BotApiError
from .event_logging import LOG_FIELD_EMPTY, StructuredLogEvent, log_structured_event
from .polling_models import PollingSummary, UpdateHandler
from .request_models import GetUpdatesRequest

if TYPE_CHECKING:
    from .client import BotClient


def _log_polling_event(
    *,
    event: str,
    input_data: str,
    decision: str,
    result: str,
    failure_reason: str = LOG_FIELD_EMPTY,
    state_before: str = LOG_FIELD_EMPTY,
    state_after: str = LOG_FIELD_EMPTY,
    **context: object,
) -> None:
    log_structured_event(
        StructuredLogEvent(
            component="polling",
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


def start_polling(
    client: "BotClient",
    stop_event: threading.Event,
    on_update: UpdateHandler,
    *,
    limit: int = POLL_LIMIT_DEFAULT,
    timeout: int = POLL_TIMEOUT_SECONDS_DEFAULT,
    allowed_updates: Optional[Sequence[str]] = None,
    error_backoff_seconds: float = 0.0,
    loop_label: str = "loop",
) -> PollingSummary:
    """Fetch updates until ``stop_event`` is set, handing each one to ``on_update``.

    ``on_update(update, None)`` is called for every update whose id is above the
    last delivered id, in the order received. A failed fetch is reported as
    ``on_update(None, error)`` and polling continues with the same offset.
    Exceptions raised by ``on_update`` itself are not caught.
    """
    page_limit = max(1, min(int(limit), POLL_LIMIT_MAX))
    poll_timeout = max(0, int(timeout))
    allowed = tuple(allowed_updates) if allowed_updates is not None else None

    last_update_id = 0
    fetch_count = 0
    delivered_count = 0
    skipped_count = 0
    error_count = 0

    _log_polling_event(
        event="polling_started",
        input_data=f"limit={page_limit} timeout={poll_timeout}",
        decision="begin_long_poll",
        result="started",
        state_before="idle",
        state_after=f"offset={last_update_id + 1}",
        loop_label=loop_label,
    )

    while True:
        if stop_event.is_set():
            _log_polling_event(
                event="polling_stopped",
                input_data=f"fetches={fetch_count}",
                decision="stop_signal_observed",
                result="stopped",
                state_before=f"last_update_id={last_update_id}",
                state_after="idle",
                delivered=delivered_count,
                errors=error_count,
                loop_label=loop_label,
            )
            return PollingSummary(
                fetch_count=fetch_count,
                delivered_count=delivered_count,
                skipped_count=skipped_count,
                error_count=error_count,
                last_update_id=last_update_id,
            )

        request = GetUpdatesRequest(
            offset=last_update_id + 1,
            limit=page_limit,
            timeout=poll_timeout,
            allowed_updates=allowed,
        )
        fetch_count += 1
        try:
            updates = client.get_updates(request)
        except BotApiError as exc:
            error_count += 1
            _log_polling_event(
                event="fetch_updates",
                input_data=f"offset={request.offset}",
                decision="report_error_and_continue",
                result=exc.reason_code,
                failure_reason=str(exc),
                state_before=f"last_update_id={last_update_id}",
                state_after=f"last_update_id={last_update_id}",
                loop_label=loop_label,
            )
            on_update(None, exc)
            if error_backoff_seconds > 0:
                stop_event.wait(error_backoff_seconds)
            continue

        cursor_before = last_update_id
        batch_delivered = 0
        for update in updates:
            if update.update_id <= last_update_id:
                skipped_count += 1
                continue
            last_update_id = update.update_id
            delivered_count += 1
            batch_delivered += 1
            on_update(update, None)

        _log_polling_event(
            event="fetch_updates",
            input_data=f"offset={request.offset}",
            decision="deliver_updates_above_cursor",
            result="OK" if updates else "NO_UPDATES",
            state_before=f"last_update_id={cursor_before}",
            state_after=f"last_update_id={last_update_id}",
            received=len(updates),
            malformed=sum(1 for update in updates if update.decode_error is not None),
            delivered=batch_delivered,
            loop_label=loop_label,
        )
