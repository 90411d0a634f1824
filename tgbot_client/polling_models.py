from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .api_models import Update
from .errors import BotApiError

UpdateHandler = Callable[[Optional[Update], Optional[BotApiError]], None]


@dataclass(frozen=True)
class PollingSummary:
    fetch_count: int
    delivered_count: int
    skipped_count: int
    error_count: int
    last_update_id: int
