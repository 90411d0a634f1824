from __future__ import annotations

import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Optional

LOG_PATH_ENV = "TGBOT_LOG_PATH"
DEFAULT_LOG_PATH = Path(tempfile.gettempdir()) / "tgbot-client.log"
LOG_ROTATE_MAX_BYTES = 5 * 1024 * 1024
# One active file plus this many numbered backups.
LOG_ROTATE_BACKUP_COUNT = 9

# All client threads share one writer; rollover and append happen under it.
_WRITE_LOCK = threading.Lock()


def get_log_path() -> Path:
    raw = os.environ.get(LOG_PATH_ENV, "").strip()
    return Path(raw).expanduser() if raw else DEFAULT_LOG_PATH


def _numbered(path: Path, index: int) -> Path:
    return path.with_name(f"{path.name}.{index}")


def _roll_over(path: Path, backup_count: int) -> None:
    """Shift ``path`` to ``path.1``, ``path.1`` to ``path.2`` and so on; the oldest is dropped."""
    if backup_count <= 0:
        path.unlink(missing_ok=True)
        return
    _numbered(path, backup_count).unlink(missing_ok=True)
    for index in range(backup_count - 1, 0, -1):
        source = _numbered(path, index)
        if source.exists():
            os.replace(source, _numbered(path, index + 1))
    os.replace(path, _numbered(path, 1))


def append_rotating_log_line(
    path: Path,
    line: str,
    *,
    max_bytes: Optional[int] = None,
    backup_count: Optional[int] = None,
) -> None:
    """Append ``line`` to ``path``, rolling the file over first when the line would not fit."""
    limit = max(1024, LOG_ROTATE_MAX_BYTES if max_bytes is None else int(max_bytes))
    backups = max(0, LOG_ROTATE_BACKUP_COUNT if backup_count is None else int(backup_count))
    size = len(line.encode("utf-8", errors="replace"))
    with _WRITE_LOCK:
        path.parent.mkdir(parents=True, exist_ok=True)
        current = path.stat().st_size if path.exists() else 0
        if current and current + size > limit:
            _roll_over(path, backups)
        with open(path, "a", encoding="utf-8") as handle:
            handle.write(line)


def write_log_line(message: str) -> None:
    line = f"[{time.strftime('%Y-%m-%d %H:%M:%S')}] {message}\n"
    try:
        append_rotating_log_line(get_log_path(), line)
    except Exception:
        # Logging must never break the caller.
        pass
