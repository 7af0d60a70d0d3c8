# Project: aemet-climate
# Owner: GreenUnicorn
"""
utils.py — Shared utilities: retry logic, failure logging, date helpers.
"""

import calendar
import time
from collections import deque
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import Any

DEFAULT_LOG_PATH = Path("logs/aemet_climate.log")
MAX_ATTEMPTS = 4
RETRY_DELAY_SECONDS = 30


def fmt_day(day: date) -> str:
    """Format a date for display as 'DD/MM/YYYY'."""
    return day.strftime("%d/%m/%Y")


def parse_day(text: str) -> date:
    """Parse a user-entered 'DD/MM/YYYY' date.

    Raises:
        ValueError: If the text does not match the format.
    """
    return datetime.strptime(text.strip(), "%d/%m/%Y").date()


def add_months(day: date, months: int) -> date:
    """Move a date forward by whole months, clamping to the month's last day.

    Example: 31 Aug + 6 months -> 28/29 Feb.
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def with_retry(
    fn: Callable[..., Any],
    *args: Any,
    label: str = "API call",
    attempts: int = MAX_ATTEMPTS,
    delay: float = RETRY_DELAY_SECONDS,
    log_path: Path = DEFAULT_LOG_PATH,
    **kwargs: Any,
) -> Any:
    """Call a function up to `attempts` times, retrying on any exception.

    Args:
        fn: Callable to invoke.
        *args: Positional arguments forwarded to fn.
        label: Human-readable name for the call, used in warning messages.
        attempts: Maximum number of calls.
        delay: Seconds to sleep between failed attempts.
        log_path: Path to the log file for recording final failures.
        **kwargs: Keyword arguments forwarded to fn.

    Returns:
        The return value of fn on success.

    Raises:
        RuntimeError: If every attempt raises.
    """
    for attempt in range(1, attempts + 1):
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            if attempt < attempts:
                print(
                    f"[aemet] {label} failed (attempt {attempt}/{attempts}): "
                    f"{e}. Retrying in {delay:g}s..."
                )
                time.sleep(delay)
            else:
                msg = f"All {attempts} attempts failed for {label}."
                print(f"[aemet] {msg}")
                _log_error(f"{label}: {e}", attempts=attempts, log_path=log_path)
                raise RuntimeError(msg) from e


def _log_error(message: str, attempts: int = MAX_ATTEMPTS, log_path: Path = DEFAULT_LOG_PATH) -> None:
    """Append a timestamped ERROR line to the log file.

    Args:
        message: Error description to log.
        attempts: Number of attempts made, included in the line.
        log_path: Destination log file path.
    """
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(log_path, "a") as f:
            f.write(f"{timestamp} [ERROR] Request failed after {attempts} attempts: {message}\n")
    except OSError:
        pass  # Never crash on logging failure


def write_last_run(
    status: str,
    detail: str,
    log_dir: Path = Path("logs"),
) -> None:
    """Append a status record to logs/last_run.txt after each run.

    Format: ``2026-02-23 20:00:01|OK|5530E: 19358 records``

    Args:
        status: 'OK' or 'ERROR'.
        detail: Human-readable summary of the run outcome.
        log_dir: Directory containing last_run.txt.
    """
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(log_dir / "last_run.txt", "a") as f:
            f.write(f"{timestamp}|{status}|{detail.replace('|', '-')}\n")
    except OSError:
        pass


def read_last_run(log_dir: Path = Path("logs")) -> dict | None:
    """Read the most recent run record from logs/last_run.txt.

    Returns:
        Dict with keys timestamp, status, detail, or None if the file is
        missing, empty or malformed.
    """
    path = log_dir / "last_run.txt"
    if not path.exists():
        return None
    try:
        with open(path) as f:
            buf: deque[str] = deque(f, maxlen=1)
        if not buf:
            return None
        last = buf[0].rstrip("\n")
        parts = last.split("|", 2)
        if len(parts) != 3:
            return None
        return {"timestamp": parts[0], "status": parts[1], "detail": parts[2]}
    except OSError:
        return None
