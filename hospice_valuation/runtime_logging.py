"""JSON-lines runtime event log for the calculator UI."""

from __future__ import annotations

import json
import os
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd
from streamlit.runtime.scriptrunner import get_script_run_ctx


LOG_DIR = Path(".local_store")
RUNTIME_EVENTS_LOG_FILE = LOG_DIR / "runtime_events.jsonl"

_DEFAULT_LOG_DIR = Path(".local_store")
_STORAGE_ENV_VAR = "HOSPICE_STORAGE_ROOT"

EVENT_COLUMNS = ["timestamp_utc", "level", "event", "message"]

_hook_installed = False


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_default(value: Any):
    if isinstance(value, (set, tuple)):
        return list(value)
    return str(value)


def configure_log_root(path_value: str | Path | None) -> Path:
    global LOG_DIR, RUNTIME_EVENTS_LOG_FILE
    text = "" if path_value is None else str(path_value).strip()
    LOG_DIR = Path(os.path.expandvars(os.path.expanduser(text))) if text else _DEFAULT_LOG_DIR
    RUNTIME_EVENTS_LOG_FILE = LOG_DIR / "runtime_events.jsonl"
    return LOG_DIR


def runtime_log_path() -> str:
    return str(RUNTIME_EVENTS_LOG_FILE.resolve())


def _exception_fields(exc: BaseException) -> dict[str, str]:
    if exc.__traceback__ is not None:
        tb_text = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    else:
        tb_text = traceback.format_exc()
    return {
        "exception_type": type(exc).__name__,
        "exception_message": str(exc),
        "traceback": tb_text,
    }


def append_runtime_event(
    level: str,
    event: str,
    message: str,
    context: dict[str, Any] | None = None,
    exc: BaseException | None = None,
) -> None:
    """Append one event record; a failed write is dropped rather than raised."""
    record: dict[str, Any] = {
        "timestamp_utc": _now_iso(),
        "level": str(level).upper(),
        "event": str(event),
        "message": str(message),
        "context": context or {},
    }
    if exc is not None:
        record.update(_exception_fields(exc))
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        line = json.dumps(record, default=_json_default, ensure_ascii=False)
        with RUNTIME_EVENTS_LOG_FILE.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
    except (OSError, TypeError, ValueError):
        # Write failures are dropped.
        pass


def _parse_line(line: str) -> dict[str, Any]:
    try:
        record = json.loads(line)
    except json.JSONDecodeError:
        record = None
    if isinstance(record, dict):
        return record
    return {
        "timestamp_utc": _now_iso(),
        "level": "ERROR",
        "event": "log_parse_error",
        "message": "Malformed log line encountered.",
        "context": {"line": line},
    }


def read_runtime_events(limit: int = 200) -> list[dict[str, Any]]:
    """Most recent ``limit`` events, oldest first; unreadable lines become ``log_parse_error`` records."""
    if limit <= 0 or not RUNTIME_EVENTS_LOG_FILE.exists():
        return []
    try:
        lines = RUNTIME_EVENTS_LOG_FILE.read_text(encoding="utf-8").splitlines()
    except OSError:
        return []
    return [_parse_line(line) for line in lines[-int(limit) :] if line.strip()]


def runtime_events_frame(limit: int = 200, levels: list[str] | None = None) -> pd.DataFrame:
    """Newest-first table of recent events for the diagnostics panel."""
    events = read_runtime_events(limit)
    if levels:
        wanted = {str(lvl).upper() for lvl in levels}
        events = [e for e in events if str(e.get("level", "")).upper() in wanted]
    if not events:
        return pd.DataFrame(columns=EVENT_COLUMNS)
    df = pd.DataFrame(events).reindex(columns=EVENT_COLUMNS)
    return df.iloc[::-1].reset_index(drop=True)


def install_global_exception_logging() -> None:
    """Record uncaught exceptions raised inside a Streamlit script run."""
    global _hook_installed
    if _hook_installed:
        return
    default_hook = sys.excepthook

    def _log_uncaught(exc_type, exc, exc_tb):
        # Plain scripts importing the package keep the default hook only.
        if get_script_run_ctx() is not None:
            append_runtime_event("ERROR", "uncaught_exception", f"{exc_type.__name__}: {exc}", exc=exc)
        default_hook(exc_type, exc, exc_tb)

    sys.excepthook = _log_uncaught
    _hook_installed = True


configure_log_root(os.getenv(_STORAGE_ENV_VAR, ""))
