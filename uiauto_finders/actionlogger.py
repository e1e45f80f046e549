"""
@file actionlogger.py
@brief Event log for matches and resolutions.

Every event is one record: time, level, action, then whichever of
_EVENT_FIELDS were given, metadata and exception details. Records go to
stderr and/or an append-only file, as " | "-joined lines or one JSON object
per line.
"""

from __future__ import annotations

import json
import os
import sys
import threading
from datetime import datetime
from typing import Any, Dict, Optional

_EVENT_FIELDS = ("event", "finder", "element", "path", "attempt", "status", "duration_ms")
_REDACTED_KEYS = frozenset({"password", "passwd", "secret", "token"})


class EventSink:
    """Enable switch plus console/file output shared by the event loggers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "INFO"

    def configure(self, *, console: bool = True, file_path: Optional[str] = None, level: str = "INFO") -> None:
        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._level = level.upper()

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def _emit(self, line: str) -> None:
        with self._lock:
            if self._console:
                print(line, file=sys.stderr, flush=True)
            if not self._file_path:
                return
            try:
                os.makedirs(os.path.dirname(os.path.abspath(self._file_path)), exist_ok=True)
                with open(self._file_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError as e:
                # stop retrying the file for every event
                print(f"[{type(self).__name__}] cannot write {self._file_path}: {e}", file=sys.stderr)
                self._file_path = None


def describe_exception(exception: BaseException) -> Dict[str, Any]:
    """
    Summarize an exception for an event record.

    A TimeoutError is unwrapped to its root cause, so the record names the
    finder that kept failing.
    """
    info: Dict[str, Any] = {"type": type(exception).__name__, "message": str(exception)}
    root = getattr(exception, "root_cause", None) or exception.__cause__
    if root is not None and root is not exception:
        info["cause_type"] = type(root).__name__
        info["cause_message"] = str(root)
    finder = getattr(exception, "finder", None)
    if finder is not None:
        info["finder"] = str(finder)
    return info


class ActionLogger(EventSink):
    """Logs find/resolve events as text lines or JSON lines."""

    def __init__(self) -> None:
        super().__init__()
        self._format = "line"

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        format: str = "line",
    ) -> None:
        fmt = (format or "line").lower()
        if fmt not in ("line", "jsonl"):
            raise ValueError("ActionLogger format must be 'line' or 'jsonl'")
        super().configure(console=console, file_path=file_path, level=level)
        self._format = fmt

    def log(
        self,
        action: str,
        *,
        status: str = "ok",
        metadata: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
        **fields: Any,
    ) -> None:
        """
        Emit one event.

        @param action What happened, e.g. "find" or "resolve_element"
        @param fields Any of event, finder, element, path, attempt, duration_ms
        """
        if not self._enabled:
            return
        unknown = set(fields) - set(_EVENT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown action log fields: {sorted(unknown)}")

        fields.setdefault("event", "action")
        fields["status"] = status
        record: Dict[str, Any] = {
            "ts": datetime.now().astimezone().isoformat(timespec="milliseconds"),
            "level": self._level,
            "action": action,
        }
        record.update((key, fields[key]) for key in _EVENT_FIELDS if fields.get(key) is not None)
        record["metadata"] = {
            key: "***" if key.lower() in _REDACTED_KEYS else value
            for key, value in (metadata or {}).items()
        }
        if exception is not None:
            record["exception"] = describe_exception(exception)

        if self._format == "jsonl":
            self._emit(json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str))
        else:
            self._emit(_as_line(record))


def _as_line(record: Dict[str, Any]) -> str:
    parts = [record["ts"][11:23], record["level"], record["action"]]
    parts += [f"{key}={record[key]}" for key in _EVENT_FIELDS if key in record]
    parts += [f"{key}={value}" for key, value in record["metadata"].items()]
    exc = record.get("exception")
    if exc:
        parts.append(f"exc={exc['type']}: {exc['message']}")
    return " | ".join(parts)


ACTION_LOGGER = ActionLogger()
