# uiauto_finders/timinglogger.py
"""
@file timinglogger.py
@brief Wait/retry timing events (wait_start, retry_wait, wait_timeout, ...).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .actionlogger import EventSink

_SEVERITY = {"debug": 10, "info": 20, "success": 20, "warning": 30, "error": 40}


class TimingLogger(EventSink):
    """
    Emits one line per timing event, e.g.
    [error] [timing] 12:00:01.250 wait_timeout element 'ok' exists attempts=5
    Events whose status ranks below the configured level are dropped.
    """

    def log(self, event: str, description: str = "", status: str = "info", **metadata: Any) -> None:
        if not self._enabled:
            return
        status = status.lower()
        if _SEVERITY.get(status, 20) < _SEVERITY.get(self._level.lower(), 20):
            return
        parts = [f"[{status}]", "[timing]", datetime.now().strftime("%H:%M:%S.%f")[:-3], event]
        if description:
            parts.append(description)
        parts += [f"{key}={value}" for key, value in metadata.items() if value is not None]
        self._emit(" ".join(parts))


TIMING_LOGGER = TimingLogger()
