"""
modules/observability/logger.py
-------------------------------
Structured JSON event log: append-only, one object per line (.jsonl).

Usage:
    from modules.observability.logger import StructuredLogger

    events = StructuredLogger()
    events.log("req_abc123", "request_parsed", {"tasks": 2})

Events are written to  logs/<request_id>.jsonl  (or config.EVENT_LOGS_DIR).
Diagnostics for humans go through the standard `logging` module instead.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

import config

# logs/ directory lives alongside backend/main.py
_LOGS_DIR: Path = Path(__file__).resolve().parents[2] / "logs"


class StructuredLogger:
    """Thread-safe, append-only JSONL logger."""

    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self._logs_dir = Path(logs_dir or config.EVENT_LOGS_DIR or _LOGS_DIR)
        self._lock = threading.Lock()
        self._handles: dict[str, object] = {}  # request_id -> file handle

    @property
    def logs_dir(self) -> Path:
        return self._logs_dir

    # ── public API ────────────────────────────────────────────────────────

    def log(self, request_id: str, event_type: str, payload: dict) -> None:
        """Append one structured JSON record to ``<request_id>.jsonl``."""
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": request_id,
            "event_type": event_type,
            "payload": payload,
        }
        line = json.dumps(record, default=str, ensure_ascii=False) + "\n"

        with self._lock:
            fh = self._handles.get(request_id)
            if fh is None:
                fh = self._open(request_id)
            fh.write(line)  # type: ignore[union-attr]
            fh.flush()  # type: ignore[union-attr]

    def close(self, request_id: str | None = None) -> None:
        """Close one or all open file handles."""
        with self._lock:
            if request_id:
                fh = self._handles.pop(request_id, None)
                if fh:
                    fh.close()  # type: ignore[union-attr]
            else:
                for fh in self._handles.values():
                    fh.close()  # type: ignore[union-attr]
                self._handles.clear()

    # ── internals ─────────────────────────────────────────────────────────

    def _open(self, request_id: str):  # noqa: ANN202
        os.makedirs(self._logs_dir, exist_ok=True)
        path = self._logs_dir / f"{request_id}.jsonl"
        fh = open(path, "a", encoding="utf-8")  # noqa: SIM115
        self._handles[request_id] = fh
        return fh
