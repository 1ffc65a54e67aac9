# logging_utils.py
from __future__ import annotations

import json
from typing import Any, Dict, TextIO, Optional


class JsonLinesLogger:
    """
    Query trace in JSON Lines:
    - One JSON object per event.
    - No wall clock; events carry an increasing sequence number instead.
    - sort_keys=True so the same run always writes the same bytes.
    - With no file every event is dropped.
    """

    def __init__(self, file: Optional[TextIO] = None):
        self._file = file
        self._seq = 0

    def log_event(
        self,
        *,
        event: str,
        kind: Optional[str] = None,
        target: Optional[str] = None,
        outcome: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._seq += 1
        if self._file is None:
            return

        record: Dict[str, Any] = {
            "seq": self._seq,
            "event": event,
        }
        if kind is not None:
            record["kind"] = kind
        if target is not None:
            record["target"] = target
        if outcome is not None:
            record["outcome"] = outcome
        if extra:
            record.update(extra)

        line = json.dumps(record, sort_keys=True)
        self._file.write(line + "\n")
        self._file.flush()
