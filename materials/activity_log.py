"""
Activity log for the application.

An ActivityLog instance is created by the caller and passed to every component
that records events. Entries live in an in-memory ring buffer, are mirrored to
the standard `logging` module, and are persisted through a pluggable store:

    log = ActivityLog(JsonLinesLogStore(Path(".materials_activity.jsonl")))
    log.log("DocGen", "render_pdf", "Rendering PDF", {"kind": "resume"})
    print(log.format_as_text())

JsonLinesLogStore writes one JSON object per line so the file can be tailed or
grepped; it is reloaded on start-up so history survives restarts.
"""

import json
import logging
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ValidationError

logger = logging.getLogger("materials.activity")

Level = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

DEFAULT_CAPACITY = 1000


class LogEntry(BaseModel):
    timestamp: str
    level: Level = "INFO"
    module: str
    function: str = ""
    message: str
    details: Optional[Union[Dict[str, Any], str]] = None

    def format(self) -> str:
        detail_str = ""
        if self.details:
            if isinstance(self.details, str):
                detail_str = f" | Details: {self.details}"
            else:
                detail_str = f" | Details: {json.dumps(self.details, sort_keys=True, default=str)}"
        where = f"{self.module}.{self.function}" if self.function else self.module
        return f"[{self.timestamp}] [{self.level}] {where} - {self.message}{detail_str}"


class MemoryLogStore:
    """Keeps nothing beyond the process; the default store."""

    def __init__(self) -> None:
        self._entries: List[LogEntry] = []

    def load(self) -> List[LogEntry]:
        return list(self._entries)

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def clear(self) -> None:
        self._entries = []


class JsonLinesLogStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> List[LogEntry]:
        if not self.path.exists():
            return []
        entries = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(LogEntry.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    logger.warning("Skipping unreadable log line %s in %s: %s", line_no, self.path, e)
        return entries

    def append(self, entry: LogEntry) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(entry.model_dump_json() + "\n")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


_STDLIB_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class ActivityLog:
    def __init__(self, store=None, capacity: int = DEFAULT_CAPACITY, stdlib_logger: Optional[logging.Logger] = None):
        self.store = store if store is not None else MemoryLogStore()
        self._entries = deque(maxlen=capacity)
        self._logger = stdlib_logger or logger
        try:
            self._entries.extend(self.store.load())
        except OSError as e:
            self._logger.warning("Could not load activity log history: %s", e)
        self.log("ActivityLog", "__init__", "Activity log initialized.", {"loadedCount": len(self._entries)})

    def log(
        self,
        module: str,
        function: str,
        message: str,
        details: Optional[Union[Dict[str, Any], str]] = None,
        level: Level = "INFO",
    ) -> LogEntry:
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            level=level,
            module=module,
            function=function,
            message=message,
            details=details,
        )
        self._entries.append(entry)
        self._logger.log(_STDLIB_LEVELS[level], "%s.%s - %s", module, function, message)
        try:
            self.store.append(entry)
        except OSError as e:
            # the in-memory copy is still complete
            self._logger.error("Failed to persist activity log entry: %s", e)
        return entry

    def info(self, module: str, function: str, message: str, details=None) -> LogEntry:
        return self.log(module, function, message, details, "INFO")

    def error(self, module: str, function: str, message: str, details=None) -> LogEntry:
        return self.log(module, function, message, details, "ERROR")

    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def tail(self, count: int) -> List[LogEntry]:
        return list(self._entries)[-count:] if count > 0 else []

    def format_as_text(self, entries: Optional[Iterable[LogEntry]] = None) -> str:
        return "\n".join(e.format() for e in (self._entries if entries is None else entries))

    def clear(self) -> None:
        self._entries.clear()
        try:
            self.store.clear()
        except OSError as e:
            self._logger.error("Cleared logs in memory, but failed to clear the store: %s", e)
            self.log("ActivityLog", "clear", "Cleared logs from memory, but the store could not be cleared.",
                     {"error": str(e)}, "ERROR")
            return
        self.log("ActivityLog", "clear", "All log entries cleared.")
