from __future__ import annotations

import csv
import fcntl
import io
import threading
import time
from dataclasses import asdict, fields
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Union

from casebook.core.config import RunConfig
from casebook.core.logs import get_logger
from casebook.core.text import normalize_text
from casebook.core.types import EXECUTION_COLUMNS, ExecutionRecord, Status

log = get_logger(__name__)

_FIELD_BY_COLUMN = dict(zip(EXECUTION_COLUMNS, (f.name for f in fields(ExecutionRecord))))


def record_from_mapping(entry: Mapping[str, object]) -> ExecutionRecord:
    """Accepts either persisted column names or ExecutionRecord field names."""
    kw = {}
    for k, v in entry.items():
        name = _FIELD_BY_COLUMN.get(k, k)
        if name not in _FIELD_BY_COLUMN.values():
            raise KeyError(f"Unknown execution record field: '{k}'")
        if isinstance(v, Enum):
            v = v.value
        kw[name] = "" if v is None else str(v)
    return ExecutionRecord(**kw)


def normalize_status(s: str) -> str:
    s = (s or "").strip().upper()
    return s if s in (Status.PASS.value, Status.FAIL.value) else Status.UNKNOWN.value


def format_row(rec: ExecutionRecord) -> str:
    """
    One CSV line, every field quoted ("" for embedded quotes) and flattened
    to a single physical line.
    """
    buf = io.StringIO()
    w = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    w.writerow([normalize_text(v) for v in rec.to_row()])
    return buf.getvalue()


def format_header() -> str:
    buf = io.StringIO()
    csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n").writerow(EXECUTION_COLUMNS)
    return buf.getvalue()


class ExecutionRecorder:
    """
    Append-only execution log. Appends from threads in this process are
    serialized by a lock; appends from other worker processes by flock on
    the log file itself.
    """

    def __init__(self, path: Union[str, Path], config: Optional[RunConfig] = None):
        self.path = Path(path)
        self.config = config or RunConfig()
        self._lock = threading.Lock()

    def with_defaults(self, rec: ExecutionRecord) -> ExecutionRecord:
        now = datetime.now()
        filled = ExecutionRecord(**asdict(rec))
        filled.execution_id = rec.execution_id or f"EXEC_{time.time_ns() // 1_000_000}_{rec.test_case_id}"
        filled.browser = rec.browser or (self.config.browsers[0] if self.config.browsers else "chromium")
        filled.environment = rec.environment or self.config.environment
        filled.executed_by = rec.executed_by or self.config.executed_by
        filled.execution_date = rec.execution_date or now.strftime("%Y-%m-%d")
        filled.start_time = rec.start_time or now.strftime("%H:%M:%S")
        filled.status = normalize_status(rec.status)
        filled.duration_seconds = rec.duration_seconds or "0"
        return filled

    def record(self, entry: Union[ExecutionRecord, Mapping[str, object]]) -> ExecutionRecord:
        rec = entry if isinstance(entry, ExecutionRecord) else record_from_mapping(entry)
        rec = self.with_defaults(rec)
        line = format_row(rec)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            with self.path.open("ab+") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    # header and trailing-newline checks must happen under the lock
                    f.seek(0, 2)
                    if f.tell() == 0:
                        f.write(format_header().encode("utf-8"))
                    else:
                        f.seek(-1, 2)
                        if f.read(1) != b"\n":
                            f.write(b"\n")
                    f.write(line.encode("utf-8"))
                    f.flush()
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        log.info(
            "execution recorded",
            execution_id=rec.execution_id,
            test_case_id=rec.test_case_id,
            browser=rec.browser,
            status=rec.status,
        )
        return rec

    def read_records(self) -> List[ExecutionRecord]:
        if not self.path.exists():
            return []
        with self.path.open(newline="", encoding="utf-8") as f:
            rows = [r for r in csv.DictReader(f) if r.get("Execution ID")]
        return [ExecutionRecord.from_row(r) for r in rows]
