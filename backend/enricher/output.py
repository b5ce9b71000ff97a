"""
Append-only CSV output log; also the only checkpoint.

Row count equals fixtures fully processed, so a restart resumes at fixture
number resume_offset(). A row is committed once it has been written and synced;
nothing is ever written for a half-processed fixture. An unterminated last row
(a crash during the write itself) is cut off when the writer opens the log.

Fields are not suitable for embedded newlines: a newline inside a value would
be counted as an extra row on resume. Such values are written as-is and logged.
"""
from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Union

from shared.utils.logging import get_logger

logger = get_logger(__name__)

FIELD_SEPARATOR = ","
ROW_TERMINATOR = "\n"

PathLike = Union[str, os.PathLike]


def format_timestamp(value: datetime) -> str:
    """UTC 'YYYY-MM-DD HH:MM:SS.mmm'; naive datetimes are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M:%S.") + f"{value.microsecond // 1000:03d}"


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def serialize_field(value: Any) -> str:
    """Render one field: None empty, bool 1/0, numbers bare, timestamps UTC, all else quoted."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    return '"' + str(value).replace('"', '""') + '"'


def serialize_row(values: Iterable[Any]) -> str:
    return FIELD_SEPARATOR.join(serialize_field(v) for v in values) + ROW_TERMINATOR


def count_rows(text: str) -> int:
    return text.count(ROW_TERMINATOR)


def resume_offset(path: PathLike) -> int:
    """Number of rows already in the log, i.e. the index of the first unprocessed fixture."""
    p = Path(path)
    if not p.exists():
        return 0
    return count_rows(p.read_text(encoding="utf-8"))


class OutputWriter:
    """Sole appender to the output log. Keeps a row count so the file is read only once."""

    def __init__(self, path: PathLike, fsync: bool = True) -> None:
        self._path = Path(path)
        self._fsync = fsync
        self._drop_partial_row()
        self.rows_written = resume_offset(self._path)

    def _drop_partial_row(self) -> None:
        """Cut an unterminated last row left by a crash mid-write; that fixture is redone."""
        if not self._path.exists():
            return
        text = self._path.read_text(encoding="utf-8")
        if not text or text.endswith(ROW_TERMINATOR):
            return
        keep = text[: text.rfind(ROW_TERMINATOR) + 1]
        logger.warning(
            "partial_row_truncated",
            path=str(self._path),
            dropped=text[len(keep):],
            rows_kept=count_rows(keep),
        )
        with self._path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(keep)
            fh.flush()
            if self._fsync:
                os.fsync(fh.fileno())

    def append_row(self, *values: Any) -> int:
        """Durably append one row; returns the new row count."""
        line = serialize_row(values)
        if line.count(ROW_TERMINATOR) != 1:
            logger.warning("row_contains_newline", row_index=self.rows_written)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8", newline="") as fh:
            fh.write(line)
            fh.flush()
            if self._fsync:
                os.fsync(fh.fileno())
        self.rows_written += 1
        logger.debug("row_appended", rows_written=self.rows_written)
        return self.rows_written

    def tail(self, n: int = 1) -> list[str]:
        """Last n rows of the log, for operator inspection."""
        if not self._path.exists() or n <= 0:
            return []
        rows = self._path.read_text(encoding="utf-8").split(ROW_TERMINATOR)
        if rows and rows[-1] == "":
            rows.pop()
        return rows[-n:]

