"""Unit tests for CSV field serialization, the append-only writer, and resume offsets."""
from __future__ import annotations

import csv
import io
from datetime import datetime, timedelta, timezone
from pathlib import Path

from enricher.output import OutputWriter, resume_offset, serialize_field, serialize_row


# ── serialize_field ─────────────────────────────────────────────────────

def test_none_is_empty() -> None:
    assert serialize_field(None) == ""


def test_bools_are_dummies() -> None:
    assert serialize_field(True) == "1"
    assert serialize_field(False) == "0"


def test_numbers_are_bare() -> None:
    assert serialize_field(2) == "2"
    assert serialize_field(0.857) == "0.857"
    assert serialize_field(0.0) == "0"
    assert serialize_field(1.0) == "1"


def test_timestamp_is_utc_millis() -> None:
    ts = datetime(2018, 1, 1, 15, 0, 5, 123456, tzinfo=timezone.utc)
    assert serialize_field(ts) == "2018-01-01 15:00:05.123"


def test_timestamp_with_offset_converted_to_utc() -> None:
    ts = datetime(2018, 1, 1, 16, 0, 0, tzinfo=timezone(timedelta(hours=1)))
    assert serialize_field(ts) == "2018-01-01 15:00:00.000"


def test_text_quoted_with_doubled_quotes() -> None:
    assert serialize_field('Queen\'s "Park"') == '"Queen\'s ""Park"""'
    assert serialize_field("") == '""'


def test_row_joined_and_terminated() -> None:
    assert serialize_row(["E0", 2, None, True]) == '"E0",2,,1\n'


# ── round trip ──────────────────────────────────────────────────────────

def test_comma_and_quote_survive_reparse(tmp_path: Path) -> None:
    text = 'Brighton & Hove "Albion", the'
    writer = OutputWriter(tmp_path / "out.csv", fsync=False)
    writer.append_row("E0", text, 3, None)
    rows = list(csv.reader(io.StringIO((tmp_path / "out.csv").read_text(encoding="utf-8"))))
    assert rows == [["E0", text, "3", ""]]


# ── writer / checkpoint ─────────────────────────────────────────────────

def test_resume_offset_missing_file(tmp_path: Path) -> None:
    assert resume_offset(tmp_path / "absent.csv") == 0


def test_resume_offset_counts_rows(tmp_path: Path) -> None:
    path = tmp_path / "out.csv"
    path.write_text('"a",1\n"b",2\n', encoding="utf-8")
    assert resume_offset(path) == 2


def test_writer_appends_and_tracks_count(tmp_path: Path) -> None:
    path = tmp_path / "out.csv"
    path.write_text('"a",1\n', encoding="utf-8")
    writer = OutputWriter(path, fsync=False)
    assert writer.rows_written == 1
    assert writer.append_row("b", 2) == 2
    assert writer.append_row("c", 3) == 3
    assert path.read_text(encoding="utf-8") == '"a",1\n"b",2\n"c",3\n'
    assert resume_offset(path) == writer.rows_written


def test_writer_creates_parent_dirs(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path / "nested" / "out.csv")
    writer.append_row("x")
    assert (tmp_path / "nested" / "out.csv").read_text(encoding="utf-8") == '"x"\n'


def test_tail_returns_last_rows(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path / "out.csv", fsync=False)
    assert writer.tail() == []
    for i in range(3):
        writer.append_row(i)
    assert writer.tail(2) == ["1", "2"]


def test_unterminated_last_row_is_dropped_before_appending(tmp_path: Path) -> None:
    path = tmp_path / "out.csv"
    complete = '"E0","2018-01-01","A","B",1,0,,,0,,\n'
    path.write_text(complete + '"E0","2018-01-0', encoding="utf-8")

    writer = OutputWriter(path, fsync=False)
    assert writer.rows_written == 1
    assert path.read_text(encoding="utf-8") == complete

    writer.append_row("E1", "2018-01-02", "C", "D", 2, 2, None, None, 0.0, None, None)
    assert path.read_text(encoding="utf-8") == complete + '"E1","2018-01-02","C","D",2,2,,,0,,\n'
    assert resume_offset(path) == writer.rows_written == 2


def test_unterminated_only_row_leaves_empty_log(tmp_path: Path) -> None:
    path = tmp_path / "out.csv"
    path.write_text('"E0","2018', encoding="utf-8")
    writer = OutputWriter(path, fsync=False)
    assert writer.rows_written == 0
    assert path.read_text(encoding="utf-8") == ""
