"""
Fixture list loading.
The input is a simple CSV: one header row, no quoting, one fixture per line.
It may live on disk or be served over HTTP.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from shared.models.domain import SourceRecord
from shared.utils.logging import get_logger

from enricher.errors import FixtureFormatError

logger = get_logger(__name__)

FIELD_SEPARATOR = ","

# Input column (lower-cased header) -> SourceRecord field
COLUMNS: dict[str, str] = {
    "div": "division",
    "matchdate": "match_date",
    "hometeam": "home_team",
    "awayteam": "away_team",
    "homegoals": "home_goals",
    "awaygoals": "away_goals",
}


def parse_simple_csv(text: str) -> list[dict[str, str]]:
    """
    Split unquoted CSV into dicts keyed by lower-cased header names.
    Blank lines are skipped; missing trailing fields come back as ''.
    """
    lines = [line.rstrip("\r") for line in text.split("\n")]
    lines = [line for line in lines if line.strip()]
    if not lines:
        return []
    headers = [h.strip().lower() for h in lines[0].split(FIELD_SEPARATOR)]
    rows: list[dict[str, str]] = []
    for line in lines[1:]:
        fields = line.split(FIELD_SEPARATOR)
        rows.append({h: (fields[i].strip() if i < len(fields) else "") for i, h in enumerate(headers)})
    return rows


def to_source_records(rows: list[dict[str, str]]) -> list[SourceRecord]:
    if rows:
        missing = [c for c in COLUMNS if c not in rows[0]]
        if missing:
            raise FixtureFormatError(f"missing columns: {', '.join(missing)}")
    records: list[SourceRecord] = []
    for i, row in enumerate(rows):
        data: dict[str, Any] = {field: row[column] for column, field in COLUMNS.items()}
        try:
            records.append(SourceRecord(**data))
        except ValidationError as e:
            # header is line 1
            raise FixtureFormatError(str(e), line_number=i + 2) from e
    return records


async def fetch_text(source: str, timeout_s: float = 30.0) -> str:
    if source.startswith(("http://", "https://")):
        async with httpx.AsyncClient(timeout=timeout_s, follow_redirects=True) as client:
            resp = await client.get(source)
            resp.raise_for_status()
            return resp.text
    return Path(source).read_text(encoding="utf-8")


async def load_fixtures(source: str, timeout_s: float = 30.0) -> list[SourceRecord]:
    """Load and validate the fixture list from a path or URL."""
    text = await fetch_text(source, timeout_s=timeout_s)
    records = to_source_records(parse_simple_csv(text))
    logger.info("fixtures_loaded", source=source, count=len(records))
    return records
