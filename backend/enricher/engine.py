"""
Fixture Enrichment Engine.
Walks the fixture list from the checkpoint: load the date's index page -> match -> load the
match page -> append a row -> pause. One fixture in flight; the row append commits it.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional, Sequence

import structlog

from shared.models.domain import DetailRecord, MatchResult, SourceRecord
from shared.utils.logging import get_logger

from enricher.config import EnricherSettings, get_enricher_settings
from enricher.matcher import match
from enricher.metrics import log_summary, record_fixture, record_fixture_latency
from enricher.navigation import NavigationController, Viewport
from enricher.output import OutputWriter
from enricher.rate_limiter import RandomDelay
from enricher.sources.base import MatchSource

logger = get_logger(__name__)

GOALS_DELIMITER = " / "
QUALITY_DECIMALS = 3


@dataclass
class EnrichmentContext:
    """Everything a run touches. Only the writer appends; only the controller repoints viewports."""
    index_viewport: Viewport
    detail_viewport: Viewport
    navigator: NavigationController
    writer: OutputWriter
    source: MatchSource
    delay: RandomDelay


def output_values(
    fixture: SourceRecord,
    result: MatchResult,
    detail: Optional[DetailRecord],
) -> tuple:
    """Column order: div, date, home, away, goals x2, kick-off, goal list, quality, matched names."""
    matched = result.candidate
    return (
        fixture.division,
        fixture.match_date,
        fixture.home_team,
        fixture.away_team,
        fixture.home_goals,
        fixture.away_goals,
        detail.kickoff if detail else None,
        detail.goals_text(GOALS_DELIMITER) if detail else None,
        round(result.quality, QUALITY_DECIMALS),
        matched.home if matched else None,
        matched.away if matched else None,
    )


class FixtureEnrichmentEngine:
    """Runs the enrichment loop over a fixture list, resuming from the output log."""

    def __init__(
        self,
        context: EnrichmentContext,
        settings: Optional[EnricherSettings] = None,
    ) -> None:
        self._ctx = context
        self._settings = settings or get_enricher_settings()

    async def load_index(self, fixture: SourceRecord) -> None:
        """Show the fixture's date listing in the index viewport, reusing it when already there."""
        ctx = self._ctx
        url = ctx.source.index_url(fixture.match_date)
        navigated = await ctx.navigator.ensure_loaded(ctx.index_viewport, url)
        if not navigated:
            return
        await ctx.delay.delay_between(*self._settings.index_delay)
        step = ctx.source.reveal_step
        if step is None:
            return
        logger.info("index_reveal", selector=step.selector, index=step.index)

        async def click() -> None:
            await ctx.index_viewport.click(step.selector, step.index)

        await ctx.navigator.await_content_refresh(ctx.index_viewport, step.refresh_scope, click)

    async def find_match(self, fixture: SourceRecord) -> MatchResult:
        ctx = self._ctx
        html = await ctx.index_viewport.content()
        candidates = ctx.source.parse_candidates(html, ctx.index_viewport.location)
        result = match(fixture, candidates, ctx.source.division_paths)
        logger.info(
            "fixture_match",
            candidates=len(candidates),
            matched=result.matched,
            quality=round(result.quality, QUALITY_DECIMALS),
            home=result.candidate.home if result.candidate else None,
            away=result.candidate.away if result.candidate else None,
        )
        return result

    async def load_detail(self, result: MatchResult) -> DetailRecord:
        ctx = self._ctx
        await ctx.delay.delay_between(*self._settings.detail_delay)
        await ctx.navigator.ensure_loaded(ctx.detail_viewport, result.candidate.detail_url)
        detail = ctx.source.parse_detail(await ctx.detail_viewport.content())
        logger.info("fixture_detail", kickoff=detail.kickoff, goals=len(detail.goals))
        return detail

    async def process_one(self, fixture: SourceRecord) -> MatchResult:
        """Look up one fixture and append its row. Returns the match outcome."""
        await self.load_index(fixture)
        result = await self.find_match(fixture)
        detail = await self.load_detail(result) if result.matched else None
        self._ctx.writer.append_row(*output_values(fixture, result, detail))
        return result

    async def run(self, fixtures: Sequence[SourceRecord]) -> int:
        """
        Process fixtures from the checkpoint to the end. Returns how many were processed.
        Cancellation stops before the next commit; the interrupted fixture is redone next run.
        """
        writer = self._ctx.writer
        start = writer.rows_written
        if start > len(fixtures):
            logger.warning("output_longer_than_input", rows=start, fixtures=len(fixtures))
        logger.info("enrichment_started", resume_at=start, total=len(fixtures))

        processed = 0
        try:
            for csv_index in range(start, len(fixtures)):
                fixture = fixtures[csv_index]
                structlog.contextvars.bind_contextvars(csv_index=csv_index)
                logger.info(
                    "fixture_lookup",
                    division=fixture.division,
                    date=fixture.match_date,
                    home=fixture.home_team,
                    away=fixture.away_team,
                    score=fixture.score_text,
                )
                started = time.monotonic()
                result = await self.process_one(fixture)
                record_fixture(result.matched)
                record_fixture_latency(time.monotonic() - started)
                processed += 1
                await self._ctx.delay.delay_between(*self._settings.fixture_delay)
        finally:
            structlog.contextvars.unbind_contextvars("csv_index")
            log_summary()

        logger.info("enrichment_finished", processed=processed, rows=writer.rows_written)
        return processed
