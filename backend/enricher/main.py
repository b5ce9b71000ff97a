"""
Enricher entrypoint.
Launches Chromium with an index tab and a match tab and runs the enrichment loop once;
SIGINT/SIGTERM abort cleanly and the next run resumes from the output log.
"""
from __future__ import annotations

import asyncio
import signal
import sys
from pathlib import Path

# Ensure backend root is on path when run as python -m enricher.main
_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

from playwright.async_api import async_playwright

from shared.utils.logging import get_logger, setup_logging

from enricher.config import get_enricher_settings
from enricher.engine import EnrichmentContext, FixtureEnrichmentEngine
from enricher.fixtures import load_fixtures
from enricher.navigation import NavigationController, PlaywrightViewport
from enricher.output import OutputWriter
from enricher.rate_limiter import RandomDelay
from enricher.sources.soccerway import SoccerwaySource

logger = get_logger(__name__)


async def main() -> None:
    settings = get_enricher_settings()
    setup_logging("enricher", output_path=settings.output_path)

    try:
        fixtures = await load_fixtures(settings.input_source)
    except Exception as e:
        logger.exception("fixtures_load_failed", source=settings.input_source, error=str(e))
        raise

    writer = OutputWriter(settings.output_path)
    if writer.rows_written:
        logger.info("resuming", rows_written=writer.rows_written, last_row=writer.tail(1))
    if writer.rows_written >= len(fixtures):
        logger.info("nothing_to_do", rows_written=writer.rows_written, fixtures=len(fixtures))
        return

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=settings.headless)
        context = await browser.new_context(user_agent=settings.user_agent)
        index_page = await context.new_page()
        detail_page = await context.new_page()

        ctx = EnrichmentContext(
            index_viewport=PlaywrightViewport("index", index_page, settings.navigation_timeout_s),
            detail_viewport=PlaywrightViewport("detail", detail_page, settings.navigation_timeout_s),
            navigator=NavigationController(settings.navigation_timeout_s),
            writer=writer,
            source=SoccerwaySource(settings.base_url),
            delay=RandomDelay(),
        )
        engine = FixtureEnrichmentEngine(ctx, settings)
        loop_task = asyncio.create_task(engine.run(fixtures))

        def on_signal() -> None:
            logger.warning("abort_requested", rows_written=writer.rows_written)
            loop_task.cancel()

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                asyncio.get_running_loop().add_signal_handler(sig, on_signal)
            except NotImplementedError:
                pass

        try:
            await loop_task
        except asyncio.CancelledError:
            logger.info("enricher_aborted", rows_written=writer.rows_written)
        finally:
            await context.close()
            await browser.close()

    logger.info("enricher_stopped", rows_written=writer.rows_written)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
