"""Shared fixtures: an in-memory viewport, recorded sleeps, and Soccerway-shaped HTML builders."""
from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from enricher.metrics import reset_metrics
from enricher.navigation import Viewport

BASE_URL = "https://uk.soccerway.com"


class FakeViewport(Viewport):
    """
    Serves HTML from dicts. A click on a URL listed in `revealed` swaps in that HTML and
    removes the loading overlay on the next loop turn, like the real listing refresh.
    """

    def __init__(
        self,
        name: str,
        pages: dict[str, str],
        revealed: Optional[dict[str, str]] = None,
        refresh_fires: bool = True,
        navigation_hangs: bool = False,
    ) -> None:
        super().__init__(name)
        self._pages = pages
        self._revealed = revealed or {}
        self._refresh_fires = refresh_fires
        self._navigation_hangs = navigation_hangs
        self._location = ""
        self._html = ""
        self._removal: Optional[asyncio.Event] = None
        self.navigations: list[str] = []
        self.clicks: list[tuple[str, int]] = []
        self.events: list[str] = []
        self.disarm_count = 0

    @property
    def location(self) -> str:
        return self._location

    @property
    def watch_armed(self) -> bool:
        return self._removal is not None

    async def navigate(self, url: str) -> None:
        self.navigations.append(url)
        if self._navigation_hangs:
            await asyncio.Event().wait()
        await asyncio.sleep(0)
        self._location = url
        self._html = self._pages[url]

    async def content(self) -> str:
        return self._html

    async def click(self, selector: str, index: int = 0) -> None:
        self.events.append("click")
        self.clicks.append((selector, index))
        if self._location in self._revealed:
            self._html = self._revealed[self._location]
        if self._refresh_fires and self._removal is not None:
            asyncio.get_running_loop().call_soon(self.insert_node)
            asyncio.get_running_loop().call_soon(self.remove_node)

    def insert_node(self) -> None:
        self.events.append("insert")

    def remove_node(self) -> None:
        self.events.append("remove")
        if self._removal is not None:
            self._removal.set()

    async def arm_removal_watch(self, scope_selector: str) -> None:
        self.events.append("arm")
        self._removal = asyncio.Event()

    async def wait_removal(self) -> None:
        assert self._removal is not None
        await self._removal.wait()
        # one-shot: observer disconnects on firing
        self._removal = None
        self.events.append("fired")

    async def disarm_removal_watch(self) -> None:
        self.disarm_count += 1
        self._removal = None


class RecordedSleep:
    """Stand-in for asyncio.sleep; optionally raises on the n-th call to simulate an abort."""

    def __init__(self, abort_on_call: Optional[int] = None) -> None:
        self.calls: list[float] = []
        self._abort_on_call = abort_on_call

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._abort_on_call is not None and len(self.calls) == self._abort_on_call:
            raise OperatorAbort()


class OperatorAbort(Exception):
    pass


# ── HTML builders ───────────────────────────────────────────────────────

def index_row(home: str, away: str, score: Optional[str], path: str) -> str:
    score_cell = f'<a href="{path}">{score}</a>' if score is not None else "-"
    return (
        "<tr>"
        f'<td class="team team-a"><a href="/teams/a/" title="{home}">{home[:8]}</a></td>'
        f'<td class="score-time score">{score_cell}</td>'
        f'<td class="team team-b"><a href="/teams/b/" title="{away}">{away[:8]}</a></td>'
        f'<td class="info-button button"><a href="{path}">More info</a></td>'
        "</tr>"
    )


def index_page(*rows: str) -> str:
    return (
        "<html><body><div class=\"content-column\"><div class=\"content\">"
        "<ul class=\"subnav\"><li><a href=\"#\">All</a></li><li><a href=\"#\">UK</a></li></ul>"
        f"<table class=\"matches\">{''.join(rows)}</table>"
        "</div></div></body></html>"
    )


def england_detail_page(kickoff: str, goals: list[tuple[int, str, str]]) -> str:
    items = []
    for minute, team, score in goals:
        scorer = f'<a href="/players/x/">Player</a> <span class="minute">{minute}\'</span>'
        home = scorer if team == "home" else ""
        away = scorer if team == "away" else ""
        items.append(
            f'<li><span class="scorer">{home}</span><span class="score">{score}</span>'
            f'<span class="scorer">{away}</span></li>'
        )
    return (
        "<html><body><div class=\"details\"><dl>"
        "<dt>Date</dt><dd>1 January 2018</dd>"
        f"<dt>Kick-off</dt><dd> {kickoff} </dd>"
        "</dl></div>"
        f"<ul class=\"scorer-info\">{''.join(items)}</ul>"
        "</body></html>"
    )


def scotland_detail_page(kickoff: str, goals: list[tuple[int, str, str]]) -> str:
    rows = []
    for minute, team, score in goals:
        cell = f'<span class="minute">{minute}\'</span>'
        home = cell if team == "home" else ""
        away = cell if team == "away" else ""
        rows.append(
            f'<tr><td class="player player-a">{home}</td>'
            f'<td class="event-icon"><div>icon</div><div>{score}</div></td>'
            f'<td class="player player-b">{away}</td></tr>'
        )
    return (
        "<html><body><div class=\"details\"><dl>"
        f"<dt>KO</dt><span>{kickoff}</span>"
        "</dl></div>"
        f"<table class=\"matches events\">{''.join(rows)}</table>"
        "</body></html>"
    )


@pytest.fixture(autouse=True)
def _reset_metrics() -> None:
    reset_metrics()
