"""
Soccerway (uk.soccerway.com) match source.
Index pages list a day's matches per country; the [UK] tab reloads the listing in place.
Match pages differ between English and Scottish leagues, so goals have two layouts.
"""
from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from shared.models.domain import CandidateRecord, GoalEvent
from shared.models.enums import TeamSide
from shared.utils.logging import get_logger

from enricher.sources.base import GoalLayout, MatchSource, RevealStep

logger = get_logger(__name__)

SOCCERWAY_BASE = "https://uk.soccerway.com"

# Fixture division code -> Soccerway path prefix
DIVISION_PATHS: dict[str, str] = {
    "E0": "england/premier-league",
    "E1": "england/championship",
    "E2": "england/league-one",
    "E3": "england/league-two",
    "EC": "england/conference",  # several suffixes, prefix match
    "SC0": "scotland/premier-league",
    "SC1": "scotland/first-division",
    "SC2": "scotland/second-division",
    "SC3": "scotland/third-division",
}

# Score shown for matches without a result link (unplayed / postponed)
UNPLAYED_SCORE = "999 - 999"

_DIVISION_IN_URL = re.compile(r"/matches/\d{4}/\d{2}/\d{2}/(.+?/.+?)/")
_LEADING_MINUTE = re.compile(r"\s*(\d+)")

UK_TAB = RevealStep(
    selector=".content-column .content .subnav li a",
    index=1,
    refresh_scope=".content-column .content",
)


def _text(el: Optional[Tag]) -> str:
    return el.get_text().strip() if el is not None else ""


def _minute(el: Tag) -> Optional[int]:
    m = _LEADING_MINUTE.match(el.get_text())
    return int(m.group(1)) if m else None


def _goal(home_minute: Optional[Tag], away_minute: Optional[Tag], score: str) -> Optional[GoalEvent]:
    minute_el = home_minute or away_minute
    if minute_el is None:
        return None
    minute = _minute(minute_el)
    if minute is None:
        return None
    team = TeamSide.HOME if home_minute is not None else TeamSide.AWAY
    return GoalEvent(minute=minute, team=team, score_after=score)


def parse_goals_events_table(soup: BeautifulSoup) -> list[GoalEvent]:
    """Scottish layout: one table row per goal, score in the second cell div."""
    goals: list[GoalEvent] = []
    for tr in soup.select("table.matches.events tr"):
        divs = tr.select("td div")
        if len(divs) < 2:
            continue
        goal = _goal(
            tr.select_one(".player-a .minute"),
            tr.select_one(".player-b .minute"),
            _text(divs[1]),
        )
        if goal:
            goals.append(goal)
    return goals


def parse_goals_scorer_list(soup: BeautifulSoup) -> list[GoalEvent]:
    """English layout: one list item per goal; home scorer comes first."""
    goals: list[GoalEvent] = []
    for li in soup.select("ul.scorer-info li"):
        goal = _goal(
            li.select_one(".scorer:first-child .minute"),
            li.select_one(".scorer:not(:first-child) .minute"),
            _text(li.select_one(".score")),
        )
        if goal:
            goals.append(goal)
    return goals


class SoccerwaySource(MatchSource):
    """Parses Soccerway match-date index pages and match detail pages."""

    def __init__(
        self,
        base_url: str = SOCCERWAY_BASE,
        division_paths: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._division_paths = dict(division_paths or DIVISION_PATHS)

    @property
    def source_name(self) -> str:
        return "soccerway"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def division_paths(self) -> Mapping[str, str]:
        return self._division_paths

    @property
    def reveal_step(self) -> Optional[RevealStep]:
        return UK_TAB

    def index_url(self, match_date: str) -> str:
        return f"{self._base_url}/matches/{match_date.replace('-', '/')}/"

    def parse_candidates(self, html: str, page_url: str) -> list[CandidateRecord]:
        soup = BeautifulSoup(html, "html.parser")
        candidates: list[CandidateRecord] = []
        for td in soup.select(".matches td.info-button"):
            tr = td.find_parent("tr")
            if tr is None:
                continue
            home_link = tr.select_one(".team-a a")
            away_link = tr.select_one(".team-b a")
            info_link = td.select_one("a[href]")
            if home_link is None or away_link is None or info_link is None:
                logger.debug("index_row_incomplete", page=page_url)
                continue
            url = urljoin(page_url, info_link["href"])
            div = _DIVISION_IN_URL.search(url)
            if not div:
                logger.debug("index_row_no_division", url=url)
                continue
            score_link = tr.select_one(".score a")
            candidates.append(CandidateRecord(
                home=home_link.get("title", "") or _text(home_link),
                away=away_link.get("title", "") or _text(away_link),
                score_text=_text(score_link) if score_link is not None else UNPLAYED_SCORE,
                division_path=div.group(1),
                detail_url=url,
            ))
        return candidates

    def parse_kickoff(self, soup: BeautifulSoup) -> Optional[str]:
        # Scottish pages: <dt>KO</dt><span>; English pages: <dt>Kick-off</dt><dd>
        for selector, label in ((".details span", "KO"), (".details dd", "Kick-off")):
            for el in soup.select(selector):
                label_el = el.find_previous_sibling()
                if label_el is not None and label_el.get_text() == label:
                    return _text(el)
        return None

    def goal_layouts(self) -> Sequence[GoalLayout]:
        return (parse_goals_events_table, parse_goals_scorer_list)
