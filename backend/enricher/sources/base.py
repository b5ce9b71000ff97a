"""
Match source interface: URLs, listing interaction, and page parsing for one results site.
Parsers only see page HTML; loading and waiting belong to the navigation layer.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence

from bs4 import BeautifulSoup

from shared.models.domain import CandidateRecord, DetailRecord, GoalEvent
from shared.utils.logging import get_logger

from enricher.metrics import record_layout_fallback

logger = get_logger(__name__)

GoalLayout = Callable[[BeautifulSoup], list[GoalEvent]]


@dataclass(frozen=True)
class RevealStep:
    """Click that swaps an index page's listing in place, and the subtree that refreshes."""
    selector: str
    index: int
    refresh_scope: str


class MatchSource(ABC):
    """Base for results-site adapters."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        pass

    @property
    @abstractmethod
    def base_url(self) -> str:
        pass

    @property
    @abstractmethod
    def division_paths(self) -> Mapping[str, str]:
        """Fixture division code -> site path prefix."""
        pass

    @property
    def reveal_step(self) -> Optional[RevealStep]:
        """Interaction needed after loading an index page, or None."""
        return None

    @abstractmethod
    def index_url(self, match_date: str) -> str:
        """URL of the page listing all matches on match_date (YYYY-MM-DD)."""
        pass

    @abstractmethod
    def parse_candidates(self, html: str, page_url: str) -> list[CandidateRecord]:
        pass

    @abstractmethod
    def parse_kickoff(self, soup: BeautifulSoup) -> Optional[str]:
        pass

    @abstractmethod
    def goal_layouts(self) -> Sequence[GoalLayout]:
        """Goal extractors in order of preference; later ones are fallbacks."""
        pass

    def parse_detail(self, html: str) -> DetailRecord:
        """Kick-off and goals; each goal layout is tried until one yields events."""
        soup = BeautifulSoup(html, "html.parser")
        kickoff = self.parse_kickoff(soup)
        goals: list[GoalEvent] = []
        for position, layout in enumerate(self.goal_layouts()):
            goals = layout(soup)
            if goals:
                if position > 0:
                    record_layout_fallback()
                    logger.debug("goal_layout_fallback", source=self.source_name, layout=position)
                break
        return DetailRecord(kickoff=kickoff, goals=goals)
