"""
Pydantic v2 domain models shared across the fixture enricher.
Fixtures come from the input CSV; candidates and details come from source pages.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.models.enums import TeamSide


# ── Base ────────────────────────────────────────────────────────────────
class DomainModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ── Input ───────────────────────────────────────────────────────────────
class SourceRecord(FrozenModel):
    """One known fixture from the input list; list position is processing order."""
    division: str
    match_date: str
    home_team: str
    away_team: str
    home_goals: int
    away_goals: int

    @property
    def score_text(self) -> str:
        """Score as rendered on index pages, e.g. '2 - 1'."""
        return f"{self.home_goals} - {self.away_goals}"


# ── Discovered on source pages ──────────────────────────────────────────
class CandidateRecord(FrozenModel):
    """A match listed on an index page, not yet tied to any fixture."""
    home: str
    away: str
    score_text: str
    division_path: str
    detail_url: str


class MatchResult(FrozenModel):
    candidate: Optional[CandidateRecord] = None
    quality: float = Field(default=0.0, ge=0.0)

    @property
    def matched(self) -> bool:
        return self.candidate is not None


class GoalEvent(FrozenModel):
    minute: int
    team: TeamSide
    score_after: str

    def as_text(self) -> str:
        return f"{self.minute}:{self.team.value}:{self.score_after}"


class DetailRecord(DomainModel):
    kickoff: Optional[str] = None
    goals: list[GoalEvent] = Field(default_factory=list)

    def goals_text(self, delimiter: str = " / ") -> str:
        return delimiter.join(goal.as_text() for goal in self.goals)


NO_MATCH = MatchResult(candidate=None, quality=0.0)
