from enricher.sources.base import MatchSource, RevealStep
from enricher.sources.soccerway import DIVISION_PATHS, SoccerwaySource

__all__ = [
    "DIVISION_PATHS",
    "MatchSource",
    "RevealStep",
    "SoccerwaySource",
]
