"""
Record matching: resolve which index-page candidate is a given fixture.
Exact filter on score and division, then trigram ranking on the joined team names.
"""
from __future__ import annotations

from typing import Iterable, Mapping

from shared.models.domain import NO_MATCH, CandidateRecord, MatchResult, SourceRecord
from shared.utils.logging import get_logger

from enricher.trigrams import joined_trigrams, similarity

logger = get_logger(__name__)


def _division_matches(candidate: CandidateRecord, prefix: str) -> bool:
    # Some divisions (e.g. the conference) appear under several path suffixes
    return candidate.division_path.startswith(prefix)


def filter_candidates(
    source: SourceRecord,
    candidates: Iterable[CandidateRecord],
    division_paths: Mapping[str, str],
) -> list[CandidateRecord]:
    """Keep candidates with the fixture's exact score and a division path under its mapped prefix."""
    prefix = division_paths.get(source.division)
    if not prefix:
        logger.warning("division_unmapped", division=source.division)
        return []
    score = source.score_text
    return [c for c in candidates if c.score_text == score and _division_matches(c, prefix)]


def match(
    source: SourceRecord,
    candidates: Iterable[CandidateRecord],
    division_paths: Mapping[str, str],
) -> MatchResult:
    """
    Pick the surviving candidate with the highest name similarity.

    Ties keep the first candidate seen. A fixture with no survivors, or whose survivors
    share no trigrams with it, is a no-match (candidate None, quality 0).
    """
    survivors = filter_candidates(source, candidates, division_paths)
    logger.debug("candidates_filtered", survivors=len(survivors), score=source.score_text)
    if not survivors:
        return NO_MATCH

    source_trigrams = joined_trigrams(source.home_team, source.away_team)
    best: CandidateRecord | None = None
    best_quality = 0.0
    for candidate in survivors:
        quality = similarity(joined_trigrams(candidate.home, candidate.away), source_trigrams)
        if quality > best_quality:
            best, best_quality = candidate, quality

    if best is None:
        return NO_MATCH
    return MatchResult(candidate=best, quality=best_quality)
