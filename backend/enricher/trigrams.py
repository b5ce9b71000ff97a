"""
Trigram shingling and overlap scoring for fuzzy team-name comparison.

Home and away names are normalized separately and joined with a two-space
separator before shingling, so shingles spanning the join contribute as well.
Normalization never sees the separator, so it is not collapsed. The two names
are scored as one string, not as independent home/away scores.
"""
from __future__ import annotations

import re
from collections import Counter

TRIGRAM_LENGTH = 3
NAME_SEPARATOR = "  "

_WHITESPACE = re.compile(r"\s+")

TrigramSet = Counter


def normalize(text: str) -> str:
    """Case-fold and collapse whitespace runs to a single space."""
    return _WHITESPACE.sub(" ", (text or "").casefold()).strip()


def _shingle(norm: str) -> TrigramSet:
    if not norm:
        return Counter()
    if len(norm) < TRIGRAM_LENGTH:
        return Counter([norm])
    return Counter(norm[i:i + TRIGRAM_LENGTH] for i in range(len(norm) - TRIGRAM_LENGTH + 1))


def to_trigrams(text: str) -> TrigramSet:
    """
    Multiset of every length-3 substring of the normalized text (stride 1).
    Text shorter than three characters is its own single shingle; empty text gives an empty set.
    """
    return _shingle(normalize(text))


def joined_trigrams(home: str, away: str) -> TrigramSet:
    """Shingles of 'home  away' with each name normalized on its own side of the separator."""
    home_norm, away_norm = normalize(home), normalize(away)
    if not home_norm or not away_norm:
        return _shingle(home_norm or away_norm)
    return _shingle(f"{home_norm}{NAME_SEPARATOR}{away_norm}")


def similarity(a: TrigramSet, b: TrigramSet) -> float:
    """
    Multiset Jaccard: shared shingle count over combined shingle count (min / max per shingle).
    1.0 for identical non-empty sets, 0.0 when nothing is shared or either side is empty.
    """
    if not a or not b:
        return 0.0
    shared = sum((a & b).values())
    if not shared:
        return 0.0
    return shared / sum((a | b).values())
