"""
Enricher metrics: fixtures processed, match outcomes, navigations, layout fallbacks, latency.
In-memory counters, reset on restart; a summary is logged when a run ends.
"""
from __future__ import annotations

from typing import Any, Dict

from shared.utils.logging import get_logger

logger = get_logger(__name__)

_metrics: Dict[str, Any] = {
    "fixture_latency_seconds": [],
    "fixtures_processed": 0,
    "matched_count": 0,
    "unmatched_count": 0,
    "navigation_count": 0,
    "navigation_reuse_count": 0,
    "layout_fallback_count": 0,
}


def record_fixture_latency(seconds: float) -> None:
    _metrics["fixture_latency_seconds"].append(seconds)
    if len(_metrics["fixture_latency_seconds"]) > 1000:
        _metrics["fixture_latency_seconds"] = _metrics["fixture_latency_seconds"][-500:]


def record_fixture(matched: bool) -> None:
    _metrics["fixtures_processed"] += 1
    if matched:
        _metrics["matched_count"] += 1
    else:
        _metrics["unmatched_count"] += 1


def record_navigation() -> None:
    _metrics["navigation_count"] += 1


def record_navigation_reuse() -> None:
    _metrics["navigation_reuse_count"] += 1


def record_layout_fallback() -> None:
    _metrics["layout_fallback_count"] += 1


def get_metrics() -> Dict[str, Any]:
    lat = _metrics["fixture_latency_seconds"]
    avg_lat = sum(lat) / len(lat) if lat else 0
    return {
        "fixture_latency_avg_seconds": round(avg_lat, 4),
        "fixture_latency_samples": len(lat),
        "fixtures_processed": _metrics["fixtures_processed"],
        "matched_count": _metrics["matched_count"],
        "unmatched_count": _metrics["unmatched_count"],
        "navigation_count": _metrics["navigation_count"],
        "navigation_reuse_count": _metrics["navigation_reuse_count"],
        "layout_fallback_count": _metrics["layout_fallback_count"],
    }


def reset_metrics() -> None:
    """Zero all counters (used between runs in one process, e.g. tests)."""
    _metrics["fixture_latency_seconds"] = []
    for key in list(_metrics):
        if key != "fixture_latency_seconds":
            _metrics[key] = 0


def log_summary() -> None:
    logger.info("enrichment_summary", **get_metrics())
