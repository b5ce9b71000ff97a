"""Exceptions raised by the enricher. Recoverable outcomes (no match, layout fallback) are not errors."""
from __future__ import annotations


class EnricherError(Exception):
    """Base class for enricher failures."""


class FixtureFormatError(EnricherError):
    """Input fixture list is missing a column or holds a non-numeric goal count."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class NavigationTimeout(EnricherError):
    """A page load or content refresh did not complete within the configured timeout."""

    def __init__(self, url: str, timeout_s: float) -> None:
        self.url = url
        self.timeout_s = timeout_s
        super().__init__(f"timed out after {timeout_s}s waiting for {url}")
