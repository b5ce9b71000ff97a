"""Domain enumerations for the fixture enricher."""
from __future__ import annotations

from enum import Enum


class TeamSide(str, Enum):
    HOME = "home"
    AWAY = "away"


class ViewportState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
