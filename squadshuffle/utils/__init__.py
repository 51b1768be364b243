"""
Utilities package for SquadShuffle.

This package contains utility functions and constants used throughout the application.
"""
from .time_utils import fmt_mmss, now_ts, now_iso
from .constants import (
    APP_TITLE, SUPPORTED_TEAM_SIZES, DEFAULT_TEAM_SIZE, TEAM_NAMES, TEAM_COLORS,
    MATCH_DURATIONS, DEFAULT_MATCH_DURATION_SECONDS, DEFAULT_DATA_DIR
)

__all__ = [
    "fmt_mmss", "now_ts", "now_iso", "APP_TITLE", "SUPPORTED_TEAM_SIZES",
    "DEFAULT_TEAM_SIZE", "TEAM_NAMES", "TEAM_COLORS", "MATCH_DURATIONS",
    "DEFAULT_MATCH_DURATION_SECONDS", "DEFAULT_DATA_DIR"
]
