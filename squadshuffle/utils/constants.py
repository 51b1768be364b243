"""
Constants for the SquadShuffle application.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "SquadShuffle"

# Team size configuration (players per side)
SUPPORTED_TEAM_SIZES = [4, 5, 7, 11]
DEFAULT_TEAM_SIZE = 5

# Goalkeeper advice only applies to formats with at least this many players per side
GOALKEEPER_ADVICE_MIN_TEAM_SIZE = 5
MIN_GOALKEEPERS = 2

# Team display identity, assigned by team index
TEAM_NAMES = ["Team Alpha", "Team Beta", "Team Gamma", "Team Delta"]
TEAM_COLORS = ["#28a745", "#007bff", "#fd7e14", "#dc3545"]

# Balancer tuning
MAX_BALANCE_ITERATIONS = 50
BALANCED_SKILL_DIFF = 0.5
MIN_SWAP_IMPROVEMENT = 0.1

# Match timer
MATCH_DURATIONS = {
    "5 Minutes": 5 * 60,
    "7 Minutes": 7 * 60,
    "10 Minutes": 10 * 60,
    "90 Minutes": 90 * 60,
}
DEFAULT_MATCH_DURATION_SECONDS = 10 * 60

# Countdown colors
TIME_COLOR_NORMAL = "#28a745"
TIME_COLOR_WARNING = "#fd7e14"   # last five minutes
TIME_COLOR_CRITICAL = "#dc3545"  # last minute
TIME_WARNING_SECONDS = 300
TIME_CRITICAL_SECONDS = 60

UNKNOWN_SCORER = "Unknown"

# Storage
DEFAULT_DATA_DIR = "data"

# Web server
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
