"""Countdown match timer for the SquadShuffle application."""

import logging
from typing import Dict, Optional

from ..models import MatchState, MatchStateError
from ..utils import fmt_mmss, now_ts
from ..utils.constants import (
    TIME_COLOR_CRITICAL, TIME_COLOR_NORMAL, TIME_COLOR_WARNING,
    TIME_CRITICAL_SECONDS, TIME_WARNING_SECONDS
)

logger = logging.getLogger(__name__)


class TimerService:
    """Service for running the match countdown from wall-clock timestamps."""

    def __init__(self, match_state: MatchState):
        self.match_state = match_state

    # ------------------------------------------------------------------
    # Configuration helpers
    # ------------------------------------------------------------------
    def configure_duration(self, duration_seconds: int) -> None:
        """Set the match length.

        Raises:
            MatchStateError: If the match is in progress
            ValueError: If the duration is not positive
        """

        state = self.match_state
        if state.match_started and not state.match_ended:
            raise MatchStateError("Cannot change the duration while a match is in progress")

        seconds = int(duration_seconds)
        if seconds <= 0:
            raise ValueError("Match duration must be greater than zero")

        state.duration_seconds = seconds
        state.elapsed_seconds = 0
        state.run_start_ts = None

    # ------------------------------------------------------------------
    # Core timer controls
    # ------------------------------------------------------------------
    def start_match(self) -> None:
        """Start the countdown from the full duration."""

        state = self.match_state
        if not state.teams:
            raise MatchStateError("Please create teams first!")

        state.elapsed_seconds = 0
        state.run_start_ts = now_ts()
        state.match_started = True
        state.match_ended = False
        state.paused = False
        logger.info("Match started (%s)", fmt_mmss(state.duration_seconds))

    def pause_match(self) -> None:
        """Pause the countdown and bank the elapsed time."""

        state = self.match_state
        if not state.is_running:
            return

        self._bank_running_segment()
        state.paused = True

    def resume_match(self) -> None:
        """Resume a paused countdown without resetting it."""

        state = self.match_state
        if not state.match_started:
            self.start_match()
            return

        if state.match_ended or not state.paused:
            return

        state.paused = False
        state.run_start_ts = now_ts()

    def stop_match(self) -> None:
        """End the match early."""

        state = self.match_state
        if not state.match_started or state.match_ended:
            return

        self._end_match()
        logger.info("Match stopped at %s", fmt_mmss(state.elapsed_seconds))

    def reset_match(self) -> None:
        """Reset the timer and scores while keeping the teams."""

        state = self.match_state
        state.match_started = False
        state.match_ended = False
        state.paused = False
        state.elapsed_seconds = 0
        state.run_start_ts = None
        state.reset_scores()

    def check_expired(self) -> bool:
        """End the match once the countdown reaches zero.

        Returns:
            True if this call ended the match
        """

        state = self.match_state
        if not state.match_started or state.match_ended:
            return False

        if self.get_remaining_seconds() > 0:
            return False

        self._end_match()
        logger.info("Match time expired")
        return True

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    def get_elapsed_seconds(self) -> int:
        """Seconds played so far, never more than the duration."""

        state = self.match_state
        elapsed = state.elapsed_seconds
        if state.is_running and state.run_start_ts is not None:
            elapsed += int(now_ts() - state.run_start_ts)
        return max(0, min(elapsed, state.duration_seconds))

    def get_remaining_seconds(self) -> int:
        state = self.match_state
        if not state.match_started:
            return state.duration_seconds
        return max(0, state.duration_seconds - self.get_elapsed_seconds())

    def get_time_color(self, remaining_seconds: Optional[int] = None) -> str:
        """Countdown color: red in the last minute, orange in the last five."""

        remaining = self.get_remaining_seconds() if remaining_seconds is None else remaining_seconds
        if remaining <= TIME_CRITICAL_SECONDS:
            return TIME_COLOR_CRITICAL
        if remaining <= TIME_WARNING_SECONDS:
            return TIME_COLOR_WARNING
        return TIME_COLOR_NORMAL

    def get_timer_status(self) -> Dict[str, object]:
        """Return the current timer state for display purposes."""

        state = self.match_state
        remaining = self.get_remaining_seconds()
        return {
            "duration_seconds": state.duration_seconds,
            "elapsed_seconds": self.get_elapsed_seconds(),
            "remaining_seconds": remaining,
            "remaining_display": fmt_mmss(remaining),
            "time_color": self.get_time_color(remaining),
            "match_started": state.match_started,
            "match_ended": state.match_ended,
            "paused": state.paused,
            "running": state.is_running,
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _bank_running_segment(self) -> None:
        state = self.match_state
        state.elapsed_seconds = self.get_elapsed_seconds()
        state.run_start_ts = None

    def _end_match(self) -> None:
        state = self.match_state
        self._bank_running_segment()
        state.match_ended = True
        state.paused = False
