"""
Team formation engine for the SquadShuffle application.

Splits a pool of rated players into evenly sized teams:

    validate -> shuffle -> partition -> balance (two teams only) -> name/color

Every function here is pure apart from consuming entropy from the random
source, which callers may inject to make shuffles reproducible.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple, TypeVar, Union

from ..models.player import Player, Position
from ..models.team import (
    FormationResult, Team, TeamBalance, TeamStats, ValidationResult, ValidationWarning
)
from ..utils.constants import (
    BALANCED_SKILL_DIFF, GOALKEEPER_ADVICE_MIN_TEAM_SIZE, MAX_BALANCE_ITERATIONS,
    MIN_GOALKEEPERS, MIN_SWAP_IMPROVEMENT, TEAM_COLORS, TEAM_NAMES
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

GOALKEEPER_SHORTAGE = "GOALKEEPER_SHORTAGE"


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1), e.g. ``random.Random``."""

    def random(self) -> float:
        ...


class InsufficientPlayersError(Exception):
    """Raised when the pool cannot fill two full teams."""

    def __init__(self, team_size: int, available: int):
        self.team_size = team_size
        self.available = available
        self.required = team_size * 2
        self.shortfall = self.required - available
        super().__init__(
            f"Need at least {self.required} players for {team_size}v{team_size} match"
        )


@dataclass
class PartitionResult:
    """Contiguous team slices plus the leftover substitutes."""
    team_slices: List[List[Player]]
    substitutes: List[Player]


def _check_team_size(team_size: int) -> None:
    if team_size < 1:
        raise ValueError(f"Team size must be at least 1, got {team_size}")


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------
def count_positions(players: Sequence[Player]) -> dict:
    """Count players per position; every position is present in the result."""
    counts = {position: 0 for position in Position}
    for player in players:
        counts[player.position] += 1
    return counts


def validate_team_formation(players: Sequence[Player], team_size: int) -> ValidationResult:
    """
    Check whether ``players`` can be split into at least two teams of ``team_size``.

    Args:
        players: Candidate pool
        team_size: Players per team

    Returns:
        ValidationResult; warnings are advisory and never affect ``valid``

    Raises:
        ValueError: If team_size is less than 1
    """
    _check_team_size(team_size)
    total_players = len(players)
    min_players_needed = team_size * 2

    if total_players < min_players_needed:
        shortfall = min_players_needed - total_players
        return ValidationResult(
            valid=False,
            message=(
                f"Need at least {min_players_needed} players for "
                f"{team_size}v{team_size}. You have {total_players}."
            ),
            suggestion=f"Add {shortfall} more players.",
            shortfall=shortfall,
        )

    warnings: List[ValidationWarning] = []
    positions = count_positions(players)
    if (positions[Position.GOALKEEPER] < MIN_GOALKEEPERS
            and team_size >= GOALKEEPER_ADVICE_MIN_TEAM_SIZE):
        warnings.append(ValidationWarning(
            code=GOALKEEPER_SHORTAGE,
            message="Consider adding more goalkeepers for better team balance.",
        ))

    max_teams = total_players // team_size
    substitute_count = total_players % team_size
    return ValidationResult(
        valid=True,
        message=f"Can form {max_teams} teams with {substitute_count} substitutes.",
        max_teams=max_teams,
        substitute_count=substitute_count,
        warnings=warnings,
    )


# ---------------------------------------------------------------------------
# Randomizer
# ---------------------------------------------------------------------------
def fisher_yates_shuffle(items: Sequence[T], rng: Optional[RandomSource] = None) -> List[T]:
    """
    Return a uniformly random permutation of ``items``.

    The input is never mutated; the shuffle runs over a working copy.
    """
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


# ---------------------------------------------------------------------------
# Partitioner
# ---------------------------------------------------------------------------
def partition_players(shuffled_players: Sequence[Player], team_size: int) -> PartitionResult:
    """Slice the shuffled pool into full teams; the remainder become substitutes."""
    _check_team_size(team_size)
    total_teams = len(shuffled_players) // team_size
    players_needed = total_teams * team_size

    team_slices = [
        list(shuffled_players[k * team_size:(k + 1) * team_size])
        for k in range(total_teams)
    ]
    substitutes = list(shuffled_players[players_needed:])
    return PartitionResult(team_slices=team_slices, substitutes=substitutes)


# ---------------------------------------------------------------------------
# Balancer
# ---------------------------------------------------------------------------
def calculate_team_balance(team: Sequence[Player]) -> TeamBalance:
    """Position counts plus total and average skill for a team."""
    total_skill = sum(p.skill_level for p in team)
    average_skill = total_skill / len(team) if team else 0.0
    return TeamBalance(
        position_counts=count_positions(team),
        average_skill=average_skill,
        total_skill=total_skill,
    )


def _skill_diff(team_a: Sequence[Player], team_b: Sequence[Player]) -> float:
    return abs(
        calculate_team_balance(team_a).average_skill
        - calculate_team_balance(team_b).average_skill
    )


def _find_best_swap(
    team_a: List[Player], team_b: List[Player], skill_diff: float
) -> Tuple[Optional[Tuple[int, int]], float]:
    best_swap = None
    best_improvement = 0.0

    for i in range(len(team_a)):
        for j in range(len(team_b)):
            temp_a = list(team_a)
            temp_b = list(team_b)
            temp_a[i], temp_b[j] = temp_b[j], temp_a[i]

            improvement = skill_diff - _skill_diff(temp_a, temp_b)
            if improvement > best_improvement:
                best_improvement = improvement
                best_swap = (i, j)

    return best_swap, best_improvement


def balance_teams(
    team_a: Sequence[Player],
    team_b: Sequence[Player],
    max_iterations: int = MAX_BALANCE_ITERATIONS,
) -> Tuple[List[Player], List[Player]]:
    """
    Greedy best-swap hill climb on average skill between two teams.

    Each iteration commits the single swap that most reduces the difference in
    average skill. Stops when the teams are within BALANCED_SKILL_DIFF, when no
    swap improves by more than MIN_SWAP_IMPROVEMENT, or after max_iterations.
    Positions are not considered.

    Returns:
        New (team_a, team_b) lists; the inputs are left untouched
    """
    team_a = list(team_a)
    team_b = list(team_b)
    iterations = 0

    while iterations < max_iterations:
        skill_diff = _skill_diff(team_a, team_b)
        if skill_diff < BALANCED_SKILL_DIFF:
            break

        best_swap, best_improvement = _find_best_swap(team_a, team_b, skill_diff)
        if best_swap is None or best_improvement <= MIN_SWAP_IMPROVEMENT:
            break

        i, j = best_swap
        logger.debug(
            "Balance swap %d: %s <-> %s (skill diff %.2f -> %.2f)",
            iterations + 1, team_a[i].id, team_b[j].id, skill_diff, skill_diff - best_improvement,
        )
        team_a[i], team_b[j] = team_b[j], team_a[i]
        iterations += 1

    return team_a, team_b


# ---------------------------------------------------------------------------
# Namer / colorer
# ---------------------------------------------------------------------------
def team_name_for_index(index: int) -> str:
    if 0 <= index < len(TEAM_NAMES):
        return TEAM_NAMES[index]
    return f"Team {index + 1}"


def team_color_for_index(index: int) -> str:
    return TEAM_COLORS[index % len(TEAM_COLORS)]


def name_and_color_teams(team_slices: Sequence[Sequence[Player]]) -> List[Team]:
    """Wrap each slice in a Team named and colored by its index."""
    return [
        Team(
            name=team_name_for_index(index),
            color=team_color_for_index(index),
            players=list(players),
        )
        for index, players in enumerate(team_slices)
    ]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------
def shuffle_into_teams(
    players: Sequence[Player],
    team_size: int,
    rng: Optional[RandomSource] = None,
) -> FormationResult:
    """
    Shuffle players into named teams, leaving extras as substitutes.

    Args:
        players: Candidate pool
        team_size: Players per team
        rng: Random source for the shuffle (defaults to a fresh ``random.Random``)

    Returns:
        FormationResult with every input player in exactly one team or the
        substitutes list

    Raises:
        InsufficientPlayersError: If fewer than two full teams can be formed
        ValueError: If team_size is less than 1
    """
    _check_team_size(team_size)
    if len(players) < team_size * 2:
        raise InsufficientPlayersError(team_size, len(players))

    shuffled_players = fisher_yates_shuffle(players, rng)
    partition = partition_players(shuffled_players, team_size)
    team_slices = partition.team_slices

    # Balancing only applies to the head-to-head case
    if len(team_slices) == 2:
        team_slices[0], team_slices[1] = balance_teams(team_slices[0], team_slices[1])

    teams = name_and_color_teams(team_slices)
    return FormationResult(
        teams=teams,
        substitutes=partition.substitutes,
        total_teams=len(teams),
    )


def get_team_stats(team: Union[Team, Sequence[Player]]) -> TeamStats:
    """Summarize a team for display: average skill to one decimal, positions."""
    players = team.players if isinstance(team, Team) else list(team)
    balance = calculate_team_balance(players)
    positions = ", ".join(
        f"{count} {position.value}"
        for position, count in balance.position_counts.items()
        if count > 0
    )
    return TeamStats(
        average_skill=f"{balance.average_skill:.1f}",
        total_skill=balance.total_skill,
        positions=positions,
        player_count=len(players),
    )
