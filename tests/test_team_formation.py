"""
Unit tests for the team formation engine.

Covers validation, the Fisher-Yates shuffle, partitioning, the two-team
balancer, team naming and the team statistics summary.
"""
import random
import unittest
from collections import Counter
from typing import List, Optional

from squadshuffle.models import Player, Position, Team
from squadshuffle.services.team_formation import (
    GOALKEEPER_SHORTAGE, InsufficientPlayersError, balance_teams, calculate_team_balance,
    fisher_yates_shuffle, get_team_stats, name_and_color_teams, partition_players,
    shuffle_into_teams, team_color_for_index, team_name_for_index, validate_team_formation
)


class FixedRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


class SequenceRandom:
    """Random source that replays a fixed sequence of draws."""

    def __init__(self, draws: List[float]):
        self.draws = list(draws)
        self.index = 0

    def random(self) -> float:
        value = self.draws[self.index % len(self.draws)]
        self.index += 1
        return value


# Always drawing just below 1.0 picks j == i, i.e. the identity permutation
IDENTITY = FixedRandom(0.999999)


def make_players(skills: List[int], positions: Optional[List[Position]] = None,
                 prefix: str = "p") -> List[Player]:
    positions = positions or [Position.MIDFIELDER] * len(skills)
    return [
        Player(name=f"{prefix}{i}", id=f"{prefix}{i}", position=pos, skill_level=skill)
        for i, (skill, pos) in enumerate(zip(skills, positions))
    ]


def average(players: List[Player]) -> float:
    return sum(p.skill_level for p in players) / len(players)


class TestValidateTeamFormation(unittest.TestCase):
    """Tests for the feasibility check."""

    def test_too_few_players_reports_shortfall(self) -> None:
        result = validate_team_formation(make_players([3] * 6), 5)

        self.assertFalse(result.valid)
        self.assertEqual(result.message, "Need at least 10 players for 5v5. You have 6.")
        self.assertEqual(result.suggestion, "Add 4 more players.")
        self.assertEqual(result.shortfall, 4)
        self.assertIsNone(result.max_teams)

    def test_twelve_players_five_a_side(self) -> None:
        result = validate_team_formation(make_players([3] * 12), 5)

        self.assertTrue(result.valid)
        self.assertEqual(result.max_teams, 2)
        self.assertEqual(result.substitute_count, 2)
        self.assertEqual(result.shortfall, 0)
        self.assertEqual(result.message, "Can form 2 teams with 2 substitutes.")

    def test_goalkeeper_warning_does_not_block(self) -> None:
        positions = [Position.GOALKEEPER] + [Position.DEFENDER] * 9
        result = validate_team_formation(make_players([3] * 10, positions), 5)

        self.assertTrue(result.valid)
        self.assertEqual([w.code for w in result.warnings], [GOALKEEPER_SHORTAGE])
        self.assertIn("goalkeepers", str(result.warnings[0]))

    def test_no_goalkeeper_warning_with_two_keepers(self) -> None:
        positions = [Position.GOALKEEPER] * 2 + [Position.FORWARD] * 8
        result = validate_team_formation(make_players([3] * 10, positions), 5)
        self.assertEqual(result.warnings, [])

    def test_no_goalkeeper_warning_for_small_formats(self) -> None:
        result = validate_team_formation(make_players([3] * 8), 4)
        self.assertTrue(result.valid)
        self.assertEqual(result.warnings, [])

    def test_invalid_result_has_no_warnings(self) -> None:
        result = validate_team_formation(make_players([3] * 3), 5)
        self.assertEqual(result.warnings, [])

    def test_valid_matches_two_team_threshold(self) -> None:
        for team_size in range(1, 7):
            for count in range(0, 16):
                result = validate_team_formation(make_players([3] * count), team_size)
                self.assertEqual(result.valid, count >= 2 * team_size,
                                 f"{count} players, team size {team_size}")

    def test_team_size_below_one_rejected(self) -> None:
        with self.assertRaises(ValueError):
            validate_team_formation(make_players([3] * 4), 0)

    def test_to_dict_lists_warning_messages(self) -> None:
        data = validate_team_formation(make_players([3] * 12), 5).to_dict()
        self.assertEqual(data["substitute_count"], 2)
        self.assertEqual(data["warnings"],
                         ["Consider adding more goalkeepers for better team balance."])


class TestFisherYatesShuffle(unittest.TestCase):
    """Tests for the randomizer."""

    def test_input_not_mutated(self) -> None:
        items = list(range(10))
        fisher_yates_shuffle(items, random.Random(1))
        self.assertEqual(items, list(range(10)))

    def test_high_draws_keep_order(self) -> None:
        self.assertEqual(fisher_yates_shuffle(list("abcde"), IDENTITY), list("abcde"))

    def test_zero_draws_rotate_left(self) -> None:
        # Each step swaps position i with 0
        self.assertEqual(fisher_yates_shuffle(list("abcd"), FixedRandom(0.0)), list("bcda"))

    def test_sequence_of_draws(self) -> None:
        # i=2: j=int(0.5*3)=1 -> a c b ; i=1: j=int(0.0*2)=0 -> c a b
        rng = SequenceRandom([0.5, 0.0])
        self.assertEqual(fisher_yates_shuffle(list("abc"), rng), list("cab"))

    def test_is_permutation(self) -> None:
        items = list(range(25))
        shuffled = fisher_yates_shuffle(items, random.Random(7))
        self.assertEqual(sorted(shuffled), items)

    def test_empty_and_single(self) -> None:
        self.assertEqual(fisher_yates_shuffle([], random.Random(1)), [])
        self.assertEqual(fisher_yates_shuffle(["x"], random.Random(1)), ["x"])

    def test_all_permutations_reachable(self) -> None:
        rng = random.Random(2024)
        seen = Counter(tuple(fisher_yates_shuffle("abc", rng)) for _ in range(3000))
        self.assertEqual(len(seen), 6)
        for count in seen.values():
            self.assertGreater(count, 350)


class TestPartitionPlayers(unittest.TestCase):
    """Tests for slicing a shuffled pool into teams."""

    def test_contiguous_slices_and_substitutes(self) -> None:
        players = make_players([3] * 12)
        result = partition_players(players, 5)

        self.assertEqual([p.id for p in result.team_slices[0]], [f"p{i}" for i in range(5)])
        self.assertEqual([p.id for p in result.team_slices[1]], [f"p{i}" for i in range(5, 10)])
        self.assertEqual([p.id for p in result.substitutes], ["p10", "p11"])

    def test_exact_multiple_has_no_substitutes(self) -> None:
        result = partition_players(make_players([3] * 12), 4)
        self.assertEqual(len(result.team_slices), 3)
        self.assertEqual(result.substitutes, [])


class TestBalanceTeams(unittest.TestCase):
    """Tests for the two-team skill balancer."""

    def test_lopsided_teams_converge(self) -> None:
        team_a = make_players([5] * 5, prefix="a")
        team_b = make_players([1] * 5, prefix="b")

        new_a, new_b = balance_teams(team_a, team_b)

        diff = abs(average(new_a) - average(new_b))
        self.assertLess(diff, 4.0)
        # No single swap can improve on 3x5+2x1 vs 2x5+3x1
        self.assertAlmostEqual(diff, 0.8)
        self.assertEqual(sorted(p.skill_level for p in new_a), [1, 1, 5, 5, 5])
        self.assertEqual([p.id for p in new_a], ["b0", "b1", "a2", "a3", "a4"])
        self.assertEqual([p.id for p in new_b], ["a0", "a1", "b2", "b3", "b4"])

    def test_inputs_not_mutated(self) -> None:
        team_a = make_players([5] * 5, prefix="a")
        team_b = make_players([1] * 5, prefix="b")
        balance_teams(team_a, team_b)
        self.assertEqual([p.id for p in team_a], [f"a{i}" for i in range(5)])
        self.assertEqual([p.id for p in team_b], [f"b{i}" for i in range(5)])

    def test_balanced_teams_untouched(self) -> None:
        team_a = make_players([3, 4, 2], prefix="a")
        team_b = make_players([3, 3, 3], prefix="b")
        new_a, new_b = balance_teams(team_a, team_b)
        self.assertEqual([p.id for p in new_a], ["a0", "a1", "a2"])
        self.assertEqual([p.id for p in new_b], ["b0", "b1", "b2"])

    def test_iteration_cap(self) -> None:
        team_a = make_players([5] * 5, prefix="a")
        team_b = make_players([1] * 5, prefix="b")
        new_a, _ = balance_teams(team_a, team_b, max_iterations=1)
        self.assertEqual([p.skill_level for p in new_a], [1, 5, 5, 5, 5])

    def test_stops_at_local_optimum(self) -> None:
        # Averages 3.0 vs 2.5: not balanced, but every swap widens the gap
        team_a = make_players([5, 1], prefix="a")
        team_b = make_players([3, 2], prefix="b")
        new_a, new_b = balance_teams(team_a, team_b)
        self.assertEqual([p.id for p in new_a], ["a0", "a1"])
        self.assertEqual([p.id for p in new_b], ["b0", "b1"])

    def test_never_makes_balance_worse(self) -> None:
        rng = random.Random(99)
        for _ in range(200):
            size = rng.randint(1, 8)
            team_a = make_players([rng.randint(1, 5) for _ in range(size)], prefix="a")
            team_b = make_players([rng.randint(1, 5) for _ in range(size)], prefix="b")
            before = abs(average(team_a) - average(team_b))

            new_a, new_b = balance_teams(team_a, team_b)

            after = abs(average(new_a) - average(new_b))
            self.assertLessEqual(after, before + 1e-9)
            self.assertEqual(
                sorted(p.id for p in new_a + new_b),
                sorted(p.id for p in team_a + team_b),
            )

    def test_team_balance_counts_positions(self) -> None:
        positions = [Position.GOALKEEPER, Position.DEFENDER, Position.DEFENDER]
        balance = calculate_team_balance(make_players([3, 4, 5], positions))
        self.assertEqual(balance.position_counts[Position.DEFENDER], 2)
        self.assertEqual(balance.position_counts[Position.FORWARD], 0)
        self.assertEqual(balance.total_skill, 12)
        self.assertAlmostEqual(balance.average_skill, 4.0)


class TestNaming(unittest.TestCase):
    """Tests for team names and colors."""

    def test_names_and_fallback(self) -> None:
        names = [team_name_for_index(i) for i in range(6)]
        self.assertEqual(names, ["Team Alpha", "Team Beta", "Team Gamma", "Team Delta",
                                 "Team 5", "Team 6"])

    def test_colors_cycle(self) -> None:
        self.assertEqual(team_color_for_index(0), "#28a745")
        self.assertEqual(team_color_for_index(3), "#dc3545")
        self.assertEqual(team_color_for_index(4), "#28a745")

    def test_name_and_color_teams(self) -> None:
        slices = [make_players([3], prefix="a"), make_players([4], prefix="b")]
        teams = name_and_color_teams(slices)
        self.assertEqual([(t.name, t.color) for t in teams],
                         [("Team Alpha", "#28a745"), ("Team Beta", "#007bff")])
        self.assertEqual(teams[1].player_ids(), ["b0"])


class TestShuffleIntoTeams(unittest.TestCase):
    """End-to-end tests for the formation pipeline."""

    def assert_conserved(self, players: List[Player], result) -> None:
        formed = [p.id for team in result.teams for p in team.players]
        subs = [p.id for p in result.substitutes]
        self.assertEqual(Counter(formed + subs), Counter(p.id for p in players))

    def test_twelve_players_five_a_side(self) -> None:
        players = make_players([1, 2, 3, 4, 5, 5, 4, 3, 2, 1, 3, 3])
        result = shuffle_into_teams(players, 5, random.Random(5))

        self.assertEqual(result.total_teams, 2)
        self.assertEqual([len(t.players) for t in result.teams], [5, 5])
        self.assertEqual(len(result.substitutes), 2)
        self.assertEqual([t.name for t in result.teams], ["Team Alpha", "Team Beta"])
        self.assertEqual([t.color for t in result.teams], ["#28a745", "#007bff"])
        self.assert_conserved(players, result)

    def test_substitutes_are_tail_of_shuffle(self) -> None:
        players = make_players([5, 5, 5, 5, 1, 1, 1, 1, 3, 2])
        result = shuffle_into_teams(players, 4, IDENTITY)

        self.assertEqual([p.id for p in result.substitutes], ["p8", "p9"])
        # Identity shuffle gives [5,5,5,5] vs [1,1,1,1]; balancing evens it out
        self.assertEqual(average(result.teams[0].players), average(result.teams[1].players))

    def test_three_teams_are_not_balanced(self) -> None:
        players = make_players([5] * 5 + [1] * 5 + [3] * 5)
        result = shuffle_into_teams(players, 5, IDENTITY)

        self.assertEqual([t.name for t in result.teams],
                         ["Team Alpha", "Team Beta", "Team Gamma"])
        self.assertEqual([p.skill_level for p in result.teams[0].players], [5] * 5)
        self.assertEqual([p.skill_level for p in result.teams[1].players], [1] * 5)
        self.assertEqual(result.substitutes, [])

    def test_many_teams_use_generated_names(self) -> None:
        players = make_players([3] * 6)
        result = shuffle_into_teams(players, 1, random.Random(3))
        self.assertEqual(result.total_teams, 6)
        self.assertEqual(result.teams[4].name, "Team 5")
        self.assertEqual(result.teams[4].color, "#28a745")

    def test_conservation_and_sizes(self) -> None:
        rng = random.Random(11)
        for team_size in (1, 2, 4, 5, 7):
            for count in range(team_size * 2, team_size * 2 + 9):
                players = make_players([rng.randint(1, 5) for _ in range(count)])
                result = shuffle_into_teams(players, team_size, rng)

                self.assertTrue(all(len(t.players) == team_size for t in result.teams))
                self.assertEqual(len(result.substitutes), count % team_size)
                self.assertEqual(result.total_teams, count // team_size)
                self.assert_conserved(players, result)

    def test_deterministic_with_fixed_seed(self) -> None:
        players = make_players([1, 2, 3, 4, 5, 1, 2, 3, 4, 5, 3])
        first = shuffle_into_teams(players, 5, random.Random(123))
        second = shuffle_into_teams(players, 5, random.Random(123))
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_input_not_mutated(self) -> None:
        players = make_players([5, 1] * 6)
        shuffle_into_teams(players, 5, random.Random(8))
        self.assertEqual([p.id for p in players], [f"p{i}" for i in range(12)])

    def test_insufficient_players_raises(self) -> None:
        with self.assertRaises(InsufficientPlayersError) as ctx:
            shuffle_into_teams(make_players([3] * 7), 4)

        error = ctx.exception
        self.assertEqual(error.shortfall, 1)
        self.assertEqual(error.required, 8)
        self.assertEqual(error.available, 7)
        self.assertEqual(str(error), "Need at least 8 players for 4v4 match")


class TestGetTeamStats(unittest.TestCase):
    """Tests for the display summary."""

    def test_skills_three_four_five(self) -> None:
        stats = get_team_stats(make_players([3, 4, 5]))
        self.assertEqual(stats.average_skill, "4.0")
        self.assertEqual(stats.total_skill, 12)
        self.assertEqual(stats.player_count, 3)

    def test_positions_summary_in_enumeration_order(self) -> None:
        positions = [Position.FORWARD, Position.GOALKEEPER, Position.DEFENDER, Position.DEFENDER]
        team = Team(name="Team Alpha", color="#28a745",
                    players=make_players([2, 3, 3, 4], positions))
        stats = get_team_stats(team)
        self.assertEqual(stats.positions, "1 GK, 2 DEF, 1 FWD")
        self.assertEqual(stats.average_skill, "3.0")

    def test_average_rounded_to_one_decimal(self) -> None:
        self.assertEqual(get_team_stats(make_players([1, 2, 2])).average_skill, "1.7")

    def test_empty_team(self) -> None:
        stats = get_team_stats([])
        self.assertEqual(stats.average_skill, "0.0")
        self.assertEqual(stats.positions, "")
        self.assertEqual(stats.player_count, 0)


if __name__ == "__main__":
    unittest.main()
