"""
Tests for round pairing generation.
"""

from itertools import combinations

import pytest

from tabletop.exceptions import DuplicatePlayer, InvalidRosterSize, TabletopError
from tabletop.pairing.generator import (
    PlayerProfile,
    build_pair_counts,
    explain_table,
    generate_round,
    pair_load,
    score_candidate,
    team_summary,
)
from tabletop.utils import pair_key


def make_roster(n, teams=None):
    """Players 1..n; teams maps a player index range to a team id."""
    roster = []
    for idx in range(n):
        team_id = teams(idx) if teams else None
        roster.append(PlayerProfile(id=idx + 1, name=f"Player {idx + 1}", team_id=team_id))
    return roster


def pairs_of(tables):
    seen = set()
    for table in tables:
        for a, b in combinations(table, 2):
            seen.add(pair_key(a, b))
    return seen


class TestBuildPairCounts:
    """Tests for build_pair_counts function."""

    def test_empty_history(self):
        assert build_pair_counts([]) == {}

    def test_counts_every_pair_of_a_table(self):
        counts = build_pair_counts([[1, 2, 3, 4]])
        assert len(counts) == 6
        assert all(v == 1 for v in counts.values())

    def test_repeats_accumulate(self):
        counts = build_pair_counts([[1, 2, 3, 4], [1, 2, 5, 6]])
        assert counts[pair_key(1, 2)] == 2
        assert counts[pair_key(2, 1)] == 2
        assert counts[pair_key(1, 5)] == 1

    def test_accepts_mappings(self):
        counts = build_pair_counts([{"playerIds": [1, 2, 3, 4]}])
        assert counts[pair_key(3, 4)] == 1


class TestCandidateScoring:
    """Tests for pair load and candidate table scoring."""

    def test_pair_load_ignores_self(self):
        players = make_roster(4)
        counts = build_pair_counts([[1, 2, 3, 4], [1, 2, 5, 6]])
        assert pair_load(players[0], players, counts) == 4

    def test_perfect_two_vs_two_is_rewarded(self):
        group = make_roster(4, teams=lambda i: "A" if i < 2 else "B")
        assert score_candidate(group, build_pair_counts([])) == -0.5

    def test_single_team_is_penalized(self):
        group = make_roster(4, teams=lambda i: "A")
        assert score_candidate(group, build_pair_counts([])) == 2.0

    def test_three_vs_one_is_penalized(self):
        group = make_roster(4, teams=lambda i: "A" if i < 3 else "B")
        assert score_candidate(group, build_pair_counts([])) == 1.5

    def test_teamless_players_are_singletons(self):
        group = make_roster(4)
        assert score_candidate(group, build_pair_counts([])) == pytest.approx(0.2)

    def test_two_plus_two_solos_uses_spread_penalty(self):
        group = make_roster(4, teams=lambda i: "A" if i < 2 else None)
        assert score_candidate(group, build_pair_counts([])) == pytest.approx(0.4)

    def test_teamless_players_never_share_a_real_team_id(self):
        group = [
            PlayerProfile(id=1),
            PlayerProfile(id=2, team_id="solo-1"),
            PlayerProfile(id=3, team_id="solo-4"),
            PlayerProfile(id=4),
        ]
        assert score_candidate(group, build_pair_counts([])) == pytest.approx(0.2)

    def test_repeats_add_to_score(self):
        group = make_roster(4)
        counts = build_pair_counts([[1, 2, 3, 4]])
        assert score_candidate(group, counts) == pytest.approx(6.2)

    def test_team_summary(self):
        group = make_roster(4, teams=lambda i: 7 if i < 2 else None)
        assert team_summary(group) == {"team-7": 2, "player-3": 1, "player-4": 1}


class TestGenerateRound:
    """Tests for generate_round function."""

    def test_rejects_roster_not_divisible_by_four(self):
        with pytest.raises(InvalidRosterSize):
            generate_round(make_roster(6), [])

    def test_roster_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            generate_round(make_roster(5), [])
        with pytest.raises(TabletopError):
            generate_round(make_roster(3), [])

    def test_rejects_duplicate_player_ids(self):
        roster = [PlayerProfile(id=1), PlayerProfile(id=1), PlayerProfile(id=2), PlayerProfile(id=3)]
        with pytest.raises(DuplicatePlayer) as exc_info:
            generate_round(roster, [])
        assert exc_info.value.player_ids == [1]

    def test_duplicate_error_is_a_tabletop_error(self):
        with pytest.raises(TabletopError):
            generate_round([{"id": "a"}, {"id": "b"}, {"id": "a"}, {"id": "c"}], [])

    def test_empty_roster_yields_no_tables(self):
        result = generate_round([], [])
        assert result.tables == []
        assert result.explanation == []

    @pytest.mark.parametrize("n", [4, 8, 12, 16, 20])
    def test_partitions_the_roster(self, n):
        roster = make_roster(n, teams=lambda i: i % 3)
        result = generate_round(roster, [])

        assert len(result.tables) == n // 4
        assigned = [pid for table in result.tables for pid in table.player_ids]
        assert len(assigned) == n
        assert sorted(assigned) == list(range(1, n + 1))
        for table in result.tables:
            assert len(set(table.player_ids)) == 4

    def test_table_indexes_are_sequential(self):
        result = generate_round(make_roster(12), [])
        assert [t.table_index for t in result.tables] == [1, 2, 3]

    def test_first_round_mixes_two_teams(self):
        roster = make_roster(8, teams=lambda i: 1 if i < 4 else 2)
        result = generate_round(roster, [])

        assert [t.player_ids for t in result.tables] == [[1, 2, 5, 6], [3, 4, 7, 8]]
        for table in result.tables:
            assert table.pair_score == -0.5
            assert table.team_summary == {"team-1": 2, "team-2": 2}

    def test_second_round_minimises_repeats_for_eight_players(self):
        roster = make_roster(8, teams=lambda i: 1 if i < 4 else 2)
        first = generate_round(roster, [])
        history = [{"playerIds": t.player_ids} for t in first.tables]
        second = generate_round(roster, history)

        first_pairs = pairs_of(t.player_ids for t in first.tables)
        first_tables = {frozenset(t.player_ids) for t in first.tables}
        for table in second.tables:
            repeated = pairs_of([table.player_ids]) & first_pairs
            # Two tables of four always share at least two pairs with any earlier split
            assert len(repeated) == 2
            assert frozenset(table.player_ids) not in first_tables
            assert table.pair_score == 1.5
        assert [t.player_ids for t in second.tables] == [[1, 2, 7, 8], [3, 4, 5, 6]]

    def test_second_round_has_no_repeats_for_sixteen_players(self):
        roster = make_roster(16)
        first = generate_round(roster, [])
        history = [t.player_ids for t in first.tables]
        second = generate_round(roster, history)

        first_pairs = pairs_of(history)
        second_pairs = pairs_of(t.player_ids for t in second.tables)
        assert first_pairs.isdisjoint(second_pairs)
        assert [t.player_ids for t in second.tables] == [
            [1, 5, 9, 13],
            [2, 6, 10, 14],
            [3, 7, 11, 15],
            [4, 8, 12, 16],
        ]

    def test_accepts_mapping_roster(self):
        roster = [{"id": f"p{i}", "name": f"P{i}", "teamId": None} for i in range(4)]
        result = generate_round(roster, [])
        assert result.tables[0].player_ids == ["p0", "p1", "p2", "p3"]

    def test_is_deterministic(self):
        roster = make_roster(12, teams=lambda i: i % 2)
        history = [[1, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12]]
        first = generate_round(roster, history)
        second = generate_round(roster, history)
        assert first == second

    def test_does_not_mutate_inputs(self):
        roster = make_roster(8)
        history = [[1, 2, 3, 4]]
        roster_copy = list(roster)
        generate_round(roster, history)
        assert roster == roster_copy
        assert history == [[1, 2, 3, 4]]


class TestExplanation:
    """Tests for per-table explanation strings."""

    def test_one_line_per_table(self):
        result = generate_round(make_roster(8), [])
        assert len(result.explanation) == 2
        assert result.explanation[0] == "Table 1 minimised repeat pair score 0.20"

    def test_negative_score_reported_as_zero(self):
        roster = make_roster(8, teams=lambda i: 1 if i < 4 else 2)
        result = generate_round(roster, [])
        assert result.explanation == [
            "Table 1 minimised repeat pair score 0.00",
            "Table 2 minimised repeat pair score 0.00",
        ]

    def test_two_decimal_places(self):
        roster = make_roster(8, teams=lambda i: 1 if i < 4 else 2)
        history = [[1, 2, 5, 6], [3, 4, 7, 8]]
        result = generate_round(roster, history)
        assert explain_table(result.tables[0]) == "Table 1 minimised repeat pair score 1.50"
