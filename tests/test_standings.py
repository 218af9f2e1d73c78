"""Tests for the standings calculator and final-result rules."""
import random

from torneo.models.match import Match, MatchResult
from torneo.services.standings import (
    compute_standings,
    determine_final_result,
    sort_standings,
)

POINTS = {"type": "points", "allow_tie": True, "require_all_matches": False}
WINS = {"type": "wins", "allow_tie": True, "require_all_matches": False}
POINTS_NO_TIE = {"type": "points", "allow_tie": False, "require_all_matches": False}


def _match(team1, team2, s1, s2, completed=True):
    if s1 > s2:
        result = MatchResult.TEAM1
    elif s2 > s1:
        result = MatchResult.TEAM2
    else:
        result = MatchResult.DRAW
    return Match(
        team1=team1,
        team2=team2,
        team1_score=s1,
        team2_score=s2,
        result=result if completed else None,
        completed=completed,
    )


def _by_name(rows):
    return {r["name"]: r for r in rows}


def test_win_on_points():
    rows = _by_name(compute_standings(["A", "B"], [_match("A", "B", 2, 0)], POINTS))

    assert rows["A"]["points"] == 3
    assert rows["A"]["wins"] == 1
    assert rows["A"]["goals_for"] == 2
    assert rows["A"]["goals_against"] == 0
    assert rows["A"]["goal_difference"] == 2
    assert rows["B"]["points"] == 0
    assert rows["B"]["losses"] == 1
    assert rows["B"]["goals_for"] == 0
    assert rows["B"]["goals_against"] == 2
    assert rows["B"]["goal_difference"] == -2


def test_draw_is_worthless_under_wins_config():
    rows = _by_name(compute_standings(["A", "B"], [_match("A", "B", 1, 1)], WINS))

    for name in ("A", "B"):
        assert rows[name]["draws"] == 1
        assert rows[name]["points"] == 0
        assert rows[name]["wins"] == 0
        assert rows[name]["matches_played"] == 1


def test_draw_scores_a_point_each_under_points_config():
    rows = _by_name(compute_standings(["A", "B"], [_match("A", "B", 0, 0)], POINTS))
    assert rows["A"]["points"] == rows["B"]["points"] == 1


def test_pending_matches_are_ignored():
    rows = _by_name(
        compute_standings(["A", "B"], [_match("A", "B", 3, 0, completed=False)], POINTS)
    )
    assert rows["A"]["matches_played"] == 0
    assert rows["A"]["goals_for"] == 0


def test_matches_with_unknown_teams_are_skipped():
    rows = compute_standings(["A", "B"], [_match("A", "Z", 5, 0)], POINTS)
    assert all(r["matches_played"] == 0 for r in rows)


def test_result_without_scores_counts_outcome_only():
    match = Match(team1="A", team2="B", result="team2", completed=True)
    rows = _by_name(compute_standings(["A", "B"], [match], POINTS))

    assert rows["B"]["points"] == 3
    assert rows["B"]["goals_for"] == 0
    assert rows["A"]["losses"] == 1


def _league_matches():
    return [
        _match("A", "B", 2, 1),
        _match("C", "D", 0, 0),
        _match("A", "C", 1, 3),
        _match("B", "D", 4, 4),
        _match("A", "D", 2, 2),
        _match("B", "C", 1, 0),
        _match("A", "B", 0, 1),
    ]


def test_identical_output_regardless_of_match_order():
    teams = ["A", "B", "C", "D"]
    matches = _league_matches()
    expected = compute_standings(teams, matches, POINTS)

    shuffled = list(matches)
    random.Random(7).shuffle(shuffled)

    assert compute_standings(teams, shuffled, POINTS) == expected
    assert compute_standings(teams, matches, POINTS) == expected


def test_played_and_goal_difference_are_consistent():
    for config in (POINTS, WINS):
        for row in compute_standings(["A", "B", "C", "D"], _league_matches(), config):
            assert row["matches_played"] == row["wins"] + row["draws"] + row["losses"]
            assert row["goal_difference"] == row["goals_for"] - row["goals_against"]


def test_sort_uses_goal_difference_then_goals_for():
    rows = [
        {"name": "A", "points": 4, "wins": 1, "goal_difference": 1, "goals_for": 3},
        {"name": "B", "points": 4, "wins": 1, "goal_difference": 2, "goals_for": 2},
        {"name": "C", "points": 4, "wins": 1, "goal_difference": 1, "goals_for": 5},
        {"name": "D", "points": 6, "wins": 2, "goal_difference": -3, "goals_for": 1},
    ]
    assert [r["name"] for r in sort_standings(rows, POINTS)] == ["D", "B", "C", "A"]


def test_sort_keeps_input_order_for_full_ties():
    rows = [
        {"name": n, "points": 0, "wins": 0, "goal_difference": 0, "goals_for": 0}
        for n in ("Z", "M", "A")
    ]
    assert [r["name"] for r in sort_standings(rows, WINS)] == ["Z", "M", "A"]


def test_wins_config_ranks_by_wins():
    matches = [
        _match("A", "B", 1, 0),
        _match("C", "D", 0, 0),
        _match("C", "B", 0, 0),
        _match("C", "A", 0, 0),
    ]
    ranked = compute_standings(["A", "B", "C", "D"], matches, WINS)
    assert ranked[0]["name"] == "A"
    assert ranked[0]["wins"] == 1


class TestFinalResult:
    def test_single_leader_wins(self):
        ranked = compute_standings(["A", "B"], [_match("A", "B", 1, 0)], POINTS_NO_TIE)
        assert determine_final_result(ranked, POINTS_NO_TIE) == {
            "winner": "A",
            "runners": [],
            "needs_tiebreaker": False,
        }

    def test_three_way_tie_needs_tiebreaker(self):
        matches = [_match("A", "B", 1, 0), _match("B", "C", 1, 0), _match("C", "A", 1, 0)]
        ranked = compute_standings(["A", "B", "C"], matches, POINTS_NO_TIE)

        outcome = determine_final_result(ranked, POINTS_NO_TIE)

        assert outcome["needs_tiebreaker"] is True
        assert outcome["winner"] is None
        assert sorted(outcome["runners"]) == ["A", "B", "C"]

    def test_allowed_tie_names_first_as_winner(self):
        matches = [_match("A", "B", 1, 1)]
        ranked = compute_standings(["A", "B"], matches, POINTS)

        outcome = determine_final_result(ranked, POINTS)

        assert outcome == {"winner": "A", "runners": ["B"], "needs_tiebreaker": False}

    def test_tie_detection_uses_primary_key_only(self):
        matches = [_match("A", "C", 5, 0), _match("B", "C", 1, 0)]
        ranked = compute_standings(["A", "B", "C"], matches, WINS)

        outcome = determine_final_result(ranked, {**WINS, "allow_tie": False})

        assert outcome["runners"] == ["A", "B"]
        assert outcome["needs_tiebreaker"] is True

    def test_no_teams(self):
        assert determine_final_result([], POINTS) == {
            "winner": None,
            "runners": [],
            "needs_tiebreaker": False,
        }
