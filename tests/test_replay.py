"""Tests for block planning: first generation, replays and lock sets."""
import pytest

from torneo.errors import InvariantViolation
from torneo.models.match import Match, MatchResult
from torneo.services.fixtures import generate_fixture
from torneo.services.replay import (
    check_block_pairings,
    is_replay_eligible,
    plan_replay,
)


def _played(fixture, start_id=1, completed=True):
    """Turn generator output into Match rows."""
    return [
        Match(
            id=start_id + i,
            team1=p["team1"],
            team2=p["team2"],
            round=p["round"],
            block=p["block"],
            completed=completed,
            locked=False,
            result=MatchResult.DRAW if completed else None,
            team1_score=0 if completed else None,
            team2_score=0 if completed else None,
        )
        for i, p in enumerate(fixture)
    ]


TEAMS = ["A", "B", "C", "D"]


def test_empty_date_gets_block_one_round_robin():
    plan = plan_replay(TEAMS, [])

    assert plan["replay"] is False
    assert plan["block"] == 1
    assert plan["lock_ids"] == []
    assert plan["pairings"] == generate_fixture(TEAMS, 1)


def test_pending_matches_are_not_replay_eligible():
    matches = _played(generate_fixture(TEAMS, 1))
    matches[-1].completed = False

    assert not is_replay_eligible(matches)
    plan = plan_replay(TEAMS, matches)
    assert plan["replay"] is False
    assert plan["block"] == 2
    assert plan["lock_ids"] == []


def test_replay_locks_previous_block_and_repeats_pairs():
    matches = _played(generate_fixture(TEAMS, 1))

    plan = plan_replay(TEAMS, matches)

    assert plan["replay"] is True
    assert plan["block"] == 2
    assert sorted(plan["lock_ids"]) == [m.id for m in matches]
    assert [(p["team1"], p["team2"]) for p in plan["pairings"]] == [
        (m.team1, m.team2) for m in matches
    ]
    assert {p["block"] for p in plan["pairings"]} == {2}


def test_replay_rounds_continue_after_highest_round():
    matches = _played(generate_fixture(TEAMS, 1))

    plan = plan_replay(TEAMS, matches)

    # Block 1 used rounds 1-3
    assert [p["round"] for p in plan["pairings"]] == [4, 4, 5, 5, 6, 6]


def test_second_replay_only_locks_latest_block():
    block1 = _played(generate_fixture(TEAMS, 1))
    for m in block1:
        m.locked = True
    first = plan_replay(TEAMS, block1)
    block2 = _played(first["pairings"], start_id=100)

    plan = plan_replay(TEAMS, block1 + block2)

    assert plan["block"] == 3
    assert sorted(plan["lock_ids"]) == [m.id for m in block2]
    assert [p["round"] for p in plan["pairings"]] == [7, 7, 8, 8, 9, 9]


def test_replay_maps_sparse_rounds_to_consecutive_ones():
    matches = [
        Match(id=1, team1="A", team2="B", round=2, block=1, completed=True),
        Match(id=2, team1="C", team2="D", round=7, block=1, completed=True),
        Match(id=3, team1="A", team2="C", round=7, block=1, completed=True),
    ]

    plan = plan_replay(TEAMS, matches)

    assert [(p["team1"], p["team2"], p["round"]) for p in plan["pairings"]] == [
        ("A", "B", 8),
        ("C", "D", 9),
        ("A", "C", 9),
    ]


def test_replay_of_five_team_table_keeps_its_order():
    teams = ["A", "B", "C", "D", "E"]
    matches = _played(generate_fixture(teams, 1))

    plan = plan_replay(teams, matches)

    assert [(p["team1"], p["team2"]) for p in plan["pairings"]] == [
        (p["team1"], p["team2"]) for p in generate_fixture(teams)
    ]
    assert [p["round"] for p in plan["pairings"]] == [6, 6, 7, 7, 8, 8, 9, 9, 10, 10]


def test_duplicate_pair_in_previous_block_is_an_invariant_violation():
    matches = [
        Match(id=1, team1="A", team2="B", round=1, block=1, completed=True),
        Match(id=2, team1="B", team2="A", round=2, block=1, completed=True),
    ]
    with pytest.raises(InvariantViolation):
        plan_replay(["A", "B"], matches)


def test_same_pair_in_different_blocks_is_allowed():
    check_block_pairings([
        {"team1": "A", "team2": "B", "round": 1, "block": 1},
        {"team1": "A", "team2": "B", "round": 2, "block": 2},
    ])
