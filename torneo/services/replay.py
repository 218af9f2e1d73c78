"""Block planning for a matchday fixture.

A date's matches are grouped in blocks. The first generation creates block 1
from the round-robin generator; once every match of the date is played,
generating again replays the latest block as a new one and locks the old one.
"""
import logging

from torneo.errors import InvariantViolation
from torneo.services.fixtures import generate_fixture, pair_key

logger = logging.getLogger(__name__)


def is_replay_eligible(matches):
    """A replay needs at least one match and no pending ones."""
    matches = list(matches)
    return bool(matches) and all(m.completed for m in matches)


def _block_of(match):
    return match.block or 1


def plan_replay(teams, matches):
    """Decide what the next fixture generation for a date looks like.

    ``matches`` are the date's current matches (anything with ``id``,
    ``team1``, ``team2``, ``round``, ``block`` and ``completed``).

    Returns ``{"replay", "block", "lock_ids", "pairings"}`` where ``pairings``
    are ``{"team1", "team2", "round", "block"}`` dicts for the new block and
    ``lock_ids`` the ids of the matches to freeze. Nothing is mutated.
    """
    matches = list(matches)
    max_block = max((_block_of(m) for m in matches), default=0)
    next_block = max_block + 1

    if not is_replay_eligible(matches):
        plan = {
            "replay": False,
            "block": next_block,
            "lock_ids": [],
            "pairings": generate_fixture(teams, next_block),
        }
        check_block_pairings(plan["pairings"])
        return plan

    previous = sorted(
        (m for m in matches if _block_of(m) == max_block), key=lambda m: m.round
    )
    max_round = max(m.round for m in matches)

    round_map = {}
    for old_round in sorted({m.round for m in previous}):
        round_map[old_round] = max_round + 1 + len(round_map)

    pairings = [
        {
            "team1": m.team1,
            "team2": m.team2,
            "round": round_map[m.round],
            "block": next_block,
        }
        for m in previous
    ]
    check_block_pairings(pairings)

    return {
        "replay": True,
        "block": next_block,
        "lock_ids": [m.id for m in previous],
        "pairings": pairings,
    }


def check_block_pairings(pairings):
    """Raise InvariantViolation if a pair repeats inside one block."""
    seen = set()
    duplicates = []
    for p in pairings:
        key = (p["block"], pair_key(p["team1"], p["team2"]))
        if key in seen:
            duplicates.append(f"{p['team1']} vs {p['team2']}")
        seen.add(key)

    if duplicates:
        logger.error("Duplicate pairings in generated block: %s", duplicates)
        raise InvariantViolation(
            f"Duplicate pairings in generated block: {', '.join(duplicates)}"
        )
