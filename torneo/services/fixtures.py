"""Round-robin fixture generation for a single matchday.

Everything in this module is pure: team names in, pairing dicts out.
"""
from collections import Counter

from torneo.errors import ValidationError


# Fixed order for five teams as (team1 index, team2 index, round). Every team
# rests exactly once.
FIVE_TEAM_TABLE = (
    (0, 1, 1),
    (2, 3, 1),
    (4, 0, 2),
    (1, 2, 2),
    (3, 4, 3),
    (0, 2, 3),
    (1, 3, 4),
    (2, 4, 4),
    (0, 3, 5),
    (1, 4, 5),
)


def pair_key(team1, team2):
    """Order-independent key for a pairing."""
    return frozenset((team1, team2))


def check_unique_names(teams):
    duplicates = sorted(name for name, count in Counter(teams).items() if count > 1)
    if duplicates:
        raise ValidationError(f"Team names must be unique: {', '.join(duplicates)}")


def generate_fixture(teams, block=1):
    """Build a single round-robin for ``teams`` tagged with ``block``.

    Returns a list of ``{"team1", "team2", "round", "block"}`` dicts in round
    order. Every unordered pair appears once and no team plays twice in the
    same round. Fewer than two teams yields an empty fixture.
    """
    teams = list(teams)
    check_unique_names(teams)

    n = len(teams)
    if n < 2:
        return []

    if n == 5:
        return [
            {"team1": teams[i], "team2": teams[j], "round": rnd, "block": block}
            for i, j, rnd in FIVE_TEAM_TABLE
        ]

    pairs = [(i, j) for i in range(n) for j in range(i + 1, n)]

    # Seed A-B (and C-D) into the opening round
    priority = [(0, 1)]
    if n >= 4:
        priority.append((2, 3))
    ordered = priority + [p for p in pairs if p not in priority]

    rounds = []
    placed = set()
    while len(placed) < len(ordered):
        busy = set()
        current = []
        for i, j in ordered:
            if (i, j) in placed or i in busy or j in busy:
                continue
            current.append((i, j))
            placed.add((i, j))
            busy.update((i, j))
        rounds.append(current)

        if len(rounds) >= n * 2:
            break

    return [
        {"team1": teams[i], "team2": teams[j], "round": index, "block": block}
        for index, current in enumerate(rounds, start=1)
        for i, j in current
    ]


def validate_pairings(teams, pairings):
    """Check a hand-written list of pairings against the matchday's teams.

    Self-pairings, unknown teams and repeated pairs are errors; teams that
    would play fewer than ``len(teams) - 1`` matches are warnings.
    """
    teams = list(teams)
    known = set(teams)
    errors = []
    warnings = []

    counts = {team: 0 for team in teams}
    seen = set()
    for pairing in pairings:
        team1, team2 = pairing["team1"], pairing["team2"]
        if team1 == team2:
            errors.append(f"A team cannot play itself: {team1}")
        for team in (team1, team2):
            if team not in known:
                errors.append(f"Unknown team in pairing: {team}")
            else:
                counts[team] += 1

        key = pair_key(team1, team2)
        if key in seen:
            errors.append(f"Duplicate pairing: {team1} vs {team2}")
        seen.add(key)

    expected = max(len(teams) - 1, 0)
    missing = []
    for team in teams:
        missing.append({
            "team": team,
            "expected_matches": expected,
            "current_matches": counts[team],
        })
        if counts[team] < expected:
            warnings.append(
                f"{team} has fewer matches than expected ({counts[team]}/{expected})"
            )

    return {
        "is_valid": not errors,
        "errors": errors,
        "warnings": warnings,
        "missing_matches": missing,
    }
