from torneo.models.tournament import ScoringType


_STAT_KEYS = (
    "points",
    "wins",
    "draws",
    "losses",
    "matches_played",
    "goals_for",
    "goals_against",
    "goal_difference",
)


def _value(field):
    """Enum members and their raw values compare the same way."""
    return field.value if hasattr(field, "value") else field


def _primary_key(config):
    return "points" if _value(config["type"]) == ScoringType.POINTS.value else "wins"


def empty_stats(name):
    return {"name": name, **{key: 0 for key in _STAT_KEYS}}


def sort_standings(rows, config):
    """Sort standing rows best first.

    Order:
      1. Points (points config) or wins (wins config) DESC
      2. Goal difference DESC
      3. Goals for DESC

    Rows equal on every key keep their input order.
    """
    primary = _primary_key(config)
    return sorted(
        rows,
        key=lambda r: (r[primary], r["goal_difference"], r["goals_for"]),
        reverse=True,
    )


def compute_standings(teams, matches, config):
    """Rebuild every team's statistics from the match history.

    Only completed matches count, in any order. Matches naming a team that
    is not in ``teams`` are skipped. Draws score a point each under the
    points config and nothing under the wins config.

    Returns a list of stat dicts sorted with :func:`sort_standings`.
    """
    stats = {}
    for name in teams:
        stats.setdefault(name, empty_stats(name))

    award_points = _primary_key(config) == "points"

    for match in matches:
        if not match.completed:
            continue

        team1 = stats.get(match.team1)
        team2 = stats.get(match.team2)
        if team1 is None or team2 is None:
            continue

        team1["matches_played"] += 1
        team2["matches_played"] += 1

        if match.team1_score is not None and match.team2_score is not None:
            team1["goals_for"] += match.team1_score
            team1["goals_against"] += match.team2_score
            team2["goals_for"] += match.team2_score
            team2["goals_against"] += match.team1_score

        result = _value(match.result)
        if result == "team1":
            team1["wins"] += 1
            team2["losses"] += 1
            if award_points:
                team1["points"] += 3
        elif result == "team2":
            team2["wins"] += 1
            team1["losses"] += 1
            if award_points:
                team2["points"] += 3
        elif result == "draw":
            team1["draws"] += 1
            team2["draws"] += 1
            if award_points:
                team1["points"] += 1
                team2["points"] += 1

    for row in stats.values():
        row["goal_difference"] = row["goals_for"] - row["goals_against"]

    return sort_standings(stats.values(), config)


def determine_final_result(sorted_teams, config):
    """Pick the champion from already sorted standings.

    A tie on the primary key is accepted when ``config["allow_tie"]`` is set
    (the first of the tied teams is the nominal winner); otherwise no winner
    is named and the tied teams need a tiebreaker match.
    """
    if not sorted_teams:
        return {"winner": None, "runners": [], "needs_tiebreaker": False}

    primary = _primary_key(config)
    top_score = sorted_teams[0][primary]
    winners = [t["name"] for t in sorted_teams if t[primary] == top_score]

    if len(winners) == 1:
        return {"winner": winners[0], "runners": [], "needs_tiebreaker": False}

    if config.get("allow_tie", True):
        return {"winner": winners[0], "runners": winners[1:], "needs_tiebreaker": False}

    return {"winner": None, "runners": winners, "needs_tiebreaker": True}
