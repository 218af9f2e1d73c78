"""Persistence collaborator for the tournament services.

Reads return ORM objects; writes only stage changes in the current session.
The calling service commits once per operation, so a failed validation
leaves nothing half-written. Database errors propagate unchanged.
"""
from datetime import datetime, timezone

from torneo.errors import NotFoundError
from torneo.extensions import db
from torneo.models import Match, Team, Tournament, TournamentDate


def read_tournament(tournament_id):
    tournament = db.session.get(Tournament, tournament_id)
    if not tournament:
        raise NotFoundError("Tournament not found")
    return tournament


def read_dates(tournament_id):
    return (
        TournamentDate.query.filter_by(tournament_id=tournament_id)
        .order_by(TournamentDate.created_at, TournamentDate.id)
        .all()
    )


def read_date(date_id):
    date = db.session.get(TournamentDate, date_id)
    if not date:
        raise NotFoundError("Tournament date not found")
    return date


def read_match(match_id):
    match = db.session.get(Match, match_id)
    if not match:
        raise NotFoundError("Match not found")
    return match


def read_matches(tournament_id):
    """Every match of a tournament: all dates plus tiebreakers."""
    return (
        Match.query.filter_by(tournament_id=tournament_id)
        .order_by(Match.id)
        .all()
    )


def write_date(date):
    """Stage a date with refreshed match counters."""
    date.total_matches = len(date.matches)
    date.completed_matches = sum(1 for m in date.matches if m.completed)
    db.session.add(date)
    db.session.flush()
    return date


def write_tournament_teams(tournament, standings):
    """Overwrite the tournament's Team rows with recomputed standings.

    Rows are matched by team name; names without a row get one.
    """
    existing = {team.name: team for team in tournament.teams}
    now = datetime.now(timezone.utc)

    for row in standings:
        team = existing.get(row["name"])
        if team is None:
            team = Team(tournament_id=tournament.id, name=row["name"])
            tournament.teams.append(team)
            existing[row["name"]] = team

        team.points = row["points"]
        team.wins = row["wins"]
        team.draws = row["draws"]
        team.losses = row["losses"]
        team.matches_played = row["matches_played"]
        team.goals_for = row["goals_for"]
        team.goals_against = row["goals_against"]
        team.goal_difference = row["goal_difference"]
        team.updated_at = now

    db.session.flush()
    return tournament.teams


def delete_tournament(tournament_id):
    tournament = read_tournament(tournament_id)
    db.session.delete(tournament)
    db.session.flush()
