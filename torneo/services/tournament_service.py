import logging
from datetime import datetime, timezone

from torneo import store
from torneo.errors import ValidationError
from torneo.events import event_bus
from torneo.extensions import db
from torneo.models.tournament import Tournament, TournamentStatus
from torneo.services.standings import (
    compute_standings,
    determine_final_result,
    sort_standings,
)

logger = logging.getLogger(__name__)


def create_tournament(name, config=None):
    name = (name or "").strip()
    if not name:
        raise ValidationError("Tournament name is required")

    tournament = Tournament(name=name, status=TournamentStatus.SETUP, runners=[])
    tournament.apply_config(config)
    db.session.add(tournament)
    db.session.commit()
    logger.info("Created tournament %s (%s)", tournament.id, tournament.name)
    return tournament


def get_tournament(tournament_id):
    return store.read_tournament(tournament_id)


def list_tournaments():
    """Tournament history, newest first."""
    tournaments = Tournament.query.order_by(
        Tournament.created_at.desc(), Tournament.id.desc()
    ).all()
    return [
        {
            "id": t.id,
            "name": t.name,
            "status": t.status.value,
            "created_at": t.created_at,
            "completed_at": t.completed_at,
            "winner": t.winner,
            "runners": list(t.runners or []),
            "total_teams": len(t.teams),
            "total_matches": len(t.matches),
            "type": t.config["type"],
        }
        for t in tournaments
    ]


def delete_tournament(tournament_id):
    store.delete_tournament(tournament_id)
    db.session.commit()
    logger.info("Deleted tournament %s", tournament_id)


def team_names(tournament):
    """Every team of the tournament: existing rows first, then date rosters."""
    names = [team.name for team in tournament.teams]
    seen = set(names)
    for date in tournament.dates:
        for name in date.teams:
            if name not in seen:
                seen.add(name)
                names.append(name)
    return names


def recalculate_team_stats(tournament):
    """Rewrite the tournament's Team rows from its full match history.

    Runs over every match of every date plus tiebreakers, scored with the
    tournament config. Nothing is committed here.
    """
    rows = compute_standings(
        team_names(tournament),
        store.read_matches(tournament.id),
        tournament.config,
    )
    store.write_tournament_teams(tournament, rows)
    return rows


def get_tournament_standings(tournament_id):
    tournament = store.read_tournament(tournament_id)
    rows = [
        {
            "name": t.name,
            "points": t.points,
            "wins": t.wins,
            "draws": t.draws,
            "losses": t.losses,
            "matches_played": t.matches_played,
            "goals_for": t.goals_for,
            "goals_against": t.goals_against,
            "goal_difference": t.goal_difference,
        }
        for t in tournament.teams
    ]
    return sort_standings(rows, tournament.config)


def apply_final_result(tournament, standings):
    """Record winner/runners on the tournament from sorted standings."""
    outcome = determine_final_result(standings, tournament.config)
    tournament.winner = outcome["winner"]
    tournament.runners = outcome["runners"]

    if outcome["needs_tiebreaker"]:
        tournament.status = TournamentStatus.TIEBREAKER
        tournament.is_complete = False
        tournament.completed_at = None
    else:
        tournament.status = TournamentStatus.COMPLETED
        tournament.is_complete = True
        tournament.completed_at = datetime.now(timezone.utc)
    return outcome


def complete_tournament(tournament_id):
    """Close out a tournament once every date is closed.

    Returns the final result dict. A tie that is not allowed leaves the
    tournament in ``tiebreaker`` status with the tied teams as runners.
    """
    tournament = store.read_tournament(tournament_id)

    if tournament.status == TournamentStatus.COMPLETED:
        raise ValidationError("Tournament is already completed")

    matches = store.read_matches(tournament.id)
    if not matches:
        raise ValidationError("Tournament has no matches to complete")

    pending = [m for m in matches if not m.completed]
    if pending:
        raise ValidationError(
            f"Cannot complete tournament: {len(pending)} matches are still incomplete"
        )

    open_dates = [d.name for d in tournament.dates if not d.closed]
    if open_dates:
        raise ValidationError(
            f"Cannot complete tournament: dates still open: {', '.join(open_dates)}"
        )

    rows = recalculate_team_stats(tournament)
    outcome = apply_final_result(tournament, rows)
    db.session.commit()

    logger.info(
        "Tournament %s finished with status %s (winner=%s)",
        tournament.id,
        tournament.status.value,
        outcome["winner"],
    )
    event_bus.publish(
        "tournament_completed",
        tournament.id,
        status=tournament.status.value,
        winner=outcome["winner"],
        runners=outcome["runners"],
        needs_tiebreaker=outcome["needs_tiebreaker"],
    )
    return outcome
