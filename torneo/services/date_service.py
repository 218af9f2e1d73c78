import logging
from datetime import datetime, timezone

from torneo import store
from torneo.errors import NotFoundError, ValidationError
from torneo.events import event_bus
from torneo.extensions import db
from torneo.models.match import Match
from torneo.models.tournament import TournamentStatus
from torneo.models.tournament_date import TournamentDate
from torneo.services.fixtures import check_unique_names
from torneo.services.replay import plan_replay
from torneo.services.standings import compute_standings
from torneo.services.tournament_service import recalculate_team_stats

logger = logging.getLogger(__name__)


def add_tournament_date(tournament_id, name, teams, config=None):
    """Append a matchday to a tournament.

    New team names become tournament teams with empty statistics; names the
    tournament already knows are reused.
    """
    tournament = store.read_tournament(tournament_id)

    if tournament.status == TournamentStatus.COMPLETED:
        raise ValidationError("Cannot add dates to a completed tournament")
    if tournament.status == TournamentStatus.TIEBREAKER:
        raise ValidationError("Cannot add dates while a tiebreaker is pending")

    name = (name or "").strip()
    if not name:
        raise ValidationError("Date name is required")

    roster = [t.strip() for t in teams if t and t.strip()]
    if len(roster) < 2:
        raise ValidationError("A date needs at least 2 teams")
    check_unique_names(roster)

    date = TournamentDate(name=name, teams=roster, closed=False)
    date.apply_config(config)
    tournament.dates.append(date)
    store.write_date(date)

    if tournament.status == TournamentStatus.SETUP:
        tournament.status = TournamentStatus.ACTIVE

    recalculate_team_stats(tournament)
    db.session.commit()

    logger.info(
        "Added date %s (%s) to tournament %s with %d teams",
        date.id,
        date.name,
        tournament.id,
        len(roster),
    )
    return date


def list_dates(tournament_id):
    store.read_tournament(tournament_id)
    return store.read_dates(tournament_id)


def _date_in_tournament(tournament_id, date_id):
    date = store.read_date(date_id)
    if tournament_id is not None and date.tournament_id != tournament_id:
        raise NotFoundError("Tournament date not found")
    return date


def generate_date_fixture(date_id):
    """Generate the next block of matches for a date.

    The first call builds a round-robin. Once every match of the date is
    completed, the next call replays the latest block as a new one and locks
    the previous block. Returns the newly created matches.
    """
    date = store.read_date(date_id)
    if date.closed:
        raise ValidationError("Tournament date is closed")

    plan = plan_replay(date.teams, date.matches)
    if not plan["pairings"]:
        raise ValidationError("Not enough teams to generate a fixture")

    lock_ids = set(plan["lock_ids"])
    for match in date.matches:
        if match.id in lock_ids:
            match.locked = True

    created = []
    for pairing in plan["pairings"]:
        match = Match(
            tournament_id=date.tournament_id,
            team1=pairing["team1"],
            team2=pairing["team2"],
            round=pairing["round"],
            block=pairing["block"],
            locked=False,
            completed=False,
        )
        date.matches.append(match)
        created.append(match)

    store.write_date(date)
    db.session.commit()

    if plan["replay"]:
        logger.info(
            "Replayed date %s as block %d, locked %d matches",
            date.id,
            plan["block"],
            len(lock_ids),
        )
    else:
        logger.info(
            "Generated block %d for date %s: %d matches",
            plan["block"],
            date.id,
            len(created),
        )

    event_bus.publish(
        "fixture_generated",
        date.tournament_id,
        date_id=date.id,
        block=plan["block"],
        replay=plan["replay"],
        locked=len(lock_ids),
        match_count=len(created),
    )
    return created


def close_tournament_date(tournament_id, date_id):
    """Freeze a date. Every one of its matches must be completed."""
    date = _date_in_tournament(tournament_id, date_id)

    if date.closed:
        raise ValidationError("Tournament date is already closed")

    incomplete = [m for m in date.matches if not m.completed]
    if incomplete:
        raise ValidationError(
            f"Cannot close date: {len(incomplete)} matches are still incomplete"
        )

    date.closed = True
    date.closed_at = datetime.now(timezone.utc)
    store.write_date(date)
    db.session.commit()

    logger.info("Closed date %s of tournament %s", date.id, date.tournament_id)
    event_bus.publish("date_closed", date.tournament_id, date_id=date.id)
    return date


def get_date_standings(date_id):
    """Standings of a single date, scored with that date's own config."""
    date = store.read_date(date_id)
    return compute_standings(date.teams, date.matches, date.config)
