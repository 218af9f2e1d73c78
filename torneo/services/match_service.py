import logging
from datetime import datetime, timezone

from torneo import store
from torneo.errors import ValidationError
from torneo.events import event_bus
from torneo.extensions import db
from torneo.models.match import Match, MatchResult, PlayoffType
from torneo.models.tournament import TournamentStatus
from torneo.services.fixtures import pair_key
from torneo.services.tournament_service import (
    apply_final_result,
    recalculate_team_stats,
    team_names,
)

logger = logging.getLogger(__name__)


def _is_score(value):
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def result_from_scores(team1_score, team2_score):
    if team1_score > team2_score:
        return MatchResult.TEAM1
    if team2_score > team1_score:
        return MatchResult.TEAM2
    return MatchResult.DRAW


def apply_result(match_id, team1_score, team2_score, result=None):
    """Record (or correct) a match result and recompute the standings.

    ``result`` is derived from the scores when omitted and must agree with
    them when given. Team statistics are rebuilt from every match of the
    tournament, so re-entering a result replaces the old one instead of
    adding to it. Everything is committed together.

    Returns ``(match, standings)``.
    """
    if not _is_score(team1_score) or not _is_score(team2_score):
        raise ValidationError("Scores must be non-negative integers")

    match = store.read_match(match_id)

    if match.locked:
        raise ValidationError("Match is locked")

    date = match.date
    if date is not None and date.closed:
        raise ValidationError("Tournament date is closed")

    tournament = match.tournament
    if tournament.status == TournamentStatus.COMPLETED:
        raise ValidationError("Tournament is already completed")

    derived = result_from_scores(team1_score, team2_score)
    if result is not None:
        try:
            result = MatchResult(result.value if hasattr(result, "value") else result)
        except ValueError:
            raise ValidationError(f"Invalid result: {result}") from None
        if result != derived:
            raise ValidationError(
                f"Result '{result.value}' does not match the score "
                f"{team1_score}-{team2_score}"
            )

    was_completed = match.completed
    match.result = derived
    match.team1_score = team1_score
    match.team2_score = team2_score
    match.completed = True
    match.completed_at = datetime.now(timezone.utc)

    if date is not None:
        store.write_date(date)

    standings = recalculate_team_stats(tournament)

    if date is not None and date.require_all_matches and date.completed_matches == date.total_matches:
        logger.info("Date %s has every match completed and can be closed", date.id)

    if match.is_playoff and tournament.status == TournamentStatus.TIEBREAKER:
        playoffs = [m for m in store.read_matches(tournament.id) if m.is_playoff]
        if all(m.completed for m in playoffs):
            apply_final_result(tournament, standings)

    db.session.commit()

    logger.info(
        "%s result for match %s: %s %d-%d %s",
        "Corrected" if was_completed else "Recorded",
        match.id,
        match.team1,
        team1_score,
        team2_score,
        match.team2,
    )
    event_bus.publish(
        "match_result",
        tournament.id,
        match_id=match.id,
        date_id=match.date_id,
        team1=match.team1,
        team2=match.team2,
        team1_score=team1_score,
        team2_score=team2_score,
        result=derived.value,
    )
    event_bus.publish("standings_updated", tournament.id)
    if tournament.status == TournamentStatus.COMPLETED:
        event_bus.publish(
            "tournament_completed",
            tournament.id,
            status=tournament.status.value,
            winner=tournament.winner,
            runners=list(tournament.runners or []),
            needs_tiebreaker=False,
        )

    return match, standings


def add_match_to_date(date_id, team1, team2):
    """Add a hand-picked match to a date's latest open block."""
    date = store.read_date(date_id)

    if date.closed:
        raise ValidationError("Tournament date is closed")
    if team1 == team2:
        raise ValidationError("A team cannot play itself")
    if team1 not in date.teams or team2 not in date.teams:
        raise ValidationError("Teams must be part of this tournament date")

    matches = list(date.matches)
    block = max((m.block for m in matches), default=1)
    if any(m.locked for m in matches if m.block == block):
        block += 1

    key = pair_key(team1, team2)
    if any(pair_key(m.team1, m.team2) == key for m in matches if m.block == block):
        raise ValidationError(f"{team1} vs {team2} is already scheduled in block {block}")

    match = Match(
        tournament_id=date.tournament_id,
        team1=team1,
        team2=team2,
        round=max((m.round for m in matches), default=0) + 1,
        block=block,
        locked=False,
        completed=False,
    )
    date.matches.append(match)
    store.write_date(date)
    db.session.commit()

    logger.info("Added match %s vs %s to date %s (block %d)", team1, team2, date.id, block)
    return match


def create_tiebreaker(tournament_id, team1, team2):
    """Schedule a playoff match between two teams tied for first place.

    Only valid after complete_tournament left the tournament in tiebreaker
    status; both teams must be among its runners.
    """
    tournament = store.read_tournament(tournament_id)

    if tournament.status == TournamentStatus.COMPLETED:
        raise ValidationError("Tournament is already completed")
    # Only complete_tournament puts a tournament in tiebreaker status
    if tournament.status != TournamentStatus.TIEBREAKER:
        raise ValidationError("Tournament is not waiting for a tiebreaker")
    if team1 == team2:
        raise ValidationError("A team cannot play itself")

    known = set(team_names(tournament))
    tied = set(tournament.runners or [])
    for team in (team1, team2):
        if team not in known:
            raise ValidationError(f"{team} is not part of this tournament")
        if team not in tied:
            raise ValidationError(f"{team} is not tied for first place")

    matches = store.read_matches(tournament.id)
    match = Match(
        tournament_id=tournament.id,
        team1=team1,
        team2=team2,
        round=max((m.round for m in matches), default=0) + 1,
        block=1,
        locked=False,
        completed=False,
        is_playoff=True,
        playoff_type=PlayoffType.TIEBREAKER,
    )
    tournament.matches.append(match)
    tournament.status = TournamentStatus.TIEBREAKER
    tournament.is_complete = False
    db.session.commit()

    logger.info("Created tiebreaker %s vs %s for tournament %s", team1, team2, tournament.id)
    event_bus.publish(
        "tiebreaker_created",
        tournament.id,
        match_id=match.id,
        team1=team1,
        team2=team2,
    )
    return match
