from torneo.models.tournament import (
    Tournament,
    TournamentStatus,
    ScoringType,
    DEFAULT_CONFIG,
)
from torneo.models.tournament_date import TournamentDate
from torneo.models.match import Match, MatchResult, PlayoffType
from torneo.models.team import Team

__all__ = [
    "Tournament",
    "TournamentStatus",
    "ScoringType",
    "DEFAULT_CONFIG",
    "TournamentDate",
    "Match",
    "MatchResult",
    "PlayoffType",
    "Team",
]
