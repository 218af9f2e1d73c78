from torneo.schemas.tournament import (
    TournamentConfigSchema,
    TournamentSchema,
    TournamentSummarySchema,
    CreateTournamentSchema,
    CreateTiebreakerSchema,
    FinalResultSchema,
)
from torneo.schemas.tournament_date import TournamentDateSchema, CreateTournamentDateSchema
from torneo.schemas.match import (
    MatchSchema,
    CreateMatchSchema,
    SubmitResultSchema,
    PairingSchema,
    FixturePreviewSchema,
    ValidatePairingsSchema,
)
from torneo.schemas.team import TeamSchema, StandingSchema

__all__ = [
    "TournamentConfigSchema",
    "TournamentSchema",
    "TournamentSummarySchema",
    "CreateTournamentSchema",
    "CreateTiebreakerSchema",
    "FinalResultSchema",
    "TournamentDateSchema",
    "CreateTournamentDateSchema",
    "MatchSchema",
    "CreateMatchSchema",
    "SubmitResultSchema",
    "PairingSchema",
    "FixturePreviewSchema",
    "ValidatePairingsSchema",
    "TeamSchema",
    "StandingSchema",
]
