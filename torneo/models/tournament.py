from torneo.extensions import db
from datetime import datetime, timezone
import enum


class ScoringType(enum.Enum):
    POINTS = "points"
    WINS = "wins"


class TournamentStatus(enum.Enum):
    SETUP = "setup"
    ACTIVE = "active"
    COMPLETED = "completed"
    TIEBREAKER = "tiebreaker"


DEFAULT_CONFIG = {
    "type": ScoringType.POINTS.value,
    "allow_tie": True,
    "require_all_matches": False,
}


class ScoringConfigMixin:
    """Columns backing a scoring config: {type, allow_tie, require_all_matches}."""

    scoring_type = db.Column(
        db.Enum(ScoringType), nullable=False, default=ScoringType.POINTS
    )
    allow_tie = db.Column(db.Boolean, nullable=False, default=True)
    require_all_matches = db.Column(db.Boolean, nullable=False, default=False)

    @property
    def config(self):
        scoring_type = self.scoring_type or ScoringType.POINTS
        return {
            "type": scoring_type.value,
            "allow_tie": True if self.allow_tie is None else self.allow_tie,
            "require_all_matches": bool(self.require_all_matches),
        }

    def apply_config(self, config):
        merged = {**DEFAULT_CONFIG, **(config or {})}
        self.scoring_type = ScoringType(merged["type"])
        self.allow_tie = merged["allow_tie"]
        self.require_all_matches = merged["require_all_matches"]


class Tournament(ScoringConfigMixin, db.Model):
    __tablename__ = "tournaments"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    status = db.Column(
        db.Enum(TournamentStatus), nullable=False, default=TournamentStatus.SETUP
    )
    is_complete = db.Column(db.Boolean, nullable=False, default=False)
    winner = db.Column(db.String(200), nullable=True)
    runners = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(
        db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    completed_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    dates = db.relationship(
        "TournamentDate",
        backref="tournament",
        order_by="TournamentDate.id",
        cascade="all, delete-orphan",
    )
    teams = db.relationship(
        "Team", backref="tournament", order_by="Team.id", cascade="all, delete-orphan"
    )
    matches = db.relationship(
        "Match", backref="tournament", order_by="Match.id", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Tournament {self.name}>"
