from torneo.extensions import db
from datetime import datetime, timezone
import enum


class MatchResult(enum.Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"
    DRAW = "draw"


class PlayoffType(enum.Enum):
    TIEBREAKER = "tiebreaker"


class Match(db.Model):
    __tablename__ = "matches"

    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(
        db.Integer, db.ForeignKey("tournaments.id"), nullable=False, index=True
    )
    # Null for tiebreaker matches, which belong to the tournament only
    date_id = db.Column(
        db.Integer, db.ForeignKey("tournament_dates.id"), nullable=True, index=True
    )
    team1 = db.Column(db.String(200), nullable=False)
    team2 = db.Column(db.String(200), nullable=False)
    round = db.Column(db.Integer, nullable=False, default=1)
    block = db.Column(db.Integer, nullable=False, default=1)
    locked = db.Column(db.Boolean, nullable=False, default=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    result = db.Column(db.Enum(MatchResult), nullable=True)
    team1_score = db.Column(db.Integer, nullable=True)
    team2_score = db.Column(db.Integer, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)
    is_playoff = db.Column(db.Boolean, nullable=False, default=False)
    playoff_type = db.Column(db.Enum(PlayoffType), nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self):
        return f"<Match {self.team1} vs {self.team2}>"
