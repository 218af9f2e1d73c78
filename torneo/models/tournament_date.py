from torneo.extensions import db
from torneo.models.tournament import ScoringConfigMixin
from datetime import datetime, timezone


class TournamentDate(ScoringConfigMixin, db.Model):
    """A matchday: its own team subset, scoring config and matches."""

    __tablename__ = "tournament_dates"

    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(
        db.Integer, db.ForeignKey("tournaments.id"), nullable=False
    )
    name = db.Column(db.String(200), nullable=False)
    teams = db.Column(db.JSON, nullable=False, default=list)
    closed = db.Column(db.Boolean, nullable=False, default=False)
    closed_at = db.Column(db.DateTime, nullable=True)
    total_matches = db.Column(db.Integer, nullable=False, default=0)
    completed_matches = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(
        db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    matches = db.relationship(
        "Match", backref="date", order_by="Match.id", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<TournamentDate {self.name}>"
