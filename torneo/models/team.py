from torneo.extensions import db
from datetime import datetime, timezone


class Team(db.Model):
    """Aggregate standing of a team across every date of a tournament.

    Rows are rewritten from a full recompute of the match history, never
    patched incrementally.
    """

    __tablename__ = "teams"

    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(
        db.Integer, db.ForeignKey("tournaments.id"), nullable=False
    )
    name = db.Column(db.String(200), nullable=False)
    points = db.Column(db.Integer, nullable=False, default=0)
    wins = db.Column(db.Integer, nullable=False, default=0)
    draws = db.Column(db.Integer, nullable=False, default=0)
    losses = db.Column(db.Integer, nullable=False, default=0)
    matches_played = db.Column(db.Integer, nullable=False, default=0)
    goals_for = db.Column(db.Integer, nullable=False, default=0)
    goals_against = db.Column(db.Integer, nullable=False, default=0)
    goal_difference = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        db.UniqueConstraint("tournament_id", "name", name="uq_team_tournament_name"),
    )

    def __repr__(self):
        return f"<Team {self.name} - {self.points}pts>"
