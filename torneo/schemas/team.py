from torneo.extensions import ma
from torneo.models.team import Team
from marshmallow import Schema, fields


class TeamSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Team
        load_instance = True
        include_fk = True


class StandingSchema(Schema):
    """A computed standings row (not a database row)."""

    name = fields.String()
    points = fields.Integer()
    wins = fields.Integer()
    draws = fields.Integer()
    losses = fields.Integer()
    matches_played = fields.Integer()
    goals_for = fields.Integer()
    goals_against = fields.Integer()
    goal_difference = fields.Integer()
