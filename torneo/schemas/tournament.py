from torneo.extensions import ma
from torneo.models.tournament import Tournament
from marshmallow import Schema, fields, validate


class TournamentConfigSchema(Schema):
    type = fields.String(load_default="points", validate=validate.OneOf(["points", "wins"]))
    allow_tie = fields.Boolean(load_default=True)
    require_all_matches = fields.Boolean(load_default=False)


class TournamentSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Tournament
        load_instance = True
        exclude = ("scoring_type", "allow_tie", "require_all_matches")

    status = fields.Function(lambda obj: obj.status.value if obj.status else None)
    config = fields.Function(lambda obj: obj.config)
    runners = fields.Function(lambda obj: list(obj.runners or []))
    dates = ma.Nested("TournamentDateSchema", many=True, dump_only=True)
    teams = ma.Nested("TeamSchema", many=True, dump_only=True)


class TournamentSummarySchema(Schema):
    id = fields.Integer()
    name = fields.String()
    status = fields.String()
    created_at = fields.DateTime()
    completed_at = fields.DateTime(allow_none=True)
    winner = fields.String(allow_none=True)
    runners = fields.List(fields.String())
    total_teams = fields.Integer()
    total_matches = fields.Integer()
    type = fields.String()


class CreateTournamentSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    config = fields.Nested(TournamentConfigSchema, load_default=None)


class CreateTiebreakerSchema(Schema):
    team1 = fields.String(required=True, validate=validate.Length(min=1, max=200))
    team2 = fields.String(required=True, validate=validate.Length(min=1, max=200))


class FinalResultSchema(Schema):
    winner = fields.String(allow_none=True)
    runners = fields.List(fields.String())
    needs_tiebreaker = fields.Boolean()
