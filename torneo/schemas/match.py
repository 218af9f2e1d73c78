from torneo.extensions import ma
from torneo.models.match import Match
from marshmallow import Schema, fields, validate


class MatchSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Match
        load_instance = True
        include_fk = True

    result = fields.Function(lambda obj: obj.result.value if obj.result else None)
    playoff_type = fields.Function(
        lambda obj: obj.playoff_type.value if obj.playoff_type else None
    )


class CreateMatchSchema(Schema):
    team1 = fields.String(required=True, validate=validate.Length(min=1, max=200))
    team2 = fields.String(required=True, validate=validate.Length(min=1, max=200))


class SubmitResultSchema(Schema):
    team1_score = fields.Integer(required=True, strict=True, validate=validate.Range(min=0))
    team2_score = fields.Integer(required=True, strict=True, validate=validate.Range(min=0))
    result = fields.String(
        load_default=None, validate=validate.OneOf(["team1", "team2", "draw"])
    )


class PairingSchema(Schema):
    team1 = fields.String(required=True)
    team2 = fields.String(required=True)
    round = fields.Integer(load_default=None)
    block = fields.Integer(load_default=None)


class FixturePreviewSchema(Schema):
    teams = fields.List(fields.String(), required=True)
    block = fields.Integer(load_default=1, validate=validate.Range(min=1))


class ValidatePairingsSchema(Schema):
    teams = fields.List(fields.String(), required=True)
    pairings = fields.List(fields.Nested(PairingSchema), required=True)
