from torneo.extensions import ma
from torneo.models.tournament_date import TournamentDate
from torneo.schemas.tournament import TournamentConfigSchema
from marshmallow import Schema, fields, validate


class TournamentDateSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = TournamentDate
        load_instance = True
        include_fk = True
        exclude = ("scoring_type", "allow_tie", "require_all_matches")

    config = fields.Function(lambda obj: obj.config)
    teams = fields.List(fields.String())
    matches = ma.Nested("MatchSchema", many=True, dump_only=True)


class CreateTournamentDateSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    teams = fields.List(
        fields.String(validate=validate.Length(max=200)),
        required=True,
        validate=validate.Length(min=2, max=16),
    )
    config = fields.Nested(TournamentConfigSchema, load_default=None)
