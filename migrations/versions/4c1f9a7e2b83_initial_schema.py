"""initial schema

Revision ID: 4c1f9a7e2b83
Revises:
Create Date: 2026-10-18 10:12:31.447902

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '4c1f9a7e2b83'
down_revision = None
branch_labels = None
depends_on = None


scoringtype_enum = postgresql.ENUM('POINTS', 'WINS', name='scoringtype', create_type=False)
tournamentstatus_enum = postgresql.ENUM(
    'SETUP', 'ACTIVE', 'COMPLETED', 'TIEBREAKER', name='tournamentstatus', create_type=False
)
matchresult_enum = postgresql.ENUM('TEAM1', 'TEAM2', 'DRAW', name='matchresult', create_type=False)
playofftype_enum = postgresql.ENUM('TIEBREAKER', name='playofftype', create_type=False)

ENUM_TYPES = (scoringtype_enum, tournamentstatus_enum, matchresult_enum, playofftype_enum)


def upgrade():
    # Enum types are shared between tables, create them once for PostgreSQL
    for enum_type in ENUM_TYPES:
        enum_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'tournaments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('status', tournamentstatus_enum, nullable=False),
        sa.Column('is_complete', sa.Boolean(), nullable=False),
        sa.Column('winner', sa.String(length=200), nullable=True),
        sa.Column('runners', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('scoring_type', scoringtype_enum, nullable=False),
        sa.Column('allow_tie', sa.Boolean(), nullable=False),
        sa.Column('require_all_matches', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'tournament_dates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tournament_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('teams', sa.JSON(), nullable=False),
        sa.Column('closed', sa.Boolean(), nullable=False),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.Column('total_matches', sa.Integer(), nullable=False),
        sa.Column('completed_matches', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('scoring_type', scoringtype_enum, nullable=False),
        sa.Column('allow_tie', sa.Boolean(), nullable=False),
        sa.Column('require_all_matches', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tournament_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('wins', sa.Integer(), nullable=False),
        sa.Column('draws', sa.Integer(), nullable=False),
        sa.Column('losses', sa.Integer(), nullable=False),
        sa.Column('matches_played', sa.Integer(), nullable=False),
        sa.Column('goals_for', sa.Integer(), nullable=False),
        sa.Column('goals_against', sa.Integer(), nullable=False),
        sa.Column('goal_difference', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tournament_id', 'name', name='uq_team_tournament_name'),
    )
    op.create_table(
        'matches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tournament_id', sa.Integer(), nullable=False),
        sa.Column('date_id', sa.Integer(), nullable=True),
        sa.Column('team1', sa.String(length=200), nullable=False),
        sa.Column('team2', sa.String(length=200), nullable=False),
        sa.Column('round', sa.Integer(), nullable=False),
        sa.Column('block', sa.Integer(), nullable=False),
        sa.Column('locked', sa.Boolean(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('result', matchresult_enum, nullable=True),
        sa.Column('team1_score', sa.Integer(), nullable=True),
        sa.Column('team2_score', sa.Integer(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('is_playoff', sa.Boolean(), nullable=False),
        sa.Column('playoff_type', playofftype_enum, nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['date_id'], ['tournament_dates.id']),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('matches', schema=None) as batch_op:
        batch_op.create_index('ix_matches_tournament_id', ['tournament_id'], unique=False)
        batch_op.create_index('ix_matches_date_id', ['date_id'], unique=False)


def downgrade():
    with op.batch_alter_table('matches', schema=None) as batch_op:
        batch_op.drop_index('ix_matches_date_id')
        batch_op.drop_index('ix_matches_tournament_id')

    op.drop_table('matches')
    op.drop_table('teams')
    op.drop_table('tournament_dates')
    op.drop_table('tournaments')

    # PostgreSQL keeps enum types after their tables are dropped
    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(op.get_bind(), checkfirst=True)
