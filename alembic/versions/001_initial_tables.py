"""Initial tables

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Leagues (with current season snapshot)
    op.create_table(
        'leagues',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('country_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('short_code', sa.String(length=20), nullable=True),
        sa.Column('logo', sa.String(length=500), nullable=True),
        sa.Column('season_id', sa.Integer(), nullable=True),
        sa.Column('season_name', sa.String(length=100), nullable=True),
        sa.Column('season_start', sa.Date(), nullable=True),
        sa.Column('season_end', sa.Date(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_leagues_country_id', 'leagues', ['country_id'])
    op.create_index('ix_leagues_season_id', 'leagues', ['season_id'])

    # Seasons
    op.create_table(
        'seasons',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('league_id', sa.Integer(), nullable=True),
        sa.Column('club_ids', postgresql.JSONB(), nullable=False),
        sa.Column('fixture_ids', postgresql.JSONB(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_seasons_league_id', 'seasons', ['league_id'])

    # Clubs
    op.create_table(
        'clubs',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('country_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('short_code', sa.String(length=20), nullable=True),
        sa.Column('logo', sa.String(length=500), nullable=True),
        sa.Column('league_id', sa.Integer(), nullable=True),
        sa.Column('roster', postgresql.JSONB(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_clubs_league_id', 'clubs', ['league_id'])

    # Fixtures
    op.create_table(
        'fixtures',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('league_id', sa.Integer(), nullable=True),
        sa.Column('season_id', sa.Integer(), nullable=True),
        sa.Column('stage_id', sa.Integer(), nullable=True),
        sa.Column('round_id', sa.Integer(), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('home_team_id', sa.Integer(), nullable=True),
        sa.Column('away_team_id', sa.Integer(), nullable=True),
        sa.Column('lineups', postgresql.JSONB(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_fixtures_league_id', 'fixtures', ['league_id'])
    op.create_index('ix_fixtures_season_id', 'fixtures', ['season_id'])

    # Players
    op.create_table(
        'players',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('position_id', sa.Integer(), nullable=True),
        sa.Column('position_name', sa.String(length=100), nullable=True),
        sa.Column('detailed_position_id', sa.Integer(), nullable=True),
        sa.Column('detailed_position_name', sa.String(length=100), nullable=True),
        sa.Column('type_id', sa.Integer(), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('common_name', sa.String(length=100), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('photo', sa.String(length=500), nullable=True),
        sa.Column('country_name', sa.String(length=100), nullable=True),
        sa.Column('country_flag', sa.String(length=500), nullable=True),
        sa.Column('country_fifa_name', sa.String(length=10), nullable=True),
        sa.Column('country_iso3', sa.String(length=3), nullable=True),
        sa.Column('statistics', postgresql.JSONB(), nullable=True),
        sa.Column('club_id', sa.Integer(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['club_id'], ['clubs.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_players_club_id', 'players', ['club_id'])

    # Types (lookup labels for positions and statistics)
    op.create_table(
        'types',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('code', sa.String(length=255), nullable=True),
        sa.Column('developer_name', sa.String(length=255), nullable=True),
        sa.Column('model_type', sa.String(length=100), nullable=True),
        sa.Column('stat_group', sa.String(length=100), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Countries
    op.create_table(
        'countries',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('fifa_name', sa.String(length=10), nullable=True),
        sa.Column('iso3', sa.String(length=3), nullable=True),
        sa.Column('flag', sa.String(length=500), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Sync status per entity type
    op.create_table(
        'sync_statuses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('entity_type', sa.String(length=20), nullable=False),
        sa.Column('last_synced_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('entity_type')
    )

    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    # Fantasy clubs
    op.create_table(
        'fantasy_clubs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('roster', postgresql.JSONB(), nullable=False),
        sa.Column('fantasy_points', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('owner_id')
    )


def downgrade() -> None:
    op.drop_table('fantasy_clubs')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.drop_table('sync_statuses')
    op.drop_table('countries')
    op.drop_table('types')
    op.drop_index('ix_players_club_id', table_name='players')
    op.drop_table('players')
    op.drop_index('ix_fixtures_season_id', table_name='fixtures')
    op.drop_index('ix_fixtures_league_id', table_name='fixtures')
    op.drop_table('fixtures')
    op.drop_index('ix_clubs_league_id', table_name='clubs')
    op.drop_table('clubs')
    op.drop_index('ix_seasons_league_id', table_name='seasons')
    op.drop_table('seasons')
    op.drop_index('ix_leagues_season_id', table_name='leagues')
    op.drop_index('ix_leagues_country_id', table_name='leagues')
    op.drop_table('leagues')
