"""create puzzle, ledger and stats tables

Revision ID: 3c7a9e1d2b40
Revises:
Create Date: 2025-01-10 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c7a9e1d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)

    op.create_table(
        'puzzle',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.String(length=10), nullable=False),
        sa.Column('initial_grid', sa.JSON(), nullable=False),
        sa.Column('target_color', sa.String(length=16), nullable=False),
        sa.Column('actions', sa.JSON(), nullable=False),
        sa.Column('optimal_move_count', sa.Integer(), nullable=False),
        sa.Column('color_map', sa.JSON(), nullable=True),
    )
    op.create_index('ix_puzzle_date', 'puzzle', ['date'], unique=True)

    op.create_table(
        'user_puzzle_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('puzzle_id', sa.String(length=10), sa.ForeignKey('puzzle.date'), nullable=False),
        sa.Column('attempt_count', sa.Integer(), nullable=False),
        sa.Column('hint_ever_used', sa.Boolean(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('total_moves', sa.Integer(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.UniqueConstraint('user_id', 'puzzle_id', name='uq_history_user_puzzle'),
    )

    op.create_table(
        'user_puzzle_record',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('puzzle_id', sa.String(length=10), sa.ForeignKey('puzzle.date'), nullable=False),
        sa.Column('difficulty', sa.String(length=8), nullable=False),
        sa.Column('move_count', sa.Integer(), nullable=True),
        sa.Column('elo_score', sa.Integer(), nullable=True),
        sa.Column('first_try', sa.Boolean(), nullable=False),
        sa.Column('hint_used', sa.Boolean(), nullable=False),
        sa.Column('attempt_to_win', sa.Integer(), nullable=True),
        sa.Column('attempt_to_tie', sa.Integer(), nullable=True),
        sa.Column('attempt_to_beat', sa.Integer(), nullable=True),
        sa.Column('first_to_beat_bot', sa.Boolean(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.UniqueConstraint('user_id', 'puzzle_id', 'difficulty', name='uq_record_user_puzzle_difficulty'),
    )

    op.create_table(
        'daily_difficulty_scores',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('puzzle_id', sa.String(length=10), sa.ForeignKey('puzzle.date'), nullable=False),
        sa.Column('difficulty', sa.String(length=8), nullable=False),
        sa.Column('scores', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.UniqueConstraint('puzzle_id', 'difficulty', name='uq_daily_scores_puzzle_difficulty'),
    )

    op.create_table(
        'daily_difficulty_stats',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('puzzle_id', sa.String(length=10), sa.ForeignKey('puzzle.date'), nullable=False),
        sa.Column('difficulty', sa.String(length=8), nullable=False),
        sa.Column('lowest_score', sa.Integer(), nullable=True),
        sa.Column('average_score', sa.Float(), nullable=True),
        sa.Column('total_players', sa.Integer(), nullable=False),
        sa.Column('players_with_lowest_score', sa.Integer(), nullable=False),
        sa.UniqueConstraint('puzzle_id', 'difficulty', name='uq_daily_stats_puzzle_difficulty'),
    )

    op.create_table(
        'leaderboard_aggregate',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False, unique=True),
        sa.Column('games_played', sa.Integer(), nullable=False),
        sa.Column('total_attempts', sa.Integer(), nullable=False),
        sa.Column('total_moves', sa.Integer(), nullable=False),
        sa.Column('total_wins', sa.Integer(), nullable=False),
        sa.Column('puzzles_completed', sa.Integer(), nullable=False),
        sa.Column('current_completed_streak', sa.Integer(), nullable=False),
        sa.Column('longest_completed_streak', sa.Integer(), nullable=False),
        sa.Column('last_completed_date', sa.String(length=10), nullable=True),
        sa.Column('elo_by_day', sa.JSON(), nullable=False),
        sa.Column('elo_total_all_time', sa.Integer(), nullable=False),
        sa.Column('elo_total_last30', sa.Integer(), nullable=False),
        sa.Column('elo_total_last7', sa.Integer(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )

    op.create_table(
        'difficulty_aggregate',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('difficulty', sa.String(length=8), nullable=False),
        sa.Column('wins', sa.Integer(), nullable=False),
        sa.Column('goals_achieved', sa.Integer(), nullable=False),
        sa.Column('goals_beaten', sa.Integer(), nullable=False),
        sa.Column('current_tie_bot_streak', sa.Integer(), nullable=False),
        sa.Column('longest_tie_bot_streak', sa.Integer(), nullable=False),
        sa.Column('last_tie_bot_date', sa.String(length=10), nullable=True),
        sa.Column('current_first_try_streak', sa.Integer(), nullable=False),
        sa.Column('longest_first_try_streak', sa.Integer(), nullable=False),
        sa.Column('last_first_try_date', sa.String(length=10), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.UniqueConstraint('user_id', 'difficulty', name='uq_difficulty_aggregate_user'),
    )


def downgrade():
    for table in (
        'difficulty_aggregate',
        'leaderboard_aggregate',
        'daily_difficulty_stats',
        'daily_difficulty_scores',
        'user_puzzle_record',
        'user_puzzle_history',
        'puzzle',
    ):
        op.drop_table(table)
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
