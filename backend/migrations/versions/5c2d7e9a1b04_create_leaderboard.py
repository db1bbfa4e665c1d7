"""create leaderboard table

Revision ID: 5c2d7e9a1b04
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2d7e9a1b04'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'leaderboard' in set(insp.get_table_names()):
        return
    op.create_table(
        'leaderboard',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_name', sa.String(length=64), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('time_ms', sa.Integer(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_leaderboard_score', 'leaderboard', ['score'])
    op.create_index('ix_leaderboard_created_at', 'leaderboard', ['created_at'])


def downgrade():
    op.drop_index('ix_leaderboard_created_at', table_name='leaderboard')
    op.drop_index('ix_leaderboard_score', table_name='leaderboard')
    op.drop_table('leaderboard')
