"""create highscores table

Revision ID: 5c2a9e71d3b0
Revises:
Create Date: 2025-08-10 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e71d3b0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'highscores' in set(insp.get_table_names()):
        return

    op.create_table(
        'highscores',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('game', sa.String(length=100), nullable=False),
        sa.Column('mode', sa.String(length=50), nullable=False),
        sa.Column('platform', sa.String(length=50), nullable=False),
        sa.Column('player', sa.String(length=50), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_highscores_board', 'highscores', ['game', 'mode', 'platform', 'score'])
    op.create_index('ix_highscores_player', 'highscores', ['player'])
    op.create_index('ix_highscores_submitted_at', 'highscores', ['submitted_at'])


def downgrade():
    op.drop_index('ix_highscores_submitted_at', table_name='highscores')
    op.drop_index('ix_highscores_player', table_name='highscores')
    op.drop_index('ix_highscores_board', table_name='highscores')
    op.drop_table('highscores')
