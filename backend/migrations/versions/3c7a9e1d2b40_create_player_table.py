"""create player table

Revision ID: 3c7a9e1d2b40
Revises:
Create Date: 2026-10-18 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c7a9e1d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'player' in set(insp.get_table_names()):
        return
    op.create_table(
        'player',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('secret_hash', sa.String(length=128), nullable=True),
        sa.Column('wins', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('losses', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('ties', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_games', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('wins >= 0 AND losses >= 0 AND ties >= 0', name='ck_player_counters_non_negative'),
        sa.CheckConstraint('total_games = wins + losses + ties', name='ck_player_total_games'),
    )
    with op.batch_alter_table('player') as batch_op:
        batch_op.create_index('ix_player_name', ['name'], unique=True)
        batch_op.create_index('ix_player_email', ['email'], unique=True)
        batch_op.create_index('ix_player_total_games', ['total_games'], unique=False)


def downgrade():
    with op.batch_alter_table('player') as batch_op:
        batch_op.drop_index('ix_player_total_games')
        batch_op.drop_index('ix_player_email')
        batch_op.drop_index('ix_player_name')
    op.drop_table('player')
