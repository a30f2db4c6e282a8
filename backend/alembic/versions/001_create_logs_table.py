"""Create logs table

Revision ID: 001
Create Date: 2025-03-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_create_logs_table'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('user_email', sa.String(255), nullable=True),
        sa.Column('product_code', sa.String(100), nullable=True),
        sa.Column('product_name', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('ip_address', sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_logs_created_at', 'logs', ['created_at'])
    op.create_index('ix_logs_action', 'logs', ['action'])


def downgrade() -> None:
    op.drop_index('ix_logs_action', table_name='logs')
    op.drop_index('ix_logs_created_at', table_name='logs')
    op.drop_table('logs')
