"""
Initial schema: members, daily quotes with predictions, simulation history
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20251001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'member',
        sa.Column('member_no', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('member_id', sa.String(50), nullable=False),
        sa.Column('member_pwd', sa.String(100), nullable=False),
        sa.Column('member_name', sa.String(50), nullable=False),
        sa.Column('member_email', sa.String(255), nullable=False),
        sa.Column('member_role', sa.String(20), nullable=False, server_default='ROLE_USER'),
        sa.Column('member_created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('member_updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('member_last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('member_is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('member_deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('idx_member_member_id', 'member', ['member_id'], unique=True)
    op.create_index('idx_member_member_email', 'member', ['member_email'], unique=True)

    op.create_table(
        'member_auth',
        sa.Column('no', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('member_id', sa.String(50), sa.ForeignKey('member.member_id'), nullable=False),
        sa.Column('auth', sa.String(20), nullable=False),
    )
    op.create_index('idx_member_auth_member_id', 'member_auth', ['member_id'])

    op.create_table(
        'quotes_daily',
        sa.Column('date', sa.Date, primary_key=True),
        sa.Column('krw_g_open', sa.Float, nullable=True),
        sa.Column('krw_g_close', sa.Float, nullable=True),
        sa.Column('usd_oz_open', sa.Float, nullable=True),
        sa.Column('usd_oz_close', sa.Float, nullable=True),
        sa.Column('vix', sa.Float, nullable=True),
        sa.Column('etf_volume', sa.Float, nullable=True),
        sa.Column('fx_rate', sa.Float, nullable=True),
    )

    op.create_table(
        'gold_prediction',
        sa.Column('date', sa.Date, primary_key=True),
        sa.Column('pred_close', sa.Float, nullable=False),
    )

    op.create_table(
        'simulation_history',
        sa.Column('history_no', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('member_no', sa.Integer, nullable=False),
        sa.Column('history_date', sa.Date, nullable=False),
        sa.Column('history_type', sa.String(20), nullable=True),
        sa.Column('history_predict', sa.String(20), nullable=True),
        sa.Column('history_result', sa.String(20), nullable=True),
        sa.Column('pnl', sa.Float, nullable=True),
        sa.Column('favorite', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('tags', sa.String(255), nullable=True),
        sa.Column('note', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    # Every history query filters by member and date range
    op.create_index('idx_simulation_history_member_date', 'simulation_history', ['member_no', 'history_date'])


def downgrade():
    op.drop_index('idx_simulation_history_member_date', table_name='simulation_history')
    op.drop_table('simulation_history')
    op.drop_table('gold_prediction')
    op.drop_table('quotes_daily')
    op.drop_index('idx_member_auth_member_id', table_name='member_auth')
    op.drop_table('member_auth')
    op.drop_index('idx_member_member_email', table_name='member')
    op.drop_index('idx_member_member_id', table_name='member')
    op.drop_table('member')
