"""initial tables: users, slots

Revision ID: 0001
Revises:
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='user'),
        sa.Column('is_active_flag', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table('slots',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slot_number', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='available'),
        sa.Column('booked_by', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('booked_at', sa.DateTime(), nullable=True),
        sa.Column('unbooked_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('slot_number > 0', name='ck_slots_number_positive'),
        sa.CheckConstraint(
            "(status = 'booked' AND booked_by IS NOT NULL AND booked_by <> '') "
            "OR (status = 'available' AND booked_by IS NULL)",
            name='ck_slots_status_owner',
        ),
    )
    op.create_index('ix_slots_slot_number', 'slots', ['slot_number'], unique=True)
    op.create_index('ix_slots_status', 'slots', ['status'])
    op.create_index('ix_slots_booked_by', 'slots', ['booked_by'])

def downgrade():
    op.drop_index('ix_slots_booked_by', table_name='slots')
    op.drop_index('ix_slots_status', table_name='slots')
    op.drop_index('ix_slots_slot_number', table_name='slots')
    op.drop_table('slots')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
