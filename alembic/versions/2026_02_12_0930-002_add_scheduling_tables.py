"""Add split cycle, booking and waitlist tables

Revision ID: 002
Revises: 001
Create Date: 2026-02-12 09:30:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_NOW = sa.text('(CURRENT_TIMESTAMP)')


def _timestamps() -> list[sa.Column]:
    return [sa.Column('created_at', sa.DateTime(), nullable=False, server_default=_NOW),
            sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=_NOW)]


def upgrade() -> None:
    """Create split plan, cycle, booking and waitlist tables."""
    op.create_table('split_plans', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('split_type', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('cycle_days', sa.Integer(), nullable=False),
        sa.Column('sessions', sa.JSON(), nullable=False),
        sa.Column('frequency_map', sa.JSON(), nullable=False),
        sa.Column('volume_distribution', sa.JSON(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='false'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_split_plans_user_id'), 'split_plans', ['user_id'])
    op.create_index(op.f('ix_split_plans_active'), 'split_plans', ['active'])

    op.create_table('training_cycles', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('active_split_plan_id', sa.Integer(), nullable=True),
        sa.Column('current_cycle_day', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('cycles_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_cycle_start_date', sa.DateTime(), nullable=True),
        sa.Column('last_cycle_completed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['active_split_plan_id'], ['split_plans.id']),
        sa.CheckConstraint('current_cycle_day >= 1', name='ck_training_cycles_day_positive'),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_training_cycles_user_id'), 'training_cycles', ['user_id'], unique=True)

    op.create_table('workouts', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('split_plan_id', sa.Integer(), nullable=True),
        sa.Column('cycle_day', sa.Integer(), nullable=True),
        sa.Column('variation', sqlmodel.sql.sqltypes.AutoString(length=10), nullable=True),
        sa.Column('workout_type', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('exercises', sa.JSON(), nullable=False),
        sa.Column('total_volume', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_sets', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('duration_seconds', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('mental_readiness_overall', sa.Integer(), nullable=True),
        sa.Column('planned_at', sa.Date(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['split_plan_id'], ['split_plans.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_workouts_user_id'), 'workouts', ['user_id'])
    op.create_index(op.f('ix_workouts_split_plan_id'), 'workouts', ['split_plan_id'])
    op.create_index(op.f('ix_workouts_status'), 'workouts', ['status'])
    op.create_index(op.f('ix_workouts_completed_at'), 'workouts', ['completed_at'])

    op.create_table('cycle_completions', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('split_plan_id', sa.Integer(), nullable=False),
        sa.Column('cycle_number', sa.Integer(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=False),
        sa.Column('total_volume', sa.Float(), nullable=False),
        sa.Column('total_workouts_completed', sa.Integer(), nullable=False),
        sa.Column('total_sets', sa.Integer(), nullable=False),
        sa.Column('total_duration_seconds', sa.Integer(), nullable=False),
        sa.Column('avg_mental_readiness', sa.Float(), nullable=True),
        sa.Column('sets_by_muscle_group', sa.JSON(), nullable=False),
        sa.Column('workouts_by_type', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=_NOW),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['split_plan_id'], ['split_plans.id']),
        sa.UniqueConstraint('user_id', 'cycle_number', name='uq_cycle_completion_user_number'),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_cycle_completions_user_id'), 'cycle_completions', ['user_id'])

    op.create_table('split_modifications', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('split_plan_id', sa.Integer(), nullable=False),
        sa.Column('modification_type', sqlmodel.sql.sqltypes.AutoString(length=30), nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('previous_state', sa.JSON(), nullable=False),
        sa.Column('ai_validation', sa.JSON(), nullable=False),
        sa.Column('user_override', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('user_reason', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=_NOW),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['split_plan_id'], ['split_plans.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_split_modifications_user_id'), 'split_modifications', ['user_id'])
    op.create_index(op.f('ix_split_modifications_split_plan_id'), 'split_modifications', ['split_plan_id'])
    op.create_index(op.f('ix_split_modifications_created_at'), 'split_modifications', ['created_at'])

    op.create_table('coach_client_relationships', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('coach_id', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=_NOW),
        sa.ForeignKeyConstraint(['coach_id'], ['users.id']),
        sa.ForeignKeyConstraint(['client_id'], ['users.id']),
        sa.UniqueConstraint('coach_id', 'client_id', name='uq_coach_client'),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_coach_client_relationships_coach_id'), 'coach_client_relationships', ['coach_id'])
    op.create_index(op.f('ix_coach_client_relationships_client_id'), 'coach_client_relationships', ['client_id'])

    op.create_table('coach_availability', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('coach_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('location_type', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['coach_id'], ['users.id']),
        sa.UniqueConstraint('coach_id', 'date', 'start_time', 'location_type', name='uq_availability_coach_slot'),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_coach_availability_coach_id'), 'coach_availability', ['coach_id'])
    op.create_index(op.f('ix_coach_availability_date'), 'coach_availability', ['date'])

    op.create_table('coach_blocks', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('coach_id', sa.Integer(), nullable=False),
        sa.Column('block_type', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('custom_reason', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['coach_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_coach_blocks_coach_id'), 'coach_blocks', ['coach_id'])
    op.create_index(op.f('ix_coach_blocks_start_date'), 'coach_blocks', ['start_date'])
    op.create_index(op.f('ix_coach_blocks_end_date'), 'coach_blocks', ['end_date'])

    op.create_table('bookings', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('coach_id', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('location_type', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('recurring_series_id', sqlmodel.sql.sqltypes.AutoString(length=36), nullable=True),
        sa.Column('recurring_pattern', sa.JSON(), nullable=True),
        sa.Column('occurrence_index', sa.Integer(), nullable=True),
        sa.Column('coach_notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('client_notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('cancellation_reason', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        *_timestamps(),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['coach_id'], ['users.id']),
        sa.ForeignKeyConstraint(['client_id'], ['users.id']),
        sa.CheckConstraint('end_time > start_time', name='ck_bookings_time_order'),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_bookings_coach_id'), 'bookings', ['coach_id'])
    op.create_index(op.f('ix_bookings_client_id'), 'bookings', ['client_id'])
    op.create_index(op.f('ix_bookings_scheduled_date'), 'bookings', ['scheduled_date'])
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'])
    op.create_index(op.f('ix_bookings_recurring_series_id'), 'bookings', ['recurring_series_id'])

    op.create_table('booking_notifications', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('recipient_id', sa.Integer(), nullable=False),
        sa.Column('notification_type', sqlmodel.sql.sqltypes.AutoString(length=30), nullable=False),
        sa.Column('channel', sqlmodel.sql.sqltypes.AutoString(length=10), nullable=False),
        sa.Column('scheduled_for', sa.DateTime(), nullable=False),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=10), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=_NOW),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id']),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_booking_notifications_booking_id'), 'booking_notifications', ['booking_id'])
    op.create_index(op.f('ix_booking_notifications_recipient_id'), 'booking_notifications', ['recipient_id'])

    op.create_table('booking_waitlist_entries', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('coach_id', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('preferred_days', sa.JSON(), nullable=False),
        sa.Column('preferred_time_start', sa.Time(), nullable=True),
        sa.Column('preferred_time_end', sa.Time(), nullable=True),
        sa.Column('urgency_level', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('priority_score', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('offered_slot', sa.JSON(), nullable=True),
        sa.Column('notified_at', sa.DateTime(), nullable=True),
        sa.Column('response_deadline', sa.DateTime(), nullable=True),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['coach_id'], ['users.id']),
        sa.ForeignKeyConstraint(['client_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_booking_waitlist_entries_coach_id'), 'booking_waitlist_entries', ['coach_id'])
    op.create_index(op.f('ix_booking_waitlist_entries_client_id'), 'booking_waitlist_entries', ['client_id'])
    op.create_index(op.f('ix_booking_waitlist_entries_status'), 'booking_waitlist_entries', ['status'])


def downgrade() -> None:
    """Drop scheduling tables."""
    for table in ('booking_waitlist_entries', 'booking_notifications', 'bookings', 'coach_blocks',
                  'coach_availability', 'coach_client_relationships', 'split_modifications', 'cycle_completions',
                  'workouts', 'training_cycles', 'split_plans'):
        op.drop_table(table)
