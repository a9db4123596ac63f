"""Create workflow tables

Revision ID: 0001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'job_postings',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('facility_id', sa.String(length=255), nullable=False),
        sa.Column('facility_name', sa.String(length=255), nullable=False),
        sa.Column('specialty', sa.String(length=100), nullable=False),
        sa.Column('subspecialty', sa.String(length=100), nullable=True),
        sa.Column('required_licenses', sa.JSON(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('assignment_type', sa.String(length=30), nullable=False),
        sa.Column('block_duration', sa.Integer(), nullable=True),
        sa.Column('pay_amount', sa.Float(), nullable=False),
        sa.Column('requirements', sa.Text(), nullable=False),
        sa.Column('malpractice_included', sa.Boolean(), nullable=True),
        sa.Column('travel_included', sa.Boolean(), nullable=True),
        sa.Column('lodging_included', sa.Boolean(), nullable=True),
        sa.Column('flight_budget_cap', sa.Float(), nullable=True),
        sa.Column('hotel_budget_cap', sa.Float(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_job_postings_facility_id', 'job_postings', ['facility_id'], unique=False)
    op.create_index('ix_job_postings_specialty', 'job_postings', ['specialty'], unique=False)
    op.create_index('ix_job_postings_status', 'job_postings', ['status'], unique=False)

    op.create_table(
        'physician_profiles',
        sa.Column('physician_id', sa.String(length=255), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('completion_percentage', sa.Integer(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('physician_id')
    )

    op.create_table(
        'applications',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('job_posting_id', sa.String(length=32), nullable=False),
        sa.Column('physician_id', sa.String(length=255), nullable=False),
        sa.Column('physician_name', sa.String(length=255), nullable=False),
        sa.Column('physician_specialty', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.Column('review_deadline', sa.DateTime(), nullable=False),
        sa.Column('facility_decision_at', sa.DateTime(), nullable=True),
        sa.Column('decision_reason', sa.Text(), nullable=True),
        sa.Column('calendar_blocked', sa.Boolean(), nullable=False),
        sa.Column('blocked_start_date', sa.Date(), nullable=False),
        sa.Column('blocked_end_date', sa.Date(), nullable=False),
        sa.Column('profile_snapshot', sa.JSON(), nullable=False),
        sa.Column('notifications_sent', sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(['job_posting_id'], ['job_postings.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_applications_job_posting_id', 'applications', ['job_posting_id'], unique=False)
    op.create_index('ix_applications_physician_id', 'applications', ['physician_id'], unique=False)
    op.create_index('ix_applications_status', 'applications', ['status'], unique=False)
    op.create_index('ix_applications_review_deadline', 'applications', ['review_deadline'], unique=False)

    op.create_table(
        'calendar_blocks',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('physician_id', sa.String(length=255), nullable=False),
        sa.Column('application_id', sa.String(length=32), nullable=False),
        sa.Column('job_posting_id', sa.String(length=32), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('reason', sa.String(length=30), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('released_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id']),
        sa.ForeignKeyConstraint(['job_posting_id'], ['job_postings.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('application_id')
    )
    op.create_index('ix_calendar_blocks_physician_id', 'calendar_blocks', ['physician_id'], unique=False)
    op.create_index('ix_calendar_blocks_status', 'calendar_blocks', ['status'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_calendar_blocks_status', table_name='calendar_blocks')
    op.drop_index('ix_calendar_blocks_physician_id', table_name='calendar_blocks')
    op.drop_table('calendar_blocks')
    op.drop_index('ix_applications_review_deadline', table_name='applications')
    op.drop_index('ix_applications_status', table_name='applications')
    op.drop_index('ix_applications_physician_id', table_name='applications')
    op.drop_index('ix_applications_job_posting_id', table_name='applications')
    op.drop_table('applications')
    op.drop_table('physician_profiles')
    op.drop_index('ix_job_postings_status', table_name='job_postings')
    op.drop_index('ix_job_postings_specialty', table_name='job_postings')
    op.drop_index('ix_job_postings_facility_id', table_name='job_postings')
    op.drop_table('job_postings')
