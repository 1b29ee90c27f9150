"""Create users, estates, collaborators, sub-resources and the activity trail

Revision ID: 20261018_estates
Revises:
Create Date: 2026-10-18 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20261018_estates'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
    ]


def _estate_scoped():
    return [
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, primary_key=True),
        sa.Column('estate_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('estates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
    ]


def upgrade() -> None:
    # 1) Users
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 2) Estates and collaborators
    op.create_table(
        'estates',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, primary_key=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('label', sa.String(), nullable=False),
        sa.Column('decedent_name', sa.String(), nullable=True),
        sa.Column('court_county', sa.String(), nullable=True),
        sa.Column('court_case_number', sa.String(), nullable=True),
        sa.Column('court_state', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='OPEN'),
        *_timestamps(),
        sa.CheckConstraint("status in ('OPEN','CLOSED')", name='ck_estates_status'),
    )
    op.create_index('ix_estates_owner_id', 'estates', ['owner_id'], unique=False)

    op.create_table(
        'estate_collaborators',
        sa.Column('id', sa.Integer(), nullable=False, primary_key=True, autoincrement=True),
        sa.Column('estate_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('estates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('role', sa.Text(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
    )
    op.create_index('ix_estate_collaborators_estate_id_position', 'estate_collaborators', ['estate_id', 'position'], unique=False)
    op.create_index('ix_estate_collaborators_user_id', 'estate_collaborators', ['user_id'], unique=False)

    # 3) Activity trail (no foreign keys; history outlives the rows it describes)
    op.create_table(
        'estate_activity',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, primary_key=True),
        sa.Column('estate_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('kind', sa.Text(), nullable=False),
        sa.Column('action', sa.Text(), nullable=False),
        sa.Column('entity_id', sa.Text(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('snapshot', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint("kind in ('invoice','document','task','note')", name='ck_estate_activity_kind'),
    )
    op.create_index(
        'ix_estate_activity_estate_created_id',
        'estate_activity',
        [sa.text('estate_id'), sa.text('created_at DESC'), sa.text('id DESC')],
        unique=False,
    )
    op.create_index(
        'ix_estate_activity_estate_kind_action_created_id',
        'estate_activity',
        [sa.text('estate_id'), sa.text('kind'), sa.text('action'), sa.text('created_at DESC'), sa.text('id DESC')],
        unique=False,
    )
    op.create_index('ix_estate_activity_owner_created', 'estate_activity', ['owner_id', 'created_at'], unique=False)

    # 4) Sub-resources
    op.create_table(
        'estate_notes',
        *_estate_scoped(),
        sa.Column('subject', sa.String(), nullable=True),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('pinned', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        *_timestamps(),
    )
    op.create_index('ix_estate_notes_estate_id', 'estate_notes', ['estate_id'], unique=False)

    op.create_table(
        'estate_tasks',
        *_estate_scoped(),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='NOT_STARTED'),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status in ('NOT_STARTED','IN_PROGRESS','DONE')", name='ck_estate_tasks_status'),
    )
    op.create_index('ix_estate_tasks_estate_id', 'estate_tasks', ['estate_id'], unique=False)

    op.create_table(
        'estate_documents',
        *_estate_scoped(),
        sa.Column('label', sa.String(), nullable=False),
        sa.Column('subject', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_sensitive', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        *_timestamps(),
    )
    op.create_index('ix_estate_documents_estate_id', 'estate_documents', ['estate_id'], unique=False)

    op.create_table(
        'invoices',
        *_estate_scoped(),
        sa.Column('invoice_number', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='DRAFT'),
        sa.Column('issue_date', sa.Date(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status in ('DRAFT','SENT','PAID','VOID')", name='ck_invoices_status'),
    )
    op.create_index('ix_invoices_estate_id', 'invoices', ['estate_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_invoices_estate_id', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('ix_estate_documents_estate_id', table_name='estate_documents')
    op.drop_table('estate_documents')
    op.drop_index('ix_estate_tasks_estate_id', table_name='estate_tasks')
    op.drop_table('estate_tasks')
    op.drop_index('ix_estate_notes_estate_id', table_name='estate_notes')
    op.drop_table('estate_notes')
    op.drop_index('ix_estate_activity_owner_created', table_name='estate_activity')
    op.drop_index('ix_estate_activity_estate_kind_action_created_id', table_name='estate_activity')
    op.drop_index('ix_estate_activity_estate_created_id', table_name='estate_activity')
    op.drop_table('estate_activity')
    op.drop_index('ix_estate_collaborators_user_id', table_name='estate_collaborators')
    op.drop_index('ix_estate_collaborators_estate_id_position', table_name='estate_collaborators')
    op.drop_table('estate_collaborators')
    op.drop_index('ix_estates_owner_id', table_name='estates')
    op.drop_table('estates')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
