"""Add estate_invites for link-based collaborator invitations

Revision ID: 20261019_invites
Revises: 20261018_estates
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20261019_invites'
down_revision: Union[str, None] = '20261018_estates'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'estate_invites',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, primary_key=True),
        sa.Column('estate_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('estates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('role', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False, server_default='PENDING'),
        sa.Column('token', sa.Text(), nullable=False, unique=True),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('accepted_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("role in ('EDITOR','VIEWER')", name='ck_estate_invites_role'),
        sa.CheckConstraint("status in ('PENDING','ACCEPTED','REVOKED','EXPIRED')", name='ck_estate_invites_status'),
    )
    op.create_index('ix_estate_invites_estate_id', 'estate_invites', ['estate_id'], unique=False)
    op.create_index('ix_estate_invites_email', 'estate_invites', ['email'], unique=False)
    # At most one pending invite per address and estate
    op.create_index(
        'uq_estate_invites_pending_email',
        'estate_invites',
        ['estate_id', 'email'],
        unique=True,
        postgresql_where=sa.text("status = 'PENDING'"),
    )


def downgrade() -> None:
    op.drop_index('uq_estate_invites_pending_email', table_name='estate_invites')
    op.drop_index('ix_estate_invites_email', table_name='estate_invites')
    op.drop_index('ix_estate_invites_estate_id', table_name='estate_invites')
    op.drop_table('estate_invites')
