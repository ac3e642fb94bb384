"""Create events and invitations tables

Revision ID: 000000000000
Revises:
Create Date: 2026-10-17 09:00:00

"""
from typing import Union

from alembic import op
import sqlalchemy as sa
import sqlalchemy_utils

# revision identifiers, used by Alembic.
revision: str = '000000000000'
down_revision: Union[str, None] = None
branch_labels: Union[str, None] = None
depends_on: Union[str, None] = None


def upgrade() -> None:
    op.create_table(
        'events',
        sa.Column('uuid', sqlalchemy_utils.UUIDType(binary=False), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('user_id', sqlalchemy_utils.UUIDType(binary=False), nullable=False, index=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(500), nullable=True),
        sa.Column('template', sa.String(50), nullable=False, server_default='shabby-chic'),
        sa.Column('custom_image_url', sa.String(1024), nullable=True),
        sa.Column('registry_links', sa.JSON, nullable=True),
    )

    op.create_table(
        'invitations',
        sa.Column('uuid', sqlalchemy_utils.UUIDType(binary=False), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('event_id', sqlalchemy_utils.UUIDType(binary=False), sa.ForeignKey('events.uuid', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('email', sa.String(255), nullable=True, index=True),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('token', sa.String(36), nullable=False, unique=True, index=True),
        sa.Column('status', sa.Enum('pending', 'opened', 'accepted', 'declined', name='invitation_status_enum'), nullable=False, server_default='pending'),
        sa.Column('guest_count', sa.Integer, nullable=True),
        sa.Column('message', sa.Text, nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('opened_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('invitations')
    op.drop_table('events')
    sa.Enum(name='invitation_status_enum').drop(op.get_bind(), checkfirst=True)
