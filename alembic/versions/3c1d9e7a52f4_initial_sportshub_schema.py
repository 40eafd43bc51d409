"""Initial schema for users, events, sports and reviews

Revision ID: 3c1d9e7a52f4
Revises: 
Create Date: 2026-10-19 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3c1d9e7a52f4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    role_enum = postgresql.ENUM('user', 'publisher', 'admin', name='roleenum')
    role_enum.create(op.get_bind())

    level_enum = postgresql.ENUM('all', 'beginner', 'intermediate', 'advanced', name='sportlevel')
    level_enum.create(op.get_bind())

    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('role', postgresql.ENUM(name='roleenum', create_type=False), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_users_email', 'users', ['email'])

    # Only the geocoded point is stored; addresses are never persisted
    op.create_table(
        'events',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('slug', sa.String(80), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('longitude', sa.Float, nullable=False),
        sa.Column('latitude', sa.Float, nullable=False),
        sa.Column('formatted_address', sa.String(255), nullable=True),
        sa.Column('street', sa.String(255), nullable=True),
        sa.Column('city', sa.String(120), nullable=True),
        sa.Column('state', sa.String(20), nullable=True),
        sa.Column('zipcode', sa.String(20), nullable=True),
        sa.Column('country', sa.String(10), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('photo', sa.String(255), nullable=False, server_default='no-photo.jpg'),
        sa.Column('average_rating', sa.Float, nullable=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('exclusive_owner_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('name', name='events_name_key'),
        sa.UniqueConstraint('exclusive_owner_id', name='events_exclusive_owner_id_key'),
    )
    op.create_index('idx_event_owner', 'events', ['user_id'])
    op.create_index('idx_event_latitude', 'events', ['latitude'])
    op.create_index('idx_event_created_at', 'events', ['created_at'])
    op.create_index('idx_event_date', 'events', ['date'])

    op.create_table(
        'sports',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('rules', sa.Text, nullable=False),
        sa.Column('cost', sa.Float, nullable=True),
        sa.Column('level', postgresql.ENUM(name='sportlevel', create_type=False), nullable=False, server_default='all'),
        sa.Column('event_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('idx_sport_event', 'sports', ['event_id'])
    op.create_index('idx_sport_user', 'sports', ['user_id'])

    op.create_table(
        'reviews',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('comment', sa.Text, nullable=False),
        sa.Column('rating', sa.Integer, nullable=False),
        sa.Column('event_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('idx_review_event', 'reviews', ['event_id'])
    op.create_index('idx_review_user', 'reviews', ['user_id'])
    op.create_unique_constraint('uq_review_event_user', 'reviews', ['event_id', 'user_id'])


def downgrade() -> None:
    op.drop_table('reviews')
    op.drop_table('sports')
    op.drop_table('events')
    op.drop_table('users')

    sa.Enum(name='sportlevel').drop(op.get_bind())
    sa.Enum(name='roleenum').drop(op.get_bind())
