"""Initial schema for reviews and the cause/trigger catalogs

Revision ID: 4c1e7a2d9b30
Revises:
Create Date: 2024-12-17 18:50:02.132300

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4c1e7a2d9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables for the Incident Reviewer."""

    # Create causes table
    op.create_table(
        'causes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_causes_name', 'causes', ['name'], unique=False)
    op.create_index('ix_causes_category', 'causes', ['category'], unique=False)

    # Create triggers table
    op.create_table(
        'triggers',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_triggers_name', 'triggers', ['name'], unique=False)

    # Create reviews table
    op.create_table(
        'reviews',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('impact', sa.Text(), nullable=False),
        sa.Column('where', sa.Text(), nullable=False),
        sa.Column('report_proximal_cause', sa.Text(), nullable=False),
        sa.Column('report_trigger', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Create review_causes table
    op.create_table(
        'review_causes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('review_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('cause_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('cause', postgresql.JSONB(astext_type=sa.Text()), nullable=False, default={}),
        sa.Column('why', sa.Text(), nullable=False),
        sa.Column('is_proximal_cause', sa.Boolean(), nullable=False, default=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_review_causes_review_id', 'review_causes', ['review_id'], unique=False)
    op.create_index('ix_review_causes_cause_id', 'review_causes', ['cause_id'], unique=False)

    # Create review_triggers table
    op.create_table(
        'review_triggers',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('review_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('trigger_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('trigger', postgresql.JSONB(astext_type=sa.Text()), nullable=False, default={}),
        sa.Column('why', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_review_triggers_review_id', 'review_triggers', ['review_id'], unique=False)
    op.create_index('ix_review_triggers_trigger_id', 'review_triggers', ['trigger_id'], unique=False)


def downgrade() -> None:
    """Drop all tables in reverse order."""
    op.drop_index('ix_review_triggers_trigger_id', table_name='review_triggers')
    op.drop_index('ix_review_triggers_review_id', table_name='review_triggers')
    op.drop_table('review_triggers')
    op.drop_index('ix_review_causes_cause_id', table_name='review_causes')
    op.drop_index('ix_review_causes_review_id', table_name='review_causes')
    op.drop_table('review_causes')
    op.drop_table('reviews')
    op.drop_index('ix_triggers_name', table_name='triggers')
    op.drop_table('triggers')
    op.drop_index('ix_causes_category', table_name='causes')
    op.drop_index('ix_causes_name', table_name='causes')
    op.drop_table('causes')
