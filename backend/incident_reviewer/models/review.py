"""Review models for storing reviews and their cause/trigger bindings."""

import uuid
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from incident_reviewer.database import Base
from incident_reviewer.validation import NAME_MAX_LENGTH, URL_MAX_LENGTH


class ReviewRow(Base):
    """SQLAlchemy model for incident reviews.

    Bindings are owned by the review and deleted with it. They are loaded
    eagerly with the review since the aggregate is always read whole.
    """
    __tablename__ = "reviews"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
    )
    url: Mapped[str] = mapped_column(
        String(URL_MAX_LENGTH),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    impact: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    where: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    report_proximal_cause: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    report_trigger: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    # Relationships
    causes: Mapped[List["ReviewCauseRow"]] = relationship(
        "ReviewCauseRow",
        back_populates="review",
        cascade="all, delete-orphan",
        order_by="ReviewCauseRow.position",
        lazy="selectin",
    )
    triggers: Mapped[List["ReviewTriggerRow"]] = relationship(
        "ReviewTriggerRow",
        back_populates="review",
        cascade="all, delete-orphan",
        order_by="ReviewTriggerRow.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<ReviewRow(id={self.id}, title='{self.title}')>"


class ReviewCauseRow(Base):
    """SQLAlchemy model for a contributing cause bound to a review.

    The cause is stored as a JSONB snapshot taken at bind time, not as a
    foreign key, so later catalog edits don't rewrite existing bindings.
    """
    __tablename__ = "review_causes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
    )
    review_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    cause_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    cause: Mapped[Dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
    )
    why: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    is_proximal_cause: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    review: Mapped["ReviewRow"] = relationship(
        "ReviewRow",
        back_populates="causes",
    )

    def __repr__(self) -> str:
        return f"<ReviewCauseRow(id={self.id}, review_id={self.review_id}, cause_id={self.cause_id})>"


class ReviewTriggerRow(Base):
    """SQLAlchemy model for a trigger bound to a review."""
    __tablename__ = "review_triggers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
    )
    review_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    trigger_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    trigger: Mapped[Dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
    )
    why: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    review: Mapped["ReviewRow"] = relationship(
        "ReviewRow",
        back_populates="triggers",
    )

    def __repr__(self) -> str:
        return f"<ReviewTriggerRow(id={self.id}, review_id={self.review_id}, trigger_id={self.trigger_id})>"
