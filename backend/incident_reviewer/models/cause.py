"""CauseRow model for storing the contributing cause catalog."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from incident_reviewer.database import Base
from incident_reviewer.validation import CATEGORY_MAX_LENGTH, NAME_MAX_LENGTH


class CauseRow(Base):
    """SQLAlchemy model for contributing causes.

    Stores the catalog of reusable causes that reviews are classified with.
    """
    __tablename__ = "causes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
    )
    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(CATEGORY_MAX_LENGTH),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<CauseRow(id={self.id}, name='{self.name}', category='{self.category}')>"
