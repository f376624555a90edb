"""ORM model for catalog movies."""

from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)

from movie_catalog.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Movie(Base):
    """
    One catalog entry. Only title is required.

    rating is bounded to [0, 10] and duration (minutes) must be positive when set;
    both are enforced again by CHECK constraints.
    """

    __tablename__ = "movies"
    __table_args__ = (
        CheckConstraint(
            "rating IS NULL OR (rating >= 0 AND rating <= 10)",
            name="rating_range",
        ),
        CheckConstraint(
            "duration IS NULL OR duration > 0",
            name="duration_positive",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    rating = Column(Float, nullable=True)
    release_date = Column(Date, nullable=True)
    duration = Column(Integer, nullable=True)
    poster = Column(String(2048), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
