import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Integer, Boolean, DateTime, ForeignKey, Enum, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from flashstudy.core.clock import utc_now
from flashstudy.core.enums import CardOutcome
from flashstudy.db.base import Base

if TYPE_CHECKING:
    from flashstudy.models.user import User
    from flashstudy.models.deck import Deck


class StudySession(Base):
    __tablename__ = "study_sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    deck_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("decks.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    start_time: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False, index=True)
    end_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    total_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds

    correct_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    incorrect_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    percentage: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # optimistic lock: a flush against a stale version raises StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    user: Mapped["User"] = relationship("User", back_populates="study_sessions")
    deck: Mapped["Deck"] = relationship("Deck")

    cards: Mapped[list["StudySessionCard"]] = relationship(
        "StudySessionCard",
        back_populates="session",
        order_by="StudySessionCard.position",
        cascade="all, delete-orphan"
    )


class StudySessionCard(Base):
    __tablename__ = "study_session_cards"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("study_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    # Snapshot reference, no FK: history survives deleting the flashcard itself.
    flashcard_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    outcome: Mapped[CardOutcome] = mapped_column(
        Enum(CardOutcome, name="card_outcome"),
        default=CardOutcome.unanswered,
        nullable=False
    )
    time_spent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # seconds
    attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    session: Mapped["StudySession"] = relationship("StudySession", back_populates="cards")
