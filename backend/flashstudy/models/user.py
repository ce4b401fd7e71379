import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from flashstudy.core.clock import utc_now
from flashstudy.db.base import Base

if TYPE_CHECKING:
    from flashstudy.models.deck import Deck
    from flashstudy.models.study_session import StudySession


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String)
    username: Mapped[str] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

    decks: Mapped[list["Deck"]] = relationship(
        "Deck",
        back_populates="owner",
        cascade="all, delete-orphan"
    )

    study_sessions: Mapped[list["StudySession"]] = relationship(
        "StudySession",
        back_populates="user",
        cascade="all, delete-orphan"
    )
