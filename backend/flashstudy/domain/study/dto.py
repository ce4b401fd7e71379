from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from flashstudy.models import Deck, Flashcard, StudySession

T = TypeVar("T")


@dataclass
class OperationResult(Generic[T]):
    """
    Primary result plus warnings about forwarded updates that did not happen.
    """
    value: T
    warnings: list[str] = field(default_factory=list)


@dataclass
class StartedSession:
    session: "StudySession"
    deck: "Deck"
    flashcards: list["Flashcard"]
