from flashstudy.models.user import User
from flashstudy.models.deck import Deck
from flashstudy.models.flashcard import Flashcard
from flashstudy.models.study_session import StudySession, StudySessionCard

__all__ = ["User", "Deck", "Flashcard", "StudySession", "StudySessionCard"]
