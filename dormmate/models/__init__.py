"""Database model type definitions."""

from dormmate.models.conversation import Conversation
from dormmate.models.event import Event, EventParticipant
from dormmate.models.interest import Interest, InterestCategory, UserInterest
from dormmate.models.match import Match, MatchStatus
from dormmate.models.message import Message, TypingIndicator
from dormmate.models.profile import Gender, Profile

__all__ = [
    "Profile",
    "Gender",
    "Interest",
    "InterestCategory",
    "UserInterest",
    "Match",
    "MatchStatus",
    "Event",
    "EventParticipant",
    "Conversation",
    "Message",
    "TypingIndicator",
]
