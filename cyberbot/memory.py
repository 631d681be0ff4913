from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from cyberbot.config import CONVERSATION_TIME_FORMAT

# -----------------------------
# Session state
# -----------------------------
@dataclass
class UserProfile:
    name: Optional[str] = None
    interests: List[str] = field(default_factory=list)

    def add_interest(self, topic: str) -> bool:
        """Returns True only the first time a topic is seen."""
        if topic in self.interests:
            return False
        self.interests.append(topic)
        return True


@dataclass
class Session:
    """Everything one running conversation mutates, apart from tasks and the quiz."""
    profile: UserProfile = field(default_factory=UserProfile)
    topic_counters: Counter = field(default_factory=Counter)


class ConversationMemory:
    """In-process transcript, oldest line first. The on-disk copy lives in Persistence."""
    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.entries: List[str] = []
        self.clock = clock

    def add(self, message: str) -> str:
        line = f"[{self.clock().strftime(CONVERSATION_TIME_FORMAT)}] {message}"
        self.entries.append(line)
        return line

    def to_list(self) -> List[str]:
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
