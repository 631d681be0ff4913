from typing import Sequence, Tuple

from cyberbot.config import MOOD_KEYWORDS

MOODS = ('worried', 'frustrated', 'happy', 'sad', 'curious', 'neutral')


class PersonalityEngine:
    """
    Reads the user's mood off their wording and frames replies to match it.
    Both operations are pure; the engine holds nothing but its keyword table.
    """
    def __init__(self, mood_keywords: Sequence[Tuple[str, Sequence[str]]] = MOOD_KEYWORDS):
        self.mood_keywords = mood_keywords

    def detect_sentiment(self, text: str) -> str:
        lower = text.lower()
        for mood, keywords in self.mood_keywords:
            if any(k in lower for k in keywords):
                return mood
        return 'neutral'

    def adjust_for_sentiment(self, response: str, sentiment: str) -> str:
        if sentiment == 'worried':
            return ("I understand this might be concerning. " + response +
                    " Remember, being aware is the first step to staying safe.")
        if sentiment == 'frustrated':
            # Reply continues the sentence, so only its opening letter is lowered.
            return "I hear your frustration. Cybersecurity can be complex, but " + response[:1].lower() + response[1:]
        if sentiment == 'happy':
            return "Great to see your enthusiasm! " + response
        if sentiment == 'sad':
            return ("I'm sorry you're feeling this way. " + response +
                    " Taking small steps can help improve your security.")
        if sentiment == 'curious':
            return "That's a great question! " + response
        return response
