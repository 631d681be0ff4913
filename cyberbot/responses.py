import random
from collections import Counter
from typing import Dict, List, Optional, Iterable

from cyberbot.config import CANNED_REPLIES, IGNORE_WORDS, UNKNOWN_REPLY
from cyberbot.utils import tokenize_words

# -----------------------------
# Topic response sets
# -----------------------------
# Each topic owns one or more interchangeable sets. Sets rotate with the topic's
# usage counter; lines inside a set are picked at random.
TOPIC_RESPONSES: Dict[str, List[List[str]]] = {
    "password": [
        [
            "Make sure to use strong, unique passwords for each account.",
            "A good password should be at least 12 characters long and include numbers, symbols, and both uppercase and lowercase letters.",
            "Consider using a password manager to keep track of your passwords securely.",
            "Never share your passwords with anyone, even if they claim to be from tech support.",
        ],
        [
            "Password security is crucial. Did you know a strong password can significantly reduce your risk of being hacked?",
            "A passphrase can be more secure than a password. Combine multiple words for better security.",
            "Two-factor authentication adds an extra layer of protection to your accounts.",
            "Avoid using personal information like birthdays or names in your passwords.",
        ],
    ],
    "phishing": [
        [
            "Be cautious of emails asking for personal information. Scammers often disguise themselves as trusted organizations.",
            "Phishing emails often create a sense of urgency. Always verify before clicking links or providing information.",
            "Check the sender's email address carefully. Phishing attempts often use addresses that look similar to legitimate ones.",
            "If an email seems suspicious, don't click any links. Instead, go directly to the company's website.",
        ],
        [
            "Spear phishing targets specific individuals with tailored emails, so be extra cautious.",
            "Some phishing attempts come via text messages, known as smishing.",
            "Look for poor grammar and spelling, which are common in phishing emails.",
            "Hover over links to see the actual URL before clicking. Phishers often use fake links.",
        ],
    ],
    "privacy": [
        [
            "Review privacy settings on your social media accounts regularly to control what information is shared.",
            "Be careful about what personal information you share online. Once it's out there, it's hard to take back.",
            "Use privacy-focused browsers and search engines to minimize tracking of your online activities.",
            "Consider using a VPN to protect your online privacy, especially on public Wi-Fi networks.",
        ],
    ],
    "safe browsing": [
        [
            "Always look for the padlock icon and 'https://' in website URLs.",
            "Keep your browser updated and avoid downloading files from untrusted sources.",
            "Avoid entering personal information on untrusted or unknown websites.",
            "Use browser security features like pop-up blockers and safe browsing modes.",
        ],
    ],
    "cybersecurity": [
        [
            "Keep all software, including operating systems and apps, up to date with the latest security patches.",
            "Use antivirus software and keep it updated to protect against malware.",
            "Be cautious about sharing personal information on social media. It can be used by attackers.",
            "Regularly back up important data to an external drive or cloud service.",
        ],
    ],
}


class ResponseLibrary:
    def __init__(self, rng: Optional[random.Random] = None, topics: Optional[Dict[str, List[List[str]]]] = None):
        self.rng = rng or random.Random()
        self.topics = topics if topics is not None else TOPIC_RESPONSES

    def set_index(self, topic: str, count: int) -> int:
        return count % len(self.topics[topic])

    def respond(self, topic: str, counters: Counter) -> str:
        """
        Bumps the topic's counter, then draws a line from the set the new count
        selects. The first trigger of a two-set topic therefore lands on set 1.
        """
        counters[topic] += 1
        chosen_set = self.topics[topic][self.set_index(topic, counters[topic])]
        return self.rng.choice(chosen_set)


class FreeTextFallback:
    """Keyword overlap against a pool of canned statements, for input no rule claimed."""
    def __init__(self, rng: Optional[random.Random] = None, replies: Iterable[str] = CANNED_REPLIES,
                 ignore_words: Iterable[str] = IGNORE_WORDS):
        self.rng = rng or random.Random()
        self.replies = list(replies)
        self.ignore_words = set(ignore_words)

    def keywords(self, text: str) -> List[str]:
        return [w for w in tokenize_words(text.lower()) if w not in self.ignore_words]

    def candidates(self, text: str) -> List[str]:
        words = self.keywords(text)
        if not words:
            return []
        return [r for r in self.replies if any(w in r.lower() for w in words)]

    def reply(self, text: str) -> str:
        matching = self.candidates(text)
        if not matching:
            return UNKNOWN_REPLY
        return self.rng.choice(matching)
