import pytest

from cyberbot.personality import PersonalityEngine


@pytest.fixture
def p():
    return PersonalityEngine()


@pytest.mark.parametrize("text, mood", [
    ("I'm WORRIED about hackers", "worried"),
    ("this makes me so annoyed", "frustrated"),
    ("I'm thrilled to learn", "happy"),
    ("I feel miserable today", "sad"),
    ("I want to know about firewalls", "curious"),
    ("what is a firewall", "neutral"),
])
def test_detect_sentiment(p, text, mood):
    assert p.detect_sentiment(text) == mood


def test_worried_beats_every_later_mood(p):
    assert p.detect_sentiment("scared, angry, happy, sad and curious") == "worried"


def test_frustrated_beats_happy(p):
    assert p.detect_sentiment("I'm glad but also mad") == "frustrated"


def test_neutral_leaves_reply_untouched(p):
    reply = "Use a VPN on public Wi-Fi."
    assert p.adjust_for_sentiment(reply, "neutral") == reply
    assert p.adjust_for_sentiment(reply, "bored") == reply


def test_worried_wraps_reply(p):
    out = p.adjust_for_sentiment("Use a VPN.", "worried")
    assert out.startswith("I understand this might be concerning. Use a VPN.")
    assert out.endswith("Remember, being aware is the first step to staying safe.")


def test_frustrated_lowers_only_first_letter(p):
    out = p.adjust_for_sentiment("Use HTTPS everywhere.", "frustrated")
    assert out == "I hear your frustration. Cybersecurity can be complex, but use HTTPS everywhere."


def test_sad_happy_and_curious_framing(p):
    assert p.adjust_for_sentiment("X.", "sad") == (
        "I'm sorry you're feeling this way. X. Taking small steps can help improve your security.")
    assert p.adjust_for_sentiment("X.", "happy") == "Great to see your enthusiasm! X."
    assert p.adjust_for_sentiment("X.", "curious") == "That's a great question! X."
