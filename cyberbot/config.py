import os

# -----------------------------
# Config & Constants
# -----------------------------
DEFAULT_DATA_DIR = os.environ.get("CYBERBOT_DATA_DIR", "cyberbot_data")
TASKS_FILE = "tasks.json"
USER_FACTS_FILE = "user_facts.json"
CONVERSATION_FILE = "conversation.log"
ACTIVITY_FILE = "activity.log"
CRASH_LOG_FILE = "crash.log"

MAX_ACTIVITY_ENTRIES = 10
DATE_DAYFIRST = True  # reminder dates are written D/M/Y

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONVERSATION_TIME_FORMAT = "%H:%M:%S"
ACTIVITY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DISPLAY_DATE_FORMAT = "%Y-%m-%d"

BOT_IDENTITY = "I'm your Cybersecurity Awareness Chatbot, here to help you stay safe online!"
UNKNOWN_REPLY = "I'm sorry, I don't understand that question. Please ask about cybersecurity topics."
EMPTY_INPUT_REPLY = "Please type a message so I can help you."

# Checked top to bottom; first mood with a keyword hit wins.
MOOD_KEYWORDS = (
    ("worried", ("worried", "scared", "afraid", "nervous", "anxious")),
    ("frustrated", ("angry", "mad", "frustrated", "annoyed", "upset")),
    ("happy", ("happy", "excited", "glad", "pleased", "thrilled")),
    ("sad", ("sad", "depressed", "unhappy", "miserable", "down")),
    ("curious", ("interested", "curious", "want to know", "wondering", "tell me about")),
)

IGNORE_WORDS = {
    "tell", "me", "about", "are", "you", "your", "whats", "can", "i", "ask",
    "the", "a", "an", "how", "what", "where", "when", "why", "attacks", "safety",
}

CANNED_REPLIES = [
    "Password security requires strong, unique passwords and regular changes.",
    "Multi-factor authentication adds an extra layer of security beyond passwords.",
    "Phishing attacks often use fake emails to steal sensitive information.",
    "Never click on suspicious links or download attachments from unknown emails.",
    "Ransomware encrypts files and demands payment for their release.",
    "Social engineering manipulates people into revealing confidential information.",
    "Malware includes viruses, worms, and trojans that harm computer systems.",
    "Avoid entering personal information on untrusted or unknown websites.",
    "Always check if a website uses HTTPS before entering sensitive data.",
    "I can explain cybersecurity concepts and best practices.",
    "Ask me about common cyber threats and how to avoid them.",
    "Hello! How can I help with cybersecurity today?",
    "Hi there! You can ask me about phishing, online security, or password safety.",
    "Phishing emails often have urgent requests or too-good-to-be-true offers.",
    "Hover over links to check their real destination before clicking.",
    "Keep software updated to protect against known vulnerabilities.",
]

HELP_TEXT = (
    "You can ask about:\n"
    "1. Password Safety\n"
    "2. Phishing Attacks\n"
    "3. Safe Browsing\n"
    "4. General Cybersecurity\n\n"
    "You can also:\n"
    "- Add tasks (e.g., 'add task to update passwords description change email password remind on 20/11/2026')\n"
    "- List, complete or delete tasks (e.g., 'list tasks', 'complete task 1')\n"
    "- Type 'start quiz' to take the cybersecurity quiz\n"
    "- Type 'activity' to see what I've been doing\n"
    "- Type 'history' to view conversation history\n"
    "- Type 'exit' to quit"
)
