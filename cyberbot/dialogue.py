import re
import random
import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from cyberbot.config import BOT_IDENTITY, EMPTY_INPUT_REPLY, MAX_ACTIVITY_ENTRIES
from cyberbot.memory import ConversationMemory, Session
from cyberbot.persistence import Persistence, PersistenceError
from cyberbot.personality import PersonalityEngine
from cyberbot.quiz import QuizEngine
from cyberbot.responses import FreeTextFallback, ResponseLibrary
from cyberbot.tasks import INVALID_TASK_NUMBER, TaskManager
from cyberbot.utils import first_int, is_valid_name

logger = logging.getLogger(__name__)

# matcher(lower_text) -> truthy ; handler(text, lower_text, sentiment) -> reply
Matcher = Callable[[str], object]
Handler = Callable[[str, str, str], str]
Rule = Tuple[str, Matcher, Handler]

SECURITY_TOPICS = ("password", "phishing", "privacy", "safe browsing", "cybersecurity")


def _regex(pattern: str) -> Matcher:
    compiled = re.compile(pattern, re.IGNORECASE)
    return compiled.search


def _contains(*keywords: str) -> Matcher:
    return lambda lower: any(k in lower for k in keywords)


class DialogueManager:
    """
    The engine behind every turn. Rules are tried strictly in list order and
    the first one that matches produces the reply, so commands always win
    over topic questions that happen to share a keyword.
    """
    def __init__(self, store: Optional[Persistence] = None, rng: Optional[random.Random] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.store = store if store is not None else Persistence(clock=clock)
        self.rng = rng or random.Random()
        self.p = PersonalityEngine()
        self.session = Session()
        self.history = ConversationMemory(clock=clock)
        self.library = ResponseLibrary(self.rng)
        self.fallback = FreeTextFallback(self.rng)
        self.tasks = TaskManager(self.store, clock=clock)
        self.quiz = QuizEngine(self.store)
        self.lock = threading.RLock()
        self._warnings: List[str] = []

        load_error = self.tasks.load()
        if load_error:
            self.save_conversation(load_error)

        self.rules: List[Rule] = self._build_rules()

    def _build_rules(self) -> List[Rule]:
        return [
            # Commands
            ("add_task", _regex(r"(add|create|set).*task"), lambda text, lower, sent: self.tasks.add_from_text(text)),
            ("list_tasks", _regex(r"(list|show).*tasks?"), lambda text, lower, sent: self.tasks.list()),
            ("complete_task", _regex(r"(complete|finish|done).*task"), self._handle_complete),
            ("delete_task", _regex(r"(delete|remove).*task"), self._handle_delete),
            ("start_quiz", _regex(r"(start|begin|take).*(quiz|test)"), lambda text, lower, sent: self.quiz.start()),
            ("quiz_answer", lambda lower: self.quiz.in_progress and re.fullmatch(r"\d+", lower),
             lambda text, lower, sent: self.quiz.submit_answer(lower)),
            ("activity_log", _regex(r"(activity|history|log|what have you done)"), self._handle_activity),
            # Topics
            ("password", _contains("password"), self._topic("password")),
            ("phishing", _contains("phishing", "scam"), self._topic("phishing")),
            ("privacy", _contains("privacy", "data protection"), self._topic("privacy")),
            ("safe_browsing", _contains("safe browsing", "browsing"), self._topic("safe browsing")),
            ("cybersecurity", _contains("cybersecurity", "security tips"), self._topic("cybersecurity")),
            ("identity", _contains("your name", "who are you"), lambda text, lower, sent: BOT_IDENTITY),
            ("recall", _contains("remember", "what do you know"), self._handle_recall),
            ("interests", _contains("interest", "like", "prefer"), self._handle_interests),
            ("history", _contains("history"),
             lambda text, lower, sent: "You can view our conversation history from the main menu or by typing 'history'."),
        ]

    # -----------------------------
    # Rule handlers
    # -----------------------------
    def _handle_complete(self, text: str, lower: str, sentiment: str) -> str:
        try:
            number = first_int(lower)
        except ValueError:
            return INVALID_TASK_NUMBER
        if number is None:
            return "Please specify which task to complete (e.g., 'complete task 1')."
        return self.tasks.complete(number)

    def _handle_delete(self, text: str, lower: str, sentiment: str) -> str:
        try:
            number = first_int(lower)
        except ValueError:
            return INVALID_TASK_NUMBER
        if number is None:
            return "Please specify which task to delete (e.g., 'delete task 1')."
        return self.tasks.delete(number)

    def _handle_activity(self, text: str, lower: str, sentiment: str) -> str:
        return "Recent activity log:\n" + "\n".join(self.get_activity_log())

    def _topic(self, topic: str) -> Handler:
        def handler(text: str, lower: str, sentiment: str) -> str:
            if self.session.profile.add_interest(topic):
                self._persist("could not store your interest", self.store.store_user_fact, topic, 'interest')
            reply = self.library.respond(topic, self.session.topic_counters)
            return self.p.adjust_for_sentiment(reply, sentiment)
        return handler

    def _handle_recall(self, text: str, lower: str, sentiment: str) -> str:
        try:
            interests = self.store.recall_interests()
        except PersistenceError as e:
            logger.warning("Could not recall user info: %s", e)
            return f"Error recalling information: {e}"
        self.store.log_activity(f"Recalled user info for {self.user_name or 'user'}")
        if not interests:
            return "I don't have any specific information stored about your interests yet."
        return (f"I remember you're interested in {' and '.join(interests)}. "
                "Would you like to know more about these topics?")

    def _handle_interests(self, text: str, lower: str, sentiment: str) -> str:
        interests = self.session.profile.interests
        if not interests:
            return "You haven't mentioned any specific interests yet..."
        return f"Based on our conversation, you seem interested in: {', '.join(interests)}..."

    # -----------------------------
    # Persistence guard
    # -----------------------------
    def _persist(self, description: str, fn: Callable, *args) -> bool:
        try:
            fn(*args)
            return True
        except PersistenceError as e:
            logger.warning("%s: %s", description, e)
            self._warnings.append(f"(Warning: {description}: {e})")
            return False

    def _with_warnings(self, response: str) -> str:
        if not self._warnings:
            return response
        warnings, self._warnings = self._warnings, []
        return response + "\n\n" + "\n".join(warnings)

    # -----------------------------
    # Turn processing
    # -----------------------------
    def route(self, text: str) -> Tuple[str, str]:
        """Returns (rule name, reply) for one utterance without recording the turn."""
        lower = text.lower().strip()
        sentiment = self.p.detect_sentiment(lower)
        for name, matcher, handler in self.rules:
            if matcher(lower):
                return name, handler(text.strip(), lower, sentiment)
        return "fallback", self.fallback.reply(lower)

    def process_input(self, text: str) -> str:
        with self.lock:
            if not text or not text.strip():
                return EMPTY_INPUT_REPLY
            self.save_conversation(f"User asked: {text}")
            rule, response = self.route(text)
            logger.debug("Input %r handled by %s", text, rule)
            self.store.log_activity(f"Handled input via {rule}")
            self.save_conversation(f"Bot responded: {response}")
            return self._with_warnings(response)

    def save_conversation(self, message: str):
        self.history.add(message)
        self._persist("could not save conversation", self.store.append_conversation, message)

    # -----------------------------
    # Public surface
    # -----------------------------
    @property
    def user_name(self) -> Optional[str]:
        return self.session.profile.name

    @property
    def in_quiz_mode(self) -> bool:
        return self.quiz.in_progress

    def is_valid_name(self, name: str) -> bool:
        return is_valid_name(name)

    def save_user_name(self, name: str) -> str:
        with self.lock:
            name = (name or "").strip()
            if not is_valid_name(name):
                return "Please enter a valid name (letters and spaces only)."
            self.session.profile.name = name
            self._persist("could not store your name", self.store.store_user_fact, name, 'name')
            self.save_conversation(f"User entered name: {name}")
            return self._with_warnings(f"Hello, {name}! I'm here to help you stay safe online.")

    def add_task(self, title: str, description: str = "", reminder_date: Optional[datetime] = None) -> str:
        with self.lock:
            return self._with_warnings(self.tasks.add(title, description, reminder_date))

    def list_tasks(self) -> str:
        with self.lock:
            return self.tasks.list()

    def complete_task(self, number: int) -> str:
        with self.lock:
            return self.tasks.complete(number)

    def delete_task(self, number: int) -> str:
        with self.lock:
            return self.tasks.delete(number)

    def start_quiz(self) -> str:
        with self.lock:
            return self.quiz.start()

    def submit_quiz_answer(self, answer) -> str:
        with self.lock:
            return self.quiz.submit_answer(answer)

    def get_conversation_history(self) -> List[str]:
        with self.lock:
            return self.history.to_list()

    def get_activity_log(self, max_entries: int = MAX_ACTIVITY_ENTRIES) -> List[str]:
        with self.lock:
            return self.store.recent_activity(max_entries)
