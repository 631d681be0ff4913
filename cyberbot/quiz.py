from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from cyberbot.persistence import Persistence

NO_QUIZ = "No quiz in progress."
QUIZ_DONE = "Quiz already completed."


@dataclass(frozen=True)
class QuizQuestion:
    question: str
    options: Tuple[str, ...]
    correct_index: int
    explanation: str

    def __post_init__(self):
        if len(self.options) < 2:
            raise ValueError("A quiz question needs at least two options")
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(f"correct_index {self.correct_index} is outside the options")

    def is_correct(self, answer_number: int) -> bool:
        # answer_number is 1-based; anything out of range simply never matches
        return answer_number - 1 == self.correct_index


# -----------------------------
# Quiz states
# -----------------------------
@dataclass(frozen=True)
class QuizIdle:
    pass


@dataclass(frozen=True)
class QuizInProgress:
    index: int
    score: int

    def __post_init__(self):
        if self.index < 0 or not 0 <= self.score <= self.index:
            raise ValueError(f"Invalid quiz progress: index={self.index}, score={self.score}")


@dataclass(frozen=True)
class QuizCompleted:
    score: int

    def __post_init__(self):
        if self.score < 0:
            raise ValueError("Quiz score cannot be negative")


QuizState = Union[QuizIdle, QuizInProgress, QuizCompleted]


QUESTION_BANK: Tuple[QuizQuestion, ...] = (
    QuizQuestion(
        "What should you do if you receive an email asking for your password?",
        ("Reply with your password", "Delete the email", "Report the email as phishing", "Ignore it"),
        2,
        "You should never share your password via email. Reporting phishing emails helps protect others.",
    ),
    QuizQuestion(
        "True or False: Using the same password for multiple accounts is a good security practice.",
        ("True", "False"),
        1,
        "Using unique passwords for each account limits damage if one account is compromised.",
    ),
    QuizQuestion(
        "Which of these is the strongest password?",
        ("password123", "P@ssw0rd!", "CorrectHorseBatteryStaple", "12345678"),
        2,
        "Long passphrases are more secure than complex but short passwords.",
    ),
    QuizQuestion(
        "What does HTTPS in a website URL indicate?",
        ("The site has high traffic", "The connection is encrypted",
         "The site is government-approved", "The site is free to use"),
        1,
        "HTTPS ensures your connection to the website is encrypted and secure.",
    ),
    QuizQuestion(
        "What should you do before connecting to public Wi-Fi?",
        ("Disable your firewall", "Use a VPN", "Share your location", "Log in to all your accounts"),
        1,
        "A VPN encrypts your traffic on public networks.",
    ),
    QuizQuestion(
        "How often should you update your software?",
        ("Only when it stops working", "When the manufacturer releases updates",
         "Never, updates break things", "Once every 5 years"),
        1,
        "Software updates often include critical security patches.",
    ),
    QuizQuestion(
        "What is two-factor authentication?",
        ("Using two different passwords", "Verifying identity with two different methods",
         "Having two user accounts", "Logging in from two devices"),
        1,
        "2FA adds an extra layer of security beyond just a password.",
    ),
    QuizQuestion(
        "Where should you store your passwords?",
        ("In a text file on your desktop", "In your email inbox",
         "In a password manager", "On a sticky note under your keyboard"),
        2,
        "Password managers securely store and generate strong passwords.",
    ),
    QuizQuestion(
        "What is phishing?",
        ("A fishing sport", "A type of malware",
         "A fraudulent attempt to obtain sensitive information", "A hardware failure"),
        2,
        "Phishing uses deception to trick users into revealing sensitive data.",
    ),
    QuizQuestion(
        "True or False: You should click on links in emails from unknown senders.",
        ("True", "False"),
        1,
        "Links in suspicious emails may lead to malicious websites.",
    ),
)


class QuizEngine:
    """
    Walks the question bank in order: Idle -> InProgress(index, score) -> Completed(score).
    start() restarts from any state; answers outside a running quiz change nothing.
    """
    def __init__(self, store: Persistence, questions: Sequence[QuizQuestion] = QUESTION_BANK):
        self.store = store
        self.questions: List[QuizQuestion] = list(questions)
        self.state: QuizState = QuizIdle()
        self.store.log_activity(f"Initialized quiz with {len(self.questions)} questions")

    @property
    def in_progress(self) -> bool:
        return isinstance(self.state, QuizInProgress)

    @property
    def index(self) -> int:
        if isinstance(self.state, QuizInProgress):
            return self.state.index
        if isinstance(self.state, QuizCompleted):
            return len(self.questions)
        return 0

    @property
    def score(self) -> int:
        if isinstance(self.state, QuizIdle):
            return 0
        return self.state.score

    def start(self) -> str:
        self.state = QuizInProgress(index=0, score=0)
        self.store.log_activity("Started cybersecurity quiz")
        return self.current_question()

    def render_question(self, index: int) -> str:
        question = self.questions[index]
        options = "\n".join(f"{i}. {option}" for i, option in enumerate(question.options, start=1))
        return (f"Question {index + 1}/{len(self.questions)}:\n"
                f"{question.question}\n\n"
                f"{options}\n\n"
                "Enter the number of your answer:")

    def current_question(self) -> str:
        if not isinstance(self.state, QuizInProgress):
            return NO_QUIZ
        return self.render_question(self.state.index)

    def _parse_answer(self, answer: Union[int, str]) -> Optional[int]:
        if isinstance(answer, int):
            return answer
        text = str(answer).strip()
        if not text.isdigit():
            return None
        try:
            return int(text)
        except ValueError:
            # Too many digits for int(); still a number, just never a valid option
            return 0

    def submit_answer(self, answer: Union[int, str]) -> str:
        state = self.state
        if isinstance(state, QuizIdle):
            return NO_QUIZ
        if isinstance(state, QuizCompleted):
            return QUIZ_DONE

        number = self._parse_answer(answer)
        question = self.questions[state.index]
        if number is None:
            return f"Please enter the number of your answer (1-{len(question.options)})."

        correct = question.is_correct(number)
        score = state.score + 1 if correct else state.score
        verdict = "Correct" if correct else "Incorrect"
        self.store.log_activity(f"{verdict} answer for question {state.index + 1}")

        next_index = state.index + 1
        response = ("Correct! " if correct else "Incorrect. ") + question.explanation + "\n\n"
        if next_index < len(self.questions):
            self.state = QuizInProgress(index=next_index, score=score)
            response += self.render_question(next_index)
        else:
            self.state = QuizCompleted(score=score)
            self.store.log_activity(f"Completed quiz with score {score}/{len(self.questions)}")
            response += f"Quiz complete! Your score: {score}/{len(self.questions)}"
        return response
