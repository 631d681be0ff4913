import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from cyberbot.config import DISPLAY_DATE_FORMAT
from cyberbot.utils import parse_date

logger = logging.getLogger(__name__)

# Forward declaration for type hinting
class Persistence:
    pass

DEFAULT_TITLE = "New Task"
INVALID_TASK_NUMBER = "Invalid task number."

_TITLE_AFTER_TASK = re.compile(r"\btasks?\b\s*(.*?)(?:\s*\bdescription\b|$)", re.IGNORECASE)
_TITLE_AFTER_VERB = re.compile(r"\b(?:add|create)\b\s*(.*?)(?:\s*\bdescription\b|$)", re.IGNORECASE)
_DESCRIPTION = re.compile(r"\bdescription\b\s*:?\s*(.*)", re.IGNORECASE)
_REMINDER = re.compile(r"(?:remind|on)\s*(\d{1,2}[/-]\d{1,2}[/-]\d{2,4})", re.IGNORECASE)


@dataclass
class Task:
    """A to-do item. Position in the owning list is its identity."""
    title: str
    description: str = ""
    reminder_date: Optional[datetime] = None
    completed: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    def reminder_info(self, now: Optional[datetime] = None) -> str:
        if self.reminder_date is None:
            return "No reminder set"
        remaining = self.reminder_date - (now or datetime.now())
        seconds = remaining.total_seconds()
        if seconds >= 86400:
            return f"Reminder in {int(seconds // 86400)} days"
        if seconds >= 3600:
            return f"Reminder in {int(seconds // 3600)} hours"
        return "Reminder due soon!"

    def display(self, now: Optional[datetime] = None) -> str:
        status = "✓" if self.completed else " "
        text = (f"[{status}] {self.title}"
                f"\n   📝 {self.description}"
                f"\n   📅 Created: {self.created_at.strftime(DISPLAY_DATE_FORMAT)}")
        if self.reminder_date is not None:
            text += (f"\n   ⏰ {self.reminder_info(now)}"
                     f" (Due: {self.reminder_date.strftime(DISPLAY_DATE_FORMAT)})")
        return text

    def __str__(self) -> str:
        return self.display()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'description': self.description,
            'reminder_date': self.reminder_date.isoformat() if self.reminder_date else None,
            'completed': self.completed,
            'created_at': self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Task':
        reminder = data.get('reminder_date')
        created = data.get('created_at')
        return cls(
            title=data.get('title', DEFAULT_TITLE),
            description=data.get('description', ''),
            reminder_date=datetime.fromisoformat(reminder) if reminder else None,
            completed=bool(data.get('completed', False)),
            created_at=datetime.fromisoformat(created) if created else datetime.now(),
        )


# -----------------------------
# Natural-language extraction
# -----------------------------
def extract_task_title(text: str) -> str:
    # Only fall back to the verb when the word "task" never appears
    m = _TITLE_AFTER_TASK.search(text) or _TITLE_AFTER_VERB.search(text)
    if m and m.group(1).strip():
        return m.group(1).strip()
    return DEFAULT_TITLE


def extract_task_description(text: str) -> str:
    m = _DESCRIPTION.search(text)
    if m:
        return m.group(1).strip()
    return ""


def extract_reminder_date(text: str) -> Optional[datetime]:
    m = _REMINDER.search(text)
    if not m:
        return None
    return parse_date(m.group(1))


class TaskManager:
    """
    Ordered in-memory task list. Every mutation is written through to the
    store afterwards; a failed write is reported in the reply and the list
    keeps the change.
    """
    def __init__(self, store: Persistence, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock
        self.tasks: List[Task] = []

    def load(self) -> Optional[str]:
        """Replaces the list with the saved one. Returns an error message on failure."""
        try:
            self.tasks = self.store.load_tasks()
        except IOError as e:
            logger.warning("Could not load tasks: %s", e)
            self.tasks = []
            return f"Error loading tasks: {e}"
        self.store.log_activity("Loaded saved tasks")
        return None

    def _save(self) -> str:
        try:
            self.store.save_tasks(self.tasks)
        except IOError as e:
            logger.warning("Could not save tasks: %s", e)
            return f"\n\n(Warning: could not save tasks: {e})"
        return ""

    def add(self, title: str, description: str = "", reminder_date: Optional[datetime] = None) -> str:
        title = (title or "").strip() or DEFAULT_TITLE
        description = (description or "").strip()
        task = Task(title=title, description=description, reminder_date=reminder_date, created_at=self.clock())
        self.tasks.append(task)
        warning = self._save()
        self.store.log_activity(f"Added task: {title}")

        response = f"Task added successfully!\n\nTitle: {title}\nDescription: {description}"
        if reminder_date is not None:
            response += f"\nReminder set for: {reminder_date.strftime(DISPLAY_DATE_FORMAT)}"
        return response + warning

    def add_from_text(self, text: str) -> str:
        return self.add(extract_task_title(text), extract_task_description(text), extract_reminder_date(text))

    def list(self) -> str:
        if not self.tasks:
            return "You have no tasks currently."
        now = self.clock()
        response = "Your Current Tasks:\n\n"
        for i, task in enumerate(self.tasks, start=1):
            response += f"{i}. {task.display(now)}\n\n"
        self.store.log_activity("Listed all tasks")
        return response

    def _valid(self, number: int) -> bool:
        return 1 <= number <= len(self.tasks)

    def complete(self, number: int) -> str:
        if not self._valid(number):
            return INVALID_TASK_NUMBER
        task = self.tasks[number - 1]
        task.completed = True
        warning = self._save()
        self.store.log_activity(f"Completed task: {task.title}")
        return f"Marked task as completed: '{task.title}'" + warning

    def delete(self, number: int) -> str:
        if not self._valid(number):
            return INVALID_TASK_NUMBER
        task = self.tasks.pop(number - 1)
        warning = self._save()
        self.store.log_activity(f"Deleted task: {task.title}")
        return f"Deleted task: '{task.title}'" + warning

    def __len__(self) -> int:
        return len(self.tasks)
