import os
import json
import logging
import tempfile
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from cyberbot.config import (
    DEFAULT_DATA_DIR, TASKS_FILE, USER_FACTS_FILE, CONVERSATION_FILE, ACTIVITY_FILE,
    MAX_ACTIVITY_ENTRIES, CONVERSATION_TIME_FORMAT, ACTIVITY_TIME_FORMAT,
)
from cyberbot.tasks import Task

logger = logging.getLogger(__name__)


class PersistenceError(IOError):
    """Raised for any read or write of the backing store that did not succeed."""


class Persistence:
    """
    File-backed store for tasks, user facts, the conversation transcript and
    the activity log, all kept under one data directory.
    """
    def __init__(self, data_dir: str = DEFAULT_DATA_DIR, clock: Callable[[], datetime] = datetime.now):
        self.data_dir = data_dir
        self.clock = clock
        self.tasks_path = os.path.join(data_dir, TASKS_FILE)
        self.facts_path = os.path.join(data_dir, USER_FACTS_FILE)
        self.conversation_path = os.path.join(data_dir, CONVERSATION_FILE)
        self.activity_path = os.path.join(data_dir, ACTIVITY_FILE)
        try:
            os.makedirs(data_dir, exist_ok=True)
        except OSError as e:
            # Reported on first use instead; every call below will fail loudly.
            logger.warning("Could not create data directory %s: %s", data_dir, e)

    # -----------------------------
    # JSON helpers
    # -----------------------------
    def _read_json(self, path: str) -> Optional[Any]:
        bak_file = f"{path}.bak"

        def _load_from(file_path: str) -> Optional[Any]:
            if not os.path.exists(file_path):
                return None
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (json.JSONDecodeError, IOError, UnicodeError) as e:
                logger.warning("Could not load data from %s: %s", file_path, e)
                return None

        data = _load_from(path)
        if data is not None:
            return data

        if os.path.exists(path):
            # Main file is there but unreadable; the backup is our only copy.
            data = _load_from(bak_file)
            if data is None:
                raise PersistenceError(f"{os.path.basename(path)} is unreadable and has no usable backup")
            logger.info("Loaded %s from backup; the next save will repair the main file.", path)
            return data
        return _load_from(bak_file)

    def _write_json(self, path: str, data: Any):
        bak_file = f"{path}.bak"
        tmp_file_path = None
        try:
            # Same directory as the target so the rename stays atomic.
            with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=self.data_dir,
                                             delete=False, suffix='.tmp') as tmp_file:
                tmp_file_path = tmp_file.name
                json.dump(data, tmp_file, indent=2, ensure_ascii=False)

            if os.path.exists(path):
                os.replace(path, bak_file)
            os.replace(tmp_file_path, path)
        except (IOError, OSError, TypeError, ValueError) as e:
            try:
                if os.path.exists(bak_file) and not os.path.exists(path):
                    os.replace(bak_file, path)
            except OSError as e_restore:
                logger.error("Could not restore backup file %s: %s", bak_file, e_restore)
            raise PersistenceError(f"could not write {os.path.basename(path)}: {e}") from e
        finally:
            if tmp_file_path and os.path.exists(tmp_file_path):
                os.remove(tmp_file_path)

    def _append_line(self, path: str, line: str):
        with open(path, 'a', encoding='utf-8') as f:
            f.write(line + "\n")

    # -----------------------------
    # Tasks
    # -----------------------------
    def load_tasks(self) -> List[Task]:
        data = self._read_json(self.tasks_path)
        if data is None:
            return []
        try:
            tasks = [Task.from_dict(d) for d in data]
        except (TypeError, ValueError, AttributeError) as e:
            raise PersistenceError(f"tasks file is malformed: {e}") from e
        self.log_activity(f"Loaded {len(tasks)} tasks")
        return tasks

    def save_tasks(self, tasks: Sequence[Task]):
        self._write_json(self.tasks_path, [t.to_dict() for t in tasks])
        self.log_activity(f"Saved {len(tasks)} tasks")

    # -----------------------------
    # User facts
    # -----------------------------
    def _load_facts(self) -> Dict[str, Any]:
        data = self._read_json(self.facts_path)
        return data if isinstance(data, dict) else {}

    def store_user_fact(self, value: str, category: str):
        """Interests accumulate; every other category keeps only its latest value."""
        facts = self._load_facts()
        if category == 'interest':
            interests = facts.setdefault('interest', [])
            if value not in interests:
                interests.append(value)
        else:
            facts[category] = value
        self._write_json(self.facts_path, facts)
        self.log_activity(f"Stored user info: {category}={value}")

    def recall_user_fact(self, category: str) -> Optional[Any]:
        return self._load_facts().get(category)

    def recall_interests(self) -> List[str]:
        interests = self._load_facts().get('interest', [])
        return list(interests) if isinstance(interests, list) else []

    # -----------------------------
    # Conversation & activity logs
    # -----------------------------
    def append_conversation(self, text: str):
        line = f"[{self.clock().strftime(CONVERSATION_TIME_FORMAT)}] {text}"
        try:
            self._append_line(self.conversation_path, line)
        except (OSError, UnicodeError) as e:
            raise PersistenceError(f"could not save conversation: {e}") from e

    def log_activity(self, text: str):
        line = f"[{self.clock().strftime(ACTIVITY_TIME_FORMAT)}] {text}"
        try:
            self._append_line(self.activity_path, line)
        except (OSError, UnicodeError) as e:
            # Activity logging never interrupts a turn.
            logger.debug("Activity log write failed: %s", e)

    def recent_activity(self, max_entries: int = MAX_ACTIVITY_ENTRIES) -> List[str]:
        """Newest max_entries lines, oldest first."""
        if max_entries <= 0:
            return []
        try:
            if not os.path.exists(self.activity_path):
                return []
            with open(self.activity_path, 'r', encoding='utf-8') as f:
                lines = [line.rstrip("\n") for line in f if line.strip()]
        except (OSError, UnicodeError) as e:
            logger.warning("Could not read activity log: %s", e)
            return ["Could not load activity log"]
        return lines[-max_entries:]
