from datetime import datetime, timedelta

import pytest

from cyberbot.tasks import (
    DEFAULT_TITLE, INVALID_TASK_NUMBER, Task, TaskManager,
    extract_reminder_date, extract_task_description, extract_task_title,
)
from conftest import FIXED_NOW, FailingStore, RecordingStore


@pytest.fixture
def manager(recording_store, clock):
    return TaskManager(recording_store, clock=clock)


@pytest.mark.parametrize("text, title", [
    ("add task to update passwords", "to update passwords"),
    ("add task backup description copy photos to drive", "backup"),
    ("Create a TASK Review bank statements", "Review bank statements"),
    ("create task", DEFAULT_TITLE),
    ("add buy a new router", "buy a new router"),
])
def test_extract_task_title(text, title):
    assert extract_task_title(text) == title


def test_extract_description():
    assert extract_task_description("add task backup description: copy photos to drive") == "copy photos to drive"
    assert extract_task_description("add task backup") == ""


def test_extract_reminder_is_day_first():
    assert extract_reminder_date("add task renew antivirus remind on 15/11/2026") == datetime(2026, 11, 15)
    assert extract_reminder_date("add task renew on 05-11-2026") == datetime(2026, 11, 5)


def test_unparseable_or_missing_reminder_is_none():
    assert extract_reminder_date("add task renew on 31/31/2026") is None
    assert extract_reminder_date("add task renew antivirus") is None


def test_reminder_countdown():
    base = Task("t", created_at=FIXED_NOW)
    assert base.reminder_info(FIXED_NOW) == "No reminder set"

    def info(delta):
        return Task("t", reminder_date=FIXED_NOW + delta, created_at=FIXED_NOW).reminder_info(FIXED_NOW)

    assert info(timedelta(days=3, hours=5)) == "Reminder in 3 days"
    assert info(timedelta(days=1)) == "Reminder in 1 days"
    assert info(timedelta(hours=5, minutes=59)) == "Reminder in 5 hours"
    assert info(timedelta(minutes=30)) == "Reminder due soon!"
    assert info(timedelta(days=-2)) == "Reminder due soon!"


def test_display_form():
    task = Task("Patch router", "firmware 2.1", completed=True, created_at=FIXED_NOW)
    assert task.display(FIXED_NOW) == "[✓] Patch router\n   📝 firmware 2.1\n   📅 Created: 2026-10-19"

    task = Task("Renew AV", reminder_date=FIXED_NOW + timedelta(days=2), created_at=FIXED_NOW)
    assert task.display(FIXED_NOW).endswith("⏰ Reminder in 2 days (Due: 2026-10-21)")
    assert task.display(FIXED_NOW).startswith("[ ] Renew AV")


def test_load_replaces_list(clock):
    store = RecordingStore(tasks=[Task("saved", created_at=FIXED_NOW)])
    manager = TaskManager(store, clock=clock)
    assert manager.load() is None
    assert [t.title for t in manager.tasks] == ["saved"]
    assert "Loaded saved tasks" in store.activities


def test_add_from_text_reports_fields(manager, recording_store):
    reply = manager.add_from_text("add task renew antivirus description yearly licence remind on 15/11/2026")
    assert reply.startswith("Task added successfully!\n\nTitle: renew antivirus\nDescription: yearly licence")
    assert reply.endswith("Reminder set for: 2026-11-15")
    assert len(manager) == 1
    assert manager.tasks[0].created_at == FIXED_NOW
    assert recording_store.save_calls == 1
    assert "Added task: renew antivirus" in recording_store.activities


def test_blank_title_defaults(manager):
    manager.add("   ")
    assert manager.tasks[0].title == DEFAULT_TITLE


def test_list(manager):
    assert manager.list() == "You have no tasks currently."
    manager.add("first")
    manager.add("second")
    listing = manager.list()
    assert listing.startswith("Your Current Tasks:\n\n1. [ ] first")
    assert "2. [ ] second" in listing


def test_complete_and_delete_by_position(manager):
    for title in ("a", "b", "c"):
        manager.add(title)
    assert manager.complete(2) == "Marked task as completed: 'b'"
    assert [t.completed for t in manager.tasks] == [False, True, False]

    assert manager.delete(2) == "Deleted task: 'b'"
    assert [t.title for t in manager.tasks] == ["a", "c"]
    assert manager.tasks[1].completed is False


@pytest.mark.parametrize("number", [0, -1, 4])
def test_out_of_range_numbers_change_nothing(manager, recording_store, number):
    for title in ("a", "b", "c"):
        manager.add(title)
    saves = recording_store.save_calls
    assert manager.complete(number) == INVALID_TASK_NUMBER
    assert manager.delete(number) == INVALID_TASK_NUMBER
    assert [t.title for t in manager.tasks] == ["a", "b", "c"]
    assert not any(t.completed for t in manager.tasks)
    assert recording_store.save_calls == saves


def test_failed_save_keeps_change_and_warns(clock):
    manager = TaskManager(FailingStore(), clock=clock)
    reply = manager.add("offline task")
    assert "(Warning: could not save tasks: disk full)" in reply
    assert len(manager) == 1
    assert "(Warning:" in manager.delete(1)
    assert len(manager) == 0


def test_dict_round_trip():
    task = Task("t", "d", reminder_date=datetime(2026, 11, 15), completed=True, created_at=FIXED_NOW)
    data = task.to_dict()
    assert data["reminder_date"] == "2026-11-15T00:00:00"
    assert Task.from_dict(data) == task
