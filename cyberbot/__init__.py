"""Rule-based cybersecurity awareness assistant: topic Q&A, a task list and a quiz."""

__version__ = "1.0.0"
