import os
import sys
import random
import logging
import argparse
import traceback
from datetime import datetime
from typing import Callable, Iterable, Optional

from cyberbot.config import CRASH_LOG_FILE, DEFAULT_DATA_DIR, HELP_TEXT, LOG_FORMAT
from cyberbot.dialogue import DialogueManager
from cyberbot.persistence import Persistence

logger = logging.getLogger(__name__)


def handle_crash(data_dir: str):
    """Writes the current traceback to the crash log next to the data files."""
    log_message = f"--- CRASH LOG: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} ---\n"
    log_message += traceback.format_exc()
    log_message += "\n--- END OF LOG ---\n"
    crash_path = os.path.join(data_dir, CRASH_LOG_FILE)
    try:
        with open(crash_path, "a", encoding="utf-8") as f:
            f.write(log_message)
        print(f"A crash report has been saved to '{crash_path}'.")
    except OSError as e:
        logger.error("Could not write crash log: %s", e)


def ask_name(dialogue: DialogueManager, read: Callable[[str], str] = input) -> str:
    while True:
        name = read("What's your name? ").strip()
        if dialogue.is_valid_name(name):
            return name
        print("Please enter a valid name (letters and spaces only).")


def run_session(dialogue: DialogueManager, lines: Iterable[str], echo: bool = False):
    """Feeds lines to the engine until one of them is 'exit'. Returns False once exited."""
    for line in lines:
        user_input = line.strip()
        if not user_input:
            continue
        if echo:
            print(f"You: {user_input}")
        lower = user_input.lower()
        if lower == "exit":
            dialogue.save_conversation(f"User {dialogue.user_name} exited the application")
            print(f"ChatBot: Goodbye {dialogue.user_name}! Stay safe online.")
            return False
        if lower == "history":
            history = dialogue.get_conversation_history()
            print("\n".join(history) if history else "No conversation history yet.")
            continue
        if lower in ("menu", "help"):
            print(HELP_TEXT)
            continue
        print(f"ChatBot: {dialogue.process_input(user_input)}\n")
    return True


def _interactive_lines(prompt: str):
    while True:
        try:
            yield input(prompt)
        except EOFError:
            return


def main(argv: Optional[list] = None):
    parser = argparse.ArgumentParser(description="Cybersecurity Awareness Chatbot")
    parser.add_argument("--data-dir", type=str, default=DEFAULT_DATA_DIR, help="Directory for tasks, logs and user facts.")
    parser.add_argument("--name", type=str, help="Skip the name prompt and use this name.")
    parser.add_argument("--seed", type=int, help="Seed the response randomiser for reproducible replies.")
    parser.add_argument("--input-file", type=str, help="Path to a file containing user inputs for a scripted run.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    logger.debug("Initializing Persistence in %s", args.data_dir)
    store = Persistence(args.data_dir)
    logger.debug("Initializing DialogueManager")
    dialogue = DialogueManager(store, rng=random.Random(args.seed))
    logger.info("Chatbot ready.")

    try:
        if args.name is not None:
            name = args.name.strip()
            if not dialogue.is_valid_name(name):
                print("Please enter a valid name (letters and spaces only).")
                return 2
        elif args.input_file:
            name = "User"
        else:
            name = ask_name(dialogue)
        print(dialogue.save_user_name(name))
        print(HELP_TEXT + "\n")

        if args.input_file:
            print(f"Reading inputs from {args.input_file}...")
            with open(args.input_file, 'r', encoding='utf-8') as f:
                run_session(dialogue, f, echo=True)
        else:
            run_session(dialogue, _interactive_lines(f"{name}: "))
    except KeyboardInterrupt:
        print(f"\nGoodbye {dialogue.user_name}! Stay safe online.")
    except Exception as e:
        print(f"\nFATAL ERROR: {e}")
        handle_crash(args.data_dir)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
