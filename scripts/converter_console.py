"""
Logging, prompts and progress for the converter scripts.

Not meant to be called directly. The converter core never talks to the
terminal itself: it receives a logger, a prompter and a progress reporter
built here (or scripted stand-ins in tests).
"""

import logging
import shlex
import signal
import subprocess
import sys
import threading
from typing import List, Optional, Sequence

LOGGER_NAME = 'encoding_converter'
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'


def create_logger(verbose: bool = False, stream=None) -> logging.Logger:
    """Build the process-wide converter logger (stderr by default)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


class ConsolePrompter:
    """Asks questions on stdin/stderr. End of input counts as 'no'."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr
        self._lock = threading.Lock()

    def _ask(self, prompt: str) -> Optional[str]:
        with self._lock:
            print(prompt, end='', file=self.stream, flush=True)
            try:
                return input().strip()
            except EOFError:
                return None

    def confirm(self, message: str) -> bool:
        answer = self._ask(f"{message}\nContinue? [y/N] ")
        return bool(answer) and answer.lower() in ('y', 'yes')

    def choose(self, message: str, options: Sequence[str]) -> Optional[str]:
        lines = [message] + [f"  {i}) {option}" for i, option in enumerate(options, 1)]
        answer = self._ask('\n'.join(lines) + '\nChoice (empty to dismiss): ')
        if not answer:
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1]
        for option in options:
            if option.lower() == answer.lower():
                return option
        return None

    def info(self, message: str) -> None:
        print(message, file=self.stream)

    def error(self, message: str) -> None:
        print(f"ERROR: {message}", file=self.stream)


class ScriptedPrompter:
    """Answers every prompt from presets; used for --yes and in tests."""

    def __init__(self, confirm: bool = True, choice: Optional[str] = None):
        self.confirm_answer = confirm
        self.choice = choice
        self.questions: List[str] = []
        self.messages: List[str] = []
        self.errors: List[str] = []

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.confirm_answer

    def choose(self, message: str, options: Sequence[str]) -> Optional[str]:
        self.questions.append(message)
        return self.choice if self.choice in options else None

    def info(self, message: str) -> None:
        self.messages.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class ConsoleProgress:
    """Logs progress lines and carries the cooperative cancel flag."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self._cancel = threading.Event()

    def report(self, percent: float, message: str) -> None:
        self.logger.info(f"[{percent:5.1f}%] {message}")

    def cancel(self) -> None:
        self._cancel.set()

    def is_cancelled(self) -> bool:
        return self._cancel.is_set()


def command_reopener(command: Optional[str]):
    """Reopen hook that runs `command <file>` (e.g. "code -r"), or None."""
    if not command:
        return None
    argv = shlex.split(command)

    def reopen(path):
        subprocess.run(argv + [str(path)], check=True)

    return reopen


def install_interrupt_handler(progress) -> None:
    """First Ctrl-C requests cancellation at the next wave; the second aborts."""
    def handler(signum, frame):
        if progress.is_cancelled():
            raise KeyboardInterrupt
        progress.cancel()
        print('Cancelling after the current wave (Ctrl-C again to abort)...', file=sys.stderr)

    signal.signal(signal.SIGINT, handler)
