import re
import logging
from typing import Optional

log = logging.getLogger(__name__)


class Prompter:
    """Source of operator answers. The supervisor asks all its questions through this."""

    def ask(self, question: str) -> str:
        raise NotImplementedError


class ConsolePrompter(Prompter):
    """Asks on stdout and reads the answer from stdin."""

    def ask(self, question: str) -> str:
        print(question)
        try:
            return input().strip()
        except EOFError:
            return ""


def confirm(prompter: Prompter, question: str) -> bool:
    """Asks a y/n question. Only 'y' or 'yes' (any case) counts as agreement."""
    return prompter.ask(f"{question} (y/n)").strip().lower() in ("y", "yes")


def parse_positive_int(answer: str) -> Optional[int]:
    """Returns `answer` as a positive integer, or None if it is not one."""
    answer = answer.strip()
    if not re.fullmatch(r"[0-9]+", answer):
        return None
    value = int(answer)
    return value if value > 0 else None


def ask_positive_int(prompter: Prompter, question: str, default: int) -> int:
    """
    Asks for a positive integer, falling back to `default`.

    A blank answer silently selects the default; any other answer that is not
    a positive integer is logged before the default is used.
    """
    answer = prompter.ask(f"{question} (default {default})")
    if not answer:
        return default
    value = parse_positive_int(answer)
    if value is None:
        log.warning(f"'{answer}' is not a positive number; using default {default}.")
        return default
    return value
