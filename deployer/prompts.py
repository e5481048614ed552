"""Operator prompts. The ask callable is injectable so flows can run without a terminal."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

AFFIRMATIVE = ("y", "yes")


def parse_positive_amount(value: str) -> Decimal:
    """Parse a strictly positive, finite decimal amount."""
    try:
        amount = Decimal(value)
    except InvalidOperation as e:
        raise ValidationError(f'Amount "{value}" is not a number.') from e
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f'Amount "{value}" must be a positive number.')
    return amount


class Prompter:
    def __init__(self, ask: Callable[[str], str] = input):
        self.ask = ask

    def _read(self, prompt: str) -> Optional[str]:
        # Ctrl-C or a closed stdin while waiting on the operator means "no"
        try:
            return self.ask(prompt)
        except (KeyboardInterrupt, EOFError):
            logger.info("Prompt interrupted")
            return None

    def confirm(self, question: str) -> bool:
        """Yes/no question. Only y/yes counts as yes; everything else declines."""
        answer = self._read(f"{question} (y/N): ")
        return (answer or "").strip().lower() in AFFIRMATIVE

    def prompt_amount(self, question: str, default: str) -> Optional[str]:
        """
        Ask for a native-currency amount.

        Empty input takes `default`. The value is validated before it is
        returned; malformed input aborts the run rather than re-prompting.

        Returns:
            The amount as typed, or None if the operator interrupted the prompt

        Raises:
            ValidationError: the value is not a positive number
        """
        answer = self._read(f"{question} [{default}]: ")
        if answer is None:
            return None
        value = answer.strip() or default
        parse_positive_amount(value)
        return value
