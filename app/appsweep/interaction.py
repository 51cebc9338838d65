"""User confirmation collaborators.

The deletion engine and the orchestrator ask the user before removing
protected files and before closing running applications. Only an
explicit affirmative answer counts; anything else is a decline.
"""

from abc import ABC, abstractmethod

from rich.console import Console

from appsweep.utils.formatting import console as default_console

AFFIRMATIVE_ANSWERS: frozenset[str] = frozenset({"y", "yes"})


class Confirmer(ABC):
    """Abstract base class for synchronous yes/no confirmation."""

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask the user to confirm an action.

        Args:
            message: What is about to happen.

        Returns:
            True only for an affirmative answer.
        """


class ConsoleConfirmer(Confirmer):
    """Asks on the terminal and reads a single line of input.

    Args:
        console: Rich console to prompt on. Defaults to the shared console.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or default_console

    def confirm(self, message: str) -> bool:
        self._console.print(message, markup=False, highlight=False)
        try:
            answer = self._console.input("Do you want to proceed? (y/n): ")
        except EOFError:
            return False
        return answer.strip().lower() in AFFIRMATIVE_ANSWERS


class AutoConfirmer(Confirmer):
    """Answers every confirmation with a fixed value (non-interactive runs).

    Args:
        answer: The answer given to every question.
    """

    def __init__(self, answer: bool) -> None:
        self._answer = answer

    def confirm(self, message: str) -> bool:
        return self._answer
