"""User-facing notifications.

Warnings are the only failures a user ever sees; everything else is
logged. Messages carry the ``StoryMate:`` prefix.
"""

from rich.console import Console
from rich.markup import escape

MESSAGE_PREFIX = "StoryMate:"


class ConsoleNotifier:
    """Notifier printing to the terminal through rich."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def warn(self, message: str) -> None:
        self.console.print(f"[bold yellow]{MESSAGE_PREFIX}[/bold yellow] {escape(message)}", highlight=False)


class NoOpNotifier:
    """Notifier for quiet runs."""

    def warn(self, message: str) -> None:
        pass


def get_notifier(enabled: bool = True, console: Console | None = None) -> ConsoleNotifier | NoOpNotifier:
    """Return a console notifier, or a no-op one when disabled."""
    if not enabled:
        return NoOpNotifier()
    return ConsoleNotifier(console=console)
