import click
from rich.console import Console

from jlog.chooser.base import Chooser


class PromptChooser(Chooser):
    """Numbered list + prompt, for machines without fzf."""

    def __init__(self, console=None, prompt=click.prompt):
        self.console = console or Console()
        self._prompt = prompt

    def offer(self, items):
        items = list(items)
        if not items:
            return None

        for num, item in enumerate(items, 1):
            self.console.print(f"  {num:>3}. {item}", highlight=False)

        while True:
            choice = self._prompt(
                "  Ticket number (blank to enter manually)",
                default="",
                show_default=False,
            ).strip()
            if not choice:
                return None
            if choice.isdigit() and 1 <= int(choice) <= len(items):
                return items[int(choice) - 1]
            self.console.print(f"  [red]Pick a number between 1 and {len(items)}.[/red]")
