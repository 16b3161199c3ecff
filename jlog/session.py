from datetime import date

import click
from rich.console import Console
from rich.markup import escape

from jlog import cache
from jlog.jira import JiraError
from jlog.resolver import TicketResolver, format_ticket
from jlog.submit import log_work
from jlog.timefmt import ParseError, normalize, validate_date, validate_time


def _is_yes(answer):
    return answer.strip().lower() in ("y", "yes")


def fetch_tickets(client, jql, console, persisted=None):
    """Assigned tickets merged over the persisted cache.

    A failed fetch is reported and the cached tickets are used alone.
    """
    console.print("Fetching assigned tickets...")
    if persisted is None:
        persisted = cache.load_cached_tickets()
    try:
        fetched = client.search_own_tickets(jql)
    except JiraError as e:
        console.print(f"[yellow]  Could not fetch assigned tickets: {escape(str(e))}[/yellow]")
        fetched = {}
    return cache.merge(fetched, persisted)


class InteractiveSession:
    """Date → entries loop for logging several worklogs in one sitting.

    For each date: prompt start time, pick a ticket, prompt time spent and
    comment, confirm, submit. Both loops continue only on an explicit "y".
    """

    def __init__(self, client, chooser, config, console=None, prompt=click.prompt,
                 tickets=None, on_add=cache.add_cached_ticket):
        self.client = client
        self.chooser = chooser
        self.utc_offset = config["utc_offset"]
        self.jql = config.get("jql", "assignee=currentUser()")
        self.retries = config.get("retries", 2)
        self.console = console or Console()
        self._prompt = prompt
        self._on_add = on_add
        self.tickets = tickets
        self.logged = 0
        self.failed = 0

    def run(self):
        if self.tickets is None:
            self.tickets = fetch_tickets(self.client, self.jql, self.console)
        resolver = TicketResolver(
            self.tickets, self.chooser, self.client,
            console=self.console, prompt=self._prompt, on_add=self._on_add,
        )

        while True:
            start_date = self._ask_valid(
                "Start date (YYYY-MM-DD)", validate_date,
                "Expected a date like 2024-02-01.", default=date.today().isoformat(),
            )

            while True:
                self._log_entry(start_date, resolver)
                if not _is_yes(self._prompt("Log work for SAME DATE? (y/N)", default="N")):
                    break

            if not _is_yes(self._prompt("Log work for another date? (y/N)", default="N")):
                break
            self.console.print("-------------------")

        self.console.print(f"[dim]Logged {self.logged} worklog(s), {self.failed} failed.[/dim]")

    def _ask_valid(self, text, check, hint, default=None):
        while True:
            if default is None:
                value = self._prompt(text).strip()
            else:
                value = self._prompt(text, default=default).strip()
            if check(value):
                return value
            self.console.print(f"[red]{hint}[/red]")

    def _log_entry(self, start_date, resolver):
        start_time = self._ask_valid(
            f"Start time for work log (HH:MM, UTC{self.utc_offset})", validate_time,
            "Expected a time like 09:30.",
        )
        started = normalize(start_date, start_time, self.utc_offset)

        ticket_id, title = resolver.resolve()

        time_spent = self._ask_valid(
            "Time spent (e.g. 1h 30m)", lambda v: bool(v), "Time spent is required.",
        )
        comment = self._prompt("Comment", default="", show_default=False).strip()

        self._confirm(ticket_id, title, started, time_spent, comment)

        try:
            outcome = log_work(
                self.client, ticket_id, time_spent, comment, started,
                retries=self.retries, console=self.console,
            )
        except ParseError as e:
            self.console.print(f"[red]Failed to parse the start time: {escape(str(e))}[/red]")
            self.failed += 1
            return

        if outcome.ok:
            self.logged += 1
        else:
            self.failed += 1

    def _confirm(self, ticket_id, title, started, time_spent, comment):
        c = self.console
        c.print()
        c.print("[bold blue]-------------------[/bold blue]")
        c.print(f"[bold blue]Selected ticket:[/bold blue] [bold green]{escape(format_ticket(ticket_id, title))}[/bold green]")
        c.print(f"[bold yellow]Time:[/bold yellow] {started}", highlight=False)
        c.print(f"[bold yellow]Time spent:[/bold yellow] {escape(time_spent)}", highlight=False)
        c.print(f"[bold yellow]Comment:[/bold yellow] {escape(comment)}", highlight=False)
        c.print("[bold blue]-------------------[/bold blue]")
