"""Ticket selection: picker first, validated manual entry as fallback."""

import click
from rich.console import Console
from rich.markup import escape

from jlog import cache
from jlog.jira import JiraError, TicketNotFound

OFFERING = "offering"
MANUAL_ENTRY = "manual_entry"
VALIDATING = "validating"
RESOLVED = "resolved"


def format_ticket(ticket_id, title):
    return f"{ticket_id} - {title}"


class TicketResolver:
    """Resolves one (ticket_id, title) pair per call to resolve().

    Tickets picked from the list are trusted as-is. Tickets typed by hand are
    looked up in Jira first; unknown ids and lookup errors send the user back
    to the prompt. Validated tickets are added to `tickets` and handed to
    `on_add` for persistence.
    """

    def __init__(self, tickets, chooser, client, console=None, prompt=click.prompt,
                 on_add=cache.add_cached_ticket):
        self.tickets = tickets
        self.chooser = chooser
        self.client = client
        self.console = console or Console()
        self._prompt = prompt
        self._on_add = on_add
        self.state = OFFERING

    def resolve(self):
        self.state = OFFERING
        ticket_id = title = None

        while self.state != RESOLVED:
            if self.state == OFFERING:
                lines = [format_ticket(k, v) for k, v in self.tickets.items()]
                selection = self.chooser.offer(lines) if lines else None
                if selection and selection.split():
                    ticket_id, title = self._from_selection(selection)
                    self.state = RESOLVED
                else:
                    self.console.print("No ticket selected. Enter ticket manually.")
                    self.state = MANUAL_ENTRY

            elif self.state == MANUAL_ENTRY:
                ticket_id = self._prompt("Enter ticket").strip()
                if ticket_id:
                    self.state = VALIDATING

            elif self.state == VALIDATING:
                resolved = self._validate(ticket_id)
                if resolved is None:
                    self.state = MANUAL_ENTRY
                else:
                    ticket_id, title = resolved
                    self.state = RESOLVED

        self.console.print(f"Selected ticket: {format_ticket(ticket_id, title)}", highlight=False)
        return ticket_id, title

    def _from_selection(self, selection):
        ticket_id = selection.split()[0]
        title = cache.lookup(self.tickets, ticket_id)
        if title is None:
            _, _, title = selection.partition(" - ")
        return ticket_id, title

    def _validate(self, ticket_id):
        """Return (key, title) as Jira knows them, or None after reporting why not."""
        try:
            issue = self.client.get_issue(ticket_id)
        except TicketNotFound:
            self.console.print(f"[red]Ticket {ticket_id} does not exist.[/red]")
            return None
        except JiraError as e:
            self.console.print(f"[red]Error occurred when looking up ticket {ticket_id}: {escape(str(e))}[/red]")
            return None

        # Jira answers "abc-1" with key "ABC-1"; cache the canonical key only.
        key = issue.get("key") or ticket_id
        title = (issue.get("fields") or {}).get("summary") or ""
        cache.insert(self.tickets, key, title)
        if self._on_add:
            try:
                self._on_add(key, title)
            except OSError as e:
                self.console.print(f"[yellow]  Could not save ticket {key} to the cache: {escape(str(e))}[/yellow]")
        return key, title
