from rich.console import Console
from rich.markup import escape

from jlog.jira import JiraError
from jlog.log import write_log
from jlog.timefmt import reparse

DEFAULT_RETRIES = 2


class SubmitOutcome:
    def __init__(self, ok, message=None):
        self.ok = ok
        self.message = message

    def __bool__(self):
        return self.ok

    def __repr__(self):
        return f"SubmitOutcome(ok={self.ok!r}, message={self.message!r})"


def build_payload(time_spent, comment=None, started=None):
    """Worklog request body. `started` is left out entirely when not given."""
    payload = {
        "timeSpent": time_spent,
        "comment": comment or "",
    }
    if started is not None:
        payload["started"] = started
    return payload


def submit_worklog(client, ticket_id, time_spent, comment=None, started=None,
                   retries=DEFAULT_RETRIES):
    """Post one worklog. Retrying is left to client.post; errors become a failed outcome."""
    payload = build_payload(time_spent, comment, started)
    try:
        client.post(f"issue/{ticket_id}/worklog", payload, retries=retries)
    except JiraError as e:
        return SubmitOutcome(False, str(e))
    return SubmitOutcome(True)


def log_work(client, ticket_id, time_spent, comment=None, start_time=None,
             retries=DEFAULT_RETRIES, console=None):
    """Validate the start time, submit, report and audit one worklog.

    Raises ParseError (before any network call) if start_time is malformed.
    """
    console = console or Console()
    started = reparse(start_time) if start_time else None

    outcome = submit_worklog(client, ticket_id, time_spent, comment, started, retries)
    if outcome.ok:
        console.print(f"[green]Successfully logged work on ticket[/green] [bold green]{ticket_id}[/bold green]")
    else:
        console.print(
            f"[red]Failed to log work on ticket[/red] [bold red]{ticket_id}[/bold red]. "
            f"[bold red]Error:[/bold red] {escape(outcome.message)}",
            highlight=False,
        )
    console.print()

    try:
        write_log({
            "event": "worklog",
            "ticket": ticket_id,
            "time_spent": time_spent,
            "started": started,
            "comment": comment or "",
            "result": "logged" if outcome.ok else "failed",
            "error": outcome.message,
        })
    except OSError as e:
        console.print(f"[yellow]  Could not write audit log: {escape(str(e))}[/yellow]")
    return outcome
