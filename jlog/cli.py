import json
from datetime import datetime

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jlog.chooser import create_chooser
from jlog.config import DEFAULT_CONFIG, load_config, load_global_config, save_global_config
from jlog.credentials import CREDENTIALS_FILE, EMAIL_VAR, TOKEN_VAR, jira_auth, load_credentials, save_credential
from jlog.jira import JiraClient
from jlog.log import read_logs
from jlog.session import InteractiveSession, fetch_tickets
from jlog.submit import log_work
from jlog.timefmt import ParseError


@click.group()
@click.version_option(version="0.1.0")
def main():
    """jlog: log work on Jira tickets from the terminal."""
    load_credentials()


def _load_config_or_exit(console):
    try:
        return load_config()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)


def _client_or_exit(console, config):
    auth = jira_auth()
    if auth is None:
        console.print(
            f"[bold red]{EMAIL_VAR} and {TOKEN_VAR} must be set.[/bold red]\n"
            f"  Run: jlog auth {EMAIL_VAR} you@example.com\n"
            f"       jlog auth {TOKEN_VAR} <api-token>"
        )
        raise SystemExit(1)
    return JiraClient(config["base_url"], auth=auth)


@main.command()
@click.option("-i", "--interactive", is_flag=True, help="Interactively log work on tickets.")
@click.argument("ticket", required=False)
@click.argument("time_spent", metavar="TIME", required=False)
@click.option("--comment", default=None, help="Comment about the work log.")
@click.option("--start-time", default=None,
              help="When the work started, e.g. 2024-03-19T14:00:00.000+0000.")
def logwork(interactive, ticket, time_spent, comment, start_time):
    """Log work on a ticket.

    Examples:
        jlog logwork PROJ-123 1h30m --comment "review"
        jlog logwork -i
    """
    console = Console()

    if not interactive and not (ticket and time_spent):
        console.print("[red]Give TICKET and TIME, or use --interactive.[/red]")
        raise SystemExit(1)

    config = _load_config_or_exit(console)

    with _client_or_exit(console, config) as client:
        if interactive:
            try:
                chooser = create_chooser(config["chooser"])
                InteractiveSession(client, chooser, config, console=console).run()
            except (KeyboardInterrupt, click.Abort, EOFError):
                console.print("\n[dim]Goodbye.[/dim]")
            except RuntimeError as e:
                console.print(f"[red]{escape(str(e))}[/red]")
                raise SystemExit(1)
            return

        try:
            outcome = log_work(
                client, ticket, time_spent, comment, start_time,
                retries=config["retries"], console=console,
            )
        except ParseError as e:
            console.print(f"[red]Failed to parse the start time: {escape(str(e))}[/red]")
            raise SystemExit(1)

    if not outcome.ok:
        raise SystemExit(1)


@main.command()
def tickets():
    """List assigned and cached tickets."""
    console = Console()
    config = _load_config_or_exit(console)

    with _client_or_exit(console, config) as client:
        merged = fetch_tickets(client, config["jql"], console)

    if not merged:
        console.print("[dim]No tickets found.[/dim]")
        return

    table = Table(title="Tickets")
    table.add_column("Key", style="bold cyan")
    table.add_column("Summary")
    for key in sorted(merged):
        table.add_row(key, merged[key])
    console.print(table)


@main.command()
@click.argument("key")
@click.argument("value")
def auth(key, value):
    """Save a credential. Stored in ~/.jlog/credentials.

    Examples:
        jlog auth JIRA_EMAIL you@example.com
        jlog auth JIRA_API_TOKEN ATATT3x...
    """
    save_credential(key, value)
    click.echo(f"Saved {key} to {CREDENTIALS_FILE}")


@main.command("config")
@click.argument("key", required=False)
@click.argument("value", required=False)
def config_cmd(key, value):
    """Show settings, or set KEY to VALUE in ~/.jlog/config.json.

    Keys: base_url, utc_offset, chooser, jql, retries.
    """
    console = Console()

    if key is None:
        current = {**DEFAULT_CONFIG, **load_global_config()}
        for k, v in current.items():
            console.print(f"  [bold]{k}[/bold] = {json.dumps(v)}", highlight=False)
        return

    if key not in DEFAULT_CONFIG:
        console.print(f"[red]Unknown key {escape(repr(key))}. Use one of: {', '.join(DEFAULT_CONFIG)}[/red]")
        raise SystemExit(1)
    if value is None:
        console.print(f"[red]Missing VALUE for {key}.[/red]")
        raise SystemExit(1)

    save_global_config({key: int(value) if key == "retries" and value.isdigit() else value})
    try:
        load_config()
    except ValueError as e:
        console.print(f"[yellow]Saved, but config is not usable yet: {escape(str(e))}[/yellow]")
        return
    console.print(f"[green]Saved {key}.[/green]")


@main.command()
@click.option("-n", "--limit", default=20, help="Number of log entries to show.")
def logs(limit):
    """Show the work-log audit trail."""
    console = Console()

    entries = read_logs(limit)
    if not entries:
        console.print("[dim]No logs yet. Log some work first.[/dim]")
        return

    table = Table(title="Work Log")
    table.add_column("Time", style="dim")
    table.add_column("Ticket", style="bold cyan")
    table.add_column("Spent")
    table.add_column("Started", style="dim")
    table.add_column("Comment", max_width=40)
    table.add_column("Result", style="bold")

    for entry in entries:
        ts = entry.get("timestamp", "")
        if ts:
            try:
                ts = datetime.fromisoformat(ts).strftime("%m-%d %H:%M")
            except ValueError:
                pass
        result = entry.get("result", "")
        result_style = {"logged": "[green]logged[/green]", "failed": "[red]failed[/red]"}.get(result, result)
        table.add_row(
            ts,
            entry.get("ticket", ""),
            entry.get("time_spent", ""),
            entry.get("started") or "",
            (entry.get("comment") or "")[:40],
            result_style,
        )

    console.print(table)
