"""Ticket id → title cache.

The session keeps the merged map in memory; tickets entered by hand are also
persisted to ~/.jlog/tickets.json so they are offered again next time.
"""

import json

from jlog.config import JLOG_DIR

TICKETS_FILE = JLOG_DIR / "tickets.json"


def merge(fetched, persisted):
    """Return persisted tickets overlaid with fetched ones. Fetched titles win."""
    return {**persisted, **fetched}


def lookup(cache, ticket_id):
    return cache.get(ticket_id)


def insert(cache, ticket_id, title):
    cache[ticket_id] = title
    return cache


def load_cached_tickets():
    """Read persisted tickets. A missing or unreadable file is an empty cache."""
    if not TICKETS_FILE.exists():
        return {}
    try:
        data = json.loads(TICKETS_FILE.read_text())
    except (json.JSONDecodeError, OSError):
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): str(v) for k, v in data.items()}


def add_cached_ticket(ticket_id, title):
    """Persist one ticket, overwriting any previous title."""
    tickets = load_cached_tickets()
    tickets[ticket_id] = title
    TICKETS_FILE.parent.mkdir(parents=True, exist_ok=True)
    TICKETS_FILE.write_text(json.dumps(tickets, indent=2, sort_keys=True) + "\n")
