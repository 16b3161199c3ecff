"""Work-log audit trail.

Appends structured JSON entries to ~/.jlog/logs.jsonl.
Each entry records one submission attempt with timestamp, ticket,
time spent, start time and result.
"""

import json
from datetime import datetime

from jlog.config import JLOG_DIR

LOGS_FILE = JLOG_DIR / "logs.jsonl"


def write_log(entry):
    """Append an audit log entry."""
    LOGS_FILE.parent.mkdir(parents=True, exist_ok=True)
    entry["timestamp"] = datetime.now().isoformat()
    with open(LOGS_FILE, "a") as f:
        f.write(json.dumps(entry) + "\n")


def read_logs(limit=None):
    """Return audit entries oldest-first, skipping unreadable lines."""
    if not LOGS_FILE.exists():
        return []

    entries = []
    for line in LOGS_FILE.read_text().splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError:
            continue

    if limit:
        return entries[-limit:]
    return entries
