import json
import os
from pathlib import Path

from jlog.timefmt import is_valid_offset

JLOG_DIR = Path.home() / ".jlog"
GLOBAL_CONFIG_FILE = JLOG_DIR / "config.json"

REQUIRED_KEYS = {"base_url"}

DEFAULT_CONFIG = {
    "base_url": "",
    "utc_offset": "-0500",
    "chooser": "fzf",
    "jql": "assignee=currentUser()",
    "retries": 2,
}

# Environment overrides: JLOG_BASE_URL, JLOG_UTC_OFFSET, ...
ENV_PREFIX = "JLOG_"


def load_global_config():
    """Load ~/.jlog/config.json — values saved by `jlog config`."""
    if GLOBAL_CONFIG_FILE.exists():
        try:
            return json.loads(GLOBAL_CONFIG_FILE.read_text())
        except (json.JSONDecodeError, OSError):
            pass
    return {}


def save_global_config(updates):
    """Merge updates into ~/.jlog/config.json."""
    existing = load_global_config()
    existing.update(updates)
    GLOBAL_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    GLOBAL_CONFIG_FILE.write_text(json.dumps(existing, indent=2) + "\n")


def _env_overrides():
    overrides = {}
    for key in DEFAULT_CONFIG:
        value = os.environ.get(ENV_PREFIX + key.upper())
        if value is not None:
            overrides[key] = value
    return overrides


def load_config():
    # Merge order: defaults → global config → JLOG_* environment
    config = {**DEFAULT_CONFIG, **load_global_config(), **_env_overrides()}

    missing = {k for k in REQUIRED_KEYS if not config.get(k)}
    if missing:
        raise ValueError(
            f"Missing required config: {', '.join(sorted(missing))}. "
            "Run: jlog config base_url https://your-site.atlassian.net"
        )

    if not is_valid_offset(config["utc_offset"]):
        raise ValueError(
            f"Invalid utc_offset {config['utc_offset']!r}: expected a signed "
            "4-digit offset such as -0500 or +0100"
        )

    try:
        config["retries"] = int(config["retries"])
    except (TypeError, ValueError):
        raise ValueError(f"Invalid retries value: {config['retries']!r}")
    if config["retries"] < 1:
        raise ValueError("retries must be at least 1")

    config["base_url"] = config["base_url"].rstrip("/")
    return config
