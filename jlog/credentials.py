import os

from dotenv import dotenv_values, set_key

from jlog.config import JLOG_DIR

CREDENTIALS_FILE = JLOG_DIR / "credentials"

EMAIL_VAR = "JIRA_EMAIL"
TOKEN_VAR = "JIRA_API_TOKEN"


def load_credentials():
    """Load credentials from ~/.jlog/credentials into os.environ.

    Format: KEY=VALUE, one per line. Lines starting with # are comments.
    Variables already exported in the shell win over the file.
    """
    if not CREDENTIALS_FILE.exists():
        return {}

    creds = {}
    for key, value in dotenv_values(CREDENTIALS_FILE).items():
        if value is None:
            continue
        creds[key] = value
        if key not in os.environ:
            os.environ[key] = value

    return creds


def save_credential(key, value):
    """Save or update a single credential in ~/.jlog/credentials.

    Written with set_key so values with spaces, quotes or # read back intact.
    """
    CREDENTIALS_FILE.parent.mkdir(parents=True, exist_ok=True)
    CREDENTIALS_FILE.parent.chmod(0o700)
    CREDENTIALS_FILE.touch(mode=0o600, exist_ok=True)

    set_key(CREDENTIALS_FILE, key, value, quote_mode="always")
    CREDENTIALS_FILE.chmod(0o600)
    os.environ[key] = value


def jira_auth():
    """Return (email, token) for basic auth, or None if either is missing."""
    email = os.environ.get(EMAIL_VAR)
    token = os.environ.get(TOKEN_VAR)
    if not (email and token):
        return None
    return email, token
