import pytest

from jlog import cache, config, credentials, jira, log


@pytest.fixture(autouse=True)
def jlog_home(tmp_path, monkeypatch):
    """Point every ~/.jlog file at a temp dir and drop JLOG_* overrides."""
    home = tmp_path / ".jlog"
    monkeypatch.setattr(config, "GLOBAL_CONFIG_FILE", home / "config.json")
    monkeypatch.setattr(credentials, "CREDENTIALS_FILE", home / "credentials")
    monkeypatch.setattr(log, "LOGS_FILE", home / "logs.jsonl")
    monkeypatch.setattr(cache, "TICKETS_FILE", home / "tickets.json")
    monkeypatch.setattr(jira, "RETRY_BACKOFF", 0)
    for key in config.DEFAULT_CONFIG:
        monkeypatch.delenv(config.ENV_PREFIX + key.upper(), raising=False)
    return home


class FakeClient:
    """Stands in for JiraClient: canned issues, recorded posts."""

    def __init__(self, issues=None, assigned=None, post_error=None, lookup_error=None):
        self.issues = issues or {}
        self.assigned = assigned or {}
        self.post_error = post_error
        self.lookup_error = lookup_error
        self.lookups = []
        self.posts = []

    def search_own_tickets(self, jql="assignee=currentUser()"):
        return dict(self.assigned)

    def get_issue(self, ticket_id):
        self.lookups.append(ticket_id)
        if self.lookup_error:
            error, self.lookup_error = self.lookup_error, None
            raise error
        # Jira keys are case-insensitive on lookup and come back canonical.
        matches = [k for k in self.issues if k.lower() == ticket_id.lower()]
        if not matches:
            raise jira.TicketNotFound(f"Ticket {ticket_id} does not exist")
        return {"key": matches[0], "fields": {"summary": self.issues[matches[0]]}}

    def post(self, path, payload, retries=2):
        self.posts.append((path, payload, retries))
        if self.post_error:
            raise self.post_error
        return {"id": "10001"}


class FakeChooser:
    def __init__(self, *selections):
        self.selections = list(selections)
        self.offered = []

    def offer(self, items):
        self.offered.append(list(items))
        return self.selections.pop(0) if self.selections else None


class ScriptedPrompt:
    """click.prompt replacement answering from a list; records the questions."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.asked = []

    def __call__(self, text, default=None, **kwargs):
        self.asked.append(text)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {text}")
        answer = self.answers.pop(0)
        if answer == "" and default is not None:
            return default
        return answer


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def fake_chooser():
    return FakeChooser


@pytest.fixture
def scripted_prompt():
    return ScriptedPrompt
