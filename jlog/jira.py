"""Minimal Jira REST client: the three calls jlog needs.

    GET  search?jql=...          assigned tickets
    GET  issue/{id}              existence check + summary
    POST issue/{id}/worklog      the work log itself (retried)
"""

import time

import httpx

API_PREFIX = "/rest/api/2/"
DEFAULT_TIMEOUT = 30
RETRY_BACKOFF = 1.0  # seconds, multiplied by attempt number

# Worth retrying: the server may succeed on a second attempt.
RETRY_STATUS = {429, 500, 502, 503, 504}


class JiraError(RuntimeError):
    """A Jira call failed at the transport level or returned an error status."""


class TicketNotFound(JiraError):
    """The ticket id is well formed but no such issue exists."""


def _error_detail(response):
    """Pull the human-readable part out of a Jira error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()[:200]
    messages = list(body.get("errorMessages", [])) if isinstance(body, dict) else []
    if isinstance(body, dict):
        messages += [f"{k}: {v}" for k, v in body.get("errors", {}).items()]
    return "; ".join(messages) or response.text.strip()[:200]


class JiraClient:
    """Sync Jira client over httpx. Use as a context manager to close the pool."""

    def __init__(self, base_url, auth=None, timeout=DEFAULT_TIMEOUT, transport=None):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + API_PREFIX,
            auth=auth,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self._client.close()

    def get(self, path, params=None):
        """GET and return decoded JSON. Raises TicketNotFound on 404, JiraError otherwise."""
        try:
            r = self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise JiraError(f"GET {path} failed: {e}") from e
        if r.status_code == 404:
            raise TicketNotFound(f"GET {path}: not found")
        if r.status_code != 200:
            raise JiraError(f"GET {path} returned {r.status_code}: {_error_detail(r)}")
        try:
            return r.json()
        except ValueError as e:
            raise JiraError(f"GET {path} returned invalid JSON") from e

    def post(self, path, payload, retries=2):
        """POST JSON, making up to `retries` attempts. Returns decoded JSON (or {})."""
        attempts = max(1, retries)
        last_error = None
        for attempt in range(1, attempts + 1):
            try:
                r = self._client.post(path, json=payload)
            except httpx.HTTPError as e:
                last_error = JiraError(f"POST {path} failed: {e}")
            else:
                if r.status_code in (200, 201, 204):
                    try:
                        return r.json() if r.content else {}
                    except ValueError:
                        return {}
                last_error = JiraError(f"POST {path} returned {r.status_code}: {_error_detail(r)}")
                if r.status_code not in RETRY_STATUS:
                    raise last_error
            if attempt < attempts:
                time.sleep(RETRY_BACKOFF * attempt)
        raise last_error

    def search_own_tickets(self, jql="assignee=currentUser()"):
        """Return {key: summary} for tickets matched by jql."""
        result = self.get("search", params={"jql": jql, "fields": "summary"})
        tickets = {}
        for issue in result.get("issues", []):
            tickets[issue["key"]] = issue.get("fields", {}).get("summary", "")
        return tickets

    def get_issue(self, ticket_id):
        """Return the issue payload. Raises TicketNotFound for unknown or empty results."""
        issue = self.get(f"issue/{ticket_id}", params={"fields": "summary"})
        if not issue:
            raise TicketNotFound(f"Ticket {ticket_id} does not exist")
        return issue
