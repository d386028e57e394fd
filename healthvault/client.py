"""
Python client for the records API.

``RecordsClient`` is a thin HTTP wrapper. ``RecordBook`` keeps a local copy of
the record list and runs the same workflow as the browser page: load, render,
filter, add and delete, with notifications instead of toasts.
"""
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import quote

import requests
from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

LOAD_ERROR = "Unable to load records. Please check if the server is running."

# Add-form states
CLOSED = "closed"
OPEN = "open"
SUBMITTING = "submitting"
OPEN_WITH_ERROR = "open-with-error"


class ClientError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RecordsClient:

    def __init__(self, base_url="http://localhost:3000", session=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ClientError(f"Unable to reach {self.base_url}: {e}") from e

        if response.status_code >= 400:
            try:
                message = response.json().get("error")
            except ValueError:
                message = None
            raise ClientError(
                message or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ClientError(
                f"Unexpected response from {self.base_url}", status_code=response.status_code
            ) from e

    def list_records(self):
        return self._request("GET", "/records")

    def get_record(self, record_id):
        return self._request("GET", f"/records/{record_id}")

    def search(self, term):
        return self._request("GET", f"/records/search/{quote(term, safe='')}")

    def create_record(self, values):
        return self._request("POST", "/records", json=values)

    def update_record(self, record_id, values):
        return self._request("PUT", f"/records/{record_id}", json=values)

    def delete_record(self, record_id):
        return self._request("DELETE", f"/records/{record_id}")

    def health(self):
        return self._request("GET", "/health")


def normalize_record(row):
    """Wire row (snake_case) -> client record (camelCase)"""
    return {
        "id": row.get("id"),
        "medicine": row.get("medicine") or "",
        "dosage": row.get("dosage") or "",
        "duration": row.get("duration") or "",
        "startDate": row.get("start_date") or "",
        "endDate": row.get("end_date") or "",
        "condition": row.get("condition") or "",
    }


def format_date(value):
    if not value:
        return "N/A"
    try:
        day = value if isinstance(value, date) else date.fromisoformat(str(value)[:10])
    except ValueError:
        return str(value)
    return f"{day:%b} {day.day}, {day.year}"


def filter_records(records, term):
    term = (term or "").lower()
    if not term:
        return list(records)

    def matches(record):
        return (
            term in record["medicine"].lower()
            or term in (record["condition"] or "").lower()
            or term in record["dosage"].lower()
            or term in record["startDate"]
            or term in record["endDate"]
            or term in record["duration"].lower()
        )

    return [record for record in records if matches(record)]


_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
)
_env.filters["format_date"] = format_date


def render_records(records, error=None):
    return _env.get_template("_records.html").render(records=records, error=error)


def _dates_out_of_order(values):
    # Unparseable dates are left for the server to reject
    try:
        start = date.fromisoformat(values.get("startDate") or "")
        end = date.fromisoformat(values.get("endDate") or "")
    except ValueError:
        return False
    return start > end


@dataclass
class Notification:
    message: str
    kind: str = "success"


class RecordBook:
    """Local mirror of the record list plus the add-form state."""

    def __init__(self, client: RecordsClient):
        self.client = client
        self.records = []
        self.error = None
        self.form_state = CLOSED
        self.form_values = {}
        self.notifications = []

    def notify(self, message, kind="success"):
        self.notifications.append(Notification(message, kind))

    def load_records(self):
        try:
            rows = self.client.list_records()
        except ClientError as e:
            print(f"[CLIENT] Error loading records: {e.message}")
            self.error = LOAD_ERROR
            return render_records([], error=self.error)

        self.records = [normalize_record(row) for row in rows]
        self.error = None
        return self.render()

    def render(self, records=None):
        return render_records(self.records if records is None else records)

    def filter(self, term):
        return self.render(filter_records(self.records, term))

    def open_form(self):
        if self.form_state == CLOSED:
            self.form_state = OPEN

    def close_form(self):
        self.form_state = CLOSED
        self.form_values = {}

    def submit_new(self, values):
        """POST a new record. Returns True when it was stored."""
        self.form_values = dict(values)

        if _dates_out_of_order(values):
            self.form_state = OPEN_WITH_ERROR
            self.notify("Start date cannot be after end date", "error")
            return False

        self.form_state = SUBMITTING
        try:
            self.client.create_record(self.form_values)
        except ClientError as e:
            self.form_state = OPEN_WITH_ERROR
            self.notify(e.message or "Failed to add record. Please try again.", "error")
            return False

        self.close_form()
        self.load_records()
        self.notify("Record added successfully!")
        return True

    def remove_record(self, record_id, confirm: Optional[Callable[[int], bool]] = None):
        """DELETE a record after confirmation. A record that is already gone counts as removed."""
        if confirm is not None and not confirm(record_id):
            return False

        try:
            self.client.delete_record(record_id)
        except ClientError as e:
            if e.status_code != 404:
                self.notify(e.message or "Failed to delete record. Please try again.", "error")
                return False
            self.load_records()
            self.notify("Record was already deleted", "info")
            return True

        self.load_records()
        self.notify("Record deleted successfully!")
        return True
