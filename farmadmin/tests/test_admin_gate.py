"""Admin page gate: ordering, short-circuit and failure propagation."""

from __future__ import annotations

from datetime import datetime

import pytest

from farmadmin.core.auth.schemas import AdminSession
from farmadmin.core.gate import (
    AuthBackendError,
    DataBackendError,
    Failed,
    Redirected,
    Rendered,
    evaluate_gate,
    render_admin_page,
)
from farmadmin.domains.admin.schemas.admin_schemas import FarmPage, FarmRecord

pytestmark = pytest.mark.unit

SESSION = AdminSession(user_id=1, email="admin@example.com")


class CallLog:
    """Records the order in which gate collaborators run."""

    def __init__(self, session=SESSION, dataset=None, session_error=None, data_error=None):
        self.calls: list[str] = []
        self._session = session
        self._dataset = dataset if dataset is not None else {"rows": [1, 2, 3]}
        self._session_error = session_error
        self._data_error = data_error
        self.rendered_with: list = []

    def fetch_session(self):
        self.calls.append("session")
        if self._session_error:
            raise self._session_error
        return self._session

    def fetch_data(self):
        self.calls.append("data")
        if self._data_error:
            raise self._data_error
        return self._dataset

    def render(self, dataset):
        self.calls.append("render")
        self.rendered_with.append(dataset)
        return f"<page>{dataset!r}</page>"


def test_absent_session_redirects_to_login_without_fetching():
    log = CallLog(session=None)

    outcome = evaluate_gate(log.fetch_session, log.fetch_data, log.render)

    assert outcome == Redirected(location="/admin/auth")
    assert log.calls == ["session"]


def test_absent_session_issues_single_http_redirect():
    log = CallLog(session=None)

    resp = render_admin_page(log.fetch_session, log.fetch_data, log.render)

    assert resp.status_code == 302
    assert resp.headers["Location"] == "/admin/auth"
    assert log.calls == ["session"]


def test_custom_login_route_is_used_for_redirect():
    log = CallLog(session=None)

    outcome = evaluate_gate(log.fetch_session, log.fetch_data, log.render, login_route="/signin")

    assert outcome == Redirected(location="/signin")


def test_present_session_fetches_once_then_renders():
    log = CallLog()

    result = render_admin_page(log.fetch_session, log.fetch_data, log.render)

    assert log.calls == ["session", "data", "render"]
    assert result == "<page>{'rows': [1, 2, 3]}</page>"


def test_auth_backend_error_propagates_unchanged_and_skips_fetch():
    error = AuthBackendError("identity service down")
    log = CallLog(session_error=error)

    with pytest.raises(AuthBackendError) as excinfo:
        render_admin_page(log.fetch_session, log.fetch_data, log.render)

    assert excinfo.value is error
    assert log.calls == ["session"]


def test_auth_backend_error_is_a_failed_outcome_at_session_stage():
    error = AuthBackendError("boom")
    log = CallLog(session_error=error)

    outcome = evaluate_gate(log.fetch_session, log.fetch_data, log.render)

    assert isinstance(outcome, Failed)
    assert outcome.error is error
    assert outcome.stage == "session"


def test_data_backend_error_propagates_unchanged_and_skips_render():
    error = DataBackendError("query failed")
    log = CallLog(data_error=error)

    with pytest.raises(DataBackendError) as excinfo:
        render_admin_page(log.fetch_session, log.fetch_data, log.render)

    assert excinfo.value is error
    assert log.calls == ["session", "data"]

    outcome = evaluate_gate(log.fetch_session, log.fetch_data, log.render)
    assert isinstance(outcome, Failed) and outcome.stage == "data"


def test_unexpected_exceptions_are_not_gate_outcomes():
    log = CallLog(data_error=KeyError("bug"))

    with pytest.raises(KeyError):
        evaluate_gate(log.fetch_session, log.fetch_data, log.render)


def test_farm_page_reaches_renderer_unmodified():
    items = [
        FarmRecord(
            id=i,
            name=f"Farm {i}",
            location=None,
            farm_type=None,
            status="active",
            herd_size=None,
            onboarding_completed=False,
            owner_email=None,
            owner_name=None,
            created_at=datetime(2026, 1, 1),
        )
        for i in range(1, 31)
    ]
    requested = []

    def get_all_farms(limit, offset):
        requested.append((limit, offset))
        return FarmPage(items=items, total_count=30)

    received = []

    def render(page):
        received.append(page)
        items_seen, total = page
        return len(items_seen), total

    outcome = evaluate_gate(lambda: SESSION, lambda: get_all_farms(50, 0), render)

    assert requested == [(50, 0)]
    assert outcome == Rendered(output=(30, 30))
    assert received[0].items is items
    assert received[0].total_count == 30


def test_empty_dataset_still_renders():
    log = CallLog(dataset=[])

    outcome = evaluate_gate(log.fetch_session, log.fetch_data, log.render)

    assert isinstance(outcome, Rendered)
    assert log.rendered_with == [[]]


def test_repeated_evaluation_is_idempotent():
    log = CallLog()

    first = render_admin_page(log.fetch_session, log.fetch_data, log.render)
    second = render_admin_page(log.fetch_session, log.fetch_data, log.render)

    assert first == second
    assert log.calls == ["session", "data", "render"] * 2
