"""Access gate shared by every admin page.

Each admin page runs the same sequence: look up the caller's session,
send the caller to the login route when there is none, otherwise load the
page dataset and hand it to a renderer. ``evaluate_gate`` performs that
sequence and reports a terminal outcome; ``render_admin_page`` turns the
outcome into something Flask can return.

States per request::

    START -> CHECKING_SESSION -> REDIRECTING
                              -> FETCHING_DATA -> RENDERING
                              -> FAILED

There are no retries here. A backend failure is terminal for the request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from flask import redirect

from farmadmin.core.gate.errors import AuthBackendError, BackendError, DataBackendError

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_ROUTE = "/admin/auth"

STAGE_SESSION = "session"
STAGE_DATA = "data"

S = TypeVar("S")
D = TypeVar("D")
R = TypeVar("R")


@dataclass(frozen=True)
class Redirected:
    """No valid session; the caller must be sent to ``location``."""

    location: str


@dataclass(frozen=True)
class Rendered(Generic[R]):
    """The dataset was fetched and rendered."""

    output: R


@dataclass(frozen=True)
class Failed:
    """A backend collaborator failed at ``stage``."""

    error: BackendError
    stage: str


GateOutcome = Union[Redirected, Rendered, Failed]


def evaluate_gate(
    fetch_session: Callable[[], Optional[S]],
    fetch_data: Callable[[], D],
    render: Callable[[D], R],
    *,
    login_route: str = DEFAULT_LOGIN_ROUTE,
) -> GateOutcome:
    """Run session check, data fetch and render in strict order.

    ``fetch_data`` is only called for a present session and ``render`` only
    after ``fetch_data`` returned. Exceptions other than the two backend
    errors are not gate outcomes and propagate untouched.
    """
    try:
        session = fetch_session()
    except AuthBackendError as exc:
        logger.warning("Session lookup failed: %s", exc)
        return Failed(error=exc, stage=STAGE_SESSION)

    if session is None:
        logger.debug("No admin session; redirecting to %s", login_route)
        return Redirected(location=login_route)

    try:
        dataset = fetch_data()
    except DataBackendError as exc:
        logger.warning("Dataset fetch failed: %s", exc)
        return Failed(error=exc, stage=STAGE_DATA)

    return Rendered(output=render(dataset))


def resolve_outcome(outcome: GateOutcome) -> Any:
    """Map a gate outcome to a Flask return value, re-raising failures."""
    if isinstance(outcome, Redirected):
        return redirect(outcome.location)
    if isinstance(outcome, Failed):
        raise outcome.error
    return outcome.output


def render_admin_page(
    fetch_session: Callable[[], Optional[S]],
    fetch_data: Callable[[], D],
    render: Callable[[D], R],
    *,
    login_route: str = DEFAULT_LOGIN_ROUTE,
) -> Any:
    """Gate an admin page: redirect, render, or propagate the backend error."""
    outcome = evaluate_gate(fetch_session, fetch_data, render, login_route=login_route)
    return resolve_outcome(outcome)
