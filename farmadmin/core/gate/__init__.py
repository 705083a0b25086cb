from farmadmin.core.gate.errors import AuthBackendError, BackendError, DataBackendError
from farmadmin.core.gate.gate import (
    DEFAULT_LOGIN_ROUTE,
    Failed,
    GateOutcome,
    Redirected,
    Rendered,
    evaluate_gate,
    render_admin_page,
    resolve_outcome,
)

__all__ = [
    "AuthBackendError",
    "BackendError",
    "DataBackendError",
    "DEFAULT_LOGIN_ROUTE",
    "Failed",
    "GateOutcome",
    "Redirected",
    "Rendered",
    "evaluate_gate",
    "render_admin_page",
    "resolve_outcome",
]
