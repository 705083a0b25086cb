"""Failure classes raised by the backend collaborators of the admin gate."""

from __future__ import annotations


class BackendError(RuntimeError):
    """Transport or availability failure of an external collaborator."""


class AuthBackendError(BackendError):
    """The identity/session backend could not answer."""


class DataBackendError(BackendError):
    """The data backend failed to produce a page dataset."""
