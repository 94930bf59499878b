from __future__ import annotations

from typing import Any


class CasebookError(Exception):
    pass


class CatalogError(CasebookError):
    """Problems with the hand-edited test-management tables."""


class CatalogUnavailable(CatalogError):
    pass


class CatalogMalformed(CatalogError):
    pass


class ParameterSetMissing(CatalogError):
    def __init__(self, set_id: str):
        super().__init__(f"Test data set not found: '{set_id}'")
        self.set_id = set_id


class StepAssertionFailed(AssertionError):
    """
    AssertionError subclass so pytest reports it like a plain ``assert``.
    """

    def __init__(self, step: str, expected: Any, actual: Any):
        super().__init__(f"[{step}] expected {expected!r}, got {actual!r}")
        self.step = step
        self.expected = expected
        self.actual = actual


class ActionUnavailable(CasebookError):
    def __init__(self, action: str, timeout_ms: int | None = None):
        msg = f"'{action}' not interactable"
        if timeout_ms is not None:
            msg += f" within {timeout_ms}ms"
        super().__init__(msg)
        self.action = action
        self.timeout_ms = timeout_ms
