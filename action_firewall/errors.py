"""
Exception types for the action firewall.

The validator, executors and dispatcher report failures as structured results.
These exceptions exist for callers that want to turn a rejection into control
flow via ``raise_for_status()``.
"""

import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


class FirewallError(Exception):
    """Base class for all firewall errors."""

    code = "firewall_error"
    retryable = False

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class BudgetExceededError(FirewallError):
    """Time or action-count budget spent; the task should be terminated."""

    code = "budget_exceeded"


class PolicyViolationError(FirewallError):
    """Forbidden verb, verb outside the allow-list, or domain mismatch."""

    code = "policy_violation"


class SuspiciousContentError(PolicyViolationError):
    """Action value looks like an injected instruction."""

    code = "suspicious_content"


class ExecutionFailedError(FirewallError):
    """Every strategy for an action was exhausted."""

    code = "execution_failed"
    retryable = True


def format_error_response(error: BaseException) -> Dict[str, Any]:
    """Render an error for the task processor without leaking internals."""
    if isinstance(error, FirewallError):
        return {
            "error": error.code,
            "message": error.message,
            "retryable": error.retryable,
        }

    logger.error(f"Unhandled error: {type(error).__name__}: {error}")
    return {
        "error": "internal_error",
        "message": "An unexpected error occurred",
        "retryable": False,
    }
