"""
Action validator.

Every action goes through this firewall before it reaches the page. It holds
the per-task budgets and checks each action against the locked intent and a
list of prompt-injection patterns.
"""

import logging
import re
import time
from typing import Any, Callable, Dict, Optional, Union

from ..logging_utils import log_event
from ..models import ProposedAction, RejectionCode, ValidationResult
from .intent_lock import LockedIntent, validate_action

logger = logging.getLogger(__name__)

SUSPICIOUS_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        # instruction override
        r"ignore.*previous.*instructions",
        r"forget.*everything",
        r"system.*prompt",
        r"you.*are.*now",
        r"bypass.*security",
        # exfiltration / privilege
        r"send.*to.*external",
        r"transfer.*money",
        r"password.*is",
        r"admin.*access",
        r"root.*access",
        r"sudo",
        # destructive
        r"rm\s+-rf",
        r"delete.*all",
    )
)


def find_suspicious_pattern(text: Optional[str]) -> Optional[str]:
    """Return the source of the first pattern matching *text*, if any."""
    if not text:
        return None
    for pattern in SUSPICIOUS_PATTERNS:
        if pattern.search(text):
            return pattern.pattern
    return None


class ActionValidator:
    """
    Per-task firewall. Create one right after locking the intent and discard it
    when the task ends.

    Example::

        intent = create_locked_intent(user_id="u1", task_type="booking", goal="Book a table")
        validator = ActionValidator(intent)
        result = validator.validate(ProposedAction(type="fill", domain="opentable.com", value="2 people"))
        if not result.approved:
            print(result.reason)
    """

    def __init__(self, intent: LockedIntent, clock: Callable[[], float] = time.monotonic):
        self.intent = intent
        self._clock = clock
        self._start = clock()
        self.actions_executed = 0

    def validate(self, action: Union[ProposedAction, Dict[str, Any]]) -> ValidationResult:
        if isinstance(action, dict):
            action = ProposedAction.from_dict(action)

        result = self._check(action)
        if result.approved:
            logger.debug(f"Approved '{action.type}' for intent {self.intent.id}")
        else:
            log_event(
                "action_rejected",
                level=logging.WARNING,
                intent_id=self.intent.id,
                action_type=action.type,
                domain=action.domain,
                code=result.code.value if result.code else None,
                reason=result.reason,
                actions_executed=self.actions_executed,
            )
        return result

    def _check(self, action: ProposedAction) -> ValidationResult:
        elapsed = self.elapsed_seconds
        if elapsed > self.intent.max_duration:
            return ValidationResult.reject(
                RejectionCode.TIME_BUDGET_EXCEEDED,
                f"Task exceeded {self.intent.max_duration}s time limit",
            )

        # Counted before the policy checks so rejected attempts also spend budget.
        self.actions_executed += 1
        if self.actions_executed > self.intent.max_actions:
            return ValidationResult.reject(
                RejectionCode.ACTION_BUDGET_EXCEEDED,
                f"Too many actions (max {self.intent.max_actions})",
            )

        intent_check = validate_action(self.intent, action)
        if not intent_check.approved:
            return intent_check

        pattern = find_suspicious_pattern(action.value)
        if pattern:
            logger.warning(f"Suspicious pattern detected: {pattern}")
            return ValidationResult.reject(
                RejectionCode.SUSPICIOUS_CONTENT,
                "Suspicious pattern detected in input",
            )

        return ValidationResult.approve()

    # ── Introspection ────────────────────────────────────────────

    @property
    def elapsed_seconds(self) -> float:
        return self._clock() - self._start

    @property
    def is_exhausted(self) -> bool:
        return (
            self.actions_executed >= self.intent.max_actions
            or self.elapsed_seconds > self.intent.max_duration
        )

    def get_stats(self) -> Dict[str, Any]:
        elapsed = self.elapsed_seconds
        return {
            "actions_executed": self.actions_executed,
            "elapsed_seconds": elapsed,
            "remaining_actions": self.intent.max_actions - self.actions_executed,
            "remaining_seconds": self.intent.max_duration - elapsed,
        }
