"""
Intent locking.

Before any task runs we lock what it is allowed to do. The resulting
``LockedIntent`` is frozen: nothing the planner or a web page says later can
widen it.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import httpx

from ..config import DEFAULT_MAX_ACTIONS, DEFAULT_MAX_DURATION, FirewallConfig
from ..logging_utils import log_event
from ..models import ProposedAction, RejectionCode, TaskCategory, ValidationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Permissions:
    allowed: Tuple[str, ...]
    forbidden: Tuple[str, ...]


# Task category determines which verbs are allowed. Page-touching categories
# still forbid payment: money needs a separate human approval path.
TASK_PERMISSIONS: Mapping[str, Permissions] = MappingProxyType({
    TaskCategory.RESEARCH.value: Permissions(
        allowed=("navigate", "scroll", "screenshot", "extract", "search"),
        forbidden=("fill", "click", "submit", "login", "payment"),
    ),
    TaskCategory.BOOKING.value: Permissions(
        allowed=("navigate", "click", "fill", "select", "submit", "screenshot", "extract"),
        forbidden=("payment", "login_new_account"),
    ),
    TaskCategory.FORM.value: Permissions(
        allowed=("navigate", "click", "fill", "select", "submit", "upload", "screenshot"),
        forbidden=("payment",),
    ),
    TaskCategory.SHOPPING.value: Permissions(
        allowed=("navigate", "click", "fill", "select", "screenshot", "extract"),
        forbidden=("payment", "checkout"),
    ),
    TaskCategory.EMAIL.value: Permissions(
        allowed=("compose", "send"),
        forbidden=("navigate", "click", "fill"),
    ),
    TaskCategory.WRITING.value: Permissions(
        allowed=("generate", "format", "send_email"),
        forbidden=("navigate", "click", "fill", "payment"),
    ),
    TaskCategory.REMINDER.value: Permissions(
        allowed=("schedule", "send_email", "remember"),
        forbidden=("navigate", "click", "fill", "payment"),
    ),
    TaskCategory.GENERAL.value: Permissions(
        allowed=("navigate", "click", "scroll", "screenshot", "extract", "search", "remember", "browse"),
        forbidden=("fill", "submit", "payment", "login"),
    ),
})

# Classifier labels that are not catalog categories themselves.
_CLASSIFICATION_ALIASES = MappingProxyType({
    "document": TaskCategory.WRITING.value,
    "monitor": TaskCategory.RESEARCH.value,
    "other": TaskCategory.GENERAL.value,
})


@dataclass(frozen=True)
class LockedIntent:
    """What a single task may do. Created once, never mutated."""

    user_id: str
    task_type: str
    goal: str
    allowed_domains: Tuple[str, ...] = ()
    allowed_actions: Tuple[str, ...] = ()
    forbidden_actions: Tuple[str, ...] = ()
    success_condition: str = "Task completed"
    max_duration: int = DEFAULT_MAX_DURATION
    max_actions: int = DEFAULT_MAX_ACTIONS
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    locked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "task_type": self.task_type,
            "goal": self.goal,
            "allowed_domains": list(self.allowed_domains),
            "allowed_actions": list(self.allowed_actions),
            "forbidden_actions": list(self.forbidden_actions),
            "success_condition": self.success_condition,
            "max_duration": self.max_duration,
            "max_actions": self.max_actions,
            "created_at": self.created_at.isoformat(),
            "locked_at": self.locked_at.isoformat(),
        }


def resolve_permissions(task_type: str) -> Permissions:
    """Catalog lookup; unknown categories get the ``general`` policy."""
    task_type = getattr(task_type, "value", task_type)
    return TASK_PERMISSIONS.get(task_type) or TASK_PERMISSIONS[TaskCategory.GENERAL.value]


def _dedupe(*groups: Optional[Iterable[str]]) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for group in groups:
        for item in group or ():
            seen.setdefault(item, None)
    return tuple(seen)


def create_locked_intent(
    user_id: str,
    task_type: str,
    goal: str,
    allowed_domains: Optional[Iterable[str]] = None,
    allowed_actions: Optional[Iterable[str]] = None,
    forbidden_actions: Optional[Iterable[str]] = None,
    success_condition: Optional[str] = None,
    max_duration: Optional[int] = None,
    max_actions: Optional[int] = None,
    config: Optional[FirewallConfig] = None,
) -> LockedIntent:
    """Merge catalog defaults with caller overrides and freeze the result.

    A verb may end up in both sets; the validator treats it as forbidden.
    """
    task_type = getattr(task_type, "value", task_type)
    config = config or FirewallConfig()
    perms = resolve_permissions(task_type)
    now = datetime.now(timezone.utc)

    intent = LockedIntent(
        user_id=user_id,
        task_type=task_type,
        goal=goal,
        allowed_domains=_normalize_domains(allowed_domains),
        allowed_actions=_dedupe(perms.allowed, allowed_actions),
        forbidden_actions=_dedupe(perms.forbidden, forbidden_actions),
        success_condition=success_condition or "Task completed",
        max_duration=max_duration or config.default_max_duration,
        max_actions=max_actions or config.default_max_actions,
        created_at=now,
        locked_at=now,
    )
    log_event(
        "intent_locked",
        intent_id=intent.id,
        user_id=user_id,
        task_type=task_type,
        allowed_actions=list(intent.allowed_actions),
        forbidden_actions=list(intent.forbidden_actions),
        allowed_domains=list(intent.allowed_domains),
        max_duration=intent.max_duration,
        max_actions=intent.max_actions,
    )
    return intent


def extract_domain(url: str) -> str:
    """Hostname of *url*; bare hosts are accepted. Returns "" if unparsable."""
    raw = str(url or "").strip()
    if not raw:
        return ""
    try:
        parsed = httpx.URL(raw if raw.startswith("http") else f"https://{raw}")
    except Exception:
        return ""
    return (parsed.host or "").lower()


def domain_allowed(domain: str, allowed_domains: Iterable[str]) -> bool:
    if not domain:
        return False
    return any(domain == d or domain.endswith("." + d) for d in allowed_domains)


def _normalize_domains(domains: Optional[Iterable[str]]) -> Tuple[str, ...]:
    return _dedupe(d.strip().lower().strip(".") for d in domains or () if d and d.strip())


def _checked_host(action: ProposedAction) -> Tuple[Optional[str], Optional[ValidationResult]]:
    """Host the action will touch, or a rejection if the action contradicts itself.

    ``navigate`` goes wherever ``navigation_url`` points, so that is the host
    checked, and it must agree with ``domain`` when both are given.
    """
    if action.type == "navigate":
        url = action.navigation_url
        if not url:
            return None, None
        host = extract_domain(url)
        if action.domain and extract_domain(action.domain) != host:
            return None, ValidationResult.reject(
                RejectionCode.DOMAIN_NOT_ALLOWED,
                f"Navigation target '{host or url}' does not match declared domain '{action.domain}'",
            )
        return host, None
    if action.domain:
        return extract_domain(action.domain), None
    return None, None


def validate_action(
    intent: LockedIntent, action: Union[ProposedAction, Dict[str, Any]]
) -> ValidationResult:
    """Check an action against the locked intent. Forbidden always wins."""
    if isinstance(action, dict):
        action = ProposedAction.from_dict(action)

    if not action.type:
        return ValidationResult.reject(RejectionCode.ACTION_NOT_ALLOWED, "Action has no type")

    if action.type in intent.forbidden_actions:
        return ValidationResult.reject(
            RejectionCode.FORBIDDEN_ACTION,
            f"Action '{action.type}' is forbidden for task type '{intent.task_type}'",
        )

    if action.type not in intent.allowed_actions:
        return ValidationResult.reject(
            RejectionCode.ACTION_NOT_ALLOWED,
            f"Action '{action.type}' not in allowed list for '{intent.task_type}'",
        )

    host, mismatch = _checked_host(action)
    if mismatch is not None:
        return mismatch

    if host is not None and intent.allowed_domains:
        if not domain_allowed(host, intent.allowed_domains):
            return ValidationResult.reject(
                RejectionCode.DOMAIN_NOT_ALLOWED,
                f"Domain '{host or action.domain}' not in allowed list",
            )

    return ValidationResult.approve()


def get_task_type_from_classification(classification: str) -> str:
    """Map a classifier label onto a catalog category."""
    label = (classification or "").strip().lower()
    if label in TASK_PERMISSIONS:
        return label
    return _CLASSIFICATION_ALIASES.get(label, TaskCategory.GENERAL.value)
