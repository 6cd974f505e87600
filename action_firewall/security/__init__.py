from .intent_lock import (
    TASK_PERMISSIONS,
    LockedIntent,
    Permissions,
    create_locked_intent,
    extract_domain,
    get_task_type_from_classification,
    resolve_permissions,
    validate_action,
)
from .validator import SUSPICIOUS_PATTERNS, ActionValidator, find_suspicious_pattern

__all__ = [
    "TASK_PERMISSIONS",
    "LockedIntent",
    "Permissions",
    "create_locked_intent",
    "extract_domain",
    "get_task_type_from_classification",
    "resolve_permissions",
    "validate_action",
    "SUSPICIOUS_PATTERNS",
    "ActionValidator",
    "find_suspicious_pattern",
]
