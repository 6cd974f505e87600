"""
Data models for the action firewall.
"""

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional

from .errors import (
    BudgetExceededError,
    ExecutionFailedError,
    PolicyViolationError,
    SuspiciousContentError,
)


class TaskCategory(str, Enum):
    RESEARCH = "research"
    BOOKING = "booking"
    FORM = "form"
    SHOPPING = "shopping"
    EMAIL = "email"
    WRITING = "writing"
    REMINDER = "reminder"
    GENERAL = "general"


class RejectionCode(str, Enum):
    TIME_BUDGET_EXCEEDED = "time_budget_exceeded"
    ACTION_BUDGET_EXCEEDED = "action_budget_exceeded"
    FORBIDDEN_ACTION = "forbidden_action"
    ACTION_NOT_ALLOWED = "action_not_allowed"
    DOMAIN_NOT_ALLOWED = "domain_not_allowed"
    SUSPICIOUS_CONTENT = "suspicious_content"


_BUDGET_CODES = {RejectionCode.TIME_BUDGET_EXCEEDED, RejectionCode.ACTION_BUDGET_EXCEEDED}


@dataclass
class ProposedAction:
    """One planner step, checked by the validator before it reaches the page."""

    type: str
    domain: Optional[str] = None
    target: Optional[str] = None
    value: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"type": self.type}
        if self.domain is not None:
            d["domain"] = self.domain
        if self.target is not None:
            d["target"] = self.target
        if self.value is not None:
            d["value"] = self.value
        if self.params:
            d["params"] = dict(self.params)
        return d

    @property
    def navigation_url(self) -> Optional[str]:
        """Where a ``navigate`` action will actually go."""
        return self.params.get("url") or self.target or self.domain

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProposedAction":
        # A missing type becomes "" and is rejected before any policy lookup.
        value = data.get("value")
        params = data.get("params")
        return cls(
            type=str(data.get("type") or ""),
            domain=data.get("domain"),
            target=data.get("target"),
            value=None if value is None else str(value),
            params=dict(params) if isinstance(params, dict) else {},
        )


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a firewall check."""

    approved: bool
    reason: Optional[str] = None
    code: Optional[RejectionCode] = None

    @classmethod
    def approve(cls) -> "ValidationResult":
        return cls(approved=True)

    @classmethod
    def reject(cls, code: RejectionCode, reason: str) -> "ValidationResult":
        return cls(approved=False, reason=reason, code=code)

    @property
    def is_budget_exhausted(self) -> bool:
        return self.code in _BUDGET_CODES

    def raise_for_status(self) -> None:
        if self.approved:
            return
        if self.code in _BUDGET_CODES:
            raise BudgetExceededError(self.reason, self.code.value)
        if self.code is RejectionCode.SUSPICIOUS_CONTENT:
            raise SuspiciousContentError(self.reason)
        raise PolicyViolationError(self.reason, self.code.value if self.code else None)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"approved": self.approved}
        if self.reason is not None:
            d["reason"] = self.reason
        if self.code is not None:
            d["code"] = self.code.value
        return d


# ── Executor targets ─────────────────────────────────────────────


def _target_kwargs(cls, data: Dict[str, Any], required: tuple = ()) -> Dict[str, Any]:
    """Keep the keys *cls* knows about; raise ValueError if a required one is missing."""
    known = {f.name for f in fields(cls)}
    kwargs = {k: v for k, v in data.items() if k in known}
    missing = [name for name in required if kwargs.get(name) is None]
    if missing:
        raise ValueError(f"{cls.__name__} is missing {', '.join(missing)}")
    for name in required:
        kwargs[name] = str(kwargs[name])
    return kwargs


@dataclass
class FillTarget:
    value: str
    selector: Optional[str] = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FillTarget":
        return cls(**_target_kwargs(cls, data, required=("value",)))

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "selector": self.selector,
            "label": self.label,
            "placeholder": self.placeholder,
            "name": self.name,
            "value": self.value,
        }
        return {k: v for k, v in d.items() if v is not None}


@dataclass
class ClickTarget:
    selector: Optional[str] = None
    text: Optional[str] = None
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClickTarget":
        return cls(**_target_kwargs(cls, data))

    def to_dict(self) -> Dict[str, Any]:
        d = {"selector": self.selector, "text": self.text, "label": self.label}
        return {k: v for k, v in d.items() if v is not None}


@dataclass
class SelectTarget:
    value: str
    selector: Optional[str] = None
    label: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SelectTarget":
        return cls(**_target_kwargs(cls, data, required=("value",)))

    def to_dict(self) -> Dict[str, Any]:
        d = {"selector": self.selector, "label": self.label, "name": self.name, "value": self.value}
        return {k: v for k, v in d.items() if v is not None}


@dataclass
class NavigateTarget:
    url: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NavigateTarget":
        return cls(**_target_kwargs(cls, data, required=("url",)))

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url}


@dataclass
class ExecutionResult:
    """Result of running one action through its strategy pipeline."""

    success: bool
    method: Optional[str] = None
    method_index: Optional[int] = None
    error: Optional[str] = None
    verified: Optional[bool] = None
    attempts: int = 0

    def raise_for_status(self) -> None:
        if not self.success:
            raise ExecutionFailedError(self.error or "Action failed")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "method": self.method,
            "method_index": self.method_index,
            "error": self.error,
            "verified": self.verified,
            "attempts": self.attempts,
        }


@dataclass
class ActionOutcome:
    """Validation decision plus, when approved, the execution result."""

    action: ProposedAction
    validation: ValidationResult
    execution: Optional[ExecutionResult] = None

    @property
    def success(self) -> bool:
        return self.validation.approved and self.execution is not None and self.execution.success

    @property
    def error(self) -> Optional[str]:
        if not self.validation.approved:
            return self.validation.reason
        if self.execution is not None:
            return self.execution.error
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.to_dict(),
            "validation": self.validation.to_dict(),
            "execution": self.execution.to_dict() if self.execution else None,
            "success": self.success,
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), default=str)
