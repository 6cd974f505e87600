"""
action_firewall – permission locking and fault-tolerant execution for web agents.

Usage::

    from action_firewall import ActionDispatcher, ActionValidator, ProposedAction, create_locked_intent

    # 1. Lock what the task may do, before the planner runs
    intent = create_locked_intent(
        user_id="user-42",
        task_type="booking",
        goal="Book a table for two on Friday",
        allowed_domains=["opentable.com"],
    )

    # 2. One validator per task
    validator = ActionValidator(intent)

    # 3. Every planner step goes through the dispatcher
    dispatcher = ActionDispatcher(validator, page)
    outcome = await dispatcher.dispatch(
        ProposedAction(type="fill", domain="opentable.com", target="#party-size", value="2")
    )
    print(outcome.success, outcome.error)
"""

from .config import FirewallConfig
from .errors import (
    BudgetExceededError,
    ExecutionFailedError,
    FirewallError,
    PolicyViolationError,
    SuspiciousContentError,
)
from .execution import ActionDispatcher, execute_click, execute_fill, execute_navigate, execute_select
from .models import (
    ActionOutcome,
    ClickTarget,
    ExecutionResult,
    FillTarget,
    NavigateTarget,
    ProposedAction,
    RejectionCode,
    SelectTarget,
    TaskCategory,
    ValidationResult,
)
from .security import ActionValidator, LockedIntent, create_locked_intent, get_task_type_from_classification

__all__ = [
    "ActionDispatcher",
    "ActionValidator",
    "LockedIntent",
    "create_locked_intent",
    "get_task_type_from_classification",
    "execute_click",
    "execute_fill",
    "execute_navigate",
    "execute_select",
    "FirewallConfig",
    "ActionOutcome",
    "ClickTarget",
    "ExecutionResult",
    "FillTarget",
    "NavigateTarget",
    "ProposedAction",
    "RejectionCode",
    "SelectTarget",
    "TaskCategory",
    "ValidationResult",
    "FirewallError",
    "BudgetExceededError",
    "PolicyViolationError",
    "SuspiciousContentError",
    "ExecutionFailedError",
]
