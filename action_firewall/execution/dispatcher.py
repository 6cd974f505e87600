"""
Action dispatcher – validate, then execute against the page.

Nothing reaches the page without an approval from the task's validator.
"""

import logging
import traceback
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from ..config import FirewallConfig
from ..logging_utils import log_event
from ..models import (
    ActionOutcome,
    ClickTarget,
    ExecutionResult,
    FillTarget,
    NavigateTarget,
    ProposedAction,
    SelectTarget,
)
from ..security.validator import ActionValidator
from .actions import execute_click, execute_fill, execute_navigate, execute_select

logger = logging.getLogger(__name__)

# (page, action, config) -> ExecutionResult
ActionHandler = Callable[[Any, ProposedAction, FirewallConfig], Awaitable[ExecutionResult]]


async def _fill(page: Any, action: ProposedAction, config: FirewallConfig) -> ExecutionResult:
    p = action.params
    target = FillTarget(
        value=action.value or "",
        selector=action.target,
        label=p.get("label"),
        placeholder=p.get("placeholder"),
        name=p.get("name"),
    )
    return await execute_fill(page, target, config)


async def _click(page: Any, action: ProposedAction, config: FirewallConfig) -> ExecutionResult:
    p = action.params
    return await execute_click(
        page, ClickTarget(selector=action.target, text=p.get("text"), label=p.get("label"))
    )


async def _select(page: Any, action: ProposedAction, config: FirewallConfig) -> ExecutionResult:
    p = action.params
    target = SelectTarget(
        value=action.value or "",
        selector=action.target,
        label=p.get("label"),
        name=p.get("name"),
    )
    return await execute_select(page, target)


async def _navigate(page: Any, action: ProposedAction, config: FirewallConfig) -> ExecutionResult:
    return await execute_navigate(page, NavigateTarget(url=action.navigation_url or ""))


DEFAULT_HANDLERS: Dict[str, ActionHandler] = {
    "fill": _fill,
    "click": _click,
    "select": _select,
    "navigate": _navigate,
}


class ActionDispatcher:
    """
    Routes approved actions to their verb's strategy pipeline.

    One dispatcher per task, sharing the task's validator and page.

    Example::

        dispatcher = ActionDispatcher(ActionValidator(intent), page)
        outcome = await dispatcher.dispatch(
            ProposedAction(type="fill", domain="example.com", target="#q", value="hello")
        )
    """

    def __init__(
        self,
        validator: ActionValidator,
        page: Any,
        config: Optional[FirewallConfig] = None,
        handlers: Optional[Dict[str, ActionHandler]] = None,
    ):
        self.validator = validator
        self.page = page
        self.config = config or FirewallConfig()
        self._handlers: Dict[str, ActionHandler] = dict(DEFAULT_HANDLERS)
        if handlers:
            self._handlers.update(handlers)
        self.history: List[ActionOutcome] = []

    # ── Registration ─────────────────────────────────────────────

    def register(self, verb: str, handler: ActionHandler) -> None:
        if verb in self._handlers:
            logger.warning(f"Handler for '{verb}' already registered, overwriting")
        self._handlers[verb] = handler

    def has_handler(self, verb: str) -> bool:
        return verb in self._handlers

    # ── Dispatch ─────────────────────────────────────────────────

    async def dispatch(self, action: Union[ProposedAction, Dict[str, Any]]) -> ActionOutcome:
        if isinstance(action, dict):
            action = ProposedAction.from_dict(action)

        validation = self.validator.validate(action)
        if not validation.approved:
            outcome = ActionOutcome(action=action, validation=validation)
            self.history.append(outcome)
            return outcome

        execution = await self._execute(action)
        outcome = ActionOutcome(action=action, validation=validation, execution=execution)
        self.history.append(outcome)
        log_event(
            "action_executed",
            intent_id=self.validator.intent.id,
            action_type=action.type,
            success=execution.success,
            method=execution.method,
            method_index=execution.method_index,
            verified=execution.verified,
        )
        return outcome

    async def _execute(self, action: ProposedAction) -> ExecutionResult:
        handler = self._handlers.get(action.type)
        if handler is None:
            return ExecutionResult(success=False, error=f"No executor registered for '{action.type}'")
        try:
            return await handler(self.page, action, self.config)
        except Exception as e:
            logger.debug(traceback.format_exc())
            return ExecutionResult(success=False, error=f"{type(e).__name__}: {e}")

    @property
    def stats(self) -> Dict[str, Any]:
        stats = self.validator.get_stats()
        stats["succeeded"] = sum(1 for o in self.history if o.success)
        stats["rejected"] = sum(1 for o in self.history if not o.validation.approved)
        return stats
