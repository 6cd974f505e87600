"""
Replay a recorded planner action log through a fresh intent and validator.

Used to audit a task after the fact, or to check a planner change against
past logs without touching a browser.
"""

from typing import Any, Callable, Dict, Iterable, Optional, Union

from .models import ProposedAction
from .security.intent_lock import LockedIntent
from .security.validator import ActionValidator


def replay_actions(
    intent: LockedIntent,
    actions: Iterable[Union[ProposedAction, Dict[str, Any]]],
    clock: Optional[Callable[[], float]] = None,
) -> Dict[str, Any]:
    validator = ActionValidator(intent, clock=clock) if clock else ActionValidator(intent)
    decisions = []
    for step, raw in enumerate(actions, start=1):
        action = raw if isinstance(raw, ProposedAction) else ProposedAction.from_dict(raw)
        result = validator.validate(action)
        decisions.append({"step": step, "type": action.type, "domain": action.domain, **result.to_dict()})

    rejected = sum(1 for d in decisions if not d["approved"])
    return {
        "intent": intent.to_dict(),
        "decisions": decisions,
        "approved": len(decisions) - rejected,
        "rejected": rejected,
        "stats": validator.get_stats(),
    }
