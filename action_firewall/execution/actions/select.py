"""
Select (dropdown) action with ranked fallbacks.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ...models import ExecutionResult, SelectTarget
from ..base import FunctionStrategy, StrategyPipeline
from ._selectors import compact, quote

if TYPE_CHECKING:
    from playwright.async_api import Page


async def _select_by_value(page: "Page", t: SelectTarget) -> bool:
    if not t.selector:
        return False
    return bool(await page.select_option(t.selector, value=t.value))


async def _select_by_label(page: "Page", t: SelectTarget) -> bool:
    if not t.selector:
        return False
    return bool(await page.select_option(t.selector, label=t.value))


async def _label_locator(page: "Page", t: SelectTarget) -> bool:
    if not t.label:
        return False
    return bool(await page.get_by_label(t.label, exact=False).select_option(t.value))


async def _name_attr(page: "Page", t: SelectTarget) -> bool:
    if not t.name and not t.label:
        return False
    name = quote(t.name or compact(t.label))
    return bool(await page.select_option(f"select[name={name}]", t.value))


async def read_back_select(page: "Page", t: SelectTarget) -> Optional[bool]:
    if not t.selector:
        return None
    return await page.input_value(t.selector) == t.value


SELECT_STRATEGIES = (
    FunctionStrategy("select_by_value", _select_by_value),
    FunctionStrategy("select_by_label", _select_by_label),
    FunctionStrategy("label_locator", _label_locator),
    FunctionStrategy("name_attr", _name_attr),
)
SELECT_METHOD_COUNT = len(SELECT_STRATEGIES)


async def execute_select(page: "Page", target: Union[SelectTarget, Dict[str, Any]]) -> ExecutionResult:
    if isinstance(target, dict):
        try:
            target = SelectTarget.from_dict(target)
        except ValueError as e:
            return ExecutionResult(success=False, error=str(e))
    pipeline = StrategyPipeline("select", SELECT_STRATEGIES, verify=read_back_select)
    return await pipeline.run(page, target)
