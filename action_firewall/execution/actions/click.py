"""
Click action with ranked fallbacks, same contract as fill.
"""

from typing import TYPE_CHECKING, Any, Dict, Union

from ...models import ClickTarget, ExecutionResult
from ..base import FunctionStrategy, StrategyPipeline
from ._selectors import quote

if TYPE_CHECKING:
    from playwright.async_api import Page

_JS_CLICK = """(sel) => {
    const el = document.querySelector(sel);
    if (!el) return false;
    el.click();
    return true;
}"""


async def _css_selector(page: "Page", t: ClickTarget) -> bool:
    if not t.selector:
        return False
    await page.click(t.selector)
    return True


async def _text(page: "Page", t: ClickTarget) -> bool:
    if not t.text:
        return False
    await page.get_by_text(t.text, exact=False).first.click()
    return True


async def _role_button(page: "Page", t: ClickTarget) -> bool:
    name = t.text or t.label
    if not name:
        return False
    await page.get_by_role("button", name=name).first.click()
    return True


async def _role_link(page: "Page", t: ClickTarget) -> bool:
    name = t.text or t.label
    if not name:
        return False
    await page.get_by_role("link", name=name).first.click()
    return True


async def _aria_label(page: "Page", t: ClickTarget) -> bool:
    if not t.label:
        return False
    await page.click(f"[aria-label*={quote(t.label)} i]")
    return True


async def _js_click(page: "Page", t: ClickTarget) -> bool:
    if not t.selector:
        return False
    return bool(await page.evaluate(_JS_CLICK, t.selector))


async def _force_click(page: "Page", t: ClickTarget) -> bool:
    # Last resort for elements hidden behind overlays.
    if not t.selector:
        return False
    await page.click(t.selector, force=True)
    return True


CLICK_STRATEGIES = (
    FunctionStrategy("css_selector", _css_selector),
    FunctionStrategy("text", _text),
    FunctionStrategy("role_button", _role_button),
    FunctionStrategy("role_link", _role_link),
    FunctionStrategy("aria_label", _aria_label),
    FunctionStrategy("js_click", _js_click),
    FunctionStrategy("force_click", _force_click),
)
CLICK_METHOD_COUNT = len(CLICK_STRATEGIES)


async def execute_click(page: "Page", target: Union[ClickTarget, Dict[str, Any]]) -> ExecutionResult:
    if isinstance(target, dict):
        try:
            target = ClickTarget.from_dict(target)
        except ValueError as e:
            return ExecutionResult(success=False, error=str(e))
    return await StrategyPipeline("click", CLICK_STRATEGIES).run(page, target)
