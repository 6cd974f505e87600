"""
Fill action with fifteen fallback strategies.

Ordered from precise addressing (a selector the planner gave us) to guessing
(the n-th visible input). If one does not work, try the next.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ...config import FirewallConfig
from ...models import ExecutionResult, FillTarget
from ..base import FunctionStrategy, Strategy, StrategyPipeline
from ._selectors import compact, css_escape, quote

if TYPE_CHECKING:
    from playwright.async_api import Page

_JS_SET_VALUE = """({ sel, val }) => {
    const el = document.querySelector(sel);
    if (!el) return false;
    el.value = val;
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
    return true;
}"""


async def _css_selector(page: "Page", t: FillTarget) -> bool:
    if not t.selector:
        return False
    await page.fill(t.selector, t.value)
    return True


async def _label(page: "Page", t: FillTarget) -> bool:
    if not t.label:
        return False
    await page.get_by_label(t.label, exact=False).fill(t.value)
    return True


async def _placeholder(page: "Page", t: FillTarget) -> bool:
    if not t.placeholder:
        return False
    await page.get_by_placeholder(t.placeholder).fill(t.value)
    return True


async def _name_attr(page: "Page", t: FillTarget) -> bool:
    if not t.name and not t.label:
        return False
    name = quote(t.name or compact(t.label))
    await page.fill(f"[name={name}], [name*={name}]", t.value)
    return True


async def _id_attr(page: "Page", t: FillTarget) -> bool:
    if not t.name and not t.label:
        return False
    await page.fill(f"#{css_escape(t.name or compact(t.label))}", t.value)
    return True


class SequentialType(Strategy):
    """Clear, then type key by key for inputs that ignore programmatic fills."""

    name = "sequential_type"

    def __init__(self, delay_ms: int = 50):
        self.delay_ms = delay_ms

    async def attempt(self, page: "Page", t: FillTarget) -> bool:
        if not t.selector:
            return False
        locator = page.locator(t.selector)
        await locator.fill("")
        await locator.press_sequentially(t.value, delay=self.delay_ms)
        return True


async def _js_value_set(page: "Page", t: FillTarget) -> bool:
    if not t.selector:
        return False
    return bool(await page.evaluate(_JS_SET_VALUE, {"sel": t.selector, "val": t.value}))


async def _focus_type(page: "Page", t: FillTarget) -> bool:
    if not t.selector:
        return False
    await page.locator(t.selector).focus()
    await page.keyboard.type(t.value)
    return True


async def _clear_then_fill(page: "Page", t: FillTarget) -> bool:
    if not t.selector:
        return False
    await page.locator(t.selector).clear()
    await page.fill(t.selector, t.value)
    return True


async def _select_all_type(page: "Page", t: FillTarget) -> bool:
    if not t.selector:
        return False
    await page.locator(t.selector).focus()
    await page.keyboard.press("ControlOrMeta+a")
    await page.keyboard.type(t.value)
    return True


async def _label_for(page: "Page", t: FillTarget) -> bool:
    if not t.label:
        return False
    for_attr = await page.locator(f"label:has-text({quote(t.label)})").first.get_attribute("for")
    if not for_attr:
        return False
    await page.fill(f"#{css_escape(for_attr)}", t.value)
    return True


async def _aria_label(page: "Page", t: FillTarget) -> bool:
    label = t.label or t.placeholder
    if not label:
        return False
    await page.fill(f"[aria-label*={quote(label)} i]", t.value)
    return True


def _guess_input_type(hint: str) -> str:
    if "email" in hint:
        return "email"
    if "password" in hint:
        return "password"
    if "phone" in hint:
        return "tel"
    if "number" in hint:
        return "number"
    return "text"


def _guess_position(hint: str) -> int:
    if "email" in hint or "username" in hint or "first" in hint:
        return 0
    if "password" in hint or "last" in hint:
        return 1
    if "confirm" in hint or "phone" in hint:
        return 2
    return 0


async def _input_by_type(page: "Page", t: FillTarget) -> bool:
    hint = (t.label or t.placeholder or t.name or "").lower()
    if not hint:
        return False
    inputs = await page.query_selector_all(f'input[type="{_guess_input_type(hint)}"]:visible')
    if not inputs:
        return False
    await inputs[0].fill(t.value)
    return True


async def _nth_input(page: "Page", t: FillTarget) -> bool:
    hint = (t.label or t.placeholder or "").lower()
    if not hint:
        return False
    index = _guess_position(hint)
    inputs = await page.query_selector_all("input:visible, textarea:visible")
    if index >= len(inputs):
        return False
    await inputs[index].fill(t.value)
    return True


async def _textarea(page: "Page", t: FillTarget) -> bool:
    if not t.selector and not t.label:
        return False
    if t.selector:
        sel = t.selector
    else:
        label = quote(t.label)
        sel = f"textarea[name*={label} i], textarea[placeholder*={label} i]"
    await page.fill(sel, t.value)
    return True


def build_fill_strategies(config: Optional[FirewallConfig] = None):
    config = config or FirewallConfig()
    return (
        FunctionStrategy("css_selector", _css_selector),
        FunctionStrategy("label", _label),
        FunctionStrategy("placeholder", _placeholder),
        FunctionStrategy("name_attr", _name_attr),
        FunctionStrategy("id_attr", _id_attr),
        SequentialType(delay_ms=config.type_delay_ms),
        FunctionStrategy("js_value_set", _js_value_set),
        FunctionStrategy("focus_type", _focus_type),
        FunctionStrategy("clear_then_fill", _clear_then_fill),
        FunctionStrategy("select_all_type", _select_all_type),
        FunctionStrategy("label_for", _label_for),
        FunctionStrategy("aria_label", _aria_label),
        FunctionStrategy("input_by_type", _input_by_type),
        FunctionStrategy("nth_input", _nth_input),
        FunctionStrategy("textarea", _textarea),
    )


async def read_back_input(page: "Page", t: FillTarget) -> Optional[bool]:
    """Compare the field's value with what we wrote. None when there is no selector."""
    if not t.selector:
        return None
    return await page.input_value(t.selector) == t.value


FILL_STRATEGIES = build_fill_strategies()
FILL_METHOD_COUNT = len(FILL_STRATEGIES)


async def execute_fill(
    page: "Page",
    target: Union[FillTarget, Dict[str, Any]],
    config: Optional[FirewallConfig] = None,
) -> ExecutionResult:
    if isinstance(target, dict):
        try:
            target = FillTarget.from_dict(target)
        except ValueError as e:
            return ExecutionResult(success=False, error=str(e))
    strategies = FILL_STRATEGIES if config is None else build_fill_strategies(config)
    pipeline = StrategyPipeline("fill", strategies, verify=read_back_input)
    return await pipeline.run(page, target, read_back=config.verify_reads if config else True)
