"""
Navigate action with ranked fallbacks.

Slow pages often never reach ``load``; later strategies wait for less.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ...models import ExecutionResult, NavigateTarget
from ...security.intent_lock import extract_domain
from ..base import FunctionStrategy, StrategyPipeline

if TYPE_CHECKING:
    from playwright.async_api import Page

_JS_ASSIGN_LOCATION = """(url) => { window.location.href = url; return true; }"""


def normalize_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        return url
    return url if url.startswith(("http://", "https://")) else f"https://{url}"


def _goto(wait_until: str):
    async def attempt(page: "Page", t: NavigateTarget) -> bool:
        if not t.url:
            return False
        await page.goto(normalize_url(t.url), wait_until=wait_until)
        return True

    return attempt


async def _js_location(page: "Page", t: NavigateTarget) -> bool:
    if not t.url:
        return False
    await page.evaluate(_JS_ASSIGN_LOCATION, normalize_url(t.url))
    await page.wait_for_load_state("domcontentloaded")
    return True


async def landed_on_host(page: "Page", t: NavigateTarget) -> Optional[bool]:
    expected = extract_domain(t.url)
    if not expected:
        return None
    return extract_domain(page.url) == expected


NAVIGATE_STRATEGIES = (
    FunctionStrategy("goto_load", _goto("load")),
    FunctionStrategy("goto_domcontentloaded", _goto("domcontentloaded")),
    FunctionStrategy("goto_commit", _goto("commit")),
    FunctionStrategy("js_location", _js_location),
)
NAVIGATE_METHOD_COUNT = len(NAVIGATE_STRATEGIES)


async def execute_navigate(
    page: "Page", target: Union[NavigateTarget, Dict[str, Any], str]
) -> ExecutionResult:
    if isinstance(target, str):
        target = NavigateTarget(url=target)
    elif isinstance(target, dict):
        try:
            target = NavigateTarget.from_dict(target)
        except ValueError as e:
            return ExecutionResult(success=False, error=str(e))
    pipeline = StrategyPipeline("navigate", NAVIGATE_STRATEGIES, verify=landed_on_host)
    return await pipeline.run(page, target)
