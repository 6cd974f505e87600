import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from action_firewall import ActionValidator, create_locked_intent  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeElement:
    def __init__(self, page, key):
        self.page = page
        self.key = key

    async def fill(self, value):
        self.page._write(self.key, value)


class FakeLocator:
    def __init__(self, page, key):
        self.page = page
        self.key = key

    @property
    def first(self):
        return self

    async def fill(self, value):
        self.page._check("locator.fill")
        self.page._write(self.key, value)

    async def press_sequentially(self, value, delay=0):
        self.page._check("press_sequentially")
        self.page._write(self.key, value)

    async def focus(self):
        self.page._check("focus")
        self.page._require(self.key)
        self.page.focused = self.key

    async def clear(self):
        self.page._check("clear")
        self.page._write(self.key, "")

    async def get_attribute(self, name):
        return self.page.attributes.get((self.key, name))

    async def click(self, force=False):
        self.page._check("locator.click")
        self.page._require(self.key)
        self.page.clicked.append(self.key)

    async def select_option(self, value=None, label=None):
        return self.page._select(self.key, value=value, label=label)


class FakeKeyboard:
    def __init__(self, page):
        self.page = page

    async def type(self, text):
        self.page._check("keyboard.type")
        if self.page.focused is None:
            raise RuntimeError("nothing focused")
        self.page._write(self.page.focused, text)

    async def press(self, key):
        self.page.calls.append(("press", key))


class FakePage:
    """
    Scripted stand-in for a Playwright async page.

    ``fields`` maps locator keys to current values. Selectors are used as-is;
    helper locators use ``label:<text>``, ``placeholder:<text>``, ``text:<text>``
    and ``role:<role>:<name>``. Names listed in ``fail`` raise when called.
    """

    def __init__(self, fields=None, fail=(), echo=None, options=None):
        self.fields = dict(fields or {})
        self.fail = set(fail)
        self.echo = dict(echo or {})
        self.options = dict(options or {})  # key -> {value: label}
        self.attributes = {}
        self.query_results = {}
        self.calls = []
        self.clicked = []
        self.focused = None
        self.evaluate_result = False
        self.url = "about:blank"
        self.redirect_to = None
        self.keyboard = FakeKeyboard(self)

    # ── internals ────────────────────────────────────────────────

    def _check(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise TimeoutError(f"{name} timed out")

    def _require(self, key):
        if key not in self.fields:
            raise LookupError(f"no element for {key}")

    def _write(self, key, value):
        self._require(key)
        self.fields[key] = value

    def _select(self, key, value=None, label=None):
        self._check("select_option")
        self._require(key)
        options = self.options.get(key, {})
        if value is not None and value in options:
            self.fields[key] = value
            return [value]
        if label is not None:
            for v, lab in options.items():
                if lab == label:
                    self.fields[key] = v
                    return [v]
        return []

    # ── page API ─────────────────────────────────────────────────

    async def fill(self, selector, value):
        self._check("fill")
        self._write(selector, value)

    async def input_value(self, selector):
        self._check("input_value")
        if selector in self.echo:
            return self.echo[selector]
        self._require(selector)
        return self.fields[selector]

    def locator(self, selector):
        return FakeLocator(self, selector)

    def get_by_label(self, text, exact=False):
        return FakeLocator(self, f"label:{text}")

    def get_by_placeholder(self, text):
        return FakeLocator(self, f"placeholder:{text}")

    def get_by_text(self, text, exact=False):
        return FakeLocator(self, f"text:{text}")

    def get_by_role(self, role, name=None):
        return FakeLocator(self, f"role:{role}:{name}")

    async def evaluate(self, script, arg=None):
        self._check("evaluate")
        return self.evaluate_result

    async def query_selector_all(self, selector):
        return [FakeElement(self, key) for key in self.query_results.get(selector, [])]

    async def click(self, selector, force=False):
        self._check("force_click" if force else "click")
        self._require(selector)
        self.clicked.append(selector)

    async def select_option(self, selector, value=None, label=None):
        return self._select(selector, value=value, label=label)

    async def goto(self, url, wait_until="load"):
        self._check(f"goto:{wait_until}")
        self.url = self.redirect_to or url

    async def wait_for_load_state(self, state="load"):
        self._check("wait_for_load_state")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def booking_intent():
    return create_locked_intent(
        user_id="user-1",
        task_type="booking",
        goal="Book a table for two",
        allowed_domains=["example.com"],
    )


@pytest.fixture
def booking_validator(booking_intent, clock):
    return ActionValidator(booking_intent, clock=clock)


@pytest.fixture
def make_page():
    return FakePage
