import asyncio

from action_firewall import ClickTarget, NavigateTarget, SelectTarget, execute_click, execute_navigate, execute_select
from action_firewall.execution.actions.navigate import normalize_url


def test_click_by_selector(make_page):
    page = make_page(fields={"#go": None})
    result = asyncio.run(execute_click(page, ClickTarget(selector="#go")))
    assert result.method == "css_selector"
    assert page.clicked == ["#go"]


def test_click_falls_back_to_text(make_page):
    page = make_page(fields={"text:Reserve": None})
    result = asyncio.run(execute_click(page, ClickTarget(selector="#gone", text="Reserve")))
    assert result.method == "text"
    assert result.method_index == 2


def test_click_forced_when_intercepted(make_page):
    page = make_page(fields={"#go": None}, fail={"click"})
    result = asyncio.run(execute_click(page, {"selector": "#go"}))
    assert result.method == "force_click"
    assert result.method_index == 7


def test_click_with_nothing_to_go_on(make_page):
    result = asyncio.run(execute_click(make_page(), ClickTarget()))
    assert result.success is False
    assert "All 7 click methods failed" in result.error


def test_normalize_url():
    assert normalize_url("example.com/a") == "https://example.com/a"
    assert normalize_url("http://example.com") == "http://example.com"
    assert normalize_url("") == ""


def test_navigate_verifies_host(make_page):
    page = make_page()
    result = asyncio.run(execute_navigate(page, "example.com/menu"))
    assert result.success is True
    assert result.method == "goto_load"
    assert result.verified is True
    assert page.url == "https://example.com/menu"


def test_navigate_falls_back_on_timeout(make_page):
    page = make_page(fail={"goto:load"})
    result = asyncio.run(execute_navigate(page, NavigateTarget(url="https://example.com")))
    assert result.method == "goto_domcontentloaded"
    assert result.method_index == 2


def test_navigate_redirect_is_reported_not_retried(make_page):
    page = make_page()
    page.redirect_to = "https://login.other.com/"
    result = asyncio.run(execute_navigate(page, {"url": "https://example.com"}))
    assert result.success is True
    assert result.verified is False
    assert page.calls.count("goto:load") == 1


def test_select_by_value(make_page):
    page = make_page(fields={"#size": ""}, options={"#size": {"2": "Two people", "4": "Four people"}})
    result = asyncio.run(execute_select(page, SelectTarget(selector="#size", value="2")))
    assert result.method == "select_by_value"
    assert result.verified is True


def test_select_by_visible_label(make_page):
    page = make_page(fields={"#size": ""}, options={"#size": {"2": "Two people"}})
    result = asyncio.run(execute_select(page, SelectTarget(selector="#size", value="Two people")))
    assert result.method == "select_by_label"
    assert result.method_index == 2
    assert page.fields["#size"] == "2"
    assert result.verified is False


def test_malformed_dict_targets_return_results(make_page):
    page = make_page(fields={"#go": None, "#size": ""}, options={"#size": {"2": "Two"}})

    clicked = asyncio.run(execute_click(page, {"selector": "#go", "action": "click"}))
    assert clicked.success is True

    no_url = asyncio.run(execute_navigate(page, {"href": "https://example.com"}))
    assert no_url.success is False
    assert no_url.error == "NavigateTarget is missing url"

    no_value = asyncio.run(execute_select(page, {"selector": "#size"}))
    assert no_value.success is False
    assert no_value.error == "SelectTarget is missing value"
