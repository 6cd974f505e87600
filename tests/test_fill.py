import asyncio

from action_firewall import FillTarget, FirewallConfig, execute_fill
from action_firewall.execution.actions.fill import FILL_METHOD_COUNT, FILL_STRATEGIES

EXPECTED_ORDER = [
    "css_selector",
    "label",
    "placeholder",
    "name_attr",
    "id_attr",
    "sequential_type",
    "js_value_set",
    "focus_type",
    "clear_then_fill",
    "select_all_type",
    "label_for",
    "aria_label",
    "input_by_type",
    "nth_input",
    "textarea",
]


def test_strategy_order_is_fixed():
    assert [s.name for s in FILL_STRATEGIES] == EXPECTED_ORDER
    assert FILL_METHOD_COUNT == 15


def test_selector_fill_verified(make_page):
    page = make_page(fields={"#q": ""})
    result = asyncio.run(execute_fill(page, FillTarget(selector="#q", value="hello")))
    assert result.success is True
    assert result.method == "css_selector"
    assert result.method_index == 1
    assert result.verified is True
    assert page.fields["#q"] == "hello"


def test_empty_target_exhausts_every_strategy(make_page):
    page = make_page(fields={"#q": ""})
    page.query_results["input:visible, textarea:visible"] = ["#q"]
    result = asyncio.run(execute_fill(page, FillTarget(value="hello")))
    assert result.success is False
    assert result.attempts == 15
    assert "All 15 fill methods failed" in result.error
    assert '"value": "hello"' in result.error
    assert page.fields["#q"] == ""


def test_throwing_strategy_falls_through(make_page):
    page = make_page(fields={"#q": ""}, fail={"fill"})
    result = asyncio.run(execute_fill(page, FillTarget(selector="#q", value="hello")))
    assert result.success is True
    assert result.method == "sequential_type"
    assert result.method_index == 6
    assert page.fields["#q"] == "hello"


def test_js_fallback_when_locators_fail(make_page):
    page = make_page(fields={"#q": "hello"}, fail={"fill", "locator.fill"})
    page.evaluate_result = True
    result = asyncio.run(execute_fill(page, FillTarget(selector="#q", value="hello")))
    assert result.method == "js_value_set"
    assert result.method_index == 7


def test_read_back_mismatch_is_still_success(make_page):
    # Lenient policy: the write did not error, so a stale read-back is trusted.
    page = make_page(fields={"#q": ""}, echo={"#q": ""})
    result = asyncio.run(execute_fill(page, FillTarget(selector="#q", value="hello")))
    assert result.success is True
    assert result.method == "css_selector"
    assert result.method_index == 1
    assert result.verified is False
    assert page.calls.count("fill") == 1


def test_read_back_error_is_still_success(make_page):
    page = make_page(fields={"#q": ""}, fail={"input_value"})
    result = asyncio.run(execute_fill(page, FillTarget(selector="#q", value="hello")))
    assert result.success is True
    assert result.verified is None


def test_no_selector_means_no_read_back(make_page):
    page = make_page(fields={"label:Email": ""})
    result = asyncio.run(execute_fill(page, FillTarget(label="Email", value="a@b.co")))
    assert result.method == "label"
    assert result.method_index == 2
    assert result.verified is None
    assert "input_value" not in page.calls


def test_placeholder(make_page):
    page = make_page(fields={"placeholder:Search": ""})
    result = asyncio.run(execute_fill(page, {"placeholder": "Search", "value": "flights"}))
    assert result.method == "placeholder"
    assert page.fields["placeholder:Search"] == "flights"


def test_name_attr_derived_from_label(make_page):
    page = make_page(fields={'[name="firstname"], [name*="firstname"]': ""})
    result = asyncio.run(execute_fill(page, FillTarget(label="First Name", value="Ada")))
    assert result.method == "name_attr"
    assert result.method_index == 4


def test_label_for_attribute(make_page):
    page = make_page(fields={"#dob": ""})
    page.attributes[('label:has-text("Birthday")', "for")] = "dob"
    result = asyncio.run(execute_fill(page, FillTarget(label="Birthday", value="1990-01-01")))
    assert result.method == "label_for"
    assert page.fields["#dob"] == "1990-01-01"


def test_guess_by_position(make_page):
    page = make_page(fields={"el-0": "", "el-1": ""})
    page.query_results["input:visible, textarea:visible"] = ["el-0", "el-1"]
    result = asyncio.run(execute_fill(page, FillTarget(label="Password", value="s3cret")))
    assert result.method == "nth_input"
    assert result.method_index == 14
    assert page.fields == {"el-0": "", "el-1": "s3cret"}


def test_guess_by_input_type(make_page):
    page = make_page(fields={"email-0": ""})
    page.query_results['input[type="email"]:visible'] = ["email-0"]
    result = asyncio.run(execute_fill(page, FillTarget(label="Work email", value="a@b.co")))
    assert result.method == "input_by_type"
    assert result.method_index == 13


def test_verification_can_be_disabled(make_page):
    page = make_page(fields={"#q": ""})
    result = asyncio.run(
        execute_fill(page, FillTarget(selector="#q", value="x"), FirewallConfig(verify_reads=False))
    )
    assert result.success is True
    assert result.verified is None
    assert "input_value" not in page.calls


def test_dict_target_ignores_unknown_keys(make_page):
    page = make_page(fields={"#q": ""})
    result = asyncio.run(execute_fill(page, {"selector": "#q", "value": "x", "type": "fill"}))
    assert result.success is True
    assert result.method == "css_selector"


def test_dict_target_without_value(make_page):
    page = make_page(fields={"#q": ""})
    result = asyncio.run(execute_fill(page, {"selector": "#q"}))
    assert result.success is False
    assert result.error == "FillTarget is missing value"
    assert page.calls == []
