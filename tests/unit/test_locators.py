"""
decomposer/locators.py 單元測試
"""

import pytest
from selenium.webdriver.common.by import By

from decomposer.locators import (
    LOCATOR_STRATEGIES, Locator, Lookup, as_locator, as_lookup, find_lookup,
    sanitize_locator,
)
from decomposer.nodes import MethodCall, Name, StringLiteral


def _by(method: str, value: str) -> MethodCall:
    return MethodCall(Name("By"), method, [StringLiteral(value)])


@pytest.mark.unit
class TestLocatorDetection:
    """By.<strategy>("literal") 辨識"""

    def test_strategy_table_uses_selenium_constants(self):
        assert LOCATOR_STRATEGIES["cssSelector"] == By.CSS_SELECTOR
        assert LOCATOR_STRATEGIES["xpath"] == By.XPATH
        assert len(LOCATOR_STRATEGIES) == 8

    def test_as_locator(self):
        locator = as_locator(_by("linkText", "Home"))
        assert locator == Locator("linkText", "Home")
        assert locator.strategy == By.LINK_TEXT
        assert not locator.is_xpath

    @pytest.mark.parametrize("expr", [
        MethodCall(Name("By"), "id", [Name("variable")]),
        MethodCall(Name("Selector"), "id", [StringLiteral("q")]),
        MethodCall(Name("By"), "css", [StringLiteral("q")]),
        MethodCall(Name("By"), "id", []),
        Name("By"),
    ])
    def test_not_a_locator(self, expr):
        assert as_locator(expr) is None

    def test_as_lookup_plural(self):
        call = MethodCall(Name("driver"), "findElements", [_by("xpath", "//li")])
        lookup = as_lookup(call)
        assert lookup.plural
        assert lookup.locator.is_xpath

    def test_find_lookup_nested(self):
        call = MethodCall(
            MethodCall(Name("driver"), "findElement", [_by("id", "msg")]), "getText", [],
        )
        assert find_lookup(call) == Lookup(Locator("id", "msg"), plural=False)

    def test_find_lookup_none(self):
        assert find_lookup(None) is None
        assert find_lookup(MethodCall(Name("driver"), "getTitle", [])) is None


@pytest.mark.unit
class TestGetterName:
    """get / getList + 策略 + 清理後的值"""

    @pytest.mark.parametrize("method,value,plural,expected", [
        ("id", "username", False, "getIDusername"),
        ("xpath", "//a[text()='Home']", True, "getListXPATHatextHome"),
        ("cssSelector", "#main > .nav-item", False, "getCSSSELECTORmainnav_item"),
        ("name", "q", True, "getListNAMEq"),
        ("linkText", "Sign in!", False, "getLINKTEXTSignin"),
    ])
    def test_getter_name(self, method, value, plural, expected):
        assert Lookup(Locator(method, value), plural).getter_name == expected

    def test_sanitize_maps_dash(self):
        assert sanitize_locator("user-name") == "user_name"

    def test_sanitize_strips_quotes_and_brackets(self):
        assert sanitize_locator("//input[@name=\\\"q\\\"]") == "inputnameq"
