"""
Locator 慣用寫法辨識

錄製器產生的元素查找一律長這樣：
    driver.findElement(By.id("username"))
    driver.findElements(By.xpath("//a[text()='Home']"))

這裡負責：
- 找出運算式中的 By.<strategy>("literal") 與 findElement(s) 呼叫
- 依 locator 推導 getter 名稱 (getIDusername / getListXPATHatextHome)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from selenium.webdriver.common.by import By

from decomposer.nodes import Expression, MethodCall, Name, StringLiteral, iter_expressions

# Java By.<method> → Selenium locator 策略
LOCATOR_STRATEGIES: dict[str, str] = {
    "id": By.ID,
    "name": By.NAME,
    "className": By.CLASS_NAME,
    "tagName": By.TAG_NAME,
    "linkText": By.LINK_TEXT,
    "partialLinkText": By.PARTIAL_LINK_TEXT,
    "cssSelector": By.CSS_SELECTOR,
    "xpath": By.XPATH,
}

SINGLE_LOOKUP = "findElement"
PLURAL_LOOKUP = "findElements"

# getter 名稱要去掉的字元
_STRIPPED_CHARS = re.compile(r"[\":.()'\\/#\[\]@=* >]")
_NON_IDENTIFIER = re.compile(r"[^\w$]")


@dataclass(frozen=True)
class Locator:
    """By.<method>("<value>") 的內容"""
    method: str   # Java 端名稱，如 cssSelector
    value: str    # 字串常數內容（未去跳脫）

    @property
    def strategy(self) -> str:
        """對應的 Selenium 策略，如 'css selector'"""
        return LOCATOR_STRATEGIES[self.method]

    @property
    def is_xpath(self) -> bool:
        return self.strategy == By.XPATH


@dataclass(frozen=True)
class Lookup:
    """findElement / findElements 呼叫"""
    locator: Locator
    plural: bool

    @property
    def getter_name(self) -> str:
        prefix = "getList" if self.plural else "get"
        return prefix + self.locator.method.upper() + sanitize_locator(self.locator.value)


def sanitize_locator(value: str) -> str:
    """locator 字串轉成可接在方法名稱後面的片段"""
    cleaned = _STRIPPED_CHARS.sub("", value).replace("-", "_")
    return _NON_IDENTIFIER.sub("", cleaned)


def as_locator(expr: Expression) -> Locator | None:
    """expr 若為 By.<strategy>("literal") 則回傳 Locator"""
    if not isinstance(expr, MethodCall) or expr.name not in LOCATOR_STRATEGIES:
        return None
    if not (isinstance(expr.target, Name) and expr.target.identifier == "By"):
        return None
    if len(expr.args) != 1 or not isinstance(expr.args[0], StringLiteral):
        return None
    return Locator(method=expr.name, value=expr.args[0].value)


def as_lookup(expr: Expression) -> Lookup | None:
    if not isinstance(expr, MethodCall) or expr.name not in (SINGLE_LOOKUP, PLURAL_LOOKUP):
        return None
    if len(expr.args) != 1:
        return None
    locator = as_locator(expr.args[0])
    if locator is None:
        return None
    return Lookup(locator=locator, plural=expr.name == PLURAL_LOOKUP)


def find_lookup(expr: Expression | None) -> Lookup | None:
    """在運算式中找第一個元素查找呼叫（前序）"""
    if expr is None:
        return None
    for node in iter_expressions(expr):
        lookup = as_lookup(node)
        if lookup is not None:
            return lookup
    return None
