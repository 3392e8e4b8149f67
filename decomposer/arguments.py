"""
Argument Extractor

把寫死的字串抽成參數

Page Object 方法不該把測試資料寫死，所以進入 page 區段後：

1. 輸入文字 (sendKeys)
       driver.findElement(By.id("q")).sendKeys("hello");
   →   driver.findElement(By.id("q")).clear();
       driver.findElement(By.id("q")).sendKeys(key1);
   pending values = ["hello"]

2. 動態 xpath (By.xpath 內以單引號包住的值)
       driver.findElement(By.xpath("//a[text()='Home']")).click();
   →   driver.findElement(By.xpath("//a[text()='" + key1 + "']")).click();
   pending values = ["Home"]

xpath 的判斷是 substring 啟發式（看引號前面是不是屬性指定 / contains 呼叫），
不是真的 xpath 解析，遇到怪字串時寧可不動。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import reduce

from decomposer.locators import as_locator
from decomposer.nodes import (
    BinaryExpr, Expression, ExpressionStmt, MethodCall, Name, Statement,
    StringLiteral, transform,
)

TYPE_TEXT_VERB = "sendKeys"
CLEAR_VERB = "clear"
PLACEHOLDER_PREFIX = "key"

# 引號前面的 glue 以這些結尾時，引號內的值視為可抽出的資料
_ASSIGNMENT_TAIL = re.compile(r"(?:@[\w:.-]+|text\(\)|\.|value|text)\s*=\s*$")
_CONTAINS_TAIL = re.compile(
    r"(?:contains|starts-with)\(\s*(?:@[\w:.-]+|text\(\)|\.)\s*,\s*$"
)


@dataclass
class PendingArguments:
    """
    目前 page 方法累積的 (實際值, 參數名稱)。
    兩個 list 永遠等長，flush 時一起清空。
    """
    values: list[Expression] = field(default_factory=list)
    placeholders: list[str] = field(default_factory=list)

    def lift(self, value: Expression) -> str:
        self.values.append(value)
        placeholder = f"{PLACEHOLDER_PREFIX}{len(self.values)}"
        self.placeholders.append(placeholder)
        return placeholder

    def clear(self) -> None:
        self.values.clear()
        self.placeholders.clear()

    def __len__(self) -> int:
        return len(self.values)


def is_liftable_glue(glue: str) -> bool:
    """引號前的片段是否像 @attr= / text()= / contains(@attr,"""
    return bool(_ASSIGNMENT_TAIL.search(glue) or _CONTAINS_TAIL.search(glue))


class ArgumentExtractor:
    """每個敘述最多處理一次；沒有可辨識的寫法就原樣回傳"""

    def extract(self, statement: Statement, pending: PendingArguments) -> list[Statement]:
        """
        Returns:
            取代原敘述的敘述列表（可能在前面多一行 clear()）
        """
        if not isinstance(statement, ExpressionStmt):
            return [statement]
        call = statement.expression
        if not isinstance(call, MethodCall):
            return [statement]

        typed_value = self._typed_literal(call)
        if typed_value is not None:
            # 先抽 sendKeys 的值，編號才會是 key1
            placeholder = pending.lift(typed_value)
            call = MethodCall(call.target, call.name, [Name(placeholder), *call.args[1:]])

        call = self.lift_locators(call, pending)
        result: list[Statement] = [ExpressionStmt(call)]
        if typed_value is not None:
            clear_call = MethodCall(call.target.clone(), CLEAR_VERB, [])
            result.insert(0, ExpressionStmt(clear_call))
        return result

    @staticmethod
    def _typed_literal(call: MethodCall) -> StringLiteral | None:
        if call.name != TYPE_TEXT_VERB or call.target is None or not call.args:
            return None
        value = call.args[0]
        # Keys.ENTER 之類的按鍵不抽
        return value if isinstance(value, StringLiteral) else None

    def lift_locators(self, expr: Expression, pending: PendingArguments) -> Expression:
        """把運算式中所有 By.xpath("...") 的動態值換成參數"""
        def _lift(node: Expression) -> Expression | None:
            locator = as_locator(node)
            if locator is None or not locator.is_xpath:
                return None
            rebuilt = self._lift_xpath(locator.value, pending)
            if rebuilt is None:
                return None
            return MethodCall(node.target, node.name, [rebuilt])

        return transform(expr, _lift)

    @staticmethod
    def _lift_xpath(path: str, pending: PendingArguments) -> Expression | None:
        segments = path.split("'")
        # 引號不成對 → 不處理
        if len(segments) < 3 or len(segments) % 2 == 0:
            return None
        if not any(is_liftable_glue(segments[i - 1]) for i in range(1, len(segments), 2)):
            return None

        parts: list[Expression] = []
        static = segments[0]
        for index in range(1, len(segments), 2):
            value, glue_after = segments[index], segments[index + 1]
            if is_liftable_glue(segments[index - 1]):
                parts.append(StringLiteral(static + "'"))
                parts.append(Name(pending.lift(StringLiteral(value))))
                static = "'" + glue_after
            else:
                static += "'" + value + "'" + glue_after
        parts.append(StringLiteral(static))
        return reduce(lambda left, right: BinaryExpr(left, "+", right), parts)
