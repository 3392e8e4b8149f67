"""
Assertion Bifurcator

把 assert 拆成「Page Object getter + 測試端 assert」

單行形式：
    assertThat(driver.findElement(By.id("msg")).getText(), is("Hi"));
→ PO:   public String getIDmsg() { return driver.findElement(By.id("msg")).getText(); }
  測試: assertThat(_PO_login.getIDmsg(), is("Hi"));

區塊形式（第一行宣告變數、最後一行 assert）：
    {
        List<WebElement> elements = driver.findElements(By.xpath("//a"));
        assert (elements.size() > 0);
    }
→ PO:   public List<WebElement> getListXPATHa() { ...; return elements; }
  測試: assert (_PO_login.getListXPATHa().size() > 0);

同一個 locator 產生的 getter 內容一樣，會經由 MethodNamer 重用，不會重複產生。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import UnsupportedConstructError
from decomposer.arguments import ArgumentExtractor
from decomposer.locators import find_lookup
from decomposer.methods import MethodNamer
from decomposer.nodes import (
    AssertStmt, Block, ClassDecl, Comment, ExpressionStmt, MethodCall, MethodDecl,
    Name, ReturnStmt, Statement, VariableDecl, is_call, substitute_name,
)

if TYPE_CHECKING:
    from decomposer.router import AnalysisContext

# assert 動詞 → getter 回傳型別
ASSERTION_RETURN_TYPES: dict[str, str] = {
    "assertEquals": "String",
    "assertNotEquals": "String",
    "assertThat": "String",
    "assertTrue": "boolean",
    "assertFalse": "boolean",
}


def is_assertion_call(statement: Statement) -> bool:
    """assertXxx(...) 形式的呼叫"""
    return (
        isinstance(statement, ExpressionStmt)
        and is_call(statement.expression)
        and statement.expression.name.startswith("assert")
    )


def is_assertion(statement: Statement) -> bool:
    return is_assertion_call(statement) or isinstance(statement, AssertStmt)


def contains_assertion(block: Block) -> bool:
    """區塊內（含巢狀區塊）是否有 assert"""
    for statement in block.statements:
        if is_assertion(statement):
            return True
        if isinstance(statement, Block) and contains_assertion(statement):
            return True
    return False


def getter_return_type(verb: str) -> str:
    try:
        return ASSERTION_RETURN_TYPES[verb]
    except KeyError:
        raise UnsupportedConstructError(
            verb, "沒有對應的 getter 回傳型別"
        ) from None


class AssertionBifurcator:
    """assert 拆解；形狀不符時回傳 False，由 Router 決定怎麼處理"""

    def __init__(self, namer: MethodNamer, extractor: ArgumentExtractor):
        self.namer = namer
        self.extractor = extractor

    def split_statement(
        self,
        context: "AnalysisContext",
        page: ClassDecl,
        page_variable: str,
        statement: ExpressionStmt,
    ) -> bool:
        call = statement.expression
        subject = call.args[0] if call.args else None
        lookup = find_lookup(subject)
        if lookup is None:
            return False

        return_type = getter_return_type(call.name)
        returned = self.extractor.lift_locators(subject.clone(), context.pending)
        getter = MethodDecl(
            name=lookup.getter_name,
            return_type=return_type,
            body=Block([ReturnStmt(returned)]),
            throws=list(context.throws),
        )
        getter_call = self._commit(context, page, page_variable, getter)

        assertion = MethodCall(
            call.target.clone() if call.target is not None else None,
            call.name,
            [getter_call, *(arg.clone() for arg in call.args[1:])],
        )
        context.suite_method.body.append(ExpressionStmt(assertion))
        return True

    def split_block(
        self,
        context: "AnalysisContext",
        page: ClassDecl,
        page_variable: str,
        block: Block,
    ) -> bool:
        statements = [s for s in block.statements if not isinstance(s, Comment)]
        if len(statements) < 2:
            return False
        first, middle, last = statements[0], statements[1:-1], statements[-1]

        if not isinstance(first, VariableDecl):
            return False
        lookup = find_lookup(first.initializer)
        if lookup is None or not is_assertion(last):
            return False
        for statement in middle:
            if is_assertion(statement) or (
                isinstance(statement, Block) and contains_assertion(statement)
            ):
                return False
        if is_assertion_call(last):
            # 只檢查動詞是否支援；回傳型別沿用宣告的變數型別
            getter_return_type(last.expression.name)

        body = Block([VariableDecl(
            type=first.type,
            name=first.name,
            initializer=self.extractor.lift_locators(
                first.initializer.clone(), context.pending
            ),
            modifiers=list(first.modifiers),
        )])
        for statement in middle:
            body.extend(self.extractor.extract(statement.clone(), context.pending))
        body.append(ReturnStmt(Name(first.name)))

        getter = MethodDecl(
            name=lookup.getter_name,
            return_type=first.type,
            body=body,
            throws=list(context.throws),
        )
        getter_call = self._commit(context, page, page_variable, getter)
        context.suite_method.body.append(
            substitute_name(last.clone(), first.name, getter_call)
        )
        return True

    def _commit(
        self,
        context: "AnalysisContext",
        page: ClassDecl,
        page_variable: str,
        getter: MethodDecl,
    ) -> MethodCall:
        """getter 交給 MethodNamer，回傳測試端要用的呼叫"""
        resolved = self.namer.register(page, getter, context.pending.placeholders)
        call = MethodCall(
            Name(page_variable),
            resolved.name,
            [value.clone() for value in context.pending.values],
        )
        context.pending.clear()
        return call
