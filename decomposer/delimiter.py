"""
Delimiter Scanner

標記敘述辨識

錄製器在腳本中插入兩種標記：

    System.out.println("{SeleniumIDEExt}Comment:LOGIN:clickSubmit");  → 進入 PO_login.clickSubmit
    System.out.println("{SeleniumIDEExt}backToMain");                 → 回到測試主流程

格式不對的標記（欄位數不是 3、名稱不是合法識別字）一律當一般敘述，不報錯。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from config.config import DecomposerSettings
from decomposer.nodes import ExpressionStmt, MethodCall, Statement, StringLiteral

_PRINT_TARGET = "System.out"
_PRINT_METHODS = ("println", "print")
_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")


@dataclass(frozen=True)
class Delimiter:
    """進入標記：之後的動作屬於 page 的 method"""
    page: str
    method: str


class BackToMain:
    """離開標記（單例）"""

    def __repr__(self) -> str:
        return "BACK_TO_MAIN"


BACK_TO_MAIN = BackToMain()


def marker_payload(statement: Statement) -> str | None:
    """System.out.println("...") 的字串內容；不是 print 形式則回傳 None"""
    if not isinstance(statement, ExpressionStmt):
        return None
    call = statement.expression
    if not isinstance(call, MethodCall) or call.name not in _PRINT_METHODS:
        return None
    if call.target is None or call.target.render() != _PRINT_TARGET:
        return None
    if len(call.args) != 1 or not isinstance(call.args[0], StringLiteral):
        return None
    return call.args[0].value


class DelimiterScanner:
    """判斷一行敘述是 Enter / Exit / 一般敘述"""

    def __init__(self, settings: DecomposerSettings):
        self.tags = settings.marker_tags
        self.back_to_main = settings.back_to_main
        self.page_prefix = settings.page_prefix

    def scan(self, statement: Statement) -> Delimiter | BackToMain | None:
        payload = marker_payload(statement)
        if payload is None:
            return None
        for tag in self.tags:
            if not payload.startswith(tag):
                continue
            if payload == tag + self.back_to_main:
                return BACK_TO_MAIN
            return self._parse_enter(payload)
        return None

    def _parse_enter(self, payload: str) -> Delimiter | None:
        # {Tag}<unused>:<page>:<method>
        values = payload.split(":")
        if len(values) != 3:
            return None
        page_token, method = values[1].strip().lower(), values[2].strip()
        if not _IDENTIFIER.fullmatch(page_token) or not _IDENTIFIER.fullmatch(method):
            return None
        return Delimiter(page=self.page_prefix + page_token, method=method)
