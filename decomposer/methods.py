"""
Method Deduplicator / Namer

把方法加入類別前先做兩件事：
1. 結構比對：參數列與 body 印出來完全一樣就直接重用既有方法（名稱不同時記警告）
   測試方法不跨名稱合併，只有同名且內容相同才重用
2. 名稱衝突：同名但內容不同時，依序加上 _1, _2, ... 直到不重複（記警告）

加入之後，同一類別內的方法名稱一定唯一。
"""

from __future__ import annotations

from typing import Sequence

from decomposer.log_sink import WarningLog
from decomposer.nodes import ClassDecl, MethodDecl, Parameter

PLACEHOLDER_TYPE = "String"


def _shape(method: MethodDecl) -> tuple[str, str]:
    body = method.body.render() if method.body is not None else ""
    return method.render_parameters(), body


class MethodNamer:
    """方法去重 + 命名"""

    def __init__(self, log: WarningLog):
        self.log = log

    def register(
        self,
        owner: ClassDecl,
        method: MethodDecl,
        placeholders: Sequence[str] = (),
        merge_by_shape: bool = True,
    ) -> MethodDecl:
        """
        把 method 加入 owner（或找到等價的既有方法）。

        Args:
            owner: 目標類別
            method: 候選方法（尚未屬於任何類別）
            placeholders: 依序加上的 String 參數名稱
            merge_by_shape: False 時不合併不同名稱的方法（測試方法用）

        Returns:
            實際存在於 owner 的方法，呼叫端要用它的名稱
        """
        for placeholder in placeholders:
            method.parameters.append(Parameter(PLACEHOLDER_TYPE, placeholder))

        if merge_by_shape:
            existing = self.find_equivalent(owner, method)
        else:
            existing = self.find_identical(owner, method)
        if existing is not None:
            if existing.name != method.name:
                self.log.warning(
                    f"{owner.name}: 方法 {method.name} 與 {existing.name} 的參數與內容完全相同，"
                    f"合併為 {existing.name}"
                )
            return existing

        base_name = method.name
        index = 1
        while owner.find_method(method.name) is not None:
            method.name = f"{base_name}_{index}"
            index += 1
        if method.name != base_name:
            self.log.warning(
                f"{owner.name}: 已有內容不同的同名方法 {base_name}，新方法改名為 {method.name}"
            )
        owner.add_member(method)
        return method

    @staticmethod
    def find_identical(owner: ClassDecl, method: MethodDecl) -> MethodDecl | None:
        """同名且參數、body 相同的既有方法"""
        candidate = owner.find_method(method.name)
        if candidate is not None and (candidate is method or _shape(candidate) == _shape(method)):
            return candidate
        return None

    @staticmethod
    def find_equivalent(owner: ClassDecl, method: MethodDecl) -> MethodDecl | None:
        shape = _shape(method)
        for candidate in owner.methods:
            if candidate is method or _shape(candidate) == shape:
                return candidate
        return None
