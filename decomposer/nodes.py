"""
Java 語法樹節點

拆解器只認得錄製器會產生的少數語法，其餘一律以 Raw 節點保留原文。
所有節點都是 dataclass：
- 結構相等（==）即代表 render 結果與形狀都相同，不依賴物件身分
- render() 轉回 Java 原始碼文字
- clone() 深拷貝；節點要搬到另一棵樹時一定要先 clone，不共用
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Callable, Iterator

INDENT = "    "


class StatementKind(Enum):
    """敘述分類（Router 依此分派）"""
    CALL = "call"          # expression statement，且運算式是 method call
    BLOCK = "block"        # { ... }
    COMMENT = "comment"    # 註解
    OTHER = "other"        # 其他，原樣搬移


class ClassKind(Enum):
    CENTRAL = "central"          # 測試主類別
    PAGE_OBJECT = "page_object"  # 產生的 Page Object
    RECORDED = "recorded"        # 解析進來的錄製腳本


class Node:
    """所有節點的基底"""

    def render(self) -> str:
        raise NotImplementedError

    def clone(self):
        return copy.deepcopy(self)

    def __str__(self) -> str:
        return self.render()


def _reindent(text: str, level: int) -> str:
    """多行原文：第一行由呼叫端縮排，其餘行補上目前層級的縮排"""
    lines = text.split("\n")
    rest = [INDENT * level + line if line.strip() else "" for line in lines[1:]]
    return "\n".join([lines[0], *rest])


# ── Expressions ──

class Expression(Node):
    """運算式節點"""


@dataclass
class Name(Expression):
    identifier: str

    def render(self) -> str:
        return self.identifier


@dataclass
class Literal(Expression):
    """數字、字元、true / false / null，保留原始文字"""
    text: str

    def render(self) -> str:
        return self.text


@dataclass
class StringLiteral(Expression):
    """字串常數；value 是原始碼中引號內的內容（跳脫字元維持原樣）"""
    value: str

    def render(self) -> str:
        return f'"{self.value}"'


@dataclass
class FieldAccess(Expression):
    target: Expression
    name: str

    def render(self) -> str:
        return f"{self.target.render()}.{self.name}"


@dataclass
class MethodCall(Expression):
    target: Expression | None
    name: str
    args: list[Expression] = field(default_factory=list)

    def render(self) -> str:
        args = ", ".join(a.render() for a in self.args)
        if self.target is None:
            return f"{self.name}({args})"
        return f"{self.target.render()}.{self.name}({args})"


@dataclass
class ObjectCreation(Expression):
    type: str
    args: list[Expression] = field(default_factory=list)

    def render(self) -> str:
        args = ", ".join(a.render() for a in self.args)
        return f"new {self.type}({args})"


@dataclass
class Cast(Expression):
    type: str
    expression: Expression

    def render(self) -> str:
        return f"({self.type}) {self.expression.render()}"


@dataclass
class BinaryExpr(Expression):
    left: Expression
    operator: str
    right: Expression

    def render(self) -> str:
        return f"{self.left.render()} {self.operator} {self.right.render()}"


@dataclass
class UnaryExpr(Expression):
    operator: str
    operand: Expression

    def render(self) -> str:
        return f"{self.operator}{self.operand.render()}"


@dataclass
class Enclosed(Expression):
    """括號運算式 ( ... )"""
    inner: Expression

    def render(self) -> str:
        return f"({self.inner.render()})"


@dataclass
class Assign(Expression):
    target: Expression
    operator: str
    value: Expression

    def render(self) -> str:
        return f"{self.target.render()} {self.operator} {self.value.render()}"


@dataclass
class RawExpression(Expression):
    """不認得的運算式（lambda、三元運算…），原文保留"""
    text: str

    def render(self) -> str:
        return self.text


# ── Statements ──

class Statement(Node):
    """敘述節點；render 的第一行不含縮排，由外層 Block 負責"""

    kind = StatementKind.OTHER

    def render(self, level: int = 0) -> str:
        raise NotImplementedError


@dataclass
class ExpressionStmt(Statement):
    expression: Expression

    @property
    def kind(self) -> StatementKind:
        if isinstance(self.expression, MethodCall):
            return StatementKind.CALL
        return StatementKind.OTHER

    def render(self, level: int = 0) -> str:
        return f"{self.expression.render()};"


@dataclass
class VariableDecl(Statement):
    """單一變數的區域宣告，例如 String value = ...;"""
    type: str
    name: str
    initializer: Expression | None = None
    modifiers: list[str] = field(default_factory=list)

    def render(self, level: int = 0) -> str:
        head = " ".join([*self.modifiers, self.type, self.name])
        if self.initializer is None:
            return f"{head};"
        return f"{head} = {self.initializer.render()};"


@dataclass
class AssertStmt(Statement):
    check: Expression
    message: Expression | None = None

    def render(self, level: int = 0) -> str:
        if self.message is None:
            return f"assert {self.check.render()};"
        return f"assert {self.check.render()} : {self.message.render()};"


@dataclass
class ReturnStmt(Statement):
    expression: Expression | None = None

    def render(self, level: int = 0) -> str:
        if self.expression is None:
            return "return;"
        return f"return {self.expression.render()};"


@dataclass
class Comment(Statement):
    text: str

    kind = StatementKind.COMMENT

    def render(self, level: int = 0) -> str:
        return _reindent(self.text, level)


@dataclass
class RawStatement(Statement):
    """if / for / try 等不在詞彙表內的敘述，原文保留"""
    text: str

    def render(self, level: int = 0) -> str:
        return _reindent(self.text, level)


@dataclass
class Block(Statement):
    statements: list[Statement] = field(default_factory=list)
    # 浮動註解：不保證與敘述的相對位置，固定印在區塊開頭
    comments: list[Comment] = field(default_factory=list)

    kind = StatementKind.BLOCK

    @property
    def is_empty(self) -> bool:
        return not self.statements

    def append(self, statement: Statement) -> Statement:
        self.statements.append(statement)
        return statement

    def extend(self, statements: list[Statement]) -> None:
        self.statements.extend(statements)

    def render(self, level: int = 0) -> str:
        inner = INDENT * (level + 1)
        lines = ["{"]
        for child in [*self.comments, *self.statements]:
            lines.append(inner + child.render(level + 1))
        lines.append(INDENT * level + "}")
        return "\n".join(lines)


# ── Declarations ──

@dataclass
class ImportDecl(Node):
    name: str
    static: bool = False
    wildcard: bool = False

    def render(self) -> str:
        static = "static " if self.static else ""
        wildcard = ".*" if self.wildcard else ""
        return f"import {static}{self.name}{wildcard};"


@dataclass
class Annotation(Node):
    text: str

    def render(self) -> str:
        return self.text


@dataclass
class Parameter(Node):
    type: str
    name: str

    def render(self) -> str:
        return f"{self.type} {self.name}".strip()


class Member(Node):
    """類別成員"""

    def render(self, level: int = 0) -> str:
        raise NotImplementedError


def _with_annotations(annotations: list[Annotation], header: str, level: int) -> str:
    pad = INDENT * level
    return ("\n" + pad).join([*(a.render() for a in annotations), header])


_ACCESS_MODIFIERS = ("public", "protected", "private")


@dataclass
class FieldDecl(Member):
    type: str
    name: str
    initializer: Expression | None = None
    modifiers: list[str] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)

    def set_access(self, keyword: str) -> "FieldDecl":
        """改成指定的存取修飾字（public / protected / private 互斥）"""
        kept = [m for m in self.modifiers if m not in _ACCESS_MODIFIERS]
        self.modifiers = [keyword, *kept]
        return self

    def render(self, level: int = 0) -> str:
        head = " ".join([*self.modifiers, self.type, self.name])
        if self.initializer is not None:
            head += f" = {self.initializer.render()}"
        return _with_annotations(self.annotations, head + ";", level)


@dataclass
class MethodDecl(Member):
    name: str
    return_type: str = "void"
    parameters: list[Parameter] = field(default_factory=list)
    body: Block | None = field(default_factory=Block)
    modifiers: list[str] = field(default_factory=lambda: ["public"])
    annotations: list[Annotation] = field(default_factory=list)
    throws: list[str] = field(default_factory=list)

    def render_parameters(self) -> str:
        return "(" + ", ".join(p.render() for p in self.parameters) + ")"

    def render(self, level: int = 0) -> str:
        header = " ".join(
            [*self.modifiers, self.return_type, self.name + self.render_parameters()]
        )
        if self.throws:
            header += " throws " + ", ".join(self.throws)
        if self.body is None:
            header += ";"
        else:
            header += " " + self.body.render(level)
        return _with_annotations(self.annotations, header, level)


@dataclass
class ConstructorDecl(Member):
    name: str
    parameters: list[Parameter] = field(default_factory=list)
    body: Block = field(default_factory=Block)
    modifiers: list[str] = field(default_factory=lambda: ["public"])

    def render(self, level: int = 0) -> str:
        params = ", ".join(p.render() for p in self.parameters)
        header = " ".join([*self.modifiers, f"{self.name}({params})"])
        return f"{header} {self.body.render(level)}"


@dataclass
class NestedType(Member):
    """巢狀類別 / 介面 / enum，拆解時略過"""
    text: str

    def render(self, level: int = 0) -> str:
        return _reindent(self.text, level)


@dataclass
class RawMember(Member):
    """初始化區塊等無法歸類的成員；拆解時視為不支援"""
    node_type: str
    text: str

    def render(self, level: int = 0) -> str:
        return _reindent(self.text, level)


@dataclass
class ClassDecl(Node):
    name: str
    kind: ClassKind = ClassKind.RECORDED
    members: list[Member] = field(default_factory=list)
    modifiers: list[str] = field(default_factory=lambda: ["public"])
    annotations: list[Annotation] = field(default_factory=list)

    @property
    def fields(self) -> list[FieldDecl]:
        return [m for m in self.members if isinstance(m, FieldDecl)]

    @property
    def methods(self) -> list[MethodDecl]:
        return [m for m in self.members if isinstance(m, MethodDecl)]

    @property
    def constructors(self) -> list[ConstructorDecl]:
        return [m for m in self.members if isinstance(m, ConstructorDecl)]

    def find_method(self, name: str) -> MethodDecl | None:
        for method in self.methods:
            if method.name == name:
                return method
        return None

    def add_member(self, member: Member) -> Member:
        self.members.append(member)
        return member

    def render(self, level: int = 0) -> str:
        pad = INDENT * level
        header = " ".join([*self.modifiers, "class", self.name]) + " {"
        lines = [_with_annotations(self.annotations, header, level)]
        for member in self.members:
            lines.append("")
            lines.append(pad + INDENT + member.render(level + 1))
        lines.append(pad + "}")
        return "\n".join(lines)


@dataclass
class SourceUnit(Node):
    """一個 .java 檔：package + imports + class"""
    package: str | None = None
    imports: list[ImportDecl] = field(default_factory=list)
    classes: list[ClassDecl] = field(default_factory=list)

    @property
    def main_class(self) -> ClassDecl | None:
        return self.classes[0] if self.classes else None

    def add_import(self, import_decl: ImportDecl) -> bool:
        """加入 import；已存在（結構相等）則略過並回傳 False"""
        if import_decl in self.imports:
            return False
        self.imports.append(import_decl.clone())
        return True

    def render(self) -> str:
        parts: list[str] = []
        if self.package:
            parts.append(f"package {self.package};")
        if self.imports:
            parts.append("\n".join(i.render() for i in self.imports))
        parts.extend(c.render() for c in self.classes)
        return "\n\n".join(parts) + "\n"


# ── 走訪工具 ──

_TREE_TYPES = (Expression, Statement)


def iter_expressions(node: Node) -> Iterator[Expression]:
    """前序走訪 node（Expression 或 Statement）底下所有的 Expression"""
    if isinstance(node, Expression):
        yield node
    for f in fields(node):
        value = getattr(node, f.name)
        children = value if isinstance(value, list) else [value]
        for child in children:
            if isinstance(child, _TREE_TYPES):
                yield from iter_expressions(child)


def transform(node: Node, fn: Callable[[Expression], Expression | None]) -> Node:
    """
    由上而下替換運算式。

    fn 回傳新節點 → 取代整棵子樹（不再往下走）
    fn 回傳 None  → 保留並繼續走訪子節點

    原樹不會被修改；未變動的子樹會與原樹共用，
    所以呼叫端應該對 clone() 之後的樹使用，並丟棄舊樹。
    """
    if isinstance(node, Expression):
        replaced = fn(node)
        if replaced is not None:
            return replaced

    changes = {}
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, _TREE_TYPES):
            new_value = transform(value, fn)
            if new_value is not value:
                changes[f.name] = new_value
        elif isinstance(value, list) and any(isinstance(v, _TREE_TYPES) for v in value):
            new_list = [
                transform(v, fn) if isinstance(v, _TREE_TYPES) else v for v in value
            ]
            if any(a is not b for a, b in zip(new_list, value)):
                changes[f.name] = new_list
    return replace(node, **changes) if changes else node


def substitute_name(node: Node, identifier: str, replacement: Expression) -> Node:
    """把所有名為 identifier 的變數參照換成 replacement（每處各自 clone）"""
    def _swap(expr: Expression) -> Expression | None:
        if isinstance(expr, Name) and expr.identifier == identifier:
            return replacement.clone()
        return None

    return transform(node, _swap)


def is_call(expr: Expression | None, *names: str) -> bool:
    """expr 是否為指定名稱的 method call（未指定名稱時只判斷型別）"""
    if not isinstance(expr, MethodCall):
        return False
    return not names or expr.name in names
