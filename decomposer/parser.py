"""
Java 原始碼解析器

用 Tree-sitter (tree-sitter-language-pack 內建的 java grammar) 解析錄製腳本，
再轉成 decomposer.nodes 的節點。

只精確轉換錄製器會用到的語法；其他敘述 / 運算式以 Raw 節點保留原文，
輸出時原樣印回。

GOTCHA: Tree-sitter 使用 bytes，不是 str
"""

from __future__ import annotations

from pathlib import Path

from tree_sitter import Node as TSNode
from tree_sitter_language_pack import get_parser

from core.exceptions import SourceFileNotFoundError, SourceParseError
from decomposer.nodes import (
    Annotation, Assign, AssertStmt, BinaryExpr, Block, Cast, ClassDecl, ClassKind,
    Comment, ConstructorDecl, Enclosed, Expression, ExpressionStmt, FieldAccess,
    FieldDecl, ImportDecl, Literal, Member, MethodCall, MethodDecl, Name,
    NestedType, ObjectCreation, Parameter, RawExpression, RawMember, RawStatement,
    ReturnStmt, SourceUnit, Statement, StringLiteral, UnaryExpr, VariableDecl,
)
from utils.logger import logger

_COMMENT_TYPES = {"line_comment", "block_comment", "comment"}

_NESTED_TYPES = {
    "class_declaration", "interface_declaration", "enum_declaration",
    "annotation_type_declaration", "record_declaration",
}

_LITERAL_TYPES = {
    "decimal_integer_literal", "hex_integer_literal", "octal_integer_literal",
    "binary_integer_literal", "decimal_floating_point_literal",
    "hex_floating_point_literal", "character_literal", "text_block",
    "true", "false", "null_literal",
}

_NAME_TYPES = {"identifier", "type_identifier", "this", "super"}


def _text(node: TSNode) -> str:
    return node.text.decode("utf-8")


def _named(node: TSNode) -> list[TSNode]:
    """具名子節點（略過夾在運算式中間的註解）"""
    return [c for c in node.named_children if c.type not in _COMMENT_TYPES]


def _first_error_line(node: TSNode) -> int:
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error:
            return _first_error_line(child)
    return node.start_point[0] + 1


class JavaSourceParser:
    """
    Tree-sitter based Java parser.

    parser 只建立一次，重複使用。
    """

    def __init__(self):
        self._parser = get_parser("java")

    def parse(self, source: str, source_name: str = "") -> SourceUnit:
        """
        解析 Java 原始碼文字。

        Raises:
            SourceParseError: 原始碼含語法錯誤
        """
        tree = self._parser.parse(source.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            raise SourceParseError(source_name, line=_first_error_line(root))
        unit = self._unit(root)
        logger.debug(
            f"解析完成 {source_name or '<string>'}: "
            f"{len(unit.imports)} imports, {len(unit.classes)} classes"
        )
        return unit

    def parse_file(self, path: str | Path) -> SourceUnit:
        path = Path(path)
        if not path.exists():
            raise SourceFileNotFoundError(str(path))
        return self.parse(path.read_text(encoding="utf-8"), source_name=str(path))

    # ── 宣告 ──

    def _unit(self, root: TSNode) -> SourceUnit:
        unit = SourceUnit()
        for child in root.named_children:
            if child.type == "package_declaration":
                unit.package = self._qualified_name(child)
            elif child.type == "import_declaration":
                unit.imports.append(ImportDecl(
                    name=self._qualified_name(child),
                    static=any(c.type == "static" for c in child.children),
                    wildcard=any(c.type == "asterisk" for c in child.children),
                ))
            elif child.type == "class_declaration":
                unit.classes.append(self._class(child))
            elif child.type not in _COMMENT_TYPES:
                logger.debug(f"略過頂層宣告: {child.type}")
        return unit

    @staticmethod
    def _qualified_name(node: TSNode) -> str:
        for child in node.named_children:
            if child.type in ("scoped_identifier", "identifier"):
                return _text(child)
        return ""

    @staticmethod
    def _modifiers(node: TSNode) -> tuple[list[str], list[Annotation]]:
        modifiers: list[str] = []
        annotations: list[Annotation] = []
        for child in node.children:
            if child.type != "modifiers":
                continue
            for mod in child.children:
                if mod.type in ("marker_annotation", "annotation"):
                    annotations.append(Annotation(_text(mod)))
                elif mod.type not in _COMMENT_TYPES:
                    modifiers.append(_text(mod))
        return modifiers, annotations

    def _class(self, node: TSNode) -> ClassDecl:
        modifiers, annotations = self._modifiers(node)
        decl = ClassDecl(
            name=_text(node.child_by_field_name("name")),
            kind=ClassKind.RECORDED,
            modifiers=modifiers,
            annotations=annotations,
        )
        body = node.child_by_field_name("body")
        for child in body.named_children:
            decl.members.extend(self._members(child))
        return decl

    def _members(self, node: TSNode) -> list[Member]:
        if node.type in _COMMENT_TYPES:
            return []
        if node.type == "field_declaration":
            return self._fields(node)
        if node.type == "method_declaration":
            return [self._method(node)]
        if node.type == "constructor_declaration":
            return [self._constructor(node)]
        if node.type in _NESTED_TYPES:
            return [NestedType(self._raw_text(node))]
        return [RawMember(node.type, self._raw_text(node))]

    def _fields(self, node: TSNode) -> list[FieldDecl]:
        modifiers, annotations = self._modifiers(node)
        field_type = _text(node.child_by_field_name("type"))
        result = []
        for declarator in node.children_by_field_name("declarator"):
            value = declarator.child_by_field_name("value")
            result.append(FieldDecl(
                type=field_type,
                name=_text(declarator.child_by_field_name("name")),
                initializer=self._expression(value) if value is not None else None,
                modifiers=list(modifiers),
                annotations=[a.clone() for a in annotations],
            ))
        return result

    def _method(self, node: TSNode) -> MethodDecl:
        modifiers, annotations = self._modifiers(node)
        body = node.child_by_field_name("body")
        return MethodDecl(
            name=_text(node.child_by_field_name("name")),
            return_type=_text(node.child_by_field_name("type")),
            parameters=self._parameters(node.child_by_field_name("parameters")),
            body=self._block(body) if body is not None else None,
            modifiers=modifiers,
            annotations=annotations,
            throws=self._throws(node),
        )

    def _constructor(self, node: TSNode) -> ConstructorDecl:
        modifiers, _ = self._modifiers(node)
        return ConstructorDecl(
            name=_text(node.child_by_field_name("name")),
            parameters=self._parameters(node.child_by_field_name("parameters")),
            body=self._block(node.child_by_field_name("body")),
            modifiers=modifiers,
        )

    @staticmethod
    def _parameters(node: TSNode | None) -> list[Parameter]:
        if node is None:
            return []
        params = []
        for child in _named(node):
            if child.type == "formal_parameter":
                params.append(Parameter(
                    type=_text(child.child_by_field_name("type")),
                    name=_text(child.child_by_field_name("name")),
                ))
            else:
                # varargs / receiver parameter：整段當型別保留
                params.append(Parameter(type=_text(child), name=""))
        return params

    @staticmethod
    def _throws(node: TSNode) -> list[str]:
        for child in node.children:
            if child.type == "throws":
                return [_text(t) for t in _named(child)]
        return []

    # ── 敘述 ──

    def _block(self, node: TSNode) -> Block:
        block = Block()
        for child in node.named_children:
            block.append(self._statement(child))
        return block

    def _statement(self, node: TSNode) -> Statement:
        kind = node.type
        if kind in _COMMENT_TYPES:
            return Comment(self._raw_text(node))
        if kind == "expression_statement":
            return ExpressionStmt(self._expression(_named(node)[0]))
        if kind == "local_variable_declaration":
            return self._local_variable(node)
        if kind == "assert_statement":
            parts = _named(node)
            return AssertStmt(
                check=self._expression(parts[0]),
                message=self._expression(parts[1]) if len(parts) > 1 else None,
            )
        if kind == "return_statement":
            parts = _named(node)
            return ReturnStmt(self._expression(parts[0]) if parts else None)
        if kind in ("block", "constructor_body"):
            return self._block(node)
        return RawStatement(self._raw_text(node))

    def _local_variable(self, node: TSNode) -> Statement:
        declarators = node.children_by_field_name("declarator")
        if len(declarators) != 1:
            # int a = 1, b = 2; 不在詞彙表內
            return RawStatement(self._raw_text(node))
        modifiers, _ = self._modifiers(node)
        declarator = declarators[0]
        value = declarator.child_by_field_name("value")
        return VariableDecl(
            type=_text(node.child_by_field_name("type")),
            name=_text(declarator.child_by_field_name("name")),
            initializer=self._expression(value) if value is not None else None,
            modifiers=modifiers,
        )

    # ── 運算式 ──

    def _expression(self, node: TSNode) -> Expression:
        kind = node.type
        if kind in _NAME_TYPES:
            return Name(_text(node))
        if kind == "string_literal":
            return StringLiteral(_text(node)[1:-1])
        if kind in _LITERAL_TYPES:
            return Literal(_text(node))
        if kind == "method_invocation":
            return self._method_call(node)
        if kind == "field_access":
            return FieldAccess(
                target=self._expression(node.child_by_field_name("object")),
                name=_text(node.child_by_field_name("field")),
            )
        if kind == "object_creation_expression":
            if any(c.type == "class_body" for c in node.named_children):
                return RawExpression(self._raw_text(node))
            return ObjectCreation(
                type=_text(node.child_by_field_name("type")),
                args=self._arguments(node.child_by_field_name("arguments")),
            )
        if kind == "cast_expression":
            return Cast(
                type=_text(node.child_by_field_name("type")),
                expression=self._expression(node.child_by_field_name("value")),
            )
        if kind == "binary_expression":
            return BinaryExpr(
                left=self._expression(node.child_by_field_name("left")),
                operator=_text(node.child_by_field_name("operator")),
                right=self._expression(node.child_by_field_name("right")),
            )
        if kind == "unary_expression":
            return UnaryExpr(
                operator=_text(node.child_by_field_name("operator")),
                operand=self._expression(node.child_by_field_name("operand")),
            )
        if kind == "parenthesized_expression":
            return Enclosed(self._expression(_named(node)[0]))
        if kind == "assignment_expression":
            return Assign(
                target=self._expression(node.child_by_field_name("left")),
                operator=_text(node.child_by_field_name("operator")),
                value=self._expression(node.child_by_field_name("right")),
            )
        return RawExpression(self._raw_text(node))

    def _method_call(self, node: TSNode) -> Expression:
        if node.child_by_field_name("type_arguments") is not None:
            # Collections.<String>emptyList() 之類，原文保留
            return RawExpression(self._raw_text(node))
        target = node.child_by_field_name("object")
        return MethodCall(
            target=self._expression(target) if target is not None else None,
            name=_text(node.child_by_field_name("name")),
            args=self._arguments(node.child_by_field_name("arguments")),
        )

    def _arguments(self, node: TSNode | None) -> list[Expression]:
        if node is None:
            return []
        return [self._expression(arg) for arg in _named(node)]

    @staticmethod
    def _raw_text(node: TSNode) -> str:
        """節點原文；續行去掉節點起始欄位的縮排，輸出時再依層級補回"""
        lines = _text(node).split("\n")
        column = node.start_point[1]
        trimmed = [lines[0]]
        for line in lines[1:]:
            leading = len(line) - len(line.lstrip())
            trimmed.append(line[min(leading, column):])
        return "\n".join(trimmed)
