"""
decomposer/nodes.py 單元測試

驗證 render 輸出、結構相等、clone 獨立性與走訪工具。
"""

import pytest

from decomposer.nodes import (
    Annotation, Block, BinaryExpr, ClassDecl, ClassKind, Comment, Enclosed, ExpressionStmt,
    FieldDecl, ImportDecl, Literal, MethodCall, MethodDecl, Name, Parameter,
    RawStatement, SourceUnit, StatementKind, StringLiteral, VariableDecl,
    is_call, iter_expressions, substitute_name, transform,
)


def _find(locator: str) -> MethodCall:
    return MethodCall(Name("driver"), "findElement", [
        MethodCall(Name("By"), "id", [StringLiteral(locator)]),
    ])


@pytest.mark.unit
class TestRender:
    """節點轉回 Java 原始碼"""

    def test_method_call_chain(self):
        stmt = ExpressionStmt(MethodCall(_find("q"), "click", []))
        assert stmt.render() == 'driver.findElement(By.id("q")).click();'

    def test_statement_kinds(self):
        assert ExpressionStmt(MethodCall(None, "f", [])).kind is StatementKind.CALL
        assert ExpressionStmt(Name("x")).kind is StatementKind.OTHER
        assert Block().kind is StatementKind.BLOCK
        assert Comment("// hi").kind is StatementKind.COMMENT
        assert VariableDecl("int", "a").kind is StatementKind.OTHER

    def test_block_indentation(self):
        block = Block([ExpressionStmt(MethodCall(None, "a", []))], comments=[Comment("// note")])
        assert block.render(1) == "{\n        // note\n        a();\n    }"

    def test_raw_statement_reindented(self):
        raw = RawStatement("if (x) {\n    y();\n}")
        block = Block([raw])
        assert block.render() == "{\n    if (x) {\n        y();\n    }\n}"

    def test_method_with_throws_and_annotation(self):
        method = MethodDecl(
            name="login",
            annotations=[Annotation("@Test")],
            throws=["Exception"],
            parameters=[Parameter("String", "key1")],
        )
        assert method.render() == "@Test\npublic void login(String key1) throws Exception {\n}"

    def test_source_unit(self):
        unit = SourceUnit(package="TestCases.PO", imports=[ImportDecl("org.openqa.selenium", wildcard=True)])
        unit.classes.append(ClassDecl("PO_login", kind=ClassKind.PAGE_OBJECT, members=[
            FieldDecl("WebDriver", "driver"),
        ]))
        assert unit.render() == (
            "package TestCases.PO;\n\n"
            "import org.openqa.selenium.*;\n\n"
            "public class PO_login {\n\n"
            "    WebDriver driver;\n"
            "}\n"
        )

    def test_static_import(self):
        assert ImportDecl("org.junit.Assert", static=True, wildcard=True).render() == \
            "import static org.junit.Assert.*;"

    def test_field_set_access_replaces_existing(self):
        f = FieldDecl("WebDriver", "driver", modifiers=["public", "static"])
        assert f.set_access("private").render() == "private static WebDriver driver;"


@pytest.mark.unit
class TestEqualityAndClone:
    """結構相等與深拷貝"""

    def test_structural_equality(self):
        assert _find("q") == _find("q")
        assert _find("q") != _find("p")

    def test_clone_is_independent(self):
        original = Block([ExpressionStmt(_find("q"))])
        copy = original.clone()
        copy.statements[0].expression.name = "findElements"
        assert original.statements[0].expression.name == "findElement"

    def test_add_import_dedup(self):
        unit = SourceUnit()
        assert unit.add_import(ImportDecl("org.junit.Test")) is True
        assert unit.add_import(ImportDecl("org.junit.Test")) is False
        assert len(unit.imports) == 1

    def test_class_queries(self):
        cls = ClassDecl("C", members=[FieldDecl("int", "a"), MethodDecl("m")])
        assert [f.name for f in cls.fields] == ["a"]
        assert cls.find_method("m") is cls.methods[0]
        assert cls.find_method("x") is None


@pytest.mark.unit
class TestTraversal:
    """iter_expressions / transform / substitute_name"""

    def test_iter_expressions_preorder(self):
        expr = MethodCall(_find("q"), "getText", [])
        names = [e.name for e in iter_expressions(expr) if isinstance(e, MethodCall)]
        assert names == ["getText", "findElement", "id"]

    def test_iter_expressions_from_statement(self):
        stmt = VariableDecl("WebElement", "e", initializer=_find("q"))
        assert any(isinstance(e, StringLiteral) for e in iter_expressions(stmt))

    def test_transform_does_not_mutate_original(self):
        expr = MethodCall(_find("q"), "click", [])

        def _swap(node):
            if isinstance(node, StringLiteral):
                return StringLiteral("changed")
            return None

        result = transform(expr, _swap)
        assert 'By.id("changed")' in result.render()
        assert 'By.id("q")' in expr.render()

    def test_transform_returns_same_object_when_unchanged(self):
        expr = MethodCall(_find("q"), "click", [])
        assert transform(expr, lambda node: None) is expr

    def test_substitute_name(self):
        check = Enclosed(BinaryExpr(MethodCall(Name("elements"), "size", []), ">", Literal("0")))
        getter = MethodCall(Name("_PO_home"), "getListXPATHli", [])
        result = substitute_name(check, "elements", getter)
        assert result.render() == "(_PO_home.getListXPATHli().size() > 0)"

    def test_is_call(self):
        assert is_call(MethodCall(None, "assertTrue", []))
        assert is_call(MethodCall(None, "assertTrue", []), "assertTrue", "assertFalse")
        assert not is_call(MethodCall(None, "click", []), "assertTrue")
        assert not is_call(Name("x"))
