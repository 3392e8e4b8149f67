"""
decomposer/arguments.py 單元測試

sendKeys 文字與 xpath 動態值抽成參數。xpath 判斷是啟發式，
所以特別測一些刁鑽的字串，確認不會產生壞掉的程式碼。
"""

import pytest

from decomposer.arguments import ArgumentExtractor, PendingArguments, is_liftable_glue
from decomposer.nodes import MethodCall, Name, StringLiteral


@pytest.fixture
def extractor() -> ArgumentExtractor:
    return ArgumentExtractor()


@pytest.fixture
def pending() -> PendingArguments:
    return PendingArguments()


def _render(statements) -> list[str]:
    return [s.render() for s in statements]


@pytest.mark.unit
class TestPendingArguments:
    """值與參數名稱永遠等長"""

    def test_lift_numbers_sequentially(self, pending):
        assert pending.lift(StringLiteral("a")) == "key1"
        assert pending.lift(StringLiteral("b")) == "key2"
        assert pending.placeholders == ["key1", "key2"]
        assert len(pending) == 2

    def test_clear(self, pending):
        pending.lift(StringLiteral("a"))
        pending.clear()
        assert pending.values == []
        assert pending.placeholders == []


@pytest.mark.unit
class TestTypeText:
    """sendKeys 的字串常數"""

    def test_send_keys_lifted(self, extractor, pending, parse_body):
        (stmt,) = parse_body('driver.findElement(By.id("q")).sendKeys("hello");')
        result = extractor.extract(stmt, pending)
        assert _render(result) == [
            'driver.findElement(By.id("q")).clear();',
            'driver.findElement(By.id("q")).sendKeys(key1);',
        ]
        assert pending.values == [StringLiteral("hello")]
        assert pending.placeholders == ["key1"]

    def test_numbering_continues(self, extractor, pending, parse_body):
        first, second = parse_body("""
            driver.findElement(By.id("user")).sendKeys("alice");
            driver.findElement(By.id("pass")).sendKeys("secret");
        """)
        extractor.extract(first, pending)
        result = extractor.extract(second, pending)
        assert result[1].render() == 'driver.findElement(By.id("pass")).sendKeys(key2);'
        assert [v.render() for v in pending.values] == ['"alice"', '"secret"']

    def test_keys_constant_not_lifted(self, extractor, pending, parse_body):
        (stmt,) = parse_body('driver.findElement(By.id("q")).sendKeys(Keys.ENTER);')
        result = extractor.extract(stmt, pending)
        assert _render(result) == ['driver.findElement(By.id("q")).sendKeys(Keys.ENTER);']
        assert len(pending) == 0

    def test_other_statement_untouched(self, extractor, pending, parse_body):
        (stmt,) = parse_body('driver.findElement(By.id("submit")).click();')
        assert extractor.extract(stmt, pending) == [stmt]
        assert len(pending) == 0

    def test_non_call_statement(self, extractor, pending, parse_body):
        (stmt,) = parse_body('String a = "x";')
        assert extractor.extract(stmt, pending) == [stmt]

    def test_typed_value_lifted_before_locator(self, extractor, pending, parse_body):
        (stmt,) = parse_body(
            'driver.findElement(By.xpath("//input[@name=\'q\']")).sendKeys("phone");'
        )
        result = extractor.extract(stmt, pending)
        assert result[1].render() == (
            'driver.findElement(By.xpath("//input[@name=\'" + key2 + "\']")).sendKeys(key1);'
        )
        assert [v.value for v in pending.values] == ["phone", "q"]


@pytest.mark.unit
class TestDynamicXpath:
    """By.xpath 內單引號包住的值"""

    def test_text_equals(self, extractor, pending, parse_body):
        (stmt,) = parse_body('driver.findElement(By.xpath("//a[text()=\'Home\']")).click();')
        result = extractor.extract(stmt, pending)
        assert _render(result) == [
            'driver.findElement(By.xpath("//a[text()=\'" + key1 + "\']")).click();',
        ]
        assert pending.values == [StringLiteral("Home")]

    def test_multiple_literals(self, extractor, pending, parse_body):
        (stmt,) = parse_body(
            'driver.findElement(By.xpath("//tr[@id=\'r1\']/td[contains(text(), \'Total\')]")).click();'
        )
        result = extractor.extract(stmt, pending)
        assert result[0].render() == (
            'driver.findElement(By.xpath("//tr[@id=\'" + key1 + "\']/td[contains(text(), \'"'
            ' + key2 + "\')]")).click();'
        )
        assert [v.value for v in pending.values] == ["r1", "Total"]

    def test_only_recognized_spans_lifted(self, extractor, pending, parse_body):
        (stmt,) = parse_body(
            'driver.findElement(By.xpath("//div[name(.)=\'div\' and @class=\'box\']")).click();'
        )
        result = extractor.extract(stmt, pending)
        assert result[0].render() == (
            'driver.findElement(By.xpath("//div[name(.)=\'div\' and @class=\'" + key1 + "\']")).click();'
        )
        assert [v.value for v in pending.values] == ["box"]

    @pytest.mark.parametrize("xpath", [
        "//a",                                  # 沒有引號
        "//a[text()='Home]",                    # 引號不成對
        "//a[@title='It's']",                   # 奇數個引號
        "//a[concat('a', 'b')]",                # 引號前不是屬性指定
        "'",                                    # 只有一個引號
    ])
    def test_unrecognized_xpath_unchanged(self, extractor, pending, xpath):
        call = MethodCall(
            MethodCall(Name("driver"), "findElement", [
                MethodCall(Name("By"), "xpath", [StringLiteral(xpath)]),
            ]),
            "click",
            [],
        )
        lifted = extractor.lift_locators(call, pending)
        assert lifted.render() == call.render()
        assert len(pending) == 0

    def test_css_selector_untouched(self, extractor, pending, parse_body):
        (stmt,) = parse_body('driver.findElement(By.cssSelector("a[title=\'x\']")).click();')
        assert extractor.extract(stmt, pending)[0].render() == stmt.render()
        assert len(pending) == 0

    def test_original_statement_not_mutated(self, extractor, pending, parse_body):
        (stmt,) = parse_body('driver.findElement(By.xpath("//a[text()=\'Home\']")).click();')
        before = stmt.render()
        extractor.extract(stmt.clone(), pending)
        assert stmt.render() == before


@pytest.mark.unit
class TestGlueHeuristic:
    """is_liftable_glue"""

    @pytest.mark.parametrize("glue", [
        "//a[@id=", "//a[text()=", "//a[.=", "//input[@value = ", "//a[contains(@href, ",
        "//a[starts-with(text(),", "//*[@data-test-id=",
    ])
    def test_liftable(self, glue):
        assert is_liftable_glue(glue)

    @pytest.mark.parametrize("glue", ["//a[concat(", "//a[", "", "//a[@id"])
    def test_not_liftable(self, glue):
        assert not is_liftable_glue(glue)
