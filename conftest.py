"""
pytest 全域 fixtures

提供：
- settings / decomposer：每個測試一份新的拆解器
- java_parser：整個 session 共用一個 Tree-sitter parser
- recorded_source：Selenium IDE 匯出、含拆解標記的範例腳本
- parse_body：把幾行 Java 敘述包成方法後解析，回傳敘述列表
"""

import textwrap

import pytest

from config.config import DecomposerSettings
from decomposer.engine import PageObjectDecomposer
from decomposer.parser import JavaSourceParser


RECORDED_SOURCE = """\
package recorded;

import org.junit.Test;
import org.junit.Before;
import org.junit.After;
import static org.junit.Assert.*;
import static org.hamcrest.CoreMatchers.is;
import org.openqa.selenium.By;
import org.openqa.selenium.WebDriver;
import org.openqa.selenium.WebElement;
import org.openqa.selenium.chrome.ChromeDriver;
import org.openqa.selenium.JavascriptExecutor;
import java.util.*;

public class LoginTest {
  private WebDriver driver;
  private Map<String, Object> vars;
  JavascriptExecutor js;

  @Before
  public void setUp() {
    driver = new ChromeDriver();
    js = (JavascriptExecutor) driver;
    vars = new HashMap<String, Object>();
  }

  @After
  public void tearDown() {
    driver.quit();
  }

  @Test
  public void login() {
    driver.get("https://example.com/");
    System.out.println("{SeleniumIDEExt}Comment:LOGIN:typeCredentials");
    driver.findElement(By.id("username")).sendKeys("alice");
    driver.findElement(By.id("password")).sendKeys("secret");
    System.out.println("{SeleniumIDEExt}Comment:LOGIN:clickSubmit");
    driver.findElement(By.id("submit")).click();
    System.out.println("{SeleniumIDEExt}backToMain");
  }

  @Test
  public void checkHome() {
    System.out.println("{SeleniumIDEExt}Comment:HOME:openMenu");
    driver.findElement(By.xpath("//a[text()='Menu']")).click();
    assertThat(driver.findElement(By.id("title")).getText(), is("Home"));
    System.out.println("{SeleniumIDEExt}Comment:HOME:verifyItems");
    {
      List<WebElement> elements = driver.findElements(By.cssSelector("li.item"));
      assert (elements.size() > 0);
    }
  }
}
"""


@pytest.fixture(scope="session")
def java_parser() -> JavaSourceParser:
    """Tree-sitter parser 建立成本較高，整個 session 共用"""
    return JavaSourceParser()


@pytest.fixture
def settings() -> DecomposerSettings:
    return DecomposerSettings()


@pytest.fixture
def decomposer(settings) -> PageObjectDecomposer:
    return PageObjectDecomposer(settings)


@pytest.fixture
def recorded_source() -> str:
    return RECORDED_SOURCE


@pytest.fixture
def parse_body(java_parser):
    """
    parse_body('driver.get("x");') → [ExpressionStmt(...)]

    敘述會被包進 class Recorded { public void test() { ... } }
    """
    def _parse(statements: str) -> list:
        body = textwrap.indent(textwrap.dedent(statements).strip(), " " * 8)
        source = (
            "public class Recorded {\n"
            "    public void test() {\n"
            f"{body}\n"
            "    }\n"
            "}\n"
        )
        unit = java_parser.parse(source)
        return unit.main_class.methods[0].body.statements

    return _parse
