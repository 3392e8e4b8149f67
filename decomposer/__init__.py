"""
decomposer: 錄製腳本 → Page Object 拆解

Selenium IDE 匯出的 JUnit 腳本是一長串線性動作，錄製器會在其中插入標記：

    System.out.println("{SeleniumIDEExt}Comment:LOGIN:clickSubmit");
    driver.findElement(By.id("submit")).click();
    System.out.println("{SeleniumIDEExt}backToMain");

拆解後得到：
- TestCases.TestCases：測試主類別，只剩 Page Object 方法呼叫與 assert
- TestCases.PO.PO_login：Page Object，內含 clickSubmit() 與 assert 用的 getter

用法：
    from decomposer import PageObjectDecomposer
    decomposer = PageObjectDecomposer()
    decomposer.analyze_file("LoginTest.java")
"""

from decomposer.engine import PageObjectDecomposer
from decomposer.parser import JavaSourceParser
from decomposer.writer import SourceWriter

__all__ = [
    "PageObjectDecomposer",
    "JavaSourceParser",
    "SourceWriter",
]
