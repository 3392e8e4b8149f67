"""
Page Object Decomposer (核心引擎)
把錄製的 Selenium 測試拆成「測試主類別 + Page Object」。

使用方式：
    decomposer = PageObjectDecomposer()
    decomposer.analyze_file("recorded/LoginTest.java")
    for unit in decomposer.units:
        print(unit.render())
    print(decomposer.logs)

多個檔案可以依序丟進同一個 decomposer，Page Object 會跨檔案共用。
"""

from __future__ import annotations

from pathlib import Path

from config.config import DecomposerSettings
from core.exceptions import DecomposerError, UnsupportedConstructError
from decomposer.log_sink import WarningLog
from decomposer.methods import MethodNamer
from decomposer.nodes import (
    Annotation, Block, ClassDecl, ClassKind, ExpressionStmt, FieldDecl, ImportDecl,
    MethodCall, MethodDecl, Name, NestedType, SourceUnit, StringLiteral,
)
from decomposer.parser import JavaSourceParser
from decomposer.registry import PageObjectRegistry
from decomposer.router import InstructionRouter
from utils.logger import logger

BEFORE_CLASS_IMPORT = "org.junit.BeforeClass"


class PageObjectDecomposer:
    """拆解器入口"""

    def __init__(self, settings: DecomposerSettings | None = None):
        self.settings = settings or DecomposerSettings()
        self.log = WarningLog()
        self.central_unit = self._create_central_unit()
        self.registry = PageObjectRegistry(self.settings, self.central_unit, self.log)
        self.namer = MethodNamer(self.log)
        self.router = InstructionRouter(self.settings, self.registry, self.namer, self.log)
        self._parser: JavaSourceParser | None = None

    # ── 結果 ──

    @property
    def central_class(self) -> ClassDecl:
        return self.central_unit.main_class

    @property
    def page_units(self) -> list[SourceUnit]:
        return self.registry.page_units

    @property
    def units(self) -> list[SourceUnit]:
        """測試主 unit 在前，Page Object 依建立順序在後"""
        return [self.central_unit, *self.registry.page_units]

    @property
    def logs(self) -> list[str]:
        return self.log.entries

    def summary(self) -> dict:
        return {
            "suite_class": self.central_class.name,
            "test_methods": [m.name for m in self.central_class.methods],
            "pages": self.registry.summary(),
            "warnings": len(self.log.warnings),
        }

    # ── 分析 ──

    def analyze_source(self, source: str, source_name: str = "") -> None:
        if self._parser is None:
            self._parser = JavaSourceParser()
        self.analyze_unit(self._parser.parse(source, source_name=source_name))

    def analyze_file(self, path: str | Path) -> None:
        if self._parser is None:
            self._parser = JavaSourceParser()
        logger.info(f"分析 {path}", extra={"source": str(path)})
        self.analyze_unit(self._parser.parse_file(path))

    def analyze_unit(self, unit: SourceUnit) -> None:
        """
        拆解一個已解析的 unit。
        中途失敗時還原到分析前的狀態再往外拋，不留下拆到一半的結果。

        Raises:
            UnsupportedConstructError: 類別內有欄位 / 方法 / 巢狀類別以外的成員，
                或 assert 動詞無法對應 getter 型別
        """
        snapshot = self.registry.snapshot()
        log_size = len(self.log)
        try:
            for import_decl in unit.imports:
                self.registry.add_base_import(import_decl)
            for class_decl in unit.classes:
                self.analyze_class(class_decl)
        except DecomposerError as e:
            self.registry.restore(snapshot)
            self.log.truncate(log_size)
            self.log.warning(f"{self._unit_label(unit)} 拆解失敗，已還原: {e}")
            raise

    def analyze_class(self, class_decl: ClassDecl) -> None:
        for member in class_decl.members:
            if isinstance(member, FieldDecl):
                self._add_field(member)
            elif isinstance(member, MethodDecl):
                self._analyze_method(member)
            elif isinstance(member, NestedType):
                logger.debug(f"{class_decl.name}: 略過巢狀類別")
            else:
                raise UnsupportedConstructError(
                    type(member).__name__, f"{class_decl.name} 的成員無法拆解"
                )

    @staticmethod
    def _unit_label(unit: SourceUnit) -> str:
        main = unit.main_class
        return main.name if main is not None else "(空 unit)"

    def _add_field(self, field_decl: FieldDecl) -> None:
        moved = field_decl.clone().set_access("private")
        if moved not in self.central_class.fields:
            self.central_class.add_member(moved)

    def _analyze_method(self, method: MethodDecl) -> None:
        if method.body is None:
            logger.debug(f"略過沒有 body 的方法 {method.name}")
            return

        if method.name in self.settings.initializer_methods:
            initializer = method.clone()
            initializer.parameters = []
            self.namer.register(self.central_class, initializer, merge_by_shape=False)
            return

        suite_method = MethodDecl(
            name=method.name,
            return_type=method.return_type,
            parameters=[p.clone() for p in method.parameters],
            body=Block(),
            modifiers=list(method.modifiers),
            annotations=[a.clone() for a in method.annotations],
            throws=list(method.throws),
        )
        self.router.route(suite_method, method.body.statements)
        resolved = self.namer.register(self.central_class, suite_method, merge_by_shape=False)
        logger.info(f"測試方法 {method.name} → {self.central_class.name}.{resolved.name}")

    def _create_central_unit(self) -> SourceUnit:
        """
        測試主 unit：
            package TestCases;
            import org.junit.BeforeClass;
            public class TestCases {
                @BeforeClass
                public static void setUpClass() {
                    System.setProperty("webdriver.chrome.driver", "drivers/chromedriver");
                }
            }
        """
        unit = SourceUnit(package=self.settings.base_package)
        unit.add_import(ImportDecl(BEFORE_CLASS_IMPORT))

        suite_class = ClassDecl(name=self.settings.suite_class, kind=ClassKind.CENTRAL)
        suite_class.add_member(MethodDecl(
            name=self.settings.setup_method,
            modifiers=["public", "static"],
            annotations=[Annotation("@BeforeClass")],
            body=Block([ExpressionStmt(MethodCall(
                Name("System"),
                "setProperty",
                [
                    StringLiteral(self.settings.driver_property),
                    StringLiteral(self.settings.driver_path),
                ],
            ))]),
        ))
        unit.classes.append(suite_class)
        return unit
