"""
Page Object Registry

- 第一次遇到某個 page 名稱時，建立新的 SourceUnit + Page Object 類別
  （三個共用欄位 driver / vars / js 與對應的建構子）
- 之後同名 page 一律重用
- 管理 base imports：主測試類別與每個 Page Object 都帶同一組 import
- 每個測試方法內，每個 page 只宣告 + new 一次區域變數
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from config.config import DecomposerSettings
from decomposer.log_sink import WarningLog
from decomposer.nodes import (
    Assign, ClassDecl, ClassKind, ConstructorDecl, ExpressionStmt,
    FieldAccess, FieldDecl, ImportDecl, Name, ObjectCreation, Parameter,
    SourceUnit, VariableDecl,
)
from utils.logger import logger

if TYPE_CHECKING:
    from decomposer.router import AnalysisContext


@dataclass
class RegistrySnapshot:
    central: SourceUnit
    base_imports: list[ImportDecl]
    pages: dict[str, SourceUnit]


class PageObjectRegistry:
    """所有產生出來的 SourceUnit（主測試 unit + Page Object units）"""

    def __init__(self, settings: DecomposerSettings, central_unit: SourceUnit, log: WarningLog):
        self.settings = settings
        self.central_unit = central_unit
        self.log = log
        self.base_imports: list[ImportDecl] = []
        self._pages: dict[str, SourceUnit] = {}

    @property
    def page_units(self) -> list[SourceUnit]:
        return list(self._pages.values())

    @property
    def page_names(self) -> list[str]:
        return list(self._pages)

    def add_base_import(self, import_decl: ImportDecl) -> bool:
        """新的 import 同步加到主測試 unit 與所有 Page Object"""
        if import_decl in self.base_imports:
            return False
        self.base_imports.append(import_decl.clone())
        self.central_unit.add_import(import_decl)
        for unit in self._pages.values():
            unit.add_import(import_decl)
        return True

    def get(self, page_name: str) -> ClassDecl | None:
        unit = self._pages.get(page_name)
        return unit.main_class if unit is not None else None

    def ensure(self, page_name: str) -> ClassDecl:
        """取得 page 類別，不存在就建立"""
        existing = self.get(page_name)
        if existing is not None:
            return existing

        unit = SourceUnit(package=self.settings.pages_package)
        for import_decl in self.base_imports:
            unit.add_import(import_decl)
        page_class = self._create_page_class(page_name)
        unit.classes.append(page_class)
        self._pages[page_name] = unit

        # 主測試類別要能看到 Page Object 套件
        self.central_unit.add_import(
            ImportDecl(self.settings.pages_package, wildcard=True)
        )
        self.log.add(f"建立 Page Object {page_name}")
        return page_class

    def _create_page_class(self, page_name: str) -> ClassDecl:
        page_class = ClassDecl(name=page_name, kind=ClassKind.PAGE_OBJECT)
        constructor = ConstructorDecl(name=page_name)
        for field_type, field_name in self.settings.shared_context:
            page_class.add_member(FieldDecl(type=field_type, name=field_name))
            constructor.parameters.append(Parameter(field_type, field_name))
            constructor.body.append(ExpressionStmt(Assign(
                target=FieldAccess(Name("this"), field_name),
                operator="=",
                value=Name(field_name),
            )))
        page_class.add_member(constructor)
        return page_class

    def bind(self, context: "AnalysisContext", page_class: ClassDecl) -> str:
        """
        取得 page 在這個測試方法裡的區域變數名稱。
        第一次使用時在測試方法中加入：
            PO_login _PO_login = new PO_login(driver, vars, js);
        """
        variable = context.bindings.get(page_class.name)
        if variable is not None:
            return variable

        variable = "_" + page_class.name
        context.bindings[page_class.name] = variable
        instantiation = VariableDecl(
            type=page_class.name,
            name=variable,
            initializer=ObjectCreation(
                type=page_class.name,
                args=[Name(n) for _, n in self.settings.shared_context],
            ),
        )
        context.suite_method.body.append(instantiation)
        logger.debug(f"{context.suite_method.name}: 宣告 {variable}")
        return variable

    def snapshot(self) -> RegistrySnapshot:
        """目前所有 unit 的深複本，配合 restore 還原失敗的分析"""
        return RegistrySnapshot(
            central=self.central_unit.clone(),
            base_imports=[i.clone() for i in self.base_imports],
            pages={name: unit.clone() for name, unit in self._pages.items()},
        )

    def restore(self, snapshot: RegistrySnapshot) -> None:
        # 主測試 unit 被其他物件引用，只換內容不換物件
        self.central_unit.imports = snapshot.central.imports
        self.central_unit.classes = snapshot.central.classes
        self.base_imports = snapshot.base_imports
        self._pages = snapshot.pages
        logger.debug(f"還原 Page Object: {list(self._pages)}")

    def summary(self) -> dict[str, list[str]]:
        """{page 名稱: [方法名稱...]}"""
        return {
            name: [m.name for m in unit.main_class.methods]
            for name, unit in self._pages.items()
        }