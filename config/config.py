"""
設定管理模組
統一管理拆解器的標記格式、輸出套件名稱、driver 路徑等設定。

設定查找順序：
    1. 環境變數 DECOMPOSER_* (最高優先)
    2. JSON 設定檔 (--config 指定)
    3. 程式碼內建預設值

支援設定結構驗證，提前發現設定錯誤。
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

from core.exceptions import ConfigValidationError, InvalidConfigError

BASE_DIR = Path(__file__).resolve().parent.parent
CONFIG_DIR = Path(__file__).resolve().parent

_JAVA_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_JAVA_PACKAGE = re.compile(r"[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*")

# 環境變數 → 設定欄位
_ENV_KEYS = {
    "DECOMPOSER_MARKER_TAGS": "marker_tags",
    "DECOMPOSER_BACK_TO_MAIN": "back_to_main",
    "DECOMPOSER_PAGE_PREFIX": "page_prefix",
    "DECOMPOSER_BASE_PACKAGE": "base_package",
    "DECOMPOSER_PAGE_PACKAGE": "page_package",
    "DECOMPOSER_SUITE_CLASS": "suite_class",
    "DECOMPOSER_DRIVER_PROPERTY": "driver_property",
    "DECOMPOSER_DRIVER_PATH": "driver_path",
}


@dataclass
class DecomposerSettings:
    """拆解器設定（每次拆解共用一份，不放全域狀態）"""
    # 錄製器插入的標記前綴，例如 System.out.println("{SeleniumIDEExt}...")
    marker_tags: tuple[str, ...] = ("{RecorderExt}", "{SeleniumIDEExt}")
    back_to_main: str = "backToMain"
    page_prefix: str = "PO_"
    # 輸出
    base_package: str = "TestCases"
    page_package: str = "PO"
    suite_class: str = "TestCases"
    # @BeforeClass 設定 driver 路徑
    setup_method: str = "setUpClass"
    driver_property: str = "webdriver.chrome.driver"
    driver_path: str = "drivers/chromedriver"
    # Page Object 共用的三個欄位 (型別, 名稱)
    shared_context: tuple[tuple[str, str], ...] = (
        ("WebDriver", "driver"),
        ("Map<String, Object>", "vars"),
        ("JavascriptExecutor", "js"),
    )
    # 視為 setUp/tearDown，原樣搬到測試主類別
    initializer_methods: tuple[str, ...] = ("setUp", "tearDown")

    @property
    def pages_package(self) -> str:
        return f"{self.base_package}.{self.page_package}"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "DecomposerSettings":
        """從 dict 建立，未知的 key 直接報錯（避免打錯字卻沒發現）"""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigError(
                key=", ".join(unknown), value="", reason="未知的設定欄位"
            )
        values = dict(data)
        for key in ("marker_tags", "initializer_methods"):
            if key in values:
                values[key] = tuple(values[key])
        if "shared_context" in values:
            values["shared_context"] = tuple(
                (str(t), str(n)) for t, n in values["shared_context"]
            )
        return cls(**values)


class Config:
    """拆解器全域設定入口"""

    SETTINGS_FILE = os.getenv("DECOMPOSER_CONFIG", "")
    OUTPUT_DIR = Path(os.getenv("DECOMPOSER_OUTPUT_DIR", str(BASE_DIR / "output")))

    @classmethod
    def load_settings(
        cls, path: str | Path | None = None, validate: bool = True
    ) -> DecomposerSettings:
        """
        載入拆解設定。

        合併順序: 預設值 → JSON 設定檔 → 環境變數覆蓋

        Args:
            path: JSON 設定檔路徑，預設讀取 DECOMPOSER_CONFIG
            validate: 是否驗證設定值（預設 True）

        Returns:
            DecomposerSettings

        Raises:
            FileNotFoundError: 指定的設定檔不存在
            ConfigValidationError: 設定值不合法
        """
        data: dict = {}
        path = path or cls.SETTINGS_FILE
        if path:
            settings_file = Path(path)
            if not settings_file.exists():
                raise FileNotFoundError(f"找不到設定檔: {settings_file}")
            with open(settings_file, "r", encoding="utf-8") as f:
                data.update(json.load(f))

        for env_key, attr in _ENV_KEYS.items():
            value = os.getenv(env_key)
            if value is None or not value.strip():
                continue
            if attr == "marker_tags":
                data[attr] = [t.strip() for t in value.split(",") if t.strip()]
            else:
                data[attr] = value.strip()

        settings = DecomposerSettings.from_dict(data)
        if validate:
            cls.validate_settings(settings)
        return settings

    @classmethod
    def validate_settings(cls, settings: DecomposerSettings) -> list[str]:
        """
        驗證設定結構。

        Returns:
            警告訊息列表

        Raises:
            ConfigValidationError: 必要欄位不合法時拋出
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not settings.marker_tags or not all(settings.marker_tags):
            errors.append("marker_tags 不可為空")
        if not settings.back_to_main:
            errors.append("back_to_main 不可為空")
        for key in ("page_prefix", "suite_class", "setup_method"):
            value = getattr(settings, key)
            if not _JAVA_IDENTIFIER.fullmatch(value):
                errors.append(f"{key} 不是合法的 Java 識別字: {value!r}")
        for key in ("base_package", "page_package"):
            value = getattr(settings, key)
            if not _JAVA_PACKAGE.fullmatch(value):
                errors.append(f"{key} 不是合法的 Java 套件名稱: {value!r}")
        if len(settings.shared_context) != 3:
            errors.append("shared_context 必須剛好是 3 個欄位 (driver, vars, js)")

        if not settings.driver_path:
            warnings.append("driver_path 為空，產生的 setUpClass 不會有作用")
        if any(":" in tag for tag in settings.marker_tags):
            warnings.append("marker_tags 含有 ':'，標記欄位切割可能失準")

        if errors:
            raise ConfigValidationError(errors)

        return warnings
