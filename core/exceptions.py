"""
自訂 Exception 體系

統一的錯誤處理階層，讓每種失敗都有明確的分類與訊息。
上層可以 catch 大類別 (如 DecomposerError)，
也可以精準 catch 子類別 (如 UnsupportedConstructError)。

Exception 樹：
    DecomposerError
    ├── SourceError
    │   ├── SourceFileNotFoundError
    │   └── SourceParseError
    ├── AnalysisError
    │   └── UnsupportedConstructError
    └── ConfigError
        ├── InvalidConfigError
        └── ConfigValidationError
"""


class DecomposerError(Exception):
    """拆解器所有例外的基底，catch 這個就能攔截一切拆解錯誤"""

    def __init__(self, message: str = "", context: dict | None = None):
        self.context = context or {}
        super().__init__(message)


# ── 原始碼相關 ──

class SourceError(DecomposerError):
    """讀取 / 解析錄製腳本相關錯誤"""


class SourceFileNotFoundError(SourceError):
    """找不到錄製腳本檔案"""

    def __init__(self, path: str = ""):
        super().__init__(f"找不到原始碼檔案: {path}", context={"path": path})


class SourceParseError(SourceError):
    """Java 原始碼含語法錯誤，無法建立語法樹"""

    def __init__(self, source_name: str = "", line: int = 0):
        msg = f"無法解析 Java 原始碼: {source_name or '<string>'}"
        if line:
            msg += f" (第 {line} 行附近)"
        super().__init__(msg, context={"source_name": source_name, "line": line})


# ── 分析相關 ──

class AnalysisError(DecomposerError):
    """拆解分析過程的錯誤，會中止目前的 unit"""


class UnsupportedConstructError(AnalysisError):
    """遇到無法轉換的語法（未知的 assert 動詞、非欄位/方法的類別成員）"""

    def __init__(self, construct: str = "", reason: str = ""):
        msg = f"不支援的語法: {construct}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, context={"construct": construct})


# ── Config 相關 ──

class ConfigError(DecomposerError):
    """設定相關錯誤"""


class InvalidConfigError(ConfigError):
    """設定值無效"""

    def __init__(self, key: str = "", value: str = "", reason: str = ""):
        msg = f"設定值無效: {key}={value}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, context={"key": key, "value": value})


class ConfigValidationError(ConfigError):
    """設定檔驗證失敗（可能同時有多個錯誤）"""

    def __init__(self, errors: list[str]):
        self.errors = errors
        msg = "設定驗證失敗:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg, context={"errors": errors})
