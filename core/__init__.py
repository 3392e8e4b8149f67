"""
core: 框架核心

統一匯出例外體系，方便外部 import。

用法：
    from core import DecomposerError, UnsupportedConstructError
"""

from core.exceptions import (
    AnalysisError,
    ConfigError,
    ConfigValidationError,
    DecomposerError,
    InvalidConfigError,
    SourceError,
    SourceFileNotFoundError,
    SourceParseError,
    UnsupportedConstructError,
)

__all__ = [
    "DecomposerError",
    "SourceError",
    "SourceFileNotFoundError",
    "SourceParseError",
    "AnalysisError",
    "UnsupportedConstructError",
    "ConfigError",
    "InvalidConfigError",
    "ConfigValidationError",
]
