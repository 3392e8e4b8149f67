"""
日誌模組
統一的 logging 設定，同時輸出到 console 與檔案。

支援：
- Console 輸出（人類可讀格式）
- 檔案輸出（純文字 + 可選 JSON 結構化格式）
- 環境變數控制:
    LOG_LEVEL: console 日誌等級 (預設 INFO)
    LOG_JSON: 設為 "1" 啟用 JSON 結構化日誌檔
    DECOMPOSER_LOG_DIR: 日誌檔目錄 (預設專案根目錄下的 logs/)
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

LOG_DIR = Path(
    os.getenv("DECOMPOSER_LOG_DIR", Path(__file__).resolve().parent.parent / "logs")
)
LOG_DIR.mkdir(parents=True, exist_ok=True)


class JsonFormatter(logging.Formatter):
    """
    JSON 結構化日誌格式器，方便 CI 收集拆解過程。

    呼叫端以 extra={"source": ...} 標記正在分析的錄製腳本，
    會輸出成 "source" 欄位，一次拆多個檔案時可以依檔案篩選。
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        source = getattr(record, "source", None)
        if source:
            log_entry["source"] = str(source)
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def _create_logger() -> logging.Logger:
    _logger = logging.Logger("page_object_decomposer")
    _logger.setLevel(logging.DEBUG)

    console_level = getattr(
        logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO
    )

    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)-7s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler（人類可讀）
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    _logger.addHandler(console)

    # File handler（純文字）
    file_handler = logging.FileHandler(LOG_DIR / "decomposer.log", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    _logger.addHandler(file_handler)

    # JSON file handler（可選，設 LOG_JSON=1 啟用）
    if os.getenv("LOG_JSON", "").strip() == "1":
        json_handler = logging.FileHandler(
            LOG_DIR / "decomposer.json.log", encoding="utf-8"
        )
        json_handler.setLevel(logging.DEBUG)
        json_handler.setFormatter(JsonFormatter())
        _logger.addHandler(json_handler)

    return _logger


def set_console_level(level: str) -> int:
    """
    調整 console handler 的等級（CLI 的 --verbose 用）。
    檔案 handler 固定保留 DEBUG。

    Returns:
        實際套用的 logging 等級數值
    """
    resolved = getattr(logging, level.upper(), logging.INFO)
    for handler in logger.handlers:
        if type(handler) is logging.StreamHandler:
            handler.setLevel(resolved)
    return resolved


logger = _create_logger()
