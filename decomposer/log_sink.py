"""
警告紀錄 (Warning Log)

拆解過程中非致命的異常（空的 page 方法、方法合併、改名）
都只記在這裡，不中斷流程。紀錄只能附加（分析失敗還原時才會截斷），
同時轉送一份到 utils.logger。
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterator

from utils.logger import logger

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class WarningLog:
    """附時間戳記的文字紀錄"""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._entries: list[str] = []

    def add(self, message: str) -> str:
        entry = f"{self._clock().strftime(TIMESTAMP_FORMAT)} - {message}"
        self._entries.append(entry)
        logger.info(message)
        return entry

    def warning(self, message: str) -> str:
        entry = f"{self._clock().strftime(TIMESTAMP_FORMAT)} - Warning: {message}"
        self._entries.append(entry)
        logger.warning(message)
        return entry

    def truncate(self, size: int) -> None:
        """丟掉 size 之後的紀錄（分析失敗還原時用）"""
        del self._entries[size:]

    @property
    def entries(self) -> list[str]:
        """目前所有紀錄（回傳複本，外部修改不影響）"""
        return list(self._entries)

    @property
    def warnings(self) -> list[str]:
        return [e for e in self._entries if " - Warning: " in e]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
