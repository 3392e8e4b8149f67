from utils.logger import logger, set_console_level

__all__ = [
    "logger",
    "set_console_level",
]
