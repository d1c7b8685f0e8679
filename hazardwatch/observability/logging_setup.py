"""
Logging configuration for HazardWatch.

All modules log through loguru. Standard-library loggers (uvicorn,
aiohttp, asyncio) are routed into the same sinks.
"""

from __future__ import annotations
import logging
import sys
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level:<7}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<cyan>{file}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# loguru로 흡수할 stdlib 로거
STDLIB_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "asyncio", "aiohttp.client")

class InterceptHandler(logging.Handler):
    """stdlib 로그 레코드를 loguru로 전달"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(name=record.name).opt(depth=6, exception=record.exc_info).log(level, record.getMessage())

def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    loguru 싱크를 초기화합니다.

    Args:
        log_level: 최소 로그 레벨
        json_logs: True면 한 줄 JSON (수집기용), False면 컬러 콘솔 출력
    """
    logger.remove()
    logger.configure(extra={"name": "hazardwatch"})
    if json_logs:
        logger.add(sys.stdout, serialize=True, level=log_level.upper(), backtrace=False, diagnose=False)
    else:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, colorize=True,
                   level=log_level.upper(), backtrace=True, diagnose=False)

    handler = InterceptHandler()
    logging.basicConfig(handlers=[handler], level=0, force=True)
    for name in STDLIB_LOGGERS:
        std = logging.getLogger(name)
        std.handlers = [handler]
        std.propagate = False

def get_logger(name: str = "hazardwatch", **ctx):
    """모듈 이름과 선택적 컨텍스트를 바인딩한 logger"""
    return logger.bind(name=name, **ctx)
