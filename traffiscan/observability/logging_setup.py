"""
loguru 기반 로깅 설정.

stdlib logging(uvicorn, aiohttp)을 loguru로 모으고, 보드 갱신 중에는
뷰어 좌표와 갱신 순번을 컨텍스트로 붙여 출력합니다.
"""

from __future__ import annotations
import logging
import sys
from loguru import logger

# loguru로 흡수할 외부 라이브러리 로거
STDLIB_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi", "aiohttp.client", "asyncio")

# 컨텍스트가 없는 로그에 쓰는 기본값
DEFAULT_EXTRA = {"name": "traffiscan", "viewer": "-", "generation": "-"}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level:<7}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<magenta>viewer={extra[viewer]} gen={extra[generation]}</magenta> - "
    "<level>{message}</level>"
)

class InterceptHandler(logging.Handler):
    """stdlib 로그 레코드를 loguru로 넘기는 핸들러"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(name=record.name).opt(depth=6, exception=record.exc_info).log(level, record.getMessage())

def _route_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in STDLIB_LOGGERS:
        std = logging.getLogger(name)
        std.handlers = [InterceptHandler()]
        std.propagate = False

def setup_logging_dev(level: str = "INFO") -> None:
    """콘솔 sink 하나로 loguru를 초기화하고 stdlib 로그를 흡수합니다."""
    logger.remove()
    logger.configure(extra=DEFAULT_EXTRA)
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper(), colorize=True,
               backtrace=False, diagnose=False)
    _route_stdlib_logging()

def get_logger(name: str = "traffiscan", **ctx):
    """이름(과 선택적 컨텍스트)을 바인딩한 logger 반환."""
    return logger.bind(name=name, **ctx)

def with_context(**ctx):
    """
    블록 안의 모든 로그에 컨텍스트를 붙입니다.

    contextvars 기반이므로 블록 안에서 만든 asyncio 태스크에도 전달됩니다.
    """
    return logger.contextualize(**ctx)
