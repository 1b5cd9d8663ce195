"""
로깅 설정 (loguru)
"""
import sys
from pathlib import Path
from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO", log_dir: str = "logs", file_logging: bool = True):
    """stderr 싱크 + 일자별 로그 파일 (30일 보관)"""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)

    if file_logging:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        logger.add(
            f"{log_dir}/club_point_{{time:YYYY-MM-DD}}.log",
            rotation="1 day",
            retention="30 days",
            level="DEBUG",
            encoding="utf-8",
        )

    return logger
