import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from scriptengine.config_manager import PathsConfig


class InterceptHandler(logging.Handler):
    """Bridges standard logging records (uvicorn, httpx) into loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def intercept_std_logging(*names: str) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in names:
        logging.getLogger(name).handlers = [InterceptHandler()]
        logging.getLogger(name).propagate = False


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def _file_sinks(paths: PathsConfig) -> List[Dict[str, Any]]:
    log_path = Path(paths.log_dir)
    return [
        {"sink": log_path / f"{paths.log_name}.log", "level": "DEBUG", "compression": "zip"},
        # one JSON object per line for log shipping
        {"sink": log_path / f"{paths.log_name}.json.log", "level": "INFO", "serialize": True},
        {"sink": log_path / "error.log", "level": "ERROR"},
    ]


def setup_logger(paths: Optional[PathsConfig] = None, level: str = "INFO") -> Any:
    """
    Points loguru at stderr plus the rotating files described by `paths`.

    Args:
        paths (PathsConfig): log directory, base file name, rotation and retention.
            Defaults apply when omitted.
        level (str): Minimum logging level for the console.
    """
    paths = paths or PathsConfig()
    log_path = Path(paths.log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)
    for sink in _file_sinks(paths):
        logger.add(rotation=paths.log_rotation, retention=paths.log_retention, **sink)

    logger.info(f"Logger initialized. Logs writing to {log_path.absolute()}")
    return logger
