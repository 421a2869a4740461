"""Log-file helpers."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}"
LOG_FILE_PREFIX = "ticketsummary"


class LogFile:
    """One timestamped log file, opened at start-up and closed at shutdown.

    Opening removes loguru's console sinks: anything written to stderr would tear the
    full-screen terminal view, so diagnostics only ever go to the file.
    """

    def __init__(self, log_dir: Path, *, level: str = "INFO") -> None:
        self.log_dir = log_dir
        self.level = level.upper()
        self.path: Path | None = None
        self._sink_id: int | None = None

    def open(self) -> Path:
        if self._sink_id is not None and self.path is not None:
            return self.path
        self.log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.path = self.log_dir / f"{LOG_FILE_PREFIX}_{timestamp}.log"
        logger.remove()
        self._sink_id = logger.add(
            self.path,
            level=self.level,
            format=LOG_FORMAT,
            backtrace=False,
            diagnose=False,
            encoding="utf-8",
        )
        logger.info("logging.initialized path={}", self.path)
        return self.path

    def close(self) -> None:
        if self._sink_id is None:
            return
        logger.info("logging.terminated")
        logger.remove(self._sink_id)
        self._sink_id = None

    def __enter__(self) -> LogFile:
        self.open()
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()
