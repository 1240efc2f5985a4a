"""Centralized logging configuration module"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

# Whether already initialized
_initialized = False

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024


def rotate_logs(logs_dir: Path, base_name: str = "server.log", keep_count: int = 3):
    """Manually rotate log files (keep latest N files)"""
    current_log = logs_dir / base_name

    # If current log doesn't exist or is small, no need to rotate
    if not current_log.exists() or current_log.stat().st_size < MAX_LOG_BYTES:
        return

    # Delete oldest backup
    oldest = logs_dir / f"{base_name}.{keep_count}"
    if oldest.exists():
        oldest.unlink()

    # Shift existing backups
    for i in range(keep_count - 1, 0, -1):
        old_file = logs_dir / f"{base_name}.{i}"
        new_file = logs_dir / f"{base_name}.{i + 1}"
        if old_file.exists():
            old_file.rename(new_file)

    # Rename current to .1
    current_log.rename(logs_dir / f"{base_name}.1")


def setup_logging(logs_dir: Optional[Path] = None, level: str = "INFO") -> Path:
    """Configure console and file logging. Returns the log file path."""
    global _initialized

    logs_dir = logs_dir or Path("logs")
    log_file = logs_dir / "server.log"
    if _initialized:
        return log_file

    logs_dir.mkdir(parents=True, exist_ok=True)
    rotate_logs(logs_dir)

    # Write session separator
    with open(log_file, "a", encoding="utf-8") as f:
        f.write("\n" + "=" * 100 + "\n")
        f.write(f"Server started at: {datetime.now().strftime(DATE_FORMAT)}\n")
        f.write("=" * 100 + "\n\n")

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)

    logging.basicConfig(
        level=level.upper(),
        handlers=[console_handler, file_handler],
        force=True,
    )

    # Reduce log level for third-party libraries (httpx logs full request URLs)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    _initialized = True
    logging.getLogger(__name__).info(f"Logging initialized, writing to {log_file.absolute()}")
    return log_file
