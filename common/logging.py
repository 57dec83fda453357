"""
File: common/logging.py
Unified logging setup for the configuration controller.
Records are emitted as one JSON object per line.
"""
import os
import sys
import json
import time
import logging
import datetime
from typing import Optional, TextIO
from logging.handlers import RotatingFileHandler

from common.utils import get_debug_mode, get_env_var

# Process start, used for uptime reporting
start_time = time.time()


def setup_logging(component_name: str, debug: Optional[bool] = None, log_dir: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure logging for a component.

    Args:
        component_name: Component name, written into every record
        debug: If True, enables DEBUG logs (overrides the DEBUG environment variable)
        log_dir: Directory for a rotating log file (overrides LOG_DIR). No file is written when unset.
        stream: Console stream, stdout by default

    Returns:
        logging.Logger: Logger named after the component
    """
    debug_enabled = debug if debug is not None else get_debug_mode()
    logs_directory = log_dir if log_dir is not None else get_env_var("LOG_DIR")
    level = logging.DEBUG if debug_enabled else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(JsonFormatter(component_name, detailed=debug_enabled))
    root_logger.addHandler(console_handler)

    if logs_directory:
        os.makedirs(logs_directory, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(logs_directory, f"{component_name}.log"),
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(level)
        # Always detailed on disk
        file_handler.setFormatter(JsonFormatter(component_name, detailed=True))
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(component_name)
    logger.debug(f"Logging initialized for {component_name} (debug={debug_enabled}, dir={logs_directory})")

    return logger


def get_uptime() -> float:
    """
    Seconds since the process imported this module.
    """
    return time.time() - start_time


class JsonFormatter(logging.Formatter):
    """
    Formatter that renders log records as JSON.
    """

    def __init__(self, component: str, detailed: bool = False):
        """
        Args:
            component: Component name
            detailed: If True, adds module, function, line and thread fields
        """
        super().__init__()
        self.component = component
        self.detailed = detailed

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": int(record.created * 1000),  # milliseconds
            "datetime": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "component": self.component,
            "logger": record.name,
            "message": record.getMessage()
        }

        if self.detailed:
            log_data.update({
                "module": record.module,
                "function": record.funcName,
                "lineno": record.lineno,
                "thread": record.thread,
                "process": record.process
            })

        context = getattr(record, "context", None)
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        return json.dumps(log_data, default=str)
