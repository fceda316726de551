"""Loguru configuration for the command-line tools.

Logs always go to stderr: stdout carries message payloads and must stay clean
for redirection into files or pipes.
"""

import json
import sys
from datetime import datetime, timezone

from loguru import logger

from amqp_tools.config import Settings, get_settings


def text_formatter(record: dict) -> str:
    """Human-readable formatter.

    Includes the running command name when available.
    """
    command = record["extra"].get("command", "")
    command_str = f"[{command}] " if command else ""

    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        f"<cyan>{command_str}</cyan>"
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>\n"
    )


def json_sink(message) -> None:
    """Custom sink that writes one JSON object per log record to stderr."""
    record = message.record

    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    for key, value in record["extra"].items():
        # Skip complex objects that can't be serialized
        try:
            json.dumps(value)
            log_entry[key] = value
        except (TypeError, ValueError):
            log_entry[key] = str(value)

    if record["exception"] is not None:
        log_entry["exception"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else None,
            "value": str(record["exception"].value) if record["exception"].value else None,
        }

    sys.stderr.write(json.dumps(log_entry) + "\n")
    sys.stderr.flush()


def setup_logging(settings: Settings | None = None, verbose: bool = False) -> None:
    """Configure Loguru for a CLI invocation.

    - JSON lines when AMQP_TOOLS_LOG_FORMAT=json
    - Coloured text otherwise
    - ``verbose`` forces DEBUG regardless of AMQP_TOOLS_LOG_LEVEL
    """
    settings = settings or get_settings()
    level = "DEBUG" if verbose else settings.log_level

    logger.remove()

    if settings.log_format == "json":
        logger.add(json_sink, level=level, backtrace=False, diagnose=False)
    else:
        logger.add(
            sys.stderr,
            format=text_formatter,
            level=level,
            colorize=None,
            backtrace=False,
            diagnose=verbose,
        )

    logger.debug("Logging configured", level=level, format=settings.log_format)
