"""Logging utilities for research agents."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

ROOT_LOGGER_NAME = "researchAgent"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Union[str, Path] = "logs",
) -> logging.Logger:
    """Setup logging configuration for the research agent society.

    Args:
        level: Level for the file handler (default: INFO)
        log_dir: Directory for timestamped log files

    Returns:
        Configured logger instance
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"research_agent_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # Capture all child logs, handlers filter
    logger.propagate = False

    logger.handlers = []

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info("=" * 80)
    logger.info("Research agent session started")
    logger.info(f"Log file: {log_file}")
    logger.info("=" * 80)

    return logger


def log_tool_call(logger: logging.Logger, tool_name: str, args: Dict[str, Any]) -> None:
    """Log tool invocation.

    Args:
        logger: Logger instance
        tool_name: Name of the tool being called
        args: Tool arguments
    """
    logger.info(f"Tool call: {tool_name}")
    logger.debug(f"  Arguments: {json.dumps(args, ensure_ascii=False, indent=2, default=str)}")


def log_tool_result(logger: logging.Logger, tool_name: str, result: Any, success: bool = True) -> None:
    """Log tool execution result, truncating long payloads."""
    status = "✓ Success" if success else "✗ Failed"
    logger.info(f"Tool result: {tool_name} - {status}")

    result_str = str(result)
    if len(result_str) > 500:
        result_str = result_str[:500] + "... (truncated)"
    logger.debug(f"  Result: {result_str}")


def log_error(logger: logging.Logger, error: BaseException, context: str = "") -> None:
    """Log error with context.

    Args:
        logger: Logger instance
        error: Exception instance
        context: Additional context about where the error occurred
    """
    logger.error(f"Error occurred: {type(error).__name__}: {str(error)}")
    if context:
        logger.error(f"  Context: {context}")
    logger.exception("Full traceback:", exc_info=error)


def log_user_message(logger: logging.Logger, content: str) -> None:
    logger.info(f"User input: {content[:100]}{'...' if len(content) > 100 else ''}")


def log_agent_response(logger: logging.Logger, content: str, agent: Optional[str] = None) -> None:
    prefix = f"Agent response ({agent})" if agent else "Agent response"
    logger.info(f"{prefix}: {content[:100]}{'...' if len(content) > 100 else ''}")


def log_relay(logger: logging.Logger, agent_id: str, message: str, delivered: bool = True) -> None:
    """Log a relay from a specialist to the orchestrator."""
    status = "delivered" if delivered else "dropped"
    logger.info(f"Relay from {agent_id} {status}: {message[:100]}{'...' if len(message) > 100 else ''}")
