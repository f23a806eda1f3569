"""Unified error handling for research agents and their tools."""

from __future__ import annotations

import functools
import json
import logging
import re
from typing import Any, Awaitable, Callable

from researchAgent.utils.logging_utils import log_tool_call, log_tool_result

LOGGER = logging.getLogger(__name__)

# Messages from storage backends that signal a retryable condition
TRANSIENT_ERROR_PATTERN = re.compile(r"429|503|rate limit|temporary", re.IGNORECASE)


class ResearchAgentError(Exception):
    """Base exception for research agent errors."""

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class InvalidPathError(ResearchAgentError):
    """Document path is empty or escapes the agent root."""
    pass


class StorageError(ResearchAgentError):
    """Backing bucket failed after all retries."""
    pass


class TransientStorageError(StorageError):
    """Backing bucket failure worth retrying."""
    pass


class DuplicateAgentError(ResearchAgentError):
    """A specialist with the same sanitized id already exists."""
    pass


class AgentNotFoundError(ResearchAgentError):
    """No specialist is registered under the requested id."""
    pass


class AgentNotInitializedError(ResearchAgentError):
    """Specialist received a message before initialize()."""
    pass


class AgentAlreadyInitializedError(ResearchAgentError):
    """Specialist initialize() called a second time."""
    pass


class SpecialistExecutionError(ResearchAgentError):
    """Specialist turn failed or the specialist could not be reached."""
    pass


class AgentContextError(ResearchAgentError):
    """No agent (or the wrong kind of agent) is bound to the current request."""
    pass


class ModelConfigurationError(ResearchAgentError):
    """Model provider is unknown or missing credentials."""
    pass


def is_transient_error(error: BaseException) -> bool:
    """Return True when a storage error should be retried."""
    if isinstance(error, TransientStorageError):
        return True
    return bool(TRANSIENT_ERROR_PATTERN.search(str(error)))


def tool_error(message: str, **extra: Any) -> str:
    """Serialize a tool failure the way the model sees it."""
    return json.dumps({"ok": False, "error": message, **extra}, ensure_ascii=False)


def safe_tool_call(tool_name: str):
    """Decorator turning domain errors raised by an async tool body into a tool result.

    Only ResearchAgentError is converted. Anything else propagates to the
    turn boundary, where it is logged and reported as a generic failure.

    Args:
        tool_name: Name of the tool for logging

    Example:
        @tool
        @safe_tool_call("list_agents")
        async def list_agents() -> str:
            ...
    """
    def decorator(func: Callable[..., Awaitable[str]]) -> Callable[..., Awaitable[str]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> str:
            log_tool_call(LOGGER, tool_name, kwargs)
            try:
                result = await func(*args, **kwargs)
            except ResearchAgentError as e:
                LOGGER.warning(f"Tool {tool_name} failed: {e}")
                result = tool_error(e.user_message)
                log_tool_result(LOGGER, tool_name, result, success=False)
                return result
            log_tool_result(LOGGER, tool_name, result)
            return result
        return wrapper
    return decorator
