"""Utilities for research agents."""

from .logging_utils import (
    log_agent_response,
    log_error,
    log_relay,
    log_tool_call,
    log_tool_result,
    log_user_message,
    setup_logging,
)
from .naming import DEFAULT_AGENT_ID, sanitize_agent_id
from .error_handler import (
    safe_tool_call,
    tool_error,
    is_transient_error,
    ResearchAgentError,
    InvalidPathError,
    StorageError,
    TransientStorageError,
    DuplicateAgentError,
    AgentNotFoundError,
    AgentNotInitializedError,
    AgentAlreadyInitializedError,
    SpecialistExecutionError,
    AgentContextError,
    ModelConfigurationError,
)

__all__ = [
    "setup_logging",
    "log_tool_call",
    "log_tool_result",
    "log_error",
    "log_user_message",
    "log_agent_response",
    "log_relay",
    "DEFAULT_AGENT_ID",
    "sanitize_agent_id",
    "safe_tool_call",
    "tool_error",
    "is_transient_error",
    "ResearchAgentError",
    "InvalidPathError",
    "StorageError",
    "TransientStorageError",
    "DuplicateAgentError",
    "AgentNotFoundError",
    "AgentNotInitializedError",
    "AgentAlreadyInitializedError",
    "SpecialistExecutionError",
    "AgentContextError",
    "ModelConfigurationError",
]
