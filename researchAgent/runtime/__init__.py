"""Actor runtime, request context and state storage."""

from .actors import Actor, ActorRuntime
from .context import agent_context, get_current_agent
from .model_resolver import ModelResolver, build_model_resolver
from .state_store import InMemoryStateStore, JsonFileStateStore, StateStore

__all__ = [
    "Actor",
    "ActorRuntime",
    "agent_context",
    "get_current_agent",
    "ModelResolver",
    "build_model_resolver",
    "StateStore",
    "InMemoryStateStore",
    "JsonFileStateStore",
]
