"""In-process actor runtime.

Each actor identity ``(kind, name)`` maps to exactly one cached instance that
serializes its work behind an asyncio.Lock, so one identity handles one
message at a time in arrival order while different identities run
concurrently. State is loaded from a StateStore at the start of every
operation and saved explicitly after each mutation.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Set, Tuple

from langchain_core.messages import BaseMessage, messages_from_dict, messages_to_dict

from researchAgent.runtime.context import agent_context
from researchAgent.runtime.state_store import InMemoryStateStore, StateStore
from researchAgent.utils.error_handler import AgentNotFoundError

LOGGER = logging.getLogger(__name__)

ActorFactory = Callable[["ActorRuntime", str], "Actor"]


class Actor:
    """Durable, single-threaded unit of state and logic.

    Subclasses set ``kind``, override ``initial_state`` and wrap every public
    operation in ``async with self.processing():``. Inside that block
    ``self.state`` is the loaded state and ``get_current_agent()`` returns
    this actor.
    """

    kind: str = "actor"

    def __init__(self, runtime: "ActorRuntime", name: str):
        self.runtime = runtime
        self.name = name
        self._lock = asyncio.Lock()
        self._state: Optional[Dict[str, Any]] = None

    @property
    def identity(self) -> str:
        return f"{self.kind}:{self.name}"

    @property
    def state(self) -> Dict[str, Any]:
        if self._state is None:
            raise RuntimeError(f"{self.identity} state accessed outside processing()")
        return self._state

    def initial_state(self) -> Dict[str, Any]:
        return {"messages": []}

    @property
    def messages(self) -> List[BaseMessage]:
        return self.state["messages"]

    @messages.setter
    def messages(self, value: List[BaseMessage]) -> None:
        self.state["messages"] = list(value)

    @asynccontextmanager
    async def processing(self) -> AsyncIterator[Dict[str, Any]]:
        """Hold this identity's lock, load state and bind the agent context."""
        async with self._lock:
            with agent_context(self):
                self._state = await self._load_state()
                try:
                    yield self._state
                finally:
                    self._state = None

    async def save_state(self) -> None:
        """Persist the current state (call after every mutation)."""
        state = dict(self.state)
        state["messages"] = messages_to_dict(self.state.get("messages", []))
        await self.runtime.state_store.save(self.kind, self.name, state)

    async def _load_state(self) -> Dict[str, Any]:
        stored = await self.runtime.state_store.load(self.kind, self.name)
        if stored is None:
            return self.initial_state()
        state = dict(stored)
        state["messages"] = messages_from_dict(stored.get("messages", []))
        return state

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.identity}>"


class ActorRuntime:
    """Hosts actors, hands out addressable handles and delivers one-way sends."""

    def __init__(self, state_store: Optional[StateStore] = None):
        self.state_store = state_store or InMemoryStateStore()
        self._factories: Dict[str, ActorFactory] = {}
        self._actors: Dict[Tuple[str, str], Actor] = {}
        self._pending: Set[asyncio.Task] = set()

    def register(self, kind: str, factory: ActorFactory) -> None:
        """Register the factory building actors of ``kind``."""
        self._factories[kind] = factory
        LOGGER.info(f"Registered actor kind: {kind}")

    def get(self, kind: str, name: str) -> Actor:
        """Handle for the actor ``(kind, name)``, created on first use.

        Raises:
            AgentNotFoundError: No factory is registered for ``kind``
        """
        key = (kind, name)
        actor = self._actors.get(key)
        if actor is None:
            factory = self._factories.get(kind)
            if factory is None:
                raise AgentNotFoundError(f"No actor kind registered: {kind}")
            actor = factory(self, name)
            self._actors[key] = actor
            LOGGER.debug(f"Activated actor {actor.identity}")
        return actor

    def send(self, kind: str, name: str, method: str, *args: Any, **kwargs: Any) -> asyncio.Task:
        """Fire-and-forget call of ``method`` on another actor.

        The call is queued behind the target's lock and never awaited by the
        sender. Delivery failures are logged and dropped.
        """
        async def deliver() -> None:
            target = self.get(kind, name)
            await getattr(target, method)(*args, **kwargs)

        task = asyncio.create_task(deliver(), name=f"send:{kind}:{name}.{method}")
        self._pending.add(task)
        task.add_done_callback(self._on_send_done)
        return task

    def _on_send_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            LOGGER.warning(f"Send cancelled: {task.get_name()}")
            return
        error = task.exception()
        if error is not None:
            LOGGER.warning(f"Send failed and was dropped: {task.get_name()}: {error}")

    async def drain(self) -> None:
        """Wait until every queued send has been delivered (or dropped)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending_sends(self) -> int:
        return len(self._pending)
