"""Orchestrator (interaction) agent.

The orchestrator holds the human-facing conversation and the registry of
specialists. Each human turn streams the orchestrator graph; delegation tools
reach specialists through the actor runtime, and specialists report back
asynchronously through ``relay``.

Turn flow:
    1. Append the human message, clean the history, reconcile confirmations
    2. Stream the graph; text from the agent node is yielded as it arrives
    3. Every state snapshot is persisted as the new history
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from researchAgent.agents.registry import AgentRegistry
from researchAgent.agents.schema import RegistryEntry, utc_now
from researchAgent.graph.message_utils import (
    ToolExecution,
    clean_message_history,
    message_text,
    reconcile_confirmations,
)
from researchAgent.runtime.actors import Actor, ActorRuntime
from researchAgent.tools.registry import ORCHESTRATOR, SPECIALIST
from researchAgent.utils.error_handler import (
    AgentAlreadyInitializedError,
    AgentNotFoundError,
    DuplicateAgentError,
    SpecialistExecutionError,
)
from researchAgent.utils.logging_utils import (
    log_agent_response,
    log_error,
    log_relay,
    log_user_message,
)
from researchAgent.utils.naming import sanitize_agent_id

LOGGER = logging.getLogger(__name__)

ORCHESTRATOR_ERROR_MESSAGE = "Sorry, I encountered an error processing your request."
EMPTY_REPLY = "Okay."

_TURN_DONE = object()


class OrchestratorAgent(Actor):
    """Human-facing agent; one per session."""

    kind = ORCHESTRATOR

    def __init__(
        self,
        runtime: ActorRuntime,
        name: str,
        *,
        graph,
        executions: Optional[Mapping[str, ToolExecution]] = None,
        recursion_limit: int = 51,
    ):
        super().__init__(runtime, name)
        self.graph = graph
        self.executions = dict(executions or {})
        self.recursion_limit = recursion_limit

    def initial_state(self) -> Dict[str, Any]:
        return {"messages": [], "registry": {}}

    @property
    def registry(self) -> AgentRegistry:
        return AgentRegistry(self.state.setdefault("registry", {}))

    # ========== Human-facing operations ==========

    async def chat(self, message: str) -> AsyncIterator[str]:
        """Stream the reply to one human message.

        The turn runs in its own task; closing or cancelling this generator
        cancels that task, which stops further model output and tool calls.
        """
        queue: asyncio.Queue = asyncio.Queue()
        turn = asyncio.create_task(self._run_turn(message, queue), name=f"turn:{self.identity}")
        try:
            while True:
                chunk = await queue.get()
                if chunk is _TURN_DONE:
                    break
                yield chunk
            await turn
        finally:
            if not turn.done():
                turn.cancel()
                LOGGER.info(f"{self.identity}: turn cancelled by caller")

    async def respond(self, message: str) -> str:
        """Collect a full reply from ``chat``."""
        parts = [chunk async for chunk in self.chat(message)]
        return "".join(parts)

    async def relay(self, agent_id: str, message: str) -> None:
        """Fold a specialist's asynchronous report into the history."""
        async with self.processing():
            self.messages = [*self.messages, HumanMessage(content=f"Agent {agent_id} reports: {message}")]
            await self.save_state()
        log_relay(LOGGER, agent_id, message)

    async def get_history(self) -> List[BaseMessage]:
        async with self.processing():
            return list(self.messages)

    async def get_agents(self) -> List[RegistryEntry]:
        async with self.processing():
            return self.registry.list_entries()

    # ========== Turn execution ==========

    async def _run_turn(self, message: str, queue: asyncio.Queue) -> None:
        try:
            async with self.processing():
                log_user_message(LOGGER, message)
                try:
                    self.messages = clean_message_history([*self.messages, HumanMessage(content=message)])
                    self.messages = await reconcile_confirmations(self.messages, self.executions)
                    await self.save_state()
                    await self._stream_reply(queue)
                except Exception as e:
                    log_error(LOGGER, e, context=f"{self.identity} chat")
                    self.messages = [*self.messages, AIMessage(content=ORCHESTRATOR_ERROR_MESSAGE)]
                    await self.save_state()
                    queue.put_nowait(ORCHESTRATOR_ERROR_MESSAGE)
        except Exception as e:
            # State could not be loaded or saved
            log_error(LOGGER, e, context=f"{self.identity} chat")
            queue.put_nowait(ORCHESTRATOR_ERROR_MESSAGE)
        finally:
            queue.put_nowait(_TURN_DONE)

    async def _stream_reply(self, queue: asyncio.Queue) -> None:
        streamed: List[str] = []
        async for mode, payload in self.graph.astream(
            {"messages": list(self.messages), "loops": 0},
            config={"recursion_limit": self.recursion_limit},
            stream_mode=["messages", "values"],
        ):
            if mode == "messages":
                chunk, metadata = payload
                if metadata.get("langgraph_node") != "agent":
                    continue
                # Nested specialist graphs report a compound namespace
                if "|" in metadata.get("langgraph_checkpoint_ns", ""):
                    continue
                if not isinstance(chunk, AIMessage):
                    continue
                text = message_text(chunk)
                if text:
                    streamed.append(text)
                    queue.put_nowait(text)
            elif mode == "values":
                self.messages = payload["messages"]
                await self.save_state()

        if not streamed:
            last = self.messages[-1] if self.messages else None
            if isinstance(last, AIMessage) and not last.tool_calls and not message_text(last).strip():
                self.messages = [*self.messages[:-1], AIMessage(content=EMPTY_REPLY, id=last.id)]
                await self.save_state()
                streamed.append(EMPTY_REPLY)
                queue.put_nowait(EMPTY_REPLY)
        log_agent_response(LOGGER, "".join(streamed), agent=self.identity)

    # ========== Delegation (called by tools during a turn) ==========

    async def create_specialist(self, name: str, description: str, message: str) -> str:
        """Register and initialize a new specialist; returns its id.

        A specialist that was initialized but never registered here is adopted
        with its stored description instead of being initialized again.

        Raises:
            DuplicateAgentError: The sanitized id is already registered
            SpecialistExecutionError: The specialist could not be initialized
        """
        agent_id = sanitize_agent_id(name)
        if agent_id in self.registry:
            raise DuplicateAgentError(
                f"Agent {agent_id} already exists",
                user_message=(
                    f"Agent with ID '{agent_id}' already exists. "
                    "Use message_to_research_agent to talk to it."
                ),
            )

        specialist = self.runtime.get(SPECIALIST, agent_id)
        try:
            await specialist.initialize(agent_id, description, message, reports_to=self.name)
        except AgentAlreadyInitializedError:
            # Initialized earlier but never registered here; keep its identity
            info = await specialist.get_info()
            description = info["description"] or description
            LOGGER.warning(f"Registering existing specialist {agent_id} without re-initializing it")
        except Exception as e:
            raise SpecialistExecutionError(
                f"Failed to initialize {agent_id}: {e}",
                user_message=f"Failed to create agent '{agent_id}': {getattr(e, 'user_message', e)}",
            ) from e

        now = utc_now()
        self.registry.upsert(
            RegistryEntry(
                id=agent_id,
                name=name.strip() or agent_id,
                description=description,
                created_at=now,
                last_active=now,
            )
        )
        await self.save_state()
        return agent_id

    async def message_specialist(self, agent_id: str, message: str) -> str:
        """Query a registered specialist synchronously and return its reply.

        Raises:
            AgentNotFoundError: The id is not registered
            SpecialistExecutionError: The specialist failed or could not be reached
        """
        agent_id = sanitize_agent_id(agent_id)
        if agent_id not in self.registry:
            raise AgentNotFoundError(
                f"Agent {agent_id} not registered",
                user_message=f"Agent '{agent_id}' not found. Use list_agents to see available agents.",
            )

        specialist = self.runtime.get(SPECIALIST, agent_id)
        try:
            response = await specialist.handle_message(message)
        except Exception as e:
            reason = getattr(e, "user_message", None) or str(e)
            raise SpecialistExecutionError(
                f"Failed to message {agent_id}: {e}",
                user_message=f"Failed to message agent '{agent_id}': {reason}",
            ) from e

        self.registry.touch(agent_id, utc_now())
        await self.save_state()
        return response
