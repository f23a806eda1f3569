"""Specialist research agent.

A specialist is a durable actor owning a domain description, its own
conversation history and a private document store. The orchestrator talks
to it synchronously through ``handle_message``; the specialist can push
status updates back asynchronously with ``message_to_interaction_agent``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from researchAgent.config.prompts import Prompts
from researchAgent.config.settings import StorageSettings
from researchAgent.graph.message_utils import clean_message_history, message_text
from researchAgent.runtime.actors import Actor, ActorRuntime
from researchAgent.storage import DocumentStore, KeyValueBucket
from researchAgent.tools.registry import ORCHESTRATOR, SPECIALIST
from researchAgent.utils.error_handler import (
    AgentAlreadyInitializedError,
    AgentNotInitializedError,
    SpecialistExecutionError,
)
from researchAgent.utils.logging_utils import log_agent_response, log_error, log_relay

LOGGER = logging.getLogger(__name__)

EMPTY_REPLY = "Okay."
SPECIALIST_ERROR_MESSAGE = "Error processing research request."


class SpecialistAgent(Actor):
    """Domain specialist: uninitialized until ``initialize``, then active."""

    kind = SPECIALIST

    def __init__(
        self,
        runtime: ActorRuntime,
        name: str,
        *,
        graph,
        bucket: KeyValueBucket,
        storage: StorageSettings,
        prompts: Prompts,
        orchestrator_name: str = "default",
        recursion_limit: int = 51,
    ):
        super().__init__(runtime, name)
        self.graph = graph
        self.bucket = bucket
        self.storage = storage
        self.prompts = prompts
        self.orchestrator_name = orchestrator_name
        self.recursion_limit = recursion_limit
        self._documents: Optional[DocumentStore] = None

    def initial_state(self) -> Dict[str, Any]:
        return {"name": "", "description": "", "messages": [], "reports_to": None}

    @property
    def is_initialized(self) -> bool:
        return bool(self.state.get("name"))

    @property
    def documents(self) -> DocumentStore:
        """Document store rooted at this specialist's private prefix."""
        if self._documents is None:
            self._documents = DocumentStore(
                self.bucket,
                self.storage.specialist_root(self.name),
                author=self.name,
                max_retries=self.storage.max_retries,
                retry_base_delay=self.storage.retry_base_delay,
                retry_max_delay=self.storage.retry_max_delay,
            )
        return self._documents

    async def initialize(
        self,
        name: str,
        description: str,
        message: str,
        reports_to: Optional[str] = None,
    ) -> None:
        """Set identity and seed the history. No model call is made.

        Raises:
            AgentAlreadyInitializedError: This identity was initialized before
        """
        async with self.processing():
            if self.is_initialized:
                raise AgentAlreadyInitializedError(
                    f"{self.identity} is already initialized",
                    user_message=f"Agent {self.state['name']} already exists.",
                )
            self.state["name"] = name
            self.state["description"] = description
            self.state["reports_to"] = reports_to
            self.messages = [
                SystemMessage(content=self.prompts.domain_prompt(description)),
                HumanMessage(content=message),
            ]
            await self.save_state()
            LOGGER.info(f"Initialized {self.identity}: {description[:100]}")

    async def handle_message(self, message: str) -> str:
        """Run one specialist turn and return its final text.

        Raises:
            AgentNotInitializedError: ``initialize`` was never called
            SpecialistExecutionError: The model or graph failed
        """
        async with self.processing():
            if not self.is_initialized:
                raise AgentNotInitializedError(
                    f"{self.identity} received a message before initialize()",
                    user_message=f"Agent {self.name} is not initialized.",
                )

            self.messages = clean_message_history([*self.messages, HumanMessage(content=message)])
            await self.save_state()
            history = list(self.messages)

            try:
                result = await self.graph.ainvoke(
                    {"messages": history, "loops": 0},
                    config={"recursion_limit": self.recursion_limit},
                )
            except Exception as e:
                log_error(LOGGER, e, context=f"{self.identity} handle_message")
                self.messages = [*self.messages, AIMessage(content=SPECIALIST_ERROR_MESSAGE)]
                await self.save_state()
                raise SpecialistExecutionError(
                    f"{self.identity} failed: {e}",
                    user_message=SPECIALIST_ERROR_MESSAGE,
                ) from e

            produced = list(result["messages"][len(history):])
            reply = self._final_text(produced)
            self.messages = [*history, *produced]
            await self.save_state()

            log_agent_response(LOGGER, reply, agent=self.identity)
            return reply

    @staticmethod
    def _final_text(produced: List[BaseMessage]) -> str:
        """Final assistant text; an empty reply is replaced in place by EMPTY_REPLY."""
        last = produced[-1] if produced else None
        if isinstance(last, AIMessage) and not last.tool_calls:
            text = message_text(last)
            if text.strip():
                return text
            produced[-1] = AIMessage(content=EMPTY_REPLY, id=last.id)
            return EMPTY_REPLY
        # Turn ended without a closing reply (loop limit)
        produced.append(AIMessage(content=EMPTY_REPLY))
        return EMPTY_REPLY

    def notify_orchestrator(self, message: str) -> None:
        """Queue a relay to the orchestrator; never raises, never waits."""
        target = (self._state or {}).get("reports_to") or self.orchestrator_name
        try:
            self.runtime.send(ORCHESTRATOR, target, "relay", self.name, message)
            log_relay(LOGGER, self.name, message)
        except Exception as e:
            LOGGER.warning(f"Relay from {self.identity} to {ORCHESTRATOR}:{target} failed: {e}")
            log_relay(LOGGER, self.name, message, delivered=False)

    async def get_info(self) -> Dict[str, Any]:
        async with self.processing():
            return {
                "name": self.state["name"],
                "description": self.state["description"],
                "message_count": len(self.messages),
            }

    async def get_history(self) -> List[BaseMessage]:
        async with self.processing():
            return list(self.messages)

    async def list_documents(self, directory: Optional[str] = None) -> List[str]:
        async with self.processing():
            return await self.documents.list(directory)
