"""Runtime assembly for the research agent society."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from researchAgent.agents import OrchestratorAgent, SpecialistAgent
from researchAgent.config import Settings, get_prompts, get_settings
from researchAgent.graph import build_agent_graph
from researchAgent.runtime.actors import ActorRuntime
from researchAgent.runtime.model_resolver import ModelResolver, build_model_resolver
from researchAgent.runtime.state_store import InMemoryStateStore, JsonFileStateStore, StateStore
from researchAgent.storage import InMemoryBucket, KeyValueBucket
from researchAgent.tools import ORCHESTRATOR, SPECIALIST, ToolRegistry, build_tool_registry

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class Application:
    """Assembled runtime with the session's orchestrator."""

    runtime: ActorRuntime
    orchestrator: OrchestratorAgent
    tool_registry: ToolRegistry
    settings: Settings
    bucket: KeyValueBucket

    def specialist(self, agent_id: str) -> SpecialistAgent:
        return self.runtime.get(SPECIALIST, agent_id)

    async def shutdown(self) -> None:
        """Deliver pending relays before exit."""
        await self.runtime.drain()
        LOGGER.info("Application shut down")


def _create_state_store(settings: Settings) -> StateStore:
    if settings.storage.state_dir:
        LOGGER.info(f"Actor state persisted under {settings.storage.state_dir}")
        return JsonFileStateStore(Path(settings.storage.state_dir))
    LOGGER.info("Actor state kept in memory")
    return InMemoryStateStore()


def build_application(
    *,
    model_resolver: Optional[ModelResolver] = None,
    bucket: Optional[KeyValueBucket] = None,
    state_store: Optional[StateStore] = None,
    settings: Optional[Settings] = None,
) -> Application:
    """Wire tools, graphs and actors into an Application.

    Args:
        model_resolver: Optional zero-argument model factory (defaults to settings-based ChatOpenAI)
        bucket: Backing bucket for document stores (defaults to in-memory)
        state_store: Durable actor state (defaults to JSON files when AGENT_STATE_DIR is set)
        settings: Optional settings override

    Returns:
        Application holding the runtime and the session orchestrator
    """
    settings = settings or get_settings()
    prompts = get_prompts()
    resolver = model_resolver or build_model_resolver(settings)
    model = resolver()

    bucket = bucket if bucket is not None else InMemoryBucket()
    state_store = state_store if state_store is not None else _create_state_store(settings)
    tool_registry = build_tool_registry()

    max_loops = settings.governance.max_loops
    recursion_limit = settings.governance.recursion_limit
    orchestrator_name = settings.governance.orchestrator_name

    orchestrator_graph = build_agent_graph(
        model=model,
        tools=tool_registry.tools_for(ORCHESTRATOR),
        system_prompt=prompts.orchestrator,
        max_loops=max_loops,
        name="orchestrator",
    )
    specialist_graph = build_agent_graph(
        model=model,
        tools=tool_registry.tools_for(SPECIALIST),
        system_prompt=prompts.specialist,
        max_loops=max_loops,
        name="specialist",
    )

    runtime = ActorRuntime(state_store)
    runtime.register(
        ORCHESTRATOR,
        lambda rt, name: OrchestratorAgent(
            rt,
            name,
            graph=orchestrator_graph,
            executions=tool_registry.executions_for(ORCHESTRATOR),
            recursion_limit=recursion_limit,
        ),
    )
    runtime.register(
        SPECIALIST,
        lambda rt, name: SpecialistAgent(
            rt,
            name,
            graph=specialist_graph,
            bucket=bucket,
            storage=settings.storage,
            prompts=prompts,
            orchestrator_name=orchestrator_name,
            recursion_limit=recursion_limit,
        ),
    )

    orchestrator = runtime.get(ORCHESTRATOR, orchestrator_name)
    LOGGER.info(f"Application ready: {orchestrator.identity}")
    return Application(
        runtime=runtime,
        orchestrator=orchestrator,
        tool_registry=tool_registry,
        settings=settings,
        bucket=bucket,
    )
