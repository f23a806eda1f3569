"""Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and ensures proper test environment setup.
"""

import sys
from pathlib import Path
from typing import Any, List, Optional

import pytest

# Ensure project root is in PYTHONPATH for imports to work
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field

from researchAgent.config.settings import (
    GovernanceSettings,
    ModelSettings,
    ObservabilitySettings,
    Settings,
    StorageSettings,
)
from researchAgent.runtime.app import build_application
from researchAgent.runtime.state_store import InMemoryStateStore
from researchAgent.storage import InMemoryBucket


class FakeChatModel(BaseChatModel):
    """Chat model replaying scripted replies.

    Each call consumes the next entry of ``responses``: an AIMessage is
    returned, an exception is raised. Once the script runs out the model
    answers "Done.". Every prompt is recorded in ``calls``.
    """

    responses: List[Any] = Field(default_factory=list)
    calls: List[List[BaseMessage]] = Field(default_factory=list)
    bound_tools: List[str] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "fake-scripted"

    def bind_tools(self, tools, **kwargs):
        self.bound_tools.extend(getattr(t, "name", str(t)) for t in tools)
        return self

    def _generate(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager=None,
        **kwargs: Any,
    ) -> ChatResult:
        self.calls.append(list(messages))
        index = len(self.calls) - 1
        item = self.responses[index] if index < len(self.responses) else AIMessage(content="Done.")
        if isinstance(item, BaseException):
            raise item
        return ChatResult(generations=[ChatGeneration(message=item.model_copy(deep=True))])


@pytest.fixture
def fake_model():
    """Factory for a FakeChatModel scripted with ``responses``."""

    def _make(*responses):
        return FakeChatModel(responses=list(responses))

    return _make


@pytest.fixture
def settings():
    """Settings independent of the environment, with instant retries."""
    return Settings(
        models=ModelSettings(provider="openai", model="gpt-4o", api_key="test-key"),
        storage=StorageSettings(
            workspace_root="memory/",
            retry_base_delay=0.0,
            retry_max_delay=0.0,
        ),
        governance=GovernanceSettings(max_loops=5, orchestrator_name="default"),
        observability=ObservabilitySettings(log_dir="logs", log_level="INFO"),
    )


@pytest.fixture
def bucket():
    return InMemoryBucket()


@pytest.fixture
def make_app(settings, bucket, fake_model):
    """Build an application around a FakeChatModel scripted with ``responses``."""

    def _make(*responses):
        model = fake_model(*responses)
        application = build_application(
            model_resolver=lambda: model,
            bucket=bucket,
            state_store=InMemoryStateStore(),
            settings=settings,
        )
        return application, model

    return _make
