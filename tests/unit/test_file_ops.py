"""Tests for the specialist workspace tools."""

import json

import pytest
import pytest_asyncio

from researchAgent.tools.builtin.file_ops import list_files, read_file, write_file
from researchAgent.tools.builtin.relay import message_to_interaction_agent


@pytest_asyncio.fixture
async def specialist(make_app):
    application, _ = make_app()
    agent = application.specialist("dmd_research")
    await agent.initialize("dmd_research", "Duchenne muscular dystrophy", "Start with trials")
    return agent


async def _call(agent, tool, args):
    async with agent.processing():
        return json.loads(await tool.ainvoke(args))


class TestFileTools:
    @pytest.mark.asyncio
    async def test_fresh_workspace_is_empty(self, specialist):
        assert await _call(specialist, list_files, {}) == {"ok": True, "files": []}

    @pytest.mark.asyncio
    async def test_write_read_list(self, specialist, bucket):
        written = await _call(specialist, write_file, {"path": "/notes/./trials.md", "content": "NCT001"})
        assert written == {"ok": True, "path": "notes/trials.md"}

        read = await _call(specialist, read_file, {"path": "notes/trials.md"})
        assert read["content"] == "NCT001"

        listed = await _call(specialist, list_files, {"dir": "notes"})
        assert listed["files"] == ["notes/trials.md"]
        assert bucket.keys() == ["memory/research_agents/dmd_research/notes/trials.md"]

    @pytest.mark.asyncio
    async def test_read_missing_file(self, specialist):
        result = await _call(specialist, read_file, {"path": "../nope.md"})
        assert result == {"ok": False, "error": "File not found: nope.md"}

    @pytest.mark.asyncio
    async def test_invalid_path_reported(self, specialist, bucket):
        result = await _call(specialist, write_file, {"path": "a/..", "content": "x"})
        assert result["ok"] is False
        assert "Invalid path" in result["error"]
        assert len(bucket) == 0

    @pytest.mark.asyncio
    async def test_outside_agent_turn(self):
        result = json.loads(await list_files.ainvoke({}))
        assert result["ok"] is False

    @pytest.mark.asyncio
    async def test_orchestrator_cannot_use_workspace_tools(self, make_app):
        application, _ = make_app()
        result = await _call(application.orchestrator, write_file, {"path": "a.md", "content": "x"})
        assert result == {"ok": False, "error": "This tool is only available to specialist agents."}


class TestRelayTool:
    @pytest.mark.asyncio
    async def test_relay_reaches_orchestrator(self, make_app):
        application, _ = make_app()
        agent = application.specialist("cardio")
        await agent.initialize("cardio", "Cardiology", "hi", reports_to=application.orchestrator.name)

        result = await _call(agent, message_to_interaction_agent, {"message": "Found 3 trials"})
        assert result == {"ok": True}

        await application.runtime.drain()
        history = await application.orchestrator.get_history()
        assert history[-1].content == "Agent cardio reports: Found 3 trials"

    @pytest.mark.asyncio
    async def test_relay_failure_is_swallowed(self, specialist, mocker):
        """Scenario: the orchestrator cannot be reached."""
        mocker.patch.object(specialist.runtime, "send", side_effect=RuntimeError("runtime down"))
        result = await _call(specialist, message_to_interaction_agent, {"message": "status"})
        assert result == {"ok": True}
