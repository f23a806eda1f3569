"""End-to-end delegation scenarios through the orchestrator's model loop."""

import json

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from researchAgent.agents.specialist import SPECIALIST_ERROR_MESSAGE


def tool_call(name, args, call_id):
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


def tool_results(history):
    return {m.tool_call_id: json.loads(m.content) for m in history if isinstance(m, ToolMessage)}


CREATE_DMD = tool_call(
    "create_agent",
    {"name": "Duchenne MD Research", "description": "Duchenne muscular dystrophy", "message": "Find trials"},
    "call_create",
)


class TestCreateAgent:
    @pytest.mark.asyncio
    async def test_create_then_duplicate(self, make_app):
        """Scenario: creating the same agent twice is rejected."""
        application, model = make_app(
            CREATE_DMD,
            AIMessage(content="Created duchenne_md_research."),
            tool_call(
                "create_agent",
                {"name": "duchenne md research!", "description": "again", "message": "hi"},
                "call_dup",
            ),
            AIMessage(content="That agent already exists."),
        )
        orchestrator = application.orchestrator

        reply = await orchestrator.respond("Research Duchenne muscular dystrophy")
        assert reply == "Created duchenne_md_research."

        reply = await orchestrator.respond("Create it again")
        assert reply == "That agent already exists."

        results = tool_results(await orchestrator.get_history())
        assert results["call_create"] == {"ok": True, "agent_id": "duchenne_md_research"}
        assert results["call_dup"]["ok"] is False
        assert "already exists" in results["call_dup"]["error"]

        entries = await orchestrator.get_agents()
        assert [(e.id, e.name, e.description) for e in entries] == [
            ("duchenne_md_research", "Duchenne MD Research", "Duchenne muscular dystrophy")
        ]

        info = await application.specialist("duchenne_md_research").get_info()
        assert info == {
            "name": "duchenne_md_research",
            "description": "Duchenne muscular dystrophy",
            "message_count": 2,
        }
        # initialize makes no model call
        assert len(model.calls) == 4

    @pytest.mark.asyncio
    async def test_specialist_history_seeded(self, make_app):
        application, _ = make_app(CREATE_DMD, AIMessage(content="Done."))
        await application.orchestrator.respond("Research DMD")

        history = await application.specialist("duchenne_md_research").get_history()
        assert isinstance(history[0], SystemMessage)
        assert history[0].content == "You are a specialized medical research agent for: Duchenne muscular dystrophy"
        assert isinstance(history[1], HumanMessage)
        assert history[1].content == "Find trials"

    @pytest.mark.asyncio
    async def test_unregistered_specialist_is_adopted(self, make_app):
        """A specialist initialized without a registry entry becomes usable again."""
        application, _ = make_app(
            tool_call("create_agent", {"name": "Cardio", "description": "Heart failure", "message": "Go"}, "call_create"),
            AIMessage(content="Registered."),
            tool_call("message_to_research_agent", {"agent_id": "cardio", "message": "Status?"}, "call_ask"),
            AIMessage(content="Two trials recruiting."),
            AIMessage(content="Cardio reports two trials."),
        )
        orchestrator = application.orchestrator
        await application.specialist("cardio").initialize("cardio", "Cardiology", "Earlier task")

        await orchestrator.respond("Research cardiology")
        reply = await orchestrator.respond("Ask cardio")

        assert reply == "Cardio reports two trials."
        results = tool_results(await orchestrator.get_history())
        assert results["call_create"] == {"ok": True, "agent_id": "cardio"}
        assert results["call_ask"] == {"ok": True, "response": "Two trials recruiting."}

        entries = await orchestrator.get_agents()
        assert [(e.id, e.description) for e in entries] == [("cardio", "Cardiology")]
        history = await application.specialist("cardio").get_history()
        assert history[1].content == "Earlier task"

    @pytest.mark.asyncio
    async def test_list_agents_sorted(self, make_app):
        application, _ = make_app(
            tool_call("list_agents", {}, "call_empty"),
            AIMessage(content="None yet."),
            tool_call("create_agent", {"name": "Zeta", "description": "z", "message": "m"}, "c1"),
            tool_call("create_agent", {"name": "Alpha", "description": "a", "message": "m"}, "c2"),
            tool_call("list_agents", {}, "call_list"),
            AIMessage(content="Two agents."),
        )
        orchestrator = application.orchestrator
        await orchestrator.respond("Who is there?")
        await orchestrator.respond("Create two and list")

        results = tool_results(await orchestrator.get_history())
        assert results["call_empty"] == {"ok": True, "agents": []}
        assert [a["id"] for a in results["call_list"]["agents"]] == ["alpha", "zeta"]


class TestMessageResearchAgent:
    @pytest.mark.asyncio
    async def test_unknown_agent(self, make_app):
        """Scenario: messaging an id nobody created never reaches a specialist."""
        application, model = make_app(
            tool_call("message_to_research_agent", {"agent_id": "Ghost Agent", "message": "hi"}, "call_ghost"),
            AIMessage(content="No such agent."),
        )
        reply = await application.orchestrator.respond("Ask the ghost")

        assert reply == "No such agent."
        result = tool_results(await application.orchestrator.get_history())["call_ghost"]
        assert result["ok"] is False
        assert "ghost_agent" in result["error"]
        assert len(model.calls) == 2

    @pytest.mark.asyncio
    async def test_synchronous_reply(self, make_app):
        application, model = make_app(
            CREATE_DMD,
            AIMessage(content="Created."),
            tool_call(
                "message_to_research_agent",
                {"agent_id": "duchenne_md_research", "message": "How many trials?"},
                "call_ask",
            ),
            AIMessage(content="Twelve active trials."),
            AIMessage(content="The specialist found twelve trials."),
        )
        orchestrator = application.orchestrator
        await orchestrator.respond("Research DMD")
        created = (await orchestrator.get_agents())[0]

        reply = await orchestrator.respond("How many trials?")

        assert reply == "The specialist found twelve trials."
        result = tool_results(await orchestrator.get_history())["call_ask"]
        assert result == {"ok": True, "response": "Twelve active trials."}

        updated = (await orchestrator.get_agents())[0]
        assert updated.created_at == created.created_at
        assert updated.last_active >= created.last_active

        specialist_prompt = model.calls[3]
        assert specialist_prompt[0].content == application.specialist("duchenne_md_research").prompts.specialist
        assert isinstance(specialist_prompt[-1], HumanMessage)
        assert specialist_prompt[-1].content == "How many trials?"

    @pytest.mark.asyncio
    async def test_specialist_uses_its_workspace(self, make_app, bucket):
        application, _ = make_app(
            CREATE_DMD,
            AIMessage(content="Created."),
            tool_call(
                "message_to_research_agent",
                {"agent_id": "duchenne_md_research", "message": "Save your notes"},
                "call_ask",
            ),
            tool_call("write_file", {"path": "notes/trials.md", "content": "NCT01"}, "call_write"),
            AIMessage(content="Saved."),
            AIMessage(content="Notes saved."),
        )
        orchestrator = application.orchestrator
        await orchestrator.respond("Research DMD")
        reply = await orchestrator.respond("Save notes")

        assert reply == "Notes saved."
        assert bucket.keys() == ["memory/research_agents/duchenne_md_research/notes/trials.md"]
        files = await application.specialist("duchenne_md_research").list_documents()
        assert files == ["notes/trials.md"]

    @pytest.mark.asyncio
    async def test_specialist_failure_reported(self, make_app):
        application, _ = make_app(
            CREATE_DMD,
            AIMessage(content="Created."),
            tool_call(
                "message_to_research_agent",
                {"agent_id": "duchenne_md_research", "message": "hi"},
                "call_ask",
            ),
            RuntimeError("model exploded"),
            AIMessage(content="The specialist failed."),
        )
        orchestrator = application.orchestrator
        await orchestrator.respond("Research DMD")
        before = (await orchestrator.get_agents())[0]

        reply = await orchestrator.respond("Ask it")

        assert reply == "The specialist failed."
        result = tool_results(await orchestrator.get_history())["call_ask"]
        assert result["ok"] is False
        assert SPECIALIST_ERROR_MESSAGE in result["error"]
        assert (await orchestrator.get_agents())[0].last_active == before.last_active

        history = await application.specialist("duchenne_md_research").get_history()
        assert history[-1].content == SPECIALIST_ERROR_MESSAGE
