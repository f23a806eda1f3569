"""Tests for the actor runtime, agent context and state stores."""

import asyncio

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from researchAgent.runtime.actors import Actor, ActorRuntime
from researchAgent.runtime.context import agent_context, get_current_agent
from researchAgent.runtime.state_store import InMemoryStateStore, JsonFileStateStore
from researchAgent.utils.error_handler import AgentContextError, AgentNotFoundError


class Counter(Actor):
    kind = "counter"

    def initial_state(self):
        return {"messages": [], "count": 0, "seen": []}

    async def add(self, label: str, delay: float = 0.0) -> int:
        async with self.processing():
            self.state["seen"].append(f"start:{label}")
            await asyncio.sleep(delay)
            self.state["count"] += 1
            self.state["seen"].append(f"end:{label}")
            await self.save_state()
            return self.state["count"]

    async def snapshot(self) -> dict:
        async with self.processing():
            return dict(self.state)

    async def whoami(self):
        async with self.processing():
            return get_current_agent("counter")

    async def fail(self):
        raise RuntimeError("boom")


@pytest.fixture
def runtime():
    rt = ActorRuntime(InMemoryStateStore())
    rt.register("counter", Counter)
    return rt


class TestAgentContext:
    def test_nothing_bound(self):
        with pytest.raises(AgentContextError):
            get_current_agent()

    def test_binding_is_scoped(self, runtime):
        actor = runtime.get("counter", "a")
        with agent_context(actor):
            assert get_current_agent() is actor
            assert get_current_agent("counter") is actor
        with pytest.raises(AgentContextError):
            get_current_agent()

    def test_wrong_kind_rejected(self, runtime):
        with agent_context(runtime.get("counter", "a")):
            with pytest.raises(AgentContextError) as exc_info:
                get_current_agent("specialist")
        assert "specialist" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_concurrent_actors_see_only_themselves(self, runtime):
        a, b = runtime.get("counter", "a"), runtime.get("counter", "b")
        found_a, found_b = await asyncio.gather(a.whoami(), b.whoami())
        assert found_a is a
        assert found_b is b


class TestActorRuntime:
    def test_one_instance_per_identity(self, runtime):
        assert runtime.get("counter", "a") is runtime.get("counter", "a")
        assert runtime.get("counter", "a") is not runtime.get("counter", "b")

    def test_unknown_kind(self, runtime):
        with pytest.raises(AgentNotFoundError):
            runtime.get("nobody", "x")

    @pytest.mark.asyncio
    async def test_same_identity_is_serialized(self, runtime):
        actor = runtime.get("counter", "a")
        await asyncio.gather(actor.add("first", 0.02), actor.add("second", 0.0))
        state = await actor.snapshot()
        assert state["count"] == 2
        assert state["seen"] == ["start:first", "end:first", "start:second", "end:second"]

    @pytest.mark.asyncio
    async def test_state_survives_new_instances(self):
        store = InMemoryStateStore()
        first = ActorRuntime(store)
        first.register("counter", Counter)
        await first.get("counter", "a").add("x")

        second = ActorRuntime(store)
        second.register("counter", Counter)
        assert (await second.get("counter", "a").snapshot())["count"] == 1

    def test_state_outside_processing(self, runtime):
        with pytest.raises(RuntimeError):
            runtime.get("counter", "a").state

    @pytest.mark.asyncio
    async def test_send_is_delivered_after_drain(self, runtime):
        runtime.send("counter", "a", "add", "sent")
        assert runtime.pending_sends == 1
        await runtime.drain()
        assert runtime.pending_sends == 0
        assert (await runtime.get("counter", "a").snapshot())["count"] == 1

    @pytest.mark.asyncio
    async def test_send_failures_are_dropped(self, runtime, caplog):
        runtime.send("counter", "a", "fail")
        runtime.send("nobody", "x", "add", "lost")
        await runtime.drain()
        assert runtime.pending_sends == 0
        assert "Send failed" in caplog.text


class TestStateStores:
    @pytest.mark.asyncio
    async def test_in_memory_copies(self):
        store = InMemoryStateStore()
        state = {"messages": [], "registry": {"a": {"id": "a"}}}
        await store.save("orchestrator", "default", state)
        state["registry"]["b"] = {}
        loaded = await store.load("orchestrator", "default")
        assert loaded == {"messages": [], "registry": {"a": {"id": "a"}}}
        assert await store.load("orchestrator", "other") is None

    @pytest.mark.asyncio
    async def test_json_file_round_trip(self, tmp_path):
        store = JsonFileStateStore(tmp_path)
        await store.save("specialist", "alice", {"name": "alice", "messages": []})
        assert await store.load("specialist", "alice") == {"name": "alice", "messages": []}
        assert (tmp_path / "specialist" / "alice.json").exists()
        assert await store.load("specialist", "bob") is None

    @pytest.mark.asyncio
    async def test_json_file_io_runs_in_executor(self, tmp_path, mocker):
        store = JsonFileStateStore(tmp_path)
        loop = asyncio.get_running_loop()
        spy = mocker.patch.object(loop, "run_in_executor", wraps=loop.run_in_executor)

        await store.save("specialist", "alice", {"name": "alice", "messages": []})

        assert await store.load("specialist", "alice") == {"name": "alice", "messages": []}
        assert spy.call_count == 2

    @pytest.mark.asyncio
    async def test_messages_persist_through_actor(self, tmp_path):
        runtime = ActorRuntime(JsonFileStateStore(tmp_path))
        runtime.register("counter", Counter)
        actor = runtime.get("counter", "a")
        async with actor.processing():
            actor.messages = [HumanMessage(content="hi"), AIMessage(content="hello")]
            await actor.save_state()

        fresh = ActorRuntime(JsonFileStateStore(tmp_path))
        fresh.register("counter", Counter)
        state = await fresh.get("counter", "a").snapshot()
        assert [m.content for m in state["messages"]] == ["hi", "hello"]
        assert isinstance(state["messages"][1], AIMessage)
