"""Factory for the agent ⇄ tools loop used by every research agent.

    START → agent ⇄ tools
              ↓
             END

The agent node calls the model with the agent's tool set bound; when the
reply carries tool calls the ToolNode runs them (validating arguments against
each tool's schema first) and control returns to the agent.
"""

from __future__ import annotations

import logging
from typing import Literal, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, SystemMessage
from langchain_core.tools import BaseTool
from langgraph.graph import END, START, StateGraph
from langgraph.prebuilt import ToolNode

from researchAgent.graph.state import AgentState

LOGGER = logging.getLogger(__name__)


def build_agent_graph(
    *,
    model: BaseChatModel,
    tools: Sequence[BaseTool],
    system_prompt: str,
    max_loops: int = 25,
    name: str = "agent",
):
    """Compile the agent loop for one agent kind.

    Args:
        model: Chat model (tools are bound here)
        tools: The agent's tool set
        system_prompt: Prepended to the history on every model call
        max_loops: Agent steps allowed per turn before the loop stops
        name: Graph name used in traces

    Returns:
        Compiled graph without a checkpointer; actors persist history themselves
    """
    model_with_tools = model.bind_tools(list(tools))

    async def agent_node(state: AgentState) -> dict:
        prompt = [SystemMessage(content=system_prompt), *state["messages"]]
        response = await model_with_tools.ainvoke(prompt)
        return {"messages": [response], "loops": state.get("loops", 0) + 1}

    def agent_route(state: AgentState) -> Literal["tools", "end"]:
        last_message = state["messages"][-1]
        if not isinstance(last_message, AIMessage) or not last_message.tool_calls:
            return "end"
        if state.get("loops", 0) >= max_loops:
            LOGGER.warning(f"{name}: loop limit {max_loops} reached with pending tool calls")
            return "end"
        return "tools"

    graph = StateGraph(AgentState)
    graph.add_node("agent", agent_node)
    graph.add_node("tools", ToolNode(list(tools)))

    graph.add_edge(START, "agent")
    graph.add_conditional_edges(
        "agent",
        agent_route,
        {
            "tools": "tools",
            "end": END,
        },
    )
    graph.add_edge("tools", "agent")

    LOGGER.info(f"Built {name} graph with tools: {[t.name for t in tools]}")
    return graph.compile(name=name)
