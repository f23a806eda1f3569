"""Research agent CLI implementation using the shared framework."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from researchAgent.graph.message_utils import message_text
from researchAgent.runtime.app import Application
from researchAgent.utils.naming import sanitize_agent_id
from shared.cli.base_cli import BaseCLI

LOGGER = logging.getLogger(__name__)


class ResearchCLI(BaseCLI):
    """CLI interface for the research orchestrator.

    Extends BaseCLI with:
    - Streaming replies from the orchestrator
    - Specialist inspection commands (/agents, /info, /files)
    - Conversation history display
    """

    BASE_COMMANDS = {
        **BaseCLI.BASE_COMMANDS,
        "/agents": "List research agents",
        "/history": "Show the conversation history",
        "/info <agent_id>": "Show a research agent's details",
        "/files <agent_id>": "List a research agent's documents",
    }

    def __init__(self, application: Application):
        self.application = application
        self.orchestrator = application.orchestrator
        super().__init__()

    def _build_command_handlers(self) -> Dict:
        handlers = super()._build_command_handlers()
        handlers.update(
            {
                "/agents": self._handle_agents,
                "/history": self._handle_history,
                "/info": self._handle_info,
                "/files": self._handle_files,
            }
        )
        return handlers

    # ========== CLI Interface Implementation ==========

    def print_welcome(self):
        print("Medical research agent CLI ready.")
        print(f"Orchestrator: {self.orchestrator.identity}")
        print("\nType /help to see available commands\n")

    async def get_input(self) -> str:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, lambda: input("You> ").strip())

    async def handle_user_message(self, message: str):
        """Stream the orchestrator's reply to the terminal."""
        print("Agent> ", end="", flush=True)
        async for chunk in self.orchestrator.chat(message):
            print(chunk, end="", flush=True)
        print("\n")

    async def on_shutdown(self):
        await self.application.shutdown()
        await super().on_shutdown()

    # ========== Research Commands ==========

    async def _handle_agents(self, arg: Optional[str]) -> bool:
        entries = await self.orchestrator.get_agents()
        if not entries:
            print("No research agents yet.\n")
            return True
        print(f"\n{len(entries)} research agent(s):\n")
        for entry in entries:
            print(f"  {entry.id:<28} {entry.description[:60]}")
            print(f"  {'':<28} last active: {entry.last_active[:19]}")
        print()
        return True

    async def _handle_history(self, arg: Optional[str]) -> bool:
        messages = await self.orchestrator.get_history()
        if not messages:
            print("No messages yet.\n")
            return True
        print()
        for msg in messages:
            text = message_text(msg)
            if isinstance(msg, HumanMessage):
                print(f"  You> {text[:200]}")
            elif isinstance(msg, AIMessage):
                if msg.tool_calls:
                    print(f"  [tool calls] {', '.join(tc['name'] for tc in msg.tool_calls)}")
                if text:
                    print(f"  Agent> {text[:200]}")
            elif isinstance(msg, ToolMessage):
                print(f"  [{msg.name or 'tool'}] {text[:200]}")
            elif isinstance(msg, SystemMessage):
                print(f"  [system] {text[:200]}")
        print()
        return True

    async def _handle_info(self, arg: Optional[str]) -> bool:
        agent_id = await self._resolve_agent(arg, "/info")
        if agent_id is None:
            return True
        info = await self.application.specialist(agent_id).get_info()
        print(f"\nAgent: {info['name']}")
        print(f"  Description: {info['description']}")
        print(f"  Messages: {info['message_count']}\n")
        return True

    async def _handle_files(self, arg: Optional[str]) -> bool:
        agent_id = await self._resolve_agent(arg, "/files")
        if agent_id is None:
            return True
        files = await self.application.specialist(agent_id).list_documents()
        if not files:
            print(f"{agent_id} has no documents.\n")
            return True
        print(f"\n{agent_id} documents:")
        for path in files:
            print(f"  {path}")
        print()
        return True

    async def _resolve_agent(self, arg: Optional[str], command: str) -> Optional[str]:
        if not arg:
            print(f"Usage: {command} <agent_id>")
            return None
        agent_id = sanitize_agent_id(arg)
        known = {entry.id for entry in await self.orchestrator.get_agents()}
        if agent_id not in known:
            print(f"Unknown agent: {agent_id}. Use /agents to list agents.\n")
            return None
        return agent_id


__all__ = ["ResearchCLI"]
