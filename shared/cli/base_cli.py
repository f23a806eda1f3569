"""Base CLI framework for agent interfaces."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Dict, Optional

LOGGER = logging.getLogger(__name__)

CommandHandler = Callable[[Optional[str]], Awaitable[bool]]


class BaseCLI(ABC):
    """Base CLI class handling common command-line interaction patterns.

    Provides:
    - Command routing (/quit, /exit, /help)
    - Main input/output loop

    Subclasses implement:
    - Agent-specific welcome message
    - User message processing logic
    - Custom commands (optional)
    """

    # Base commands available to all agents
    BASE_COMMANDS: Dict[str, str] = {
        "/quit": "Exit the program",
        "/exit": "Exit the program",
        "/help": "Show available commands",
    }

    def __init__(self):
        self._command_handlers = self._build_command_handlers()
        self._running = False

        LOGGER.info(f"{self.__class__.__name__} initialized")

    def _build_command_handlers(self) -> Dict[str, CommandHandler]:
        """Build command handler mapping.

        Subclasses can override to add custom commands.
        """
        return {
            "/quit": self._handle_quit,
            "/exit": self._handle_quit,
            "/help": self._handle_help,
        }

    @property
    def commands(self) -> Dict[str, str]:
        """Get available commands (for help display)."""
        return self.BASE_COMMANDS

    # ========== Main Loop ==========

    async def run(self):
        """Main CLI loop: welcome, input, command routing, message handling, shutdown."""
        self._running = True
        self.print_welcome()

        while self._running:
            try:
                user_input = await self.get_input()

                if not user_input:
                    continue

                if self.is_command(user_input):
                    should_continue = await self.handle_command(user_input)
                    if not should_continue:
                        break
                else:
                    await self.handle_user_message(user_input)

            except (KeyboardInterrupt, EOFError):
                print("\nGoodbye!")
                LOGGER.info("Session interrupted by user")
                break
            except Exception as e:
                LOGGER.error(f"Unexpected error in main loop: {e}", exc_info=True)
                print(f"Error: {e}")

        await self.on_shutdown()

    async def on_shutdown(self):
        """Cleanup before shutdown. Subclasses can override."""
        LOGGER.info("CLI shutting down")

    # ========== Command Handling ==========

    def is_command(self, text: str) -> bool:
        return text.startswith("/")

    async def handle_command(self, cmd: str) -> bool:
        """Handle command input.

        Args:
            cmd: Command string (e.g., "/info alice")

        Returns:
            True to continue main loop, False to exit
        """
        parts = cmd.split(maxsplit=1)
        cmd_name = parts[0].lower()
        cmd_arg = parts[1].strip() if len(parts) > 1 else None

        handler = self._command_handlers.get(cmd_name)
        if handler:
            return await handler(cmd_arg)
        print(f"Unknown command: {cmd_name}")
        print("   Type /help to see available commands")
        return True

    # ========== Built-in Command Handlers ==========

    async def _handle_quit(self, arg: Optional[str]) -> bool:
        print("Session ended.")
        LOGGER.info("Exit requested by /quit command")
        return False

    async def _handle_help(self, arg: Optional[str]) -> bool:
        print("\nAvailable commands:")
        for cmd, desc in self.commands.items():
            print(f"  {cmd:<20} {desc}")
        print()
        return True

    # ========== Abstract Methods (Subclass Implementation) ==========

    @abstractmethod
    def print_welcome(self):
        """Print welcome message (agent-specific)."""

    @abstractmethod
    async def get_input(self) -> str:
        """Get user input (may be CLI, HTTP, WebSocket, etc.).

        Example for CLI:
            loop = asyncio.get_event_loop()
            return await loop.run_in_executor(None, lambda: input("You> ").strip())
        """

    @abstractmethod
    async def handle_user_message(self, message: str):
        """Process one user message (agent-specific logic)."""


__all__ = ["BaseCLI"]
