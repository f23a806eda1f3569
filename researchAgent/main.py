"""Research agent - self-contained CLI entrypoint."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add project root to path to support direct execution
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from researchAgent.cli import ResearchCLI
from researchAgent.config import get_settings
from researchAgent.runtime.app import build_application
from researchAgent.utils import ResearchAgentError, setup_logging


async def async_main():
    """Async entrypoint for the research CLI."""
    settings = get_settings()
    logger = setup_logging(settings.observability.log_level, settings.observability.log_dir)
    logger.info("Research agent society starting...")

    try:
        application = build_application(settings=settings)
    except ResearchAgentError as e:
        logger.error(f"Startup failed: {e}")
        print(f"\nStartup failed: {e.user_message}")
        return
    except Exception as e:
        logger.error(f"Fatal error during startup: {e}", exc_info=True)
        print(f"\nStartup failed: {e}")
        print("See the log file for details")
        return

    cli = ResearchCLI(application)
    try:
        await cli.run()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received, shutting down...")


def main():
    """Synchronous wrapper for async_main."""
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
