"""CLI for multi-turn conversations with the research orchestrator."""

from __future__ import annotations

from researchAgent.main import main


if __name__ == "__main__":
    main()
