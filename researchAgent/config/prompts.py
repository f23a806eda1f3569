"""Prompt configuration loader.

Loads system prompts from prompts.yaml next to this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_PROMPTS_PATH = Path(__file__).parent / "prompts.yaml"


@dataclass(frozen=True, slots=True)
class Prompts:
    orchestrator: str
    specialist: str
    specialist_domain: str

    def domain_prompt(self, description: str) -> str:
        """System turn seeding a specialist's history."""
        return self.specialist_domain.format(description=description)


def load_prompts(path: Optional[Path] = None) -> Prompts:
    """Load prompts from YAML.

    Args:
        path: Override for the prompts file (defaults to config/prompts.yaml)

    Raises:
        KeyError: A required prompt is missing
    """
    config_path = path or DEFAULT_PROMPTS_PATH
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return Prompts(
        orchestrator=config["orchestrator"].strip(),
        specialist=config["specialist"].strip(),
        specialist_domain=config["specialist_domain"].strip(),
    )


@lru_cache(maxsize=1)
def get_prompts() -> Prompts:
    """Cached prompts from the packaged prompts.yaml."""
    return load_prompts()
