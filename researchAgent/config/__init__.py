"""Configuration for research agents."""

from .prompts import Prompts, get_prompts, load_prompts
from .settings import (
    GovernanceSettings,
    ModelSettings,
    ObservabilitySettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "ModelSettings",
    "StorageSettings",
    "GovernanceSettings",
    "ObservabilitySettings",
    "get_settings",
    "Prompts",
    "get_prompts",
    "load_prompts",
]
