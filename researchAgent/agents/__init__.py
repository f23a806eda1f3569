"""Orchestrator and specialist agents."""

from .orchestrator import ORCHESTRATOR_ERROR_MESSAGE, OrchestratorAgent
from .registry import AgentRegistry
from .schema import RegistryEntry, utc_now
from .specialist import SPECIALIST_ERROR_MESSAGE, SpecialistAgent

__all__ = [
    "OrchestratorAgent",
    "SpecialistAgent",
    "AgentRegistry",
    "RegistryEntry",
    "utc_now",
    "ORCHESTRATOR_ERROR_MESSAGE",
    "SPECIALIST_ERROR_MESSAGE",
]
