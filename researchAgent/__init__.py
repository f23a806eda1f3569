"""Top-level package exports for researchAgent."""

from .runtime.app import Application, build_application

__all__ = ["Application", "build_application"]
