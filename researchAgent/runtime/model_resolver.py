"""Model resolver wiring using environment-derived settings.

``build_model_resolver`` turns ModelSettings into a zero-argument factory that
creates the chat model on demand. Tests inject their own factory instead.
"""

from __future__ import annotations

from typing import Callable, Dict

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from researchAgent.config.settings import ModelSettings, Settings
from researchAgent.utils.error_handler import ModelConfigurationError

ModelResolver = Callable[[], BaseChatModel]

# Providers served through the OpenAI-compatible client
OPENAI_COMPATIBLE_PROVIDERS = {"openai", "openai-compatible"}


def _chat_kwargs(models: ModelSettings) -> Dict[str, object]:
    if not models.api_key:
        raise ModelConfigurationError(
            f"Missing API key for model {models.model}",
            user_message=f"Missing API key for model {models.model}. Set OPENAI_API_KEY (or MODEL_API_KEY) in .env.",
        )
    kwargs: Dict[str, object] = {
        "model": models.model,
        "api_key": models.api_key,
        "temperature": models.temperature,
    }
    if models.base_url:
        kwargs["base_url"] = models.base_url
    return kwargs


def build_model_resolver(settings: Settings) -> ModelResolver:
    """Construct a resolver returning a ChatOpenAI-compatible client.

    Args:
        settings: Application settings loaded from .env

    Returns:
        Zero-argument callable creating the chat model

    Raises:
        ModelConfigurationError: Unknown provider or missing API key
    """
    models = settings.models
    provider = models.provider.strip().lower()
    if provider not in OPENAI_COMPATIBLE_PROVIDERS:
        raise ModelConfigurationError(
            f"Unsupported model provider: {models.provider}",
            user_message=(
                f"Unsupported model provider '{models.provider}'. "
                f"Supported: {', '.join(sorted(OPENAI_COMPATIBLE_PROVIDERS))}."
            ),
        )
    kwargs = _chat_kwargs(models)

    def resolver() -> BaseChatModel:
        return ChatOpenAI(**kwargs)

    return resolver


__all__ = ["ModelResolver", "build_model_resolver"]
