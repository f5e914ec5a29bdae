"""LLM Factory for centralized chat model creation and configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from langchain_core.language_models import BaseChatModel

from director.agents.roles import get_role
from director.agents.types import WorkerType
from director.integrations.observability import (
    get_observed_anthropic_llm,
    get_observed_gemini_llm,
    get_observed_llm,
)

PROVIDERS = ("anthropic", "openai", "gemini")

PLANNER_NAME = "director-planner"


class DefaultLLMFactory:
    """Factory for creating configured chat models with observability.

    Provider resolution (when none is requested): ANTHROPIC_API_KEY, then
    OPENAI_API_KEY, then GEMINI_API_KEY/GOOGLE_API_KEY. Role model choices that
    belong to another provider (e.g. a `claude-*` model on OpenAI) are replaced by
    that provider's default model.
    """

    def __init__(self, provider: str | None = None, agent_config: dict[str, dict[str, Any]] | None = None):
        """Initialize the factory.

        Args:
            provider: Force a provider ('anthropic', 'openai' or 'gemini'). Defaults to
                the DIRECTOR_PROVIDER environment variable, then auto-detection.
            agent_config: Optional per-name overrides, keyed by the model name used for
                tracing (e.g. {"worker:research": {"model": "gpt-4.1"}}).
        """
        requested = provider or os.getenv("DIRECTOR_PROVIDER")
        if requested and requested.lower() not in (*PROVIDERS, "google"):
            raise ValueError(f"Unknown provider: {requested!r}")
        self.provider = requested.lower() if requested else None
        self.agent_config = agent_config or {}
        self._check_credentials()

    def _check_credentials(self) -> None:
        """Cache credential availability."""
        self.has_anthropic = bool(os.getenv("ANTHROPIC_API_KEY"))
        self.has_openai = bool(os.getenv("OPENAI_API_KEY") or os.getenv("API_KEY"))
        self.has_gemini = bool(os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"))

    def resolve_provider(self, requested: str | None = None) -> str:
        """Pick the provider to use for a model."""
        provider = (requested or self.provider or "").lower()
        if provider == "google":
            provider = "gemini"
        if provider:
            return provider
        if self.has_anthropic:
            return "anthropic"
        if self.has_openai:
            return "openai"
        if self.has_gemini:
            return "gemini"
        raise ValueError("No completion service credentials found (ANTHROPIC_API_KEY, OPENAI_API_KEY or GEMINI_API_KEY).")

    def get_llm(
        self,
        name: str,
        provider: str | None = None,
        model: str | None = None,
        temperature: float = 0,
        **kwargs: Any,
    ) -> BaseChatModel:
        """Get a chat model with the given configuration.

        Args:
            name: Name for the node/worker (used for trace naming and overrides).
            provider: 'anthropic', 'openai', 'gemini', or None (auto-detect).
            model: Specific model name to use.
            temperature: Sampling temperature.
            **kwargs: Additional model arguments (e.g. max_tokens).

        Returns:
            Configured BaseChatModel.
        """
        overrides = dict(self.agent_config.get(name, {}))
        resolved_provider = self.resolve_provider(overrides.pop("provider", None) or provider)
        resolved_model = overrides.pop("model", None) or model
        resolved_temp = overrides.pop("temperature", temperature)
        combined_kwargs = {**kwargs, **overrides}

        if resolved_model and resolved_model.startswith("claude") and resolved_provider != "anthropic":
            resolved_model = None

        if resolved_provider == "anthropic":
            return get_observed_anthropic_llm(
                model=resolved_model or os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
                temperature=resolved_temp,
                name=name,
                **combined_kwargs,
            )
        if resolved_provider == "gemini":
            return get_observed_gemini_llm(
                model=resolved_model,
                temperature=resolved_temp,
                name=name,
                **combined_kwargs,
            )
        if resolved_provider == "openai":
            return get_observed_llm(
                model=resolved_model or os.getenv("MODEL_NAME"),
                temperature=resolved_temp,
                name=name,
                **combined_kwargs,
            )
        raise ValueError(f"Unknown provider: {resolved_provider!r}")

    def get_planner_llm(self, temperature: float = 0.3) -> BaseChatModel:
        """Chat model used by the plan builder (low temperature for consistent plans)."""
        return self.get_llm(PLANNER_NAME, temperature=temperature, max_tokens=2000)

    def get_worker_llm(
        self,
        worker_type: WorkerType,
        temperature: float = 0.7,
        agents_dir: str | Path | None = None,
    ) -> BaseChatModel:
        """Chat model for one worker role, using its model choice and token budget."""
        role = get_role(worker_type, agents_dir)
        return self.get_llm(
            f"worker:{worker_type.value}",
            model=role.model_choice,
            temperature=temperature,
            max_tokens=role.token_budget,
        )
