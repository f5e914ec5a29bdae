"""Langfuse tracing for every chat model the Director builds.

Configuration (environment):
    - LANGFUSE_PUBLIC_KEY / LANGFUSE_SECRET_KEY / LANGFUSE_HOST: required to enable tracing
    - LANGFUSE_ENABLED: set to "false" to turn tracing off without warnings

When Langfuse is not configured the models are returned without callbacks, so the
Director works the same with or without tracing.
"""

from __future__ import annotations

import importlib
import logging
import os
from typing import Any

from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

logger = logging.getLogger(__name__)

_REQUIRED_LANGFUSE_VARS = ("LANGFUSE_PUBLIC_KEY", "LANGFUSE_SECRET_KEY", "LANGFUSE_HOST")
_EXPORTER_LOGGERS = ("opentelemetry", "opentelemetry.exporter", "opentelemetry.sdk")

# Optional provider classes: import path -> (class name, pip extra).
_OPTIONAL_CHAT_MODELS = {
    "langchain_anthropic": ("ChatAnthropic", "anthropic"),
    "langchain_google_genai": ("ChatGoogleGenerativeAI", "gemini"),
}
_chat_classes: dict[str, Any] = {}

_tracing_handler: BaseCallbackHandler | None = None
_tracing_checked = False


def _langfuse_enabled() -> bool:
    return os.getenv("LANGFUSE_ENABLED", "true").lower() != "false"


class _ExportFailureHandler(logging.Handler):
    """Turns OpenTelemetry exporter noise into a single warning per failed export."""

    def emit(self, record: logging.LogRecord) -> None:
        if not _langfuse_enabled() or record.levelno < logging.WARNING:
            return
        cause = record.exc_info[1] if record.exc_info else None
        logger.warning("Langfuse trace export failed: %s", cause or record.getMessage())


def _route_exporter_logs() -> None:
    handler = _ExportFailureHandler()
    for name in _EXPORTER_LOGGERS:
        exporter_logger = logging.getLogger(name)
        exporter_logger.handlers = [handler]
        exporter_logger.propagate = False


_route_exporter_logs()


def _get_langfuse_handler() -> BaseCallbackHandler | None:
    """Return the process-wide Langfuse callback handler, creating it on first use.

    Returns None when tracing is disabled, not configured or failed to start.
    Initialization is attempted once per process.
    """
    global _tracing_handler, _tracing_checked

    if not _langfuse_enabled():
        return None
    if _tracing_checked:
        return _tracing_handler
    _tracing_checked = True

    missing = [name for name in _REQUIRED_LANGFUSE_VARS if not os.getenv(name)]
    if missing:
        logger.warning("Langfuse tracing disabled, missing: %s", ", ".join(missing))
        return None

    try:
        from langfuse.langchain import CallbackHandler

        _tracing_handler = CallbackHandler()
    except ImportError:
        logger.warning("Langfuse tracing disabled: langfuse package not installed")
    except Exception as e:
        logger.warning("Langfuse tracing disabled: %s", e)
    else:
        logger.info("Langfuse tracing enabled (host: %s)", os.getenv("LANGFUSE_HOST"))
    return _tracing_handler


def get_langfuse_callbacks() -> list[BaseCallbackHandler]:
    """Langfuse callbacks for manual injection, e.g. `graph.invoke(..., config={"callbacks": ...})`."""
    handler = _get_langfuse_handler()
    return [handler] if handler is not None else []


def is_observability_enabled() -> bool:
    """Whether chat models built here carry Langfuse callbacks."""
    return _get_langfuse_handler() is not None


def _chat_class(module: str) -> Any:
    """Import an optional chat model class, caching it after the first import."""
    if module not in _chat_classes:
        class_name, extra = _OPTIONAL_CHAT_MODELS[module]
        try:
            _chat_classes[module] = getattr(importlib.import_module(module), class_name)
        except ImportError as e:
            raise ImportError(
                f"{module.replace('_', '-')} not installed. Install with:\n"
                f"  pip install 'lead-intel-director[{extra}]'"
            ) from e
    return _chat_classes[module]


def _with_tracing(name: str | None, model_kwargs: dict[str, Any]) -> dict[str, Any]:
    callbacks = get_langfuse_callbacks()
    if callbacks:
        model_kwargs["callbacks"] = callbacks
    if name:
        model_kwargs["name"] = name
    return model_kwargs


def get_observed_llm(
    model: str | None,
    base_url: str | None = None,
    api_key: str | None = None,
    temperature: float = 0,
    name: str | None = None,
    **kwargs: Any,
) -> BaseChatModel:
    """Create a ChatOpenAI model, traced when Langfuse is configured.

    Args:
        model: Model name. Falls back to the langchain-openai default when None.
        base_url: Endpoint of an OpenAI-compatible server.
        api_key: API key. Falls back to OPENAI_API_KEY.
        temperature: Sampling temperature.
        name: Name the model is reported under in traces.
        **kwargs: Extra ChatOpenAI arguments (e.g. max_tokens).
    """
    model_kwargs: dict[str, Any] = {"temperature": temperature, **kwargs}
    for key, value in (("model", model), ("base_url", base_url), ("api_key", api_key)):
        if value:
            model_kwargs[key] = value
    return ChatOpenAI(**_with_tracing(name, model_kwargs))


def get_observed_anthropic_llm(
    model: str,
    api_key: str | None = None,
    temperature: float = 0,
    name: str | None = None,
    **kwargs: Any,
) -> BaseChatModel:
    """Create a ChatAnthropic model, traced when Langfuse is configured.

    Requires the `anthropic` extra (langchain-anthropic).
    """
    chat_anthropic = _chat_class("langchain_anthropic")
    model_kwargs: dict[str, Any] = {"model": model, "temperature": temperature, **kwargs}
    key = (api_key or os.getenv("ANTHROPIC_API_KEY") or "").strip()
    if key:
        model_kwargs["api_key"] = key
    return chat_anthropic(**_with_tracing(name, model_kwargs))


def get_observed_gemini_llm(
    model: str | None = None,
    api_key: str | None = None,
    temperature: float = 0,
    name: str | None = None,
    **kwargs: Any,
) -> BaseChatModel:
    """Create a ChatGoogleGenerativeAI model, traced when Langfuse is configured.

    Requires the `gemini` extra (langchain-google-genai). GOOGLE_API_KEY is read
    before GEMINI_API_KEY.

    Raises:
        ValueError: If no API key is available.
    """
    chat_gemini = _chat_class("langchain_google_genai")
    key = (api_key or os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or "").strip()
    if not key:
        raise ValueError("Gemini API key not found. Set GOOGLE_API_KEY or GEMINI_API_KEY, or pass api_key=...")

    model_kwargs: dict[str, Any] = {
        "model": (model or os.getenv("GEMINI_MODEL", "gemini-2.5-flash")).strip(),
        "temperature": temperature,
        "api_key": key,
        **kwargs,
    }
    return chat_gemini(**_with_tracing(name, model_kwargs))
