"""Unified LLM interface via LiteLLM; supports 100+ providers."""

from __future__ import annotations

import json
import logging
from typing import Any

from saturn_scheduler.config import Config
from saturn_scheduler.errors import ConfigurationError

log = logging.getLogger(__name__)

_PREFIXED_PROVIDERS = ("anthropic", "openai", "gemini")

_JSON_SYSTEM_SUFFIX = "\n\nReply with a single valid JSON object only: no prose, no markdown fences."
_JSON_USER_SUFFIX = "\n\n(Answer in JSON.)"


def _model_name(cfg: Config) -> str:
    """LiteLLM model string, e.g. ``gemini/gemini-1.5-flash``.

    A model that already names its provider (``vertex_ai/...``) is passed
    through, as is any model for a provider LiteLLM resolves by name alone.
    """
    if "/" in cfg.llm_model or cfg.llm_provider not in _PREFIXED_PROVIDERS:
        return cfg.llm_model
    return f"{cfg.llm_provider}/{cfg.llm_model}"


def require_api_key(cfg: Config) -> str:
    """Return the provider key or fail the request with a configuration error."""
    key = cfg.llm_api_key
    if not key:
        raise ConfigurationError(f"{cfg.llm_provider} API key not configured")
    return key


def _prepare_json_mode(system: str, messages: list[dict]) -> tuple[str, list[dict]]:
    # Some providers only honour JSON mode when "json" appears in the user turn
    messages = [dict(m) for m in messages]
    last_user = next((m for m in reversed(messages) if m.get("role") == "user"), None)
    if last_user is not None and "json" not in last_user.get("content", "").lower():
        last_user["content"] += _JSON_USER_SUFFIX
    return system + _JSON_SYSTEM_SUFFIX, messages


def chat(
    cfg: Config,
    system: str,
    messages: list[dict],
    json_mode: bool = False,
    temperature: float | None = None,
    timeout: float | None = None,
) -> str:
    from litellm import completion

    if json_mode:
        system, messages = _prepare_json_mode(system, messages)

    kwargs: dict[str, Any] = {
        "model": _model_name(cfg),
        "messages": [{"role": "system", "content": system}] + messages,
        "max_tokens": 4096,
        "api_key": require_api_key(cfg),
    }
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    if temperature is not None:
        kwargs["temperature"] = temperature
    if timeout is not None:
        kwargs["timeout"] = timeout

    resp = completion(**kwargs)
    return resp.choices[0].message.content or ""


def strip_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def chat_json(cfg: Config, system: str, messages: list[dict], **kwargs: Any) -> dict | list:
    raw = chat(cfg, system, messages, json_mode=True, **kwargs)
    if not raw.strip():
        raise ValueError(f"Empty response from {cfg.llm_provider}")
    return json.loads(strip_fences(raw))
