"""Application configuration loaded from config.yaml and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

EDIT_SCHEMAS = ("edits", "chat")
API_KEY_ENV_VARS = ("GPT_ASSISTANT_API_KEY", "OPENAI_API_KEY")


@dataclass(frozen=True)
class APIConfig:
    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    edit_model: str = "code-davinci-edit-001"
    chat_model: str = "gpt-3.5-turbo"
    edit_schema: str = "edits"
    system_prompt: str = "You are a helpful coding assistant."
    timeout: float = 30

    def __post_init__(self) -> None:
        if self.edit_schema not in EDIT_SCHEMAS:
            raise ValueError(
                f"edit_schema must be one of {', '.join(EDIT_SCHEMAS)}, got {self.edit_schema!r}"
            )
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"timeout must be between 1 and 600 seconds, got {self.timeout}")
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {self.base_url!r}")


@dataclass(frozen=True)
class PromptConfig:
    """Optional per-action instruction overrides. Empty means use the built-in prompt."""

    optimize: str = ""
    document: str = ""
    analyze: str = ""
    dry: str = ""

    def as_overrides(self) -> dict[str, str]:
        return {
            name: value
            for name, value in (
                ("optimize", self.optimize),
                ("document", self.document),
                ("analyze", self.analyze),
                ("dry", self.dry),
            )
            if value
        }


@dataclass(frozen=True)
class AppConfig:
    api: APIConfig = field(default_factory=APIConfig)
    prompts: PromptConfig = field(default_factory=PromptConfig)


def _api_key_from_env() -> str:
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return ""


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults.

    The credential is taken from the YAML ``api.api_key`` entry when set,
    otherwise from ``GPT_ASSISTANT_API_KEY`` or ``OPENAI_API_KEY``.
    """
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "gpt-assistant" / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            try:
                raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"{p} is not valid YAML: {e}") from e
            if not isinstance(raw, dict):
                raise ValueError(f"{p} must contain a mapping, got {type(raw).__name__}")

    api_raw = _section(raw, "api")
    if not api_raw.get("api_key"):
        api_raw["api_key"] = _api_key_from_env()

    return AppConfig(
        api=APIConfig(**api_raw),
        prompts=PromptConfig(**_section(raw, "prompts")),
    )


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"'{name}' section must be a mapping, got {type(value).__name__}")
    return dict(value)
