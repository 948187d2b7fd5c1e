"""Configuration models and YAML loader for the recruiting pipeline."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

ORACLE_NAMES = {"extraction", "matching", "ranking", "authenticity", "story", "email"}


def _check_provider(v: str) -> str:
    from recruitflow.llm import available_providers

    v = v.lower().strip()
    if v not in available_providers():
        msg = f"provider must be one of {available_providers()}, got '{v}'"
        raise ValueError(msg)
    return v


class LLMOverride(BaseModel):
    """Per-oracle provider/model override."""

    provider: str | None = None
    model: str | None = None

    @field_validator("provider")
    @classmethod
    def provider_known(cls, v: str | None) -> str | None:
        return None if v is None else _check_provider(v)


class LLMConfig(BaseModel):
    """Which LLM backs the oracle clients."""

    provider: str = "gemini"
    model: str | None = None
    overrides: dict[str, LLMOverride] = Field(default_factory=dict)

    @field_validator("provider")
    @classmethod
    def provider_known(cls, v: str) -> str:
        return _check_provider(v)

    @field_validator("overrides")
    @classmethod
    def overrides_name_oracles(cls, v: dict[str, LLMOverride]) -> dict[str, LLMOverride]:
        unknown = set(v) - ORACLE_NAMES
        if unknown:
            msg = f"unknown oracle override(s): {sorted(unknown)}; expected {sorted(ORACLE_NAMES)}"
            raise ValueError(msg)
        return v

    def for_oracle(self, name: str) -> tuple[str, str | None]:
        """Return (provider, model) for an oracle, applying any override."""
        override = self.overrides.get(name)
        if override is None:
            return self.provider, self.model
        provider = override.provider or self.provider
        # A provider override without a model falls back to that provider's default
        if override.model is not None:
            model = override.model
        elif override.provider is not None:
            model = None
        else:
            model = self.model
        return provider, model


class PipelineConfig(BaseModel):
    """Thresholds and excerpt lengths used by the application pipeline."""

    story_min_ranking: float = Field(default=70.0, ge=0.0, le=100.0)
    email_min_ranking: float = Field(default=80.0, ge=0.0, le=100.0)
    flag_confidence_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    cover_letter_excerpt_chars: int = Field(default=1000, ge=1)
    job_excerpt_chars: int = Field(default=1000, ge=1)
    experience_excerpt_chars: int = Field(default=150, ge=1)


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/recruitflow.db"


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
