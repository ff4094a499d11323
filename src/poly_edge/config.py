"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    # Judgment provider credentials (a provider is enabled when its key is set)
    anthropic_api_key: str = ""
    gemini_api_key: str = ""

    # Provider models
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    gemini_model: str = "gemini-2.5-flash-preview-09-2025"

    # Gemini REST base URL
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Sampling settings shared by all providers
    oracle_max_tokens: int = 1024
    oracle_temperature: float = 0.3

    # Per-provider wall clock limit inside one consult() call
    provider_timeout: float = 60.0

    # HTTP request timeout seconds
    http_timeout: float = 30.0

    # Minimum local score for a market to be listed as an edge
    min_edge_score: float = 7.0

    # Number of edges to show
    top_edges: int = 5

    @field_validator("oracle_temperature")
    @classmethod
    def _temperature_in_range(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"oracle_temperature must be in [0, 1], got {v}")
        return v

    @field_validator("provider_timeout", "http_timeout")
    @classmethod
    def _timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeouts must be > 0, got {v}")
        return v

    @field_validator("min_edge_score")
    @classmethod
    def _min_edge_score_in_range(cls, v: float) -> float:
        if not 0.0 <= v <= 10.0:
            raise ValueError(f"min_edge_score must be in [0, 10], got {v}")
        return v

    @field_validator("top_edges")
    @classmethod
    def _top_edges_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"top_edges must be >= 1, got {v}")
        return v


def get_settings() -> Settings:
    """Get a fresh settings instance."""
    return Settings()
