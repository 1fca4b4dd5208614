"""Configuration schema — validates uigen.yml."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class StepTokens(BaseModel):
    """Completion budget for each pipeline step."""

    planner: int = 1024
    generator: int = 4096
    explainer: int = 512


class LLMConfig(BaseModel):
    """Settings for the chat-completion provider."""

    model: str = "gpt-4o"
    # Any OpenAI-compatible endpoint; empty means the provider default.
    base_url: str = ""
    max_tokens: StepTokens = StepTokens()


class AppConfig(BaseModel):
    """Top-level configuration loaded from uigen.yml.

    Every field has a default, so an empty file (or no file) is valid.
    """

    # Which generator serves requests
    backend: Literal["agent", "rule_based", "remote"] = "agent"
    backend_url: str = "http://localhost:8000"

    llm: LLMConfig = LLMConfig()

    # Self-correction passes when generated code fails validation
    max_repair_attempts: int = Field(default=1, ge=0, le=3)
    max_prompt_chars: int = Field(default=2000, gt=0)

    # In-memory session limits
    max_versions: int = Field(default=50, gt=0)
    max_sessions: int = Field(default=100, gt=0)

    # Server
    host: str = "127.0.0.1"
    port: int = Field(default=8000, gt=0, lt=65536)
    cors_origins: list[str] = ["*"]

    @field_validator("backend_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def check_remote_url(self) -> "AppConfig":
        if self.backend == "remote" and not self.backend_url.startswith(("http://", "https://")):
            raise ValueError(
                f"backend_url must be an http(s) URL when backend is 'remote', got {self.backend_url!r}"
            )
        return self
