"""Pydantic models for the planner → generator → explainer pipeline."""

from __future__ import annotations

import time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def now_ms() -> int:
    """Current time as epoch milliseconds (the unit the browser client uses)."""
    return int(time.time() * 1000)


class ComponentDefinition(BaseModel):
    """One entry of the fixed component library."""

    name: str
    allowed_props: list[str]
    props: dict[str, list[str]] = {}  # prop name -> enumerated allowed values
    description: str = ""


class GenerationPlan(BaseModel):
    """Structured plan produced by the planner step.

    The model is asked for ``layoutStructure`` (camelCase, as the browser
    client expects); snake_case input is accepted too.
    """

    model_config = ConfigDict(populate_by_name=True)

    intent: str = ""
    layout_structure: str = Field(default="", alias="layoutStructure")
    components: list[str] = []
    reasoning: list[str] = []

    @field_validator("components", "reasoning", mode="before")
    @classmethod
    def coerce_to_list(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        return v

    @field_validator("intent", "layout_structure", mode="before")
    @classmethod
    def coerce_none_to_empty(cls, v: object) -> object:
        return "" if v is None else v


class ValidationResult(BaseModel):
    """Outcome of the static component-usage check."""

    valid: bool
    errors: list[str] = []
    warnings: list[str] = []


class AgentStep(BaseModel):
    """Record of a single LLM call made during a generation run."""

    step: Literal["planner", "generator", "repair", "explainer"]
    input: str
    output: str
    timestamp: int = Field(default_factory=now_ms)


class TokenUsage(BaseModel):
    """Prompt and completion tokens summed over every call in a run."""

    input_tokens: int = 0
    output_tokens: int = 0


class GenerationResult(BaseModel):
    """Everything a generation run produces."""

    plan: GenerationPlan
    code: str
    explanation: str = ""
    component_usage: list[str] = []
    validation: ValidationResult = ValidationResult(valid=True)
    steps: list[AgentStep] = []
    usage: TokenUsage = Field(default_factory=TokenUsage)
