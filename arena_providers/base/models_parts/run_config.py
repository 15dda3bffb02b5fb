"""
RunConfig: per-model, user-editable generation settings.

Purpose
-------
Validate numeric ranges and enumerated options when a configuration is built,
and check the cross-field budget rule against a concrete model right before a
run starts (``validate_for``). The budget rule is deliberately not enforced at
construction so an invalid configuration can still be submitted; it then
surfaces as an errored run without any network call.

External dependencies: Pydantic only.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...config.defaults import (
    DEFAULT_OUTPUT_TOKEN_BUDGET,
    DEFAULT_REASONING_SUMMARY,
    DEFAULT_RESPONSE_FORMAT,
    DEFAULT_TEMPERATURE,
    DEFAULT_VERBOSITY,
    REASONING_MIN_OUTPUT_BUDGET,
    SMALL_OUTPUT_BUDGET_THRESHOLD,
    THINKING_DEFAULT_BUDGET,
    THINKING_MIN_OUTPUT_BUDGET,
    THINKING_TEMPERATURE,
)
from ..errors_parts.run_errors import ValidationError
from .provider_profile import ProviderProfile

ReasoningEffort = Literal["minimal", "low", "medium", "high"]
ReasoningSummary = Literal["auto", "concise", "detailed"]
Verbosity = Literal["low", "medium", "high"]
ResponseFormat = Literal["text", "json_object", "json_schema"]


class RunConfig(BaseModel):
    """Generation settings for one model in one submission.

    Attributes:
        temperature: Sampling temperature in ``[0.0, 2.0]``.
        reasoning_effort: Effort hint for reasoning models. Sent instead of
            temperature when the model supports it.
        reasoning_summary: Reasoning summary mode (responses family, o-series).
        verbosity: Text verbosity hint for models that accept one.
        output_token_budget: Maximum output tokens (``> 0``).
        thinking_budget: Extended-thinking budget; ``None`` disables thinking.
        response_format: ``text``, ``json_object`` or ``json_schema``.
        json_schema: Schema used when ``response_format == "json_schema"``.
        web_search / code_execution / url_context: Tool toggles.
        store: Ask the upstream to store the response (responses family).
        include: Extra output fields to include (responses family).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    reasoning_effort: Optional[ReasoningEffort] = None
    reasoning_summary: ReasoningSummary = DEFAULT_REASONING_SUMMARY
    verbosity: Verbosity = DEFAULT_VERBOSITY
    output_token_budget: int = Field(default=DEFAULT_OUTPUT_TOKEN_BUDGET, gt=0)
    thinking_budget: Optional[int] = Field(default=None, gt=0)
    response_format: ResponseFormat = DEFAULT_RESPONSE_FORMAT
    json_schema: Optional[Dict[str, Any]] = None
    web_search: bool = False
    code_execution: bool = False
    url_context: bool = False
    store: bool = False
    include: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _schema_matches_format(self) -> "RunConfig":
        """Require a schema exactly when ``json_schema`` output is requested."""
        if self.response_format == "json_schema" and not self.json_schema:
            raise ValueError("json_schema response format requires a json_schema")
        return self

    def validate_for(self, profile: ProviderProfile) -> None:
        """Check the pre-network invariants of this config against ``profile``.

        Raises:
            ValidationError: when the thinking budget is not strictly below the
                output token budget.
        """
        if self.thinking_budget is not None and self.output_token_budget <= self.thinking_budget:
            raise ValidationError(
                f"Max Tokens ({self.output_token_budget}) must be greater than "
                f"Thinking Budget ({self.thinking_budget})",
                provider=profile.provider,
                model=profile.id,
            )

    @property
    def thinking_enabled(self) -> bool:
        return self.thinking_budget is not None

    @classmethod
    def defaults_for(cls, profile: ProviderProfile) -> "RunConfig":
        """Return the starting configuration for a newly selected model.

        The output budget starts at the model's output limit. Thinking models
        get a thinking budget and temperature 1.0; o-series models get a
        medium reasoning effort; deep-research models need web search.
        """
        values: Dict[str, Any] = {"output_token_budget": profile.output_token_limit}
        if profile.is_deep_research:
            values["web_search"] = True
        if profile.supports_thinking:
            values["thinking_budget"] = THINKING_DEFAULT_BUDGET
            values["temperature"] = THINKING_TEMPERATURE
            if profile.output_token_limit < SMALL_OUTPUT_BUDGET_THRESHOLD:
                values["output_token_budget"] = THINKING_MIN_OUTPUT_BUDGET
        elif profile.supports_reasoning_effort or profile.is_o_series:
            values["reasoning_effort"] = "medium"
            if profile.output_token_limit < SMALL_OUTPUT_BUDGET_THRESHOLD:
                values["output_token_budget"] = REASONING_MIN_OUTPUT_BUDGET
        return cls(**values)


__all__ = ["RunConfig", "ReasoningEffort", "ReasoningSummary", "Verbosity", "ResponseFormat"]
