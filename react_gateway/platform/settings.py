"""Application settings and configuration.

This module provides Pydantic settings classes for application configuration,
loaded from environment variables with support for nested configuration
(e.g. ``LLM__PROVIDER=openai``, ``RETRY__MAX_ATTEMPTS=5``).
"""

import logging
from typing import Literal

import pydantic_settings
from pydantic import BaseModel, Field, field_validator

from react_gateway.platform.agent.config import AgentConfig, LlmConfig, RetryPolicy


class AppHTTPSettings(BaseModel):
    host: str = Field("0.0.0.0")
    port: int = Field(8000)
    log_level: str = Field("INFO")
    log_json: bool | None = Field(
        None, description="Override log format: True=JSON, False=console, None=auto"
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v):
        v_upper = v.upper()
        if v_upper not in logging.getLevelNamesMapping():
            raise ValueError(f'invalid value "{v}"')
        return v_upper


class BugsnagSettings(BaseModel):
    api_key: str = Field("")
    release_stage: str = Field("local")

    @field_validator("release_stage")
    @classmethod
    def _validate_bugsnag_release_stage(cls, v):
        if v not in ["development", "production", "local"]:
            raise ValueError(f'invalid bugsnag release stage "{v}"')
        return v


_PROVIDER_PREFIXES = {
    "qwen": "dashscope",
    "openai": "openai",
}


class LlmSettings(BaseModel):
    """Model provider selection and credentials.

    Attributes:
        provider: "qwen" (DashScope) or "openai"
        model: Provider model name, without the LiteLLM prefix
        api_base: Optional OpenAI-compatible base URL override
        api_key: Provider API key
        temperature: Sampling temperature
        request_timeout: Timeout of a single provider round trip, in seconds
    """

    provider: Literal["qwen", "openai"] = "qwen"
    model: str = Field("qwen-plus")
    api_base: str | None = None
    api_key: str | None = None
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    request_timeout: float = Field(60.0, gt=0)

    @property
    def model_name(self) -> str:
        """LiteLLM model identifier for the configured provider."""
        prefix = _PROVIDER_PREFIXES[self.provider]
        if self.model.startswith(f"{prefix}/"):
            return self.model
        return f"{prefix}/{self.model}"

    def to_config(self) -> LlmConfig:
        return LlmConfig(
            model=self.model_name,
            api_key=self.api_key,
            base_url=self.api_base,
            temperature=self.temperature,
            request_timeout=self.request_timeout,
        )


class RetrySettings(BaseModel):
    max_attempts: int = Field(3, ge=1)
    base_delay_ms: int = Field(2000, ge=0)
    backoff_multiplier: int = Field(2, ge=1)

    def to_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            base_delay_ms=self.base_delay_ms,
            backoff_multiplier=self.backoff_multiplier,
        )


class AgentSettings(BaseModel):
    max_iterations: int = Field(15, ge=1)
    max_messages: int = Field(10, ge=2, description="Conversation window, system message and task included")

    def to_config(self) -> AgentConfig:
        return AgentConfig(max_iterations=self.max_iterations, max_messages=self.max_messages)


class StreamSettings(BaseModel):
    timeout_seconds: float = Field(300.0, gt=0)


class Settings(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_nested_delimiter="__")

    app_http: AppHTTPSettings = AppHTTPSettings()
    bugsnag: BugsnagSettings = BugsnagSettings()

    # Model provider configuration
    llm: LlmSettings = LlmSettings()

    # Completion retry policy for rate-limited calls
    retry: RetrySettings = RetrySettings()

    # Reasoning loop limits
    agent: AgentSettings = AgentSettings()

    # SSE streaming
    stream: StreamSettings = StreamSettings()
