"""
Match Settings Models for Configuration Management
"""
import os
from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from resume_match.utils.exceptions import ConfigurationError


class LLMProvider(str, Enum):
    """Supported text-generation back ends"""
    OLLAMA = "ollama"
    OPENAI = "openai"


class LLMSettings(BaseModel):
    """External model configuration"""
    provider: LLMProvider = Field(default=LLMProvider.OLLAMA, description="Wire protocol of the model endpoint")
    base_url: Optional[str] = Field(default=None, description="Model endpoint; remote scoring is skipped when unset")
    model_name: str = Field(default="llama3.1:8b", description="Model name")
    api_key: Optional[str] = Field(default=None, description="Bearer token for OpenAI-compatible endpoints")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Generation temperature")
    timeout: float = Field(default=10.0, gt=0.0, le=60.0, description="Request timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        if v is None:
            return v
        v = v.strip().rstrip("/")
        return v or None

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


class ScoringWeights(BaseModel):
    """Weights for combining sub-scores into the overall score"""
    skill: float = Field(default=0.40, ge=0.0, le=1.0)
    experience: float = Field(default=0.30, ge=0.0, le=1.0)
    education: float = Field(default=0.15, ge=0.0, le=1.0)
    keyword: float = Field(default=0.15, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_total_weights(self):
        total = self.skill + self.experience + self.education + self.keyword
        if abs(total - 1.0) > 0.01:  # Allow small floating point errors
            raise ValueError("Scoring weights must sum to 1.0")
        return self


class ReadinessThresholds(BaseModel):
    """Score bands for the readiness label"""
    excellent: int = Field(default=80, ge=0, le=100)
    good: int = Field(default=60, ge=0, le=100)
    fair: int = Field(default=40, ge=0, le=100)

    @model_validator(mode="after")
    def validate_order(self):
        if not self.excellent > self.good > self.fair:
            raise ValueError("Thresholds must satisfy excellent > good > fair")
        return self


class MatchSettings(BaseModel):
    """Complete configuration of one scoring engine instance"""
    llm: LLMSettings = Field(default_factory=LLMSettings)
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: ReadinessThresholds = Field(default_factory=ReadinessThresholds)
    max_recommendations: int = Field(default=4, ge=1, le=10)
    vocabulary_path: Optional[str] = Field(default=None, description="JSON vocabulary artifact; built-in lists when unset")

    @classmethod
    def from_env(cls) -> "MatchSettings":
        """Build settings from RESUME_MATCH_* environment variables (and .env)."""
        load_dotenv()
        llm = {
            "provider": os.getenv("RESUME_MATCH_LLM_PROVIDER"),
            "base_url": os.getenv("RESUME_MATCH_LLM_BASE_URL"),
            "model_name": os.getenv("RESUME_MATCH_LLM_MODEL"),
            "api_key": os.getenv("RESUME_MATCH_LLM_API_KEY"),
            "temperature": os.getenv("RESUME_MATCH_LLM_TEMPERATURE"),
            "timeout": os.getenv("RESUME_MATCH_LLM_TIMEOUT"),
        }
        try:
            return cls(
                llm=LLMSettings(**{k: v for k, v in llm.items() if v not in (None, "")}),
                vocabulary_path=os.getenv("RESUME_MATCH_VOCABULARY") or None,
            )
        except PydanticValidationError as e:
            first = e.errors()[0]
            key = ".".join(str(p) for p in first.get("loc", ()))
            raise ConfigurationError(
                f"Invalid environment configuration: {first.get('msg')}",
                config_key=key or None,
                cause=e,
            ) from e
