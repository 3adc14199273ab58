"""
Remote scoring through an external text-generation model.

Every way the call can go wrong surfaces as ExternalServiceError or
ModelError so the orchestrator can fall back to the local heuristics.
"""
import requests
from pydantic import ValidationError as PydanticValidationError

from resume_match.helpers.prompts import SCORING_SYSTEM_PROMPT, SCORING_USER_PROMPT
from resume_match.models.models import ExternalAssessment
from resume_match.models.settings import LLMProvider, LLMSettings
from resume_match.utils.exceptions import ExternalServiceError, ModelError
from resume_match.utils.logging_config import get_logger
from resume_match.utils.utils import ollama_generate, openai_chat, parse_json_object

logger = get_logger(__name__)


class RemoteScorer:
    """Scores a resume/job pair with an LLM behind Ollama or an OpenAI-compatible API"""

    def __init__(self, settings: LLMSettings = None):
        self.settings = settings or LLMSettings()

    @property
    def service_name(self) -> str:
        return f"{self.settings.provider.value}:{self.settings.model_name}"

    def _generate(self, prompt: str) -> str:
        s = self.settings
        if s.provider == LLMProvider.OPENAI:
            return openai_chat(
                prompt,
                base_url=s.base_url,
                model=s.model_name,
                api_key=s.api_key,
                system=SCORING_SYSTEM_PROMPT,
                temperature=s.temperature,
                timeout=s.timeout,
            )
        return ollama_generate(
            prompt,
            base_url=s.base_url,
            model=s.model_name,
            system=SCORING_SYSTEM_PROMPT,
            temperature=s.temperature,
            timeout=s.timeout,
        )

    def assess(self, resume_text: str, job_description: str) -> ExternalAssessment:
        s = self.settings
        if not s.is_configured:
            raise ExternalServiceError("No model endpoint configured", service_name=self.service_name)
        if s.provider == LLMProvider.OPENAI and not s.api_key:
            raise ExternalServiceError("API key missing for OpenAI-compatible endpoint", service_name=self.service_name, status_code=401)

        prompt = SCORING_USER_PROMPT.format(job_description=job_description, resume_text=resume_text)
        logger.debug(f"Requesting remote assessment from {self.service_name} (timeout {s.timeout}s)")

        try:
            raw = self._generate(prompt)
        except requests.Timeout as e:
            raise ExternalServiceError(
                f"Model request timed out after {s.timeout}s", service_name=self.service_name, cause=e
            ) from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ExternalServiceError(
                f"Model request failed with HTTP {status}", service_name=self.service_name, status_code=status, cause=e
            ) from e
        except requests.RequestException as e:
            raise ExternalServiceError(
                f"Model request failed: {e}", service_name=self.service_name, cause=e
            ) from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ModelError(
                "Unexpected response envelope from model endpoint",
                model_name=s.model_name, provider=s.provider.value, cause=e
            ) from e

        try:
            assessment = ExternalAssessment(**parse_json_object(raw))
        except (ValueError, TypeError, PydanticValidationError) as e:
            raise ModelError(
                "Model reply did not match the expected schema",
                model_name=s.model_name, provider=s.provider.value, cause=e
            ) from e

        logger.info(f"Remote assessment from {self.service_name}: score {assessment.overall_score}")
        return assessment
