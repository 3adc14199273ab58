import json
import pytest
import requests
from pydantic import ValidationError as PydanticValidationError
from unittest.mock import MagicMock, patch

from resume_match.models.models import ExternalAssessment
from resume_match.models.settings import LLMProvider, LLMSettings
from resume_match.services.remote import RemoteScorer
from resume_match.utils.exceptions import ExternalServiceError, ModelError
from resume_match.utils.utils import parse_json_object

REPLY = {"overall_score": 71, "strengths": ["SQL"], "gaps": ["Airflow"], "summary": "Solid analyst."}


@pytest.fixture
def openai_scorer():
    return RemoteScorer(LLMSettings(
        provider=LLMProvider.OPENAI,
        base_url="https://api.example.com/v1",
        model_name="gpt-4o-mini",
        api_key="sk-test",
        timeout=5,
    ))


@pytest.fixture
def ollama_scorer():
    return RemoteScorer(LLMSettings(base_url="http://localhost:11434"))


def _response(body, status=200):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error", response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


class TestRemoteScorer:
    """Test cases for the external model client"""

    @patch("resume_match.utils.utils.requests.post")
    def test_openai_success(self, mock_post, openai_scorer):
        """Chat completions reply wrapped in a code fence"""
        content = "```json\n" + json.dumps(REPLY) + "\n```"
        mock_post.return_value = _response({"choices": [{"message": {"content": content}}]})

        assessment = openai_scorer.assess("resume", "job")

        assert assessment.overall_score == 71
        assert assessment.gaps == ["Airflow"]
        args, kwargs = mock_post.call_args
        assert args[0] == "https://api.example.com/v1/chat/completions"
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert kwargs["timeout"] == 5
        assert kwargs["json"]["model"] == "gpt-4o-mini"
        assert "resume" in kwargs["json"]["messages"][-1]["content"]

    @patch("resume_match.utils.utils.requests.post")
    def test_ollama_payload(self, mock_post, ollama_scorer):
        """Ollama requests ask for a single JSON response"""
        mock_post.return_value = _response({"response": json.dumps(REPLY)})

        ollama_scorer.assess("my resume", "the job")

        payload = mock_post.call_args.kwargs["json"]
        assert payload["format"] == "json"
        assert payload["stream"] is False
        assert payload["model"] == "llama3.1:8b"
        assert "the job" in payload["prompt"]
        assert "system" in payload

    @patch("resume_match.utils.utils.requests.post")
    def test_openai_without_key(self, mock_post):
        """Missing API key is rejected before any request"""
        scorer = RemoteScorer(LLMSettings(provider=LLMProvider.OPENAI, base_url="https://api.example.com/v1"))

        with pytest.raises(ExternalServiceError) as exc_info:
            scorer.assess("resume", "job")

        assert exc_info.value.details["status_code"] == 401
        mock_post.assert_not_called()

    def test_not_configured(self):
        """No base URL means no remote scoring"""
        with pytest.raises(ExternalServiceError) as exc_info:
            RemoteScorer().assess("resume", "job")
        assert exc_info.value.details["service_name"] == "ollama:llama3.1:8b"

    @patch("resume_match.utils.utils.requests.post")
    def test_http_error(self, mock_post, ollama_scorer):
        """HTTP failures carry the status code"""
        mock_post.return_value = _response({}, status=401)

        with pytest.raises(ExternalServiceError) as exc_info:
            ollama_scorer.assess("resume", "job")

        assert exc_info.value.details["status_code"] == 401
        assert exc_info.value.error_code == "EXTERNAL_SERVICE_ERROR"

    @patch("resume_match.utils.utils.requests.post")
    def test_connection_error(self, mock_post, ollama_scorer):
        """Network failures become ExternalServiceError"""
        mock_post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ExternalServiceError):
            ollama_scorer.assess("resume", "job")

    @patch("resume_match.utils.utils.requests.post")
    def test_unexpected_envelope(self, mock_post, openai_scorer):
        """Empty choices list is a model error"""
        mock_post.return_value = _response({"choices": []})

        with pytest.raises(ModelError) as exc_info:
            openai_scorer.assess("resume", "job")

        assert exc_info.value.details["provider"] == "openai"

    @patch("resume_match.utils.utils.requests.post")
    def test_missing_field(self, mock_post, ollama_scorer):
        """Replies without every required field are rejected"""
        mock_post.return_value = _response({"response": json.dumps({"overall_score": 50, "strengths": []})})

        with pytest.raises(ModelError):
            ollama_scorer.assess("resume", "job")


class TestExternalAssessment:
    """Test cases for the accepted reply shape"""

    @pytest.mark.parametrize("score", [True, False, "78", 78.5])
    def test_score_must_be_an_integer(self, score):
        """Booleans, strings and floats are not scores"""
        with pytest.raises(PydanticValidationError):
            ExternalAssessment(overall_score=score, strengths=[], gaps=[], summary="")

    @patch("resume_match.utils.utils.requests.post")
    def test_boolean_score_is_a_model_error(self, mock_post, ollama_scorer):
        """A reply with a boolean score is rejected"""
        mock_post.return_value = _response({"response": json.dumps({**REPLY, "overall_score": True})})

        with pytest.raises(ModelError):
            ollama_scorer.assess("resume", "job")


class TestParseJsonObject:
    """Test cases for pulling JSON out of model replies"""

    def test_prose_wrapped(self):
        """Leading and trailing prose is ignored"""
        assert parse_json_object('Here you go: {"a": 1} hope it helps') == {"a": 1}

    @pytest.mark.parametrize("bad", ["", "no braces", "[1, 2]", "{not json}", None])
    def test_rejects(self, bad):
        """Anything without a decodable object raises ValueError"""
        with pytest.raises(ValueError):
            parse_json_object(bad)
