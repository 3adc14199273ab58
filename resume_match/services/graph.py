from functools import lru_cache
from typing import Any, Dict, List, Optional, TypedDict, Union

from langgraph.graph import StateGraph, END

from resume_match.helpers.text import ensure_text
from resume_match.helpers.vocabulary import Vocabulary, load_vocabulary
from resume_match.models.models import (
    ExternalAssessment, ExtractedProfile, MatchInput, MatchResult, ScoreBreakdown
)
from resume_match.models.settings import MatchSettings
from resume_match.services.extractor import extract_profile
from resume_match.services.matching import readiness_level, score
from resume_match.services.recommendations import recommend
from resume_match.services.remote import RemoteScorer
from resume_match.utils.exceptions import ValidationError
from resume_match.utils.logging_config import PerformanceMonitor, get_logger, log_function_call

logger = get_logger(__name__)


class MatchState(TypedDict, total=False):
    resume_text: str
    job_description: str
    use_external_model: bool
    settings: MatchSettings
    vocabulary: Vocabulary
    remote_scorer: Any
    resume_profile: ExtractedProfile
    job_profile: ExtractedProfile
    breakdown: ScoreBreakdown
    assessment: Optional[ExternalAssessment]
    degraded_reason: Optional[str]
    result: MatchResult


@lru_cache(maxsize=8)
def _vocabulary_for(path: Optional[str]) -> Vocabulary:
    return load_vocabulary(path)


def node_extract(state: MatchState):
    vocab = state["vocabulary"]
    return {
        "resume_profile": extract_profile(state["resume_text"], vocab),
        "job_profile": extract_profile(state["job_description"], vocab),
    }


def node_score(state: MatchState):
    breakdown = score(
        state["resume_profile"],
        state["job_profile"],
        resume_text=state["resume_text"],
        job_description=state["job_description"],
        weights=state["settings"].weights,
        vocabulary=state["vocabulary"],
    )
    return {"breakdown": breakdown}


def route_after_score(state: MatchState) -> str:
    return "remote" if state.get("use_external_model") else "recommend"


def node_remote(state: MatchState):
    scorer = state.get("remote_scorer") or RemoteScorer(state["settings"].llm)
    try:
        assessment = scorer.assess(state["resume_text"], state["job_description"])
        return {"assessment": assessment, "degraded_reason": None}
    except Exception as e:
        # any collaborator failure degrades to the local result
        logger.warning(f"Remote scoring unavailable, using local heuristics: {e}")
        return {"assessment": None, "degraded_reason": str(e) or e.__class__.__name__}


def node_recommend(state: MatchState):
    settings: MatchSettings = state["settings"]
    breakdown: ScoreBreakdown = state["breakdown"]
    assessment: Optional[ExternalAssessment] = state.get("assessment")
    limit = settings.max_recommendations

    if assessment is not None:
        overall = assessment.overall_score
        recs = [f"Address gap: {g}" for g in assessment.gaps if g and g.strip()]
        for r in recommend(overall, breakdown.sub_scores, breakdown.matched_skills, breakdown.missing_skills, limit):
            if r not in recs:
                recs.append(r)
        result = MatchResult(
            overall_score=overall,
            matched_skills=breakdown.matched_skills,
            missing_skills=breakdown.missing_skills,
            sub_scores=breakdown.sub_scores,
            recommendations=recs[:limit],
            readiness_level=readiness_level(overall, settings.thresholds),
            source="external",
            strengths=list(assessment.strengths),
            summary=assessment.summary,
        )
        return {"result": result}

    overall = breakdown.overall_score
    degraded = bool(state.get("use_external_model"))
    result = MatchResult(
        overall_score=overall,
        matched_skills=breakdown.matched_skills,
        missing_skills=breakdown.missing_skills,
        sub_scores=breakdown.sub_scores,
        recommendations=recommend(overall, breakdown.sub_scores, breakdown.matched_skills, breakdown.missing_skills, limit),
        readiness_level=readiness_level(overall, settings.thresholds),
        source="heuristic",
        degraded=degraded,
        degraded_reason=state.get("degraded_reason") if degraded else None,
    )
    return {"result": result}


def build_graph():
    g = StateGraph(MatchState)
    g.add_node("extract", node_extract)
    g.add_node("score", node_score)
    g.add_node("remote", node_remote)
    g.add_node("recommend", node_recommend)
    g.set_entry_point("extract")
    g.add_edge("extract", "score")
    g.add_conditional_edges("score", route_after_score, {"remote": "remote", "recommend": "recommend"})
    g.add_edge("remote", "recommend")
    g.add_edge("recommend", END)
    return g.compile()


MATCH_GRAPH = build_graph()


def _coerce_input(match_input: Union[MatchInput, Dict[str, Any]]) -> MatchInput:
    if isinstance(match_input, MatchInput):
        resume_text, job_description = match_input.resume_text, match_input.job_description
    elif isinstance(match_input, dict):
        missing = [k for k in ("resume_text", "job_description") if k not in match_input]
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}", field=missing[0])
        resume_text, job_description = match_input["resume_text"], match_input["job_description"]
    else:
        raise ValidationError(
            f"match_input must be a MatchInput or dict, got {type(match_input).__name__}",
            field="match_input",
            value=match_input,
        )
    ensure_text(resume_text, "resume_text")
    ensure_text(job_description, "job_description")
    return MatchInput(resume_text=resume_text, job_description=job_description)


@log_function_call
def evaluate_match(
    match_input: Union[MatchInput, Dict[str, Any]],
    use_external_model: bool = False,
    settings: Optional[MatchSettings] = None,
    remote_scorer=None,
    vocabulary: Optional[Vocabulary] = None,
) -> MatchResult:
    """
    Score one resume against one job description.

    The local heuristic pipeline always runs. With ``use_external_model`` the
    external model is consulted as well; if it fails (or no endpoint is
    configured) the local result is returned with ``degraded=True``.
    Only non-string inputs are rejected, with ValidationError.
    """
    data = _coerce_input(match_input)
    settings = settings or MatchSettings()
    vocab = vocabulary or _vocabulary_for(settings.vocabulary_path)

    with PerformanceMonitor("evaluate_match", logger=logger):
        state = MATCH_GRAPH.invoke({
            "resume_text": data.resume_text,
            "job_description": data.job_description,
            "use_external_model": bool(use_external_model),
            "settings": settings,
            "vocabulary": vocab,
            "remote_scorer": remote_scorer,
        })

    result: MatchResult = state["result"]
    logger.info(
        f"Match evaluated: score={result.overall_score} source={result.source} degraded={result.degraded} "
        f"matched={len(result.matched_skills)} missing={len(result.missing_skills)}"
    )
    return result


def score_resume_workflow(resume_text: str, job_description: str, **kwargs) -> MatchResult:
    return evaluate_match(MatchInput.model_construct(resume_text=resume_text, job_description=job_description), **kwargs)
