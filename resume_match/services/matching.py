import math
from collections import Counter
from typing import Dict, List, Optional, Tuple

from resume_match.helpers.text import content_words, tokenize
from resume_match.helpers.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from resume_match.models.models import ExtractedProfile, ScoreBreakdown, SubScore, SubScoreName
from resume_match.models.settings import ReadinessThresholds, ScoringWeights

NEUTRAL = 50
TOP_KEYWORDS = 20


def round_half_up(x: float) -> int:
    # round(9) strips float noise such as 62.49999999 before the half-up step
    return int(math.floor(round(x, 9) + 0.5))


def clamp(x: int, lo: int = 0, hi: int = 100) -> int:
    return max(lo, min(hi, x))


def skill_overlap(resume_skills, job_skills) -> Tuple[List[str], List[str]]:
    cv = {s.lower() for s in resume_skills}
    matched = [s for s in job_skills if s.lower() in cv]
    missing = [s for s in job_skills if s.lower() not in cv]
    return matched, missing


def skill_score(resume: ExtractedProfile, job: ExtractedProfile) -> SubScore:
    matched, missing = skill_overlap(resume.skills, job.skills)
    tech_matched, tech_missing = skill_overlap(resume.technologies, job.technologies)
    value = round_half_up(100 * len(matched) / len(job.skills)) if job.skills else NEUTRAL
    return SubScore(name=SubScoreName.SKILL, value=clamp(value), evidence={
        "matched": matched,
        "missing": missing,
        "resume_skills": list(resume.skills),
        "job_skills": list(job.skills),
        "matched_technologies": tech_matched,
        "missing_technologies": tech_missing,
    })


def experience_score(resume: ExtractedProfile, job: ExtractedProfile) -> SubScore:
    have = resume.experience_years or 0
    need = job.experience_years or 0
    if need > 0:
        if have >= need:
            value = 100
        elif have >= need * 0.8:
            value = 80
        elif have >= need * 0.6:
            value = 60
        else:
            value = 30
    elif have > 0:
        value = 70  # has experience, requirement unclear
    else:
        value = NEUTRAL
    return SubScore(name=SubScoreName.EXPERIENCE, value=value, evidence={
        "resume_years": resume.experience_years,
        "required_years": job.experience_years,
        "resume_level": resume.experience_level.value,
        "required_level": job.experience_level.value,
        "gap": need > 0 and have < need,
    })


def education_score(resume: ExtractedProfile, job: ExtractedProfile) -> SubScore:
    have = len(resume.education_signals)
    need = len(job.education_signals)
    if need > 0:
        value = min(100, round_half_up(100 * have / max(1, need)))
    else:
        value = 80 if have > 0 else NEUTRAL
    return SubScore(name=SubScoreName.EDUCATION, value=value, evidence={
        "resume_signals": list(resume.education_signals),
        "job_signals": list(job.education_signals),
    })


def top_keywords(job_description: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY, limit: int = TOP_KEYWORDS) -> Tuple[List[str], int]:
    """Most frequent content words of a posting (ties by first occurrence) and the distinct-word count."""
    words = content_words(job_description, vocabulary.stop_word_set)
    counts = Counter(words)
    first_seen: Dict[str, int] = {}
    for i, w in enumerate(words):
        first_seen.setdefault(w, i)
    ranked = sorted(counts, key=lambda w: (-counts[w], first_seen[w]))
    return ranked[:limit], len(counts)


def keyword_score(resume_text: str, job_description: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> SubScore:
    keywords, distinct = top_keywords(job_description, vocabulary)
    resume_tokens = set(tokenize(resume_text))
    matched = [w for w in keywords if w in resume_tokens]
    if keywords:
        value = round_half_up(100 * len(matched) / min(TOP_KEYWORDS, distinct))
    else:
        value = NEUTRAL
    return SubScore(name=SubScoreName.KEYWORD, value=clamp(value), evidence={
        "keywords": keywords,
        "matched": matched,
        "total_keywords": distinct,
    })


def combine(sub_scores: List[SubScore], weights: ScoringWeights = None) -> int:
    weights = weights or ScoringWeights()
    w = {
        SubScoreName.SKILL: weights.skill,
        SubScoreName.EXPERIENCE: weights.experience,
        SubScoreName.EDUCATION: weights.education,
        SubScoreName.KEYWORD: weights.keyword,
    }
    total = sum(w[s.name] * s.value for s in sub_scores)
    return clamp(round_half_up(total))


def score(
    resume_profile: ExtractedProfile,
    job_profile: ExtractedProfile,
    resume_text: str = "",
    job_description: str = "",
    weights: Optional[ScoringWeights] = None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> ScoreBreakdown:
    """
    Score a resume profile against a job profile.

    The raw texts feed keyword density only; when they are omitted that
    dimension falls back to its neutral default.
    """
    skill = skill_score(resume_profile, job_profile)
    subs = [
        skill,
        experience_score(resume_profile, job_profile),
        education_score(resume_profile, job_profile),
        keyword_score(resume_text, job_description, vocabulary),
    ]
    return ScoreBreakdown(
        overall_score=combine(subs, weights),
        sub_scores=subs,
        matched_skills=list(skill.evidence["matched"]),
        missing_skills=list(skill.evidence["missing"]),
    )


def readiness_level(total: int, thresholds: ReadinessThresholds = None) -> str:
    thresholds = thresholds or ReadinessThresholds()
    if total >= thresholds.excellent:
        return "Excellent Match - Apply Now!"
    if total >= thresholds.good:
        return "Good Match - Minor improvements suggested"
    if total >= thresholds.fair:
        return "Fair Match - Consider tailoring resume"
    return "Low Match - Significant improvements needed"
