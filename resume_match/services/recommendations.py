from typing import List, Optional

from resume_match.models.models import SubScore, SubScoreName

MAX_RECOMMENDATIONS = 4
NAMED_SKILLS = 3


def _find(sub_scores: List[SubScore], name: SubScoreName) -> Optional[SubScore]:
    for s in sub_scores:
        if s.name == name:
            return s
    return None


def has_experience_gap(sub_scores: List[SubScore]) -> bool:
    exp = _find(sub_scores, SubScoreName.EXPERIENCE)
    if exp is None:
        return False
    if "gap" in exp.evidence:
        return bool(exp.evidence["gap"])
    return exp.value < 100 and bool(exp.evidence.get("required_years"))


def recommend(
    overall_score: int,
    sub_scores: List[SubScore],
    matched_skills: List[str],
    missing_skills: List[str],
    limit: int = MAX_RECOMMENDATIONS,
) -> List[str]:
    """Fixed-order rules; each contributes at most one line."""
    out = []

    if overall_score < 60:
        out.append("Consider tailoring your resume more closely to this job posting")

    if missing_skills:
        out.append(
            "Consider highlighting these missing skills if you have them: "
            + ", ".join(missing_skills[:NAMED_SKILLS])
        )

    if matched_skills:
        out.append(
            f"Great match on these skills: {', '.join(matched_skills[:NAMED_SKILLS])} - make sure they're prominent"
        )

    if has_experience_gap(sub_scores):
        out.append("Emphasize relevant projects and accomplishments to compensate for experience gap")

    if overall_score >= 80:
        out.append("Excellent match! Your resume aligns well with this job posting")

    return out[:limit]
