import pytest
from pydantic import ValidationError as PydanticValidationError

from resume_match.models.models import ExtractedProfile, SubScore, SubScoreName
from resume_match.models.settings import ScoringWeights
from resume_match.services.extractor import extract_profile
from resume_match.services.matching import (
    combine,
    education_score,
    experience_score,
    keyword_score,
    readiness_level,
    round_half_up,
    score,
    skill_score,
    top_keywords,
)

RESUME = "5 years experience with Python, React, and AWS. Built and led a team."
JOB = (
    "Looking for a Python developer with 3+ years experience, React and Docker skills, "
    "Bachelor's degree preferred."
)


def _subs(skill=50, experience=50, education=50, keyword=50):
    return [
        SubScore(name=SubScoreName.SKILL, value=skill),
        SubScore(name=SubScoreName.EXPERIENCE, value=experience),
        SubScore(name=SubScoreName.EDUCATION, value=education),
        SubScore(name=SubScoreName.KEYWORD, value=keyword),
    ]


class TestScenario:
    """End-to-end scoring of the reference resume/job pair"""

    def test_reference_pair(self):
        """Every sub-score and the weighted total"""
        breakdown = score(extract_profile(RESUME), extract_profile(JOB), RESUME, JOB)
        values = {s.name: s.value for s in breakdown.sub_scores}

        assert breakdown.matched_skills == ["python", "react"]
        assert breakdown.missing_skills == ["docker"]
        assert values[SubScoreName.SKILL] == 67
        assert values[SubScoreName.EXPERIENCE] == 100
        assert values[SubScoreName.EDUCATION] == 0
        assert values[SubScoreName.KEYWORD] == 36
        assert breakdown.overall_score == 62
        assert breakdown.overall_score == round_half_up(0.4 * 67 + 0.3 * 100 + 0.15 * 0 + 0.15 * 36)

    def test_evidence(self):
        """Sub-scores carry the detail behind them"""
        breakdown = score(extract_profile(RESUME), extract_profile(JOB), RESUME, JOB)
        exp = breakdown.sub_score(SubScoreName.EXPERIENCE)
        kw = breakdown.sub_score(SubScoreName.KEYWORD)

        assert exp.evidence["resume_years"] == 5
        assert exp.evidence["required_years"] == 3
        assert exp.evidence["gap"] is False
        assert kw.evidence["total_keywords"] == 11
        assert kw.evidence["matched"] == ["python", "years", "experience", "react"]

    def test_degenerate_profiles(self):
        """Empty profiles score the neutral defaults"""
        breakdown = score(ExtractedProfile(), ExtractedProfile())
        assert [s.value for s in breakdown.sub_scores] == [50, 50, 50, 50]
        assert breakdown.overall_score == 50
        assert breakdown.matched_skills == []
        assert breakdown.missing_skills == []


class TestSubScores:
    """Test cases for each scoring dimension"""

    def test_skill_no_job_skills(self):
        """No job skills gives the neutral default"""
        resume = ExtractedProfile(skills=("python",))
        assert skill_score(resume, ExtractedProfile()).value == 50

    def test_skill_partition(self):
        """Matched and missing partition the job skills in job order"""
        resume = ExtractedProfile(skills=("aws", "python"))
        job = ExtractedProfile(skills=("python", "docker", "aws", "go"))
        sub = skill_score(resume, job)
        assert sub.evidence["matched"] == ["python", "aws"]
        assert sub.evidence["missing"] == ["docker", "go"]
        assert sub.value == 50

    @pytest.mark.parametrize("have,need,expected", [
        (5, 5, 100),
        (6, 5, 100),
        (4, 5, 80),
        (3, 5, 60),
        (2, 5, 30),
        (None, 5, 30),
        (2, None, 70),
        (None, None, 50),
        (0, 0, 50),
    ])
    def test_experience(self, have, need, expected):
        """Experience bands relative to the requirement"""
        sub = experience_score(
            ExtractedProfile(experience_years=have),
            ExtractedProfile(experience_years=need),
        )
        assert sub.value == expected

    def test_experience_gap_flag(self):
        """Gap is flagged only when a requirement is unmet"""
        gap = experience_score(ExtractedProfile(experience_years=2), ExtractedProfile(experience_years=5))
        no_req = experience_score(ExtractedProfile(experience_years=2), ExtractedProfile())
        assert gap.evidence["gap"] is True
        assert no_req.evidence["gap"] is False

    @pytest.mark.parametrize("resume,job,expected", [
        (("bachelor",), ("bachelor", "degree"), 50),
        (("bachelor", "degree", "university"), ("bachelor", "degree"), 100),
        (("degree",), (), 80),
        ((), (), 50),
        ((), ("degree",), 0),
    ])
    def test_education(self, resume, job, expected):
        """Education ratio with floor and neutral defaults"""
        sub = education_score(
            ExtractedProfile(education_signals=resume),
            ExtractedProfile(education_signals=job),
        )
        assert sub.value == expected

    def test_keyword_defaults(self):
        """Postings without qualifying words score neutral"""
        assert keyword_score("anything", "").value == 50
        assert keyword_score("anything", "the and for with this").value == 50

    def test_keyword_empty_resume(self):
        """An empty resume matches no keywords"""
        assert keyword_score("", "Kubernetes operators in production").value == 0

    def test_top_keywords_by_frequency(self):
        """Keywords are ranked by frequency, ties by first occurrence"""
        keywords, distinct = top_keywords("flask django python python django python")
        assert keywords == ["python", "django", "flask"]
        assert distinct == 3

    def test_top_keywords_capped_at_twenty(self):
        """Only twenty keywords are considered"""
        words = " ".join(f"word{chr(97 + i)}xyz" for i in range(25))
        keywords, distinct = top_keywords(words)
        assert len(keywords) == 20
        assert distinct == 25
        resume = " ".join(keywords[:10])
        assert keyword_score(resume, words).value == 50


class TestCombination:
    """Test cases for the weighted total and helpers"""

    @pytest.mark.parametrize("x,expected", [(62.5, 63), (0.5, 1), (66.6666, 67), (62.2, 62), (0.0, 0)])
    def test_round_half_up(self, x, expected):
        """Halves round up"""
        assert round_half_up(x) == expected

    def test_neutral_combination(self):
        """All-neutral sub-scores combine to 50"""
        assert combine(_subs()) == 50

    def test_bounds(self):
        """Extremes stay inside 0..100"""
        assert combine(_subs(0, 0, 0, 0)) == 0
        assert combine(_subs(100, 100, 100, 100)) == 100

    def test_custom_weights(self):
        """Weights are configurable"""
        weights = ScoringWeights(skill=1.0, experience=0.0, education=0.0, keyword=0.0)
        assert combine(_subs(skill=73, experience=10), weights) == 73

    def test_weights_must_sum_to_one(self):
        """Weights that do not sum to 1.0 are rejected"""
        with pytest.raises(PydanticValidationError):
            ScoringWeights(skill=0.5)

    @pytest.mark.parametrize("total,label", [
        (80, "Excellent Match - Apply Now!"),
        (79, "Good Match - Minor improvements suggested"),
        (60, "Good Match - Minor improvements suggested"),
        (59, "Fair Match - Consider tailoring resume"),
        (40, "Fair Match - Consider tailoring resume"),
        (39, "Low Match - Significant improvements needed"),
    ])
    def test_readiness_level(self, total, label):
        """Readiness bands"""
        assert readiness_level(total) == label
