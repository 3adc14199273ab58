from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class DocRecord(BaseModel):
    id: str
    path: str
    text: str


class MatchInput(BaseModel):
    resume_text: str
    job_description: str


class ExperienceLevel(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    UNKNOWN = "unknown"


class ExtractedProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    skills: Tuple[str, ...] = ()
    technologies: Tuple[str, ...] = ()
    experience_level: ExperienceLevel = ExperienceLevel.UNKNOWN
    experience_years: Optional[int] = None
    education_signals: Tuple[str, ...] = ()
    achievements: Tuple[str, ...] = ()


class SubScoreName(str, Enum):
    SKILL = "skill"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    KEYWORD = "keyword"


class SubScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: SubScoreName
    value: int = Field(ge=0, le=100)
    evidence: Dict[str, Any] = Field(default_factory=dict)


class ScoreBreakdown(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    sub_scores: List[SubScore]
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)

    def sub_score(self, name: SubScoreName) -> Optional[SubScore]:
        for s in self.sub_scores:
            if s.name == name:
                return s
        return None


class ExternalAssessment(BaseModel):
    """Reply shape accepted from the text-generation model"""
    overall_score: int = Field(ge=0, le=100, strict=True)
    strengths: List[str]
    gaps: List[str]
    summary: str


class MatchResult(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    sub_scores: List[SubScore] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    readiness_level: str = ""
    source: Literal["heuristic", "external"] = "heuristic"
    degraded: bool = False
    degraded_reason: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    summary: Optional[str] = None

    def sub_score(self, name: SubScoreName) -> Optional[SubScore]:
        for s in self.sub_scores:
            if s.name == name:
                return s
        return None


class RankedResume(BaseModel):
    resume_id: str
    rank: int
    result: MatchResult
