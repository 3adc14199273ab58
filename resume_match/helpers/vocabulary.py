"""
Skill, education and stop-word vocabularies used by the extractor and scorer.

The lists are one versioned artifact. Hosts that need different terms load a
JSON file with the same keys instead of editing the matching code.
"""
import json
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from resume_match.utils.exceptions import ConfigurationError
from resume_match.utils.logging_config import get_logger

logger = get_logger(__name__)


def _unique_lower(items: List[str]) -> List[str]:
    out, seen = [], set()
    for item in items:
        t = " ".join(str(item).lower().split())
        if t and t not in seen:
            seen.add(t)
            out.append(t)
    return out


class Vocabulary(BaseModel):
    """Versioned term lists injected into extraction and scoring"""
    version: str = Field(default="1.0", description="Vocabulary version for tracking changes")
    skills: List[str] = Field(default_factory=list, description="Canonical skill terms")
    skill_aliases: Dict[str, List[str]] = Field(default_factory=dict, description="Alternative spellings per canonical skill")
    technologies: List[str] = Field(default_factory=list, description="Tools and platforms")
    education_keywords: List[str] = Field(default_factory=list, description="Degree and institution keywords")
    seniority_keywords: Dict[str, List[str]] = Field(default_factory=dict, description="Experience level -> keywords")
    achievement_verbs: Dict[str, List[str]] = Field(default_factory=dict, description="Achievement tag -> outcome verbs")
    stop_words: List[str] = Field(default_factory=list, description="Words ignored by keyword density")

    @field_validator("skills", "technologies", "education_keywords", "stop_words")
    @classmethod
    def normalize_terms(cls, v):
        return _unique_lower(v)

    @field_validator("skill_aliases", "seniority_keywords", "achievement_verbs")
    @classmethod
    def normalize_mappings(cls, v):
        return {str(k).lower().strip(): _unique_lower(terms) for k, terms in v.items()}

    @field_validator("seniority_keywords")
    @classmethod
    def validate_levels(cls, v):
        allowed = {"entry", "mid", "senior", "lead"}
        unknown = set(v) - allowed
        if unknown:
            raise ValueError(f"Unknown experience levels: {sorted(unknown)}")
        return v

    @property
    def stop_word_set(self) -> FrozenSet[str]:
        return frozenset(self.stop_words)

    def skill_terms(self, skill: str) -> List[str]:
        return [skill] + self.skill_aliases.get(skill, [])


DEFAULT_VOCABULARY = Vocabulary(
    version="1.0",
    skills=[
        # languages
        "javascript", "typescript", "python", "java", "c++", "c#", "ruby", "php",
        "golang", "rust", "kotlin", "swift", "scala", "sql", "nosql", "html", "css",
        # frameworks and runtimes
        "react", "angular", "vue", "node.js", "express", "django", "flask", "spring",
        # data stores
        "mongodb", "postgresql", "mysql", "redis", "graphql",
        # cloud and delivery
        "aws", "azure", "gcp", "docker", "kubernetes", "git", "ci/cd", "devops",
        "microservices", "rest api",
        # practices
        "agile", "scrum", "testing", "debugging", "api development", "database design",
        "system architecture", "machine learning", "data science", "data analysis",
        "cloud computing", "frontend", "backend", "full stack",
        # soft skills
        "leadership", "communication", "project management", "team management",
        "problem solving", "teamwork", "collaboration", "analytical", "creative",
    ],
    skill_aliases={
        "node.js": ["nodejs", "node js"],
        "postgresql": ["postgres"],
        "kubernetes": ["k8s"],
        "ci/cd": ["cicd", "continuous integration"],
        "c++": ["cpp"],
        "c#": ["csharp"],
        "aws": ["amazon web services"],
        "gcp": ["google cloud"],
        "frontend": ["front end"],
        "backend": ["back end"],
        "full stack": ["fullstack"],
        "rest api": ["restful"],
        "teamwork": ["team player"],
    },
    technologies=[
        "terraform", "ansible", "jenkins", "github actions", "gitlab", "github", "jira",
        "confluence", "figma", "sketch", "photoshop", "illustrator", "tableau", "power bi",
        "elasticsearch", "kafka", "rabbitmq", "spark", "hadoop", "airflow", "snowflake",
        "linux", "nginx", "pandas", "numpy", "tensorflow", "pytorch", "scikit-learn",
    ],
    education_keywords=[
        "bachelor", "master", "phd", "doctorate", "mba", "bsc", "msc", "degree",
        "diploma", "university", "college", "computer science", "mathematics",
    ],
    seniority_keywords={
        "lead": ["lead", "principal", "architect", "director", "head of"],
        "senior": ["senior", "sr"],
        "mid": ["mid level", "intermediate"],
        "entry": ["junior", "jr", "entry level", "entry", "intern", "internship", "trainee", "new grad"],
    },
    achievement_verbs={
        "performance improvements": ["increased", "improved", "boosted", "optimized", "accelerated"],
        "leadership": ["led", "managed", "mentored", "supervised", "directed"],
        "development": ["developed", "built", "created", "designed", "implemented", "launched"],
        "cost savings": ["saved", "reduced", "cut", "lowered"],
    },
    stop_words=[
        "that", "this", "with", "will", "have", "from", "they", "were", "been", "their",
        "there", "what", "when", "which", "your", "about", "would", "into", "also", "than",
        "then", "them", "these", "those", "such", "some", "more", "most", "other", "over",
        "only", "very", "just", "each", "must", "should", "could", "being", "while",
        "where", "after", "before", "within", "across", "through", "including", "upon",
        "here", "does", "doing", "both", "same", "well", "able", "like", "make", "many",
        "much", "onto", "ours", "yours", "whom", "whose", "shall", "between", "under",
        "during", "above", "below", "again", "further", "once", "because", "until",
        "against", "among", "every",
    ],
)


def load_vocabulary(path: Optional[str] = None) -> Vocabulary:
    """Load a vocabulary JSON artifact, or return the built-in one."""
    if not path:
        return DEFAULT_VOCABULARY
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Could not read vocabulary file: {e}",
            config_key="vocabulary_path",
            config_value=path,
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError("Vocabulary file must contain a JSON object", config_key="vocabulary_path", config_value=path)
    try:
        vocab = Vocabulary(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid vocabulary file: {e.error_count()} error(s)",
            config_key="vocabulary_path",
            config_value=path,
            cause=e,
        ) from e
    logger.info(f"Loaded vocabulary {vocab.version} from {path}: {len(vocab.skills)} skills, {len(vocab.technologies)} technologies")
    return vocab
