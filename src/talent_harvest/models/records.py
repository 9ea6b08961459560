"""Candidate and normalized record models."""
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecordKind(str, Enum):
    """What a crawl harvests."""
    INTERVIEW = "interview"
    JOB = "job"


class Category(str, Enum):
    """Role families a crawl can target."""
    FRONTEND = "frontend"
    BACKEND = "backend"
    ALGORITHM = "algorithm"
    TESTING = "testing"
    DEVOPS = "devops"
    PRODUCT = "product"
    DATA = "data"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionType(str, Enum):
    ALGORITHM = "algorithm"
    SYSTEM_DESIGN = "system-design"
    INTERNALS = "internals"
    BEHAVIORAL = "behavioral"
    PROJECT = "project"
    TECHNICAL = "technical"


class JobType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class CrawlCandidate(BaseModel):
    """
    Raw item pulled off a page before cleaning and classification.

    ``fields`` holds whatever per-field text the adapter's selectors found
    (``title``, ``content``, ``company``, ``salary`` ...). ``raw_text`` is the
    concatenation used for relevance checks.
    """
    model_config = ConfigDict(frozen=True)

    raw_text: str
    source_url: str
    source_site: str
    extracted_at: datetime = Field(default_factory=utc_now)
    fields: Dict[str, str] = Field(default_factory=dict)

    def field(self, name: str) -> str:
        return self.fields.get(name, "")


class InterviewQuestion(BaseModel):
    """Normalized interview question."""
    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    category: Category
    difficulty: Difficulty
    type: QuestionType
    company: str = "unknown"
    tags: FrozenSet[str] = Field(default_factory=frozenset)
    source_url: str
    source_site: str
    crawled_at: datetime = Field(default_factory=utc_now)

    @field_serializer("tags")
    def _serialize_tags(self, tags: FrozenSet[str]):
        return sorted(tags)

    @property
    def canonical_text(self) -> str:
        return self.question


class JobPosition(BaseModel):
    """Normalized job posting."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    category: Category
    company: str = "unknown"
    salary: str = "negotiable"
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_period: Optional[str] = None
    location: str = "unspecified"
    experience: str = "unspecified"
    education: str = "unspecified"
    job_type: JobType = JobType.FULL_TIME
    description: str = ""
    requirements: str = ""
    tags: FrozenSet[str] = Field(default_factory=frozenset)
    source_url: str
    source_site: str
    crawled_at: datetime = Field(default_factory=utc_now)

    @field_serializer("tags")
    def _serialize_tags(self, tags: FrozenSet[str]):
        return sorted(tags)

    @property
    def canonical_text(self) -> str:
        return self.title


NormalizedRecord = Union[InterviewQuestion, JobPosition]
