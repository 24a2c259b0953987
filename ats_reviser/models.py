"""
Structured resume and analysis result models.

Field aliases match the JSON the model is asked to produce (camelCase);
attributes are snake_case. Instances are frozen once parsed.
"""

import math
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_BULLET_RE = re.compile(r"^\s*[*\-•]\s*")


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ResumeContact(_Model):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    location: Optional[str] = None


class SkillCategory(_Model):
    category: str
    skills: List[str] = Field(default_factory=list)


class ExperienceEntry(_Model):
    role: str
    company: str
    location: Optional[str] = None
    dates: str
    achievements: List[str] = Field(default_factory=list)


class EducationEntry(_Model):
    degree: str
    institution: str
    location: Optional[str] = None
    graduation_date: Optional[str] = Field(default=None, alias="graduationDate")


class StructuredResume(_Model):
    contact: ResumeContact
    summary: str = ""
    skills: List[SkillCategory] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)


class AnalysisResult(_Model):
    original_score: int = Field(alias="originalAtsScore")
    revised_score: int = Field(alias="revisedAtsScore")
    feedback: str
    revised_resume: StructuredResume = Field(alias="revisedResume")

    @field_validator("original_score", "revised_score", mode="before")
    @classmethod
    def _normalize_score(cls, value):
        # bool is an int subclass, reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("score must be a number")
        if not math.isfinite(value):
            raise ValueError("score must be finite")
        return max(0, min(100, int(round(value))))

    def feedback_points(self) -> List[str]:
        """Bullet items of the markdown feedback, markers stripped."""
        points = []
        for line in self.feedback.splitlines():
            if _BULLET_RE.match(line):
                point = _BULLET_RE.sub("", line, count=1).strip()
                if point:
                    points.append(point)
        return points


def score_band(score: int) -> str:
    if score >= 75:
        return "good"
    if score >= 50:
        return "fair"
    return "poor"
