"""Skills analysis output."""

from pydantic import BaseModel, Field


class SkillMatch(BaseModel):
    """A required skill resolved against the résumé."""
    skill: str
    found: str  # variant that was actually seen (skill itself or a synonym)
    category: str | None = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    context: str = ""


class CategoryScore(BaseModel):
    score: int = Field(0, ge=0, le=100)
    matches: list[str] = []
    missing: list[str] = []


class SkillGap(BaseModel):
    category: str
    score: int = 0
    missing: list[str] = []


class SkillAnalysis(BaseModel):
    matches: list[SkillMatch] = []
    missing: list[str] = []
    score: int = Field(0, ge=0, le=100)
    recommendations: list[str] = []
    categories: dict[str, CategoryScore] = {}
    suggestions: dict[str, list[str]] = {}  # missing skill -> related skills
