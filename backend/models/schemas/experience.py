"""Experience analysis output and requirements."""

from typing import Literal

from pydantic import BaseModel, Field

from models.schemas.profile import Experience


class ExperienceRequirements(BaseModel):
    roles: list[str] = []
    min_years_total: float = Field(0.0, ge=0.0)
    required_skills: list[str] = []
    preferred_industries: list[str] = []


class ExperienceMatch(BaseModel):
    required_role: str
    matched_experience: Experience
    relevance: float = Field(0.0, ge=0.0, le=1.0)
    matching_skills: list[str] = []
    missing_skills: list[str] = []
    duration_match: float = Field(0.0, ge=0.0, le=1.0)


class ExperienceGaps(BaseModel):
    duration: bool = False
    skills: list[str] = []
    roles: list[str] = []


class ExperienceAnalysis(BaseModel):
    matches: list[ExperienceMatch] = []
    total_relevant_experience: int = 0  # months
    score: int = Field(0, ge=0, le=100)
    gaps: ExperienceGaps = ExperienceGaps()
    industry_matches: list[str] = []
    recommendations: list[str] = []


class CareerProgression(BaseModel):
    progression: Literal["positive", "stable", "irregular"] = "stable"
    observations: list[str] = []
    short_term_positions: int = 0
    promotions: int = 0
    role_changes: int = 0
