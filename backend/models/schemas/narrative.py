"""Shape of the LLM narrative analysis.

The model is asked for exactly this JSON; anything that does not validate
is treated as a failed call.
"""

from pydantic import BaseModel, Field


class SkillsNarrative(BaseModel):
    technical: list[str] = []
    soft: list[str] = []
    missing: list[str] = []
    recommendations: list[str] = []


class ExperienceNarrative(BaseModel):
    strengths: list[str] = []
    gaps: list[str] = []
    recommendations: list[str] = []


class NarrativeAnalysis(BaseModel):
    match_score: int = Field(..., ge=0, le=100)
    missing_keywords: list[str] = []
    strong_matches: list[str] = []
    key_findings: list[str] = []
    suggested_improvements: list[str] = []
    skills: SkillsNarrative = SkillsNarrative()
    experience: ExperienceNarrative = ExperienceNarrative()
