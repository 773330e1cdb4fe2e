"""Analysis configuration, per-candidate report and batch comparison."""

from pydantic import BaseModel, ConfigDict, Field

from models.schemas.criteria import CustomCriteriaAnalysis, CustomCriterion
from models.schemas.education import EducationAnalysis, EducationRequirements
from models.schemas.experience import (
    CareerProgression,
    ExperienceAnalysis,
    ExperienceRequirements,
)
from models.schemas.location import LocationAnalysis
from models.schemas.narrative import NarrativeAnalysis
from models.schemas.profile import Coordinates, StructuredContent
from models.schemas.red_flags import RedFlagAnalysis
from models.schemas.skills import SkillAnalysis


class LocationConfig(BaseModel):
    city: str
    region: str | None = None
    country: str | None = None
    coordinates: Coordinates | None = None
    remote: bool = False
    hybrid: bool = False
    max_commute_distance: float | None = None
    required_on_site_days: int | None = None


class AnalysisConfig(BaseModel):
    """What the job asks for. Optional blocks switch their analyzer on."""
    required_skills: list[str] = []
    preferred_skills: list[str] = []
    experience: ExperienceRequirements = ExperienceRequirements()
    education: EducationRequirements = EducationRequirements()
    location: LocationConfig | None = None
    custom_criteria: list[CustomCriterion] = []


class CategoryScores(BaseModel):
    skills: int = 0
    experience: int = 0
    education: int = 0
    location: int | None = None
    custom_criteria: int | None = None


class ReportSummary(BaseModel):
    key_strengths: list[str] = []
    key_weaknesses: list[str] = []
    recommendations: list[str] = []
    overall_assessment: str = ""


class DetailedAnalysisReport(BaseModel):
    """One candidate against one job. Frozen once built."""
    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(0, ge=0, le=100)
    category_scores: CategoryScores
    skills_analysis: SkillAnalysis
    experience_analysis: ExperienceAnalysis
    education_analysis: EducationAnalysis
    location_analysis: LocationAnalysis | None = None
    red_flags: RedFlagAnalysis
    custom_criteria_analysis: CustomCriteriaAnalysis | None = None
    career_progression: CareerProgression = CareerProgression()
    summary: ReportSummary = ReportSummary()
    narrative: NarrativeAnalysis | None = None
    degraded: bool = False  # narrative enrichment failed
    warnings: list[str] = []  # empty structured sections, skipped analyzers


class CandidateInput(BaseModel):
    name: str = Field(..., min_length=1)
    text: str = ""
    structured_content: StructuredContent | None = None


class CandidateFailure(BaseModel):
    name: str
    error_code: str
    message: str


class CandidateComparison(BaseModel):
    ranking: list[str] = []  # "name: score - assessment", best first
    strength_comparison: list[str] = []
    unique_strengths: dict[str, list[str]] = {}
    recommendations: list[str] = []


class BatchAnalysisResult(BaseModel):
    individual_analyses: dict[str, DetailedAnalysisReport] = {}
    failures: list[CandidateFailure] = []
    comparison: CandidateComparison = CandidateComparison()
