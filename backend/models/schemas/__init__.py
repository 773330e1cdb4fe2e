"""Pydantic contracts shared by the analyzers and the API."""

from models.schemas.profile import StructuredContent
from models.schemas.skills import SkillAnalysis
from models.schemas.experience import ExperienceAnalysis
from models.schemas.education import EducationAnalysis
from models.schemas.location import LocationAnalysis
from models.schemas.red_flags import RedFlagAnalysis
from models.schemas.criteria import CustomCriteriaAnalysis
from models.schemas.narrative import NarrativeAnalysis
from models.schemas.report import AnalysisConfig, BatchAnalysisResult, DetailedAnalysisReport

__all__ = [
    "StructuredContent",
    "SkillAnalysis",
    "ExperienceAnalysis",
    "EducationAnalysis",
    "LocationAnalysis",
    "RedFlagAnalysis",
    "CustomCriteriaAnalysis",
    "NarrativeAnalysis",
    "AnalysisConfig",
    "BatchAnalysisResult",
    "DetailedAnalysisReport",
]
