"""Education and certification analysis output and requirements."""

from pydantic import BaseModel, Field

from models.schemas.profile import Certification, Education


class DegreeRequirement(BaseModel):
    degree: str
    field: str = ""


class EducationRequirements(BaseModel):
    degrees: list[DegreeRequirement] = []
    required_certifications: list[str] = []
    minimum_degree_level: int | None = Field(None, ge=0, le=5)


class EducationMatch(BaseModel):
    required_degree: str
    required_field: str = ""
    matched_education: Education
    relevance: float = Field(0.0, ge=0.0, le=1.0)
    level_match: float = 0.0
    field_match: float = 0.0
    institution_ranking: float = 0.0


class CertificationMatch(BaseModel):
    required_certification: str
    matched_certification: Certification
    relevance: float = Field(0.0, ge=0.0, le=1.0)
    is_expired: bool = False


class EducationGaps(BaseModel):
    degrees: list[str] = []
    fields: list[str] = []
    certifications: list[str] = []


class EducationAnalysis(BaseModel):
    matches: list[EducationMatch] = []
    certification_matches: list[CertificationMatch] = []
    education_score: float = Field(0.0, ge=0.0, le=1.0)
    certification_score: float = Field(0.0, ge=0.0, le=1.0)
    score: int = Field(0, ge=0, le=100)
    gaps: EducationGaps = EducationGaps()
    expired_certifications: list[str] = []
    recommendations: list[str] = []
