from pydantic import BaseModel

from models.schemas.narrative import NarrativeAnalysis
from models.schemas.report import DetailedAnalysisReport


class AnalysisResponse(BaseModel):
    """Quick résumé/job analysis: keyword matching plus optional narrative."""
    overall_score: int = 0
    keyword_score: int = 0
    matched_keywords: list[str] = []
    missing_keywords: list[str] = []
    keyword_density: dict[str, float] = {}
    tfidf_score: float = 0.0
    summary: str = ""
    strengths: list[str] = []
    weaknesses: list[str] = []
    narrative: NarrativeAnalysis | None = None
    degraded: bool = False
    scoring_method: str = "narrative"  # "narrative" | "keyword_only"


class CandidateReportResponse(BaseModel):
    report_id: str
    report: DetailedAnalysisReport
