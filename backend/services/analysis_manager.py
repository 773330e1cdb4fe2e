"""Candidate analysis: runs every analyzer and combines them into one report.

Flow (one candidate):
    text / structured content
      ├─ SkillsAnalyzer          → SkillAnalysis
      ├─ ExperienceAnalyzer      → ExperienceAnalysis + CareerProgression
      ├─ EducationAnalyzer       → EducationAnalysis
      ├─ RedFlagAnalyzer         → RedFlagAnalysis
      ├─ LocationAnalyzer        → LocationAnalysis        (if configured)
      └─ CustomCriteriaAnalyzer  → CustomCriteriaAnalysis  (if configured)
                       ↓
         weighted overall score + summary → DetailedAnalysisReport

Scoring is synchronous and pure; ``analyze`` runs it in a worker thread
alongside the Gemini narrative, and ``analyze_multiple`` fans candidates
out under a concurrency limit before comparing the successful reports.
"""

import asyncio
import datetime
import logging
from collections.abc import Awaitable, Callable

from config import settings
from errors import AppError, ExternalServiceError, InputValidationError
from models.schemas.location import JobLocationRequirements
from models.schemas.narrative import NarrativeAnalysis
from models.schemas.profile import Location, StructuredContent
from models.schemas.report import (
    AnalysisConfig,
    BatchAnalysisResult,
    CandidateComparison,
    CandidateFailure,
    CandidateInput,
    CategoryScores,
    DetailedAnalysisReport,
    ReportSummary,
)
from services import gemini_client
from services.custom_criteria_analyzer import CustomCriteriaAnalyzer
from services.education_analyzer import EducationAnalyzer
from services.experience_analyzer import ExperienceAnalyzer
from services.location_analyzer import LocationAnalyzer
from services.red_flag_analyzer import RedFlagAnalyzer
from services.resume_structurer import structure_resume
from services.skills_analyzer import SkillsAnalyzer
from services.skills_catalog import SkillsCatalog

logger = logging.getLogger(__name__)

COMPONENT_WEIGHTS: dict[str, float] = {
    "skills": 0.3,
    "experience": 0.3,
    "education": 0.2,
    "location": 0.1,
    "custom_criteria": 0.1,
}

STRENGTH_THRESHOLD = 80
HIGH_RISK_THRESHOLD = 60
MAX_RECOMMENDATIONS = 5

# Comparison
STRONG_OVERALL = 80
STRONG_EXPERIENCE = 85
INTERVIEW_RISK_THRESHOLD = 50

ASSESSMENT_BANDS: list[tuple[int, str]] = [
    (80, "Excellent match: recommended for interview"),
    (70, "Good match"),
    (60, "Acceptable match: needs verification"),
]
NOT_MEETING_ASSESSMENT = "Does not meet the requirements"

_CATEGORY_LABELS = {
    "skills": "skills",
    "experience": "experience",
    "education": "education",
    "location": "location",
    "custom_criteria": "custom criteria",
}

NarrativeGenerator = Callable[[str, str], Awaitable[NarrativeAnalysis]]


def weighted_overall(scores: CategoryScores) -> int:
    """Weighted mean of the present components, renormalized by their weights."""
    present = {
        name: value
        for name, value in scores.model_dump().items()
        if value is not None
    }
    total_weight = sum(COMPONENT_WEIGHTS[name] for name in present)
    if total_weight == 0:
        return 0
    weighted = sum(value * COMPONENT_WEIGHTS[name] for name, value in present.items())
    return min(100, round(weighted / total_weight))


def assessment_for(score: int) -> str:
    for threshold, label in ASSESSMENT_BANDS:
        if score >= threshold:
            return label
    return NOT_MEETING_ASSESSMENT


def _profile_text(content: StructuredContent) -> str:
    """Flatten structured content for the text-based analyzers."""
    lines = list(content.skills)
    for exp in content.experience:
        lines.append(" ".join(filter(None, [exp.role, exp.company, exp.description, *exp.skills])))
    for edu in content.education:
        lines.append(" ".join(filter(None, [edu.degree, edu.field, edu.institution])))
    lines.extend(c.name for c in content.certifications)
    return "\n".join(lines)


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


class AnalysisAggregator:
    def __init__(
        self,
        catalog: SkillsCatalog | None = None,
        skills_analyzer: SkillsAnalyzer | None = None,
        experience_analyzer: ExperienceAnalyzer | None = None,
        education_analyzer: EducationAnalyzer | None = None,
        location_analyzer: LocationAnalyzer | None = None,
        red_flag_analyzer: RedFlagAnalyzer | None = None,
        custom_criteria_analyzer: CustomCriteriaAnalyzer | None = None,
        narrative_generator: NarrativeGenerator | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        self.catalog = catalog or SkillsCatalog()
        self.skills_analyzer = skills_analyzer or SkillsAnalyzer(self.catalog)
        self.experience_analyzer = experience_analyzer or ExperienceAnalyzer(self.skills_analyzer)
        self.education_analyzer = education_analyzer or EducationAnalyzer()
        self.location_analyzer = location_analyzer or LocationAnalyzer()
        self.red_flag_analyzer = red_flag_analyzer or RedFlagAnalyzer()
        self.custom_criteria_analyzer = custom_criteria_analyzer or CustomCriteriaAnalyzer()
        self.narrative_generator = narrative_generator or gemini_client.generate_narrative
        self.max_concurrency = max_concurrency or settings.max_concurrent_analyses

    # ------------------------------------------------------------------
    # Single candidate
    # ------------------------------------------------------------------

    def analyze_candidate(
        self,
        text: str,
        structured_content: StructuredContent | None,
        config: AnalysisConfig,
        today: datetime.date | None = None,
    ) -> DetailedAnalysisReport:
        """Score one candidate against one job configuration."""
        content = structured_content or structure_resume(text, today)
        text = text if text.strip() else _profile_text(content)
        warnings = self._partial_data_warnings(content)

        skills = self.skills_analyzer.analyze_skills(text, config.required_skills, content.skills)
        experience = self.experience_analyzer.analyze_experience(content.experience, config.experience, today)
        progression = self.experience_analyzer.detect_career_progression(content.experience)
        education = self.education_analyzer.analyze_education(
            content.education, content.certifications, config.education, today
        )
        red_flags = self.red_flag_analyzer.analyze_profile(
            content.experience, content.education, content.certifications
        )

        location = None
        if config.location is not None:
            candidate_location = content.location or (
                Location(city=content.contact.location) if content.contact.location else None
            )
            if candidate_location is None:
                warnings.append("Location requirements were set but the candidate's location is unknown")
            else:
                location = self.location_analyzer.analyze_location(
                    candidate_location,
                    content.mobility,
                    Location(
                        city=config.location.city,
                        region=config.location.region,
                        country=config.location.country,
                        coordinates=config.location.coordinates,
                    ),
                    JobLocationRequirements(
                        is_remote_allowed=config.location.remote,
                        is_hybrid_allowed=config.location.hybrid,
                        required_on_site_days=config.location.required_on_site_days,
                        max_allowed_commute_distance=config.location.max_commute_distance,
                    ),
                )

        custom = None
        if config.custom_criteria:
            custom = self.custom_criteria_analyzer.analyze_criteria(text, config.custom_criteria)

        category_scores = CategoryScores(
            skills=skills.score,
            experience=experience.score,
            education=education.score,
            location=location.score if location else None,
            custom_criteria=custom.score if custom else None,
        )
        overall = weighted_overall(category_scores)

        preferred_found: list[str] = []
        if config.preferred_skills:
            preferred = self.skills_analyzer.analyze_skills(text, config.preferred_skills, content.skills)
            preferred_found = [m.skill for m in preferred.matches]

        weaknesses: list[str] = []
        if skills.missing:
            weaknesses.append(f"Missing required skills: {', '.join(skills.missing)}")
        if experience.gaps.duration:
            weaknesses.append(
                f"Relevant experience below requirement ({experience.total_relevant_experience} months "
                f"vs {round(config.experience.min_years_total * 12)} months)"
            )
        if red_flags.overall_risk > HIGH_RISK_THRESHOLD:
            weaknesses.append(f"High profile risk ({red_flags.overall_risk}/100)")
        if custom and custom.missing_required:
            weaknesses.append(f"Missing required criteria: {', '.join(custom.missing_required)}")

        strengths = [
            f"Strong {_CATEGORY_LABELS[name]} match ({score}%)"
            for name, score in category_scores.model_dump().items()
            if score is not None and score >= STRENGTH_THRESHOLD
        ]
        if preferred_found:
            strengths.append(f"Also brings preferred skills: {', '.join(preferred_found)}")

        recommendations = _dedupe(
            skills.recommendations
            + experience.recommendations
            + education.recommendations
            + (location.recommendations if location else [])
            + red_flags.recommendations
            + (custom.recommendations if custom else [])
        )[:MAX_RECOMMENDATIONS]

        report = DetailedAnalysisReport(
            overall_score=overall,
            category_scores=category_scores,
            skills_analysis=skills,
            experience_analysis=experience,
            education_analysis=education,
            location_analysis=location,
            red_flags=red_flags,
            custom_criteria_analysis=custom,
            career_progression=progression,
            summary=ReportSummary(
                key_strengths=strengths,
                key_weaknesses=weaknesses,
                recommendations=recommendations,
                overall_assessment=assessment_for(overall),
            ),
            warnings=warnings,
        )
        logger.info("Candidate scored %d (%s)", overall, report.summary.overall_assessment)
        return report

    @staticmethod
    def _partial_data_warnings(content: StructuredContent) -> list[str]:
        warnings = []
        if not content.skills:
            warnings.append("No skills could be extracted")
        if not content.experience:
            warnings.append("No work experience could be extracted")
        if not content.education:
            warnings.append("No education could be extracted")
        return warnings

    async def _narrative(self, text: str, job_description: str) -> NarrativeAnalysis | None:
        try:
            return await self.narrative_generator(text, job_description)
        except ExternalServiceError as e:
            logger.warning("Narrative enrichment failed, report marked degraded: %s", e.message)
            return None

    async def analyze(
        self, candidate: CandidateInput, config: AnalysisConfig, job_description: str = ""
    ) -> DetailedAnalysisReport:
        """Score a candidate and, given a job description, enrich it with a narrative."""
        if not candidate.text.strip() and candidate.structured_content is None:
            raise InputValidationError(
                f"Candidate '{candidate.name}' has neither resume text nor structured content"
            )

        scoring = asyncio.to_thread(
            self.analyze_candidate, candidate.text, candidate.structured_content, config
        )
        if not (job_description.strip() and candidate.text.strip()):
            return await scoring

        report, narrative = await asyncio.gather(
            scoring, self._narrative(candidate.text, job_description)
        )
        if narrative is None:
            return report.model_copy(update={
                "degraded": True,
                "warnings": [*report.warnings, "Narrative analysis unavailable"],
            })
        return report.model_copy(update={"narrative": narrative})

    # ------------------------------------------------------------------
    # Several candidates
    # ------------------------------------------------------------------

    async def analyze_multiple(
        self, candidates: list[CandidateInput], config: AnalysisConfig, job_description: str = ""
    ) -> BatchAnalysisResult:
        """Analyze candidates concurrently; one failure never aborts the batch."""
        names = [c.name for c in candidates]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InputValidationError("Candidate names must be unique", details={"duplicates": duplicates})

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(candidate: CandidateInput) -> DetailedAnalysisReport:
            async with semaphore:
                return await self.analyze(candidate, config, job_description)

        results = await asyncio.gather(*(run_one(c) for c in candidates), return_exceptions=True)

        reports: dict[str, DetailedAnalysisReport] = {}
        failures: list[CandidateFailure] = []
        for candidate, result in zip(candidates, results):
            if isinstance(result, AppError):
                logger.warning("Analysis of %s failed: %s", candidate.name, result.message)
                failures.append(CandidateFailure(
                    name=candidate.name, error_code=result.error_code, message=result.message
                ))
            elif isinstance(result, BaseException):  # CancelledError is not an Exception
                logger.error("Analysis of %s failed: %s", candidate.name, result, exc_info=result)
                failures.append(CandidateFailure(
                    name=candidate.name, error_code="ANALYSIS_FAILED", message=str(result) or type(result).__name__
                ))
            else:
                reports[candidate.name] = result

        logger.info("Batch analysis: %d succeeded, %d failed", len(reports), len(failures))
        return BatchAnalysisResult(
            individual_analyses=reports,
            failures=failures,
            comparison=self.compare_candidates(reports),
        )

    def compare_candidates(self, reports: dict[str, DetailedAnalysisReport]) -> CandidateComparison:
        # sorted() is stable: equal scores keep input order
        ordered = sorted(reports.items(), key=lambda item: item[1].overall_score, reverse=True)

        ranking = [
            f"{name}: {report.overall_score} - {report.summary.overall_assessment}"
            for name, report in ordered
        ]

        matched = {
            name: [m.skill for m in report.skills_analysis.matches]
            for name, report in reports.items()
        }
        unique_strengths: dict[str, list[str]] = {}
        for name, skills in matched.items():
            others = {
                s.lower()
                for other, other_skills in matched.items()
                if other != name
                for s in other_skills
            }
            unique_strengths[name] = [s for s in skills if s.lower() not in others]

        strength_comparison: list[str] = []
        for name, report in ordered:
            if report.overall_score >= STRONG_OVERALL:
                strength_comparison.append(
                    f"{name} is a strong overall match ({report.overall_score}%)"
                )
            if report.category_scores.experience >= STRONG_EXPERIENCE:
                strength_comparison.append(
                    f"{name} has highly relevant experience ({report.category_scores.experience}%)"
                )

        recommendations: list[str] = []
        if ordered:
            best_name, best = ordered[0]
            recommendations.append(
                f"Prioritize {best_name}, the best match with an overall score of {best.overall_score}"
            )
        risky = [name for name, report in ordered if report.red_flags.overall_risk > INTERVIEW_RISK_THRESHOLD]
        if risky:
            recommendations.append(
                f"Run in-depth interviews to clarify profile risks: {', '.join(risky)}"
            )

        return CandidateComparison(
            ranking=ranking,
            strength_comparison=strength_comparison,
            unique_strengths=unique_strengths,
            recommendations=recommendations,
        )
