"""Quick résumé/job analysis.

1. Extract job keywords (catalog skills + TF-IDF terms)
2. Match them against the résumé (synonyms, fuzzy spellings)
3. Ask Gemini for a narrative analysis; its score replaces the keyword score
4. Without Gemini, fall back to keyword-only scoring
"""

import logging

from errors import ExternalServiceError
from models.responses import AnalysisResponse
from services import gemini_client, keyword_extractor
from services.similarity import tfidf_cosine_similarity
from services.skills_catalog import SkillsCatalog

logger = logging.getLogger(__name__)

MAX_LISTED_KEYWORDS = 10


async def analyze(resume_text: str, job_description: str, catalog: SkillsCatalog) -> AnalysisResponse:
    job_keywords = keyword_extractor.extract_keywords(job_description, catalog)
    matched, missing = keyword_extractor.match_keywords(resume_text, job_keywords, catalog)
    keyword_score = round(len(matched) / len(job_keywords) * 100) if job_keywords else 0
    tfidf_score = tfidf_cosine_similarity(resume_text, job_description)
    density = keyword_extractor.compute_keyword_density(resume_text, matched + missing)

    try:
        narrative = await gemini_client.generate_narrative(
            resume_text, job_description, local_matched=matched, local_missing=missing
        )
    except ExternalServiceError as e:
        logger.warning("Narrative analysis unavailable, using keyword scoring: %s", e.message)
        return AnalysisResponse(
            overall_score=keyword_score,
            keyword_score=keyword_score,
            matched_keywords=matched[:MAX_LISTED_KEYWORDS],
            missing_keywords=missing[:MAX_LISTED_KEYWORDS],
            keyword_density=density,
            tfidf_score=round(tfidf_score, 4),
            summary=(
                "Keyword-only analysis (AI service unavailable). "
                f"{len(matched)} of {len(job_keywords)} job keywords found in the resume."
            ),
            strengths=[f"Matched keyword: {kw}" for kw in matched[:5]],
            weaknesses=[f"Missing keyword: {kw}" for kw in missing[:5]],
            degraded=True,
            scoring_method="keyword_only",
        )

    # Narrative lists first, local matches supplement them
    merged_matched = list(dict.fromkeys(narrative.strong_matches + matched))
    merged_missing = list(dict.fromkeys(narrative.missing_keywords + missing))
    return AnalysisResponse(
        overall_score=narrative.match_score,
        keyword_score=keyword_score,
        matched_keywords=merged_matched[:MAX_LISTED_KEYWORDS],
        missing_keywords=merged_missing[:MAX_LISTED_KEYWORDS],
        keyword_density=density,
        tfidf_score=round(tfidf_score, 4),
        summary=" ".join(narrative.key_findings[:3]),
        strengths=narrative.experience.strengths or narrative.skills.technical[:5],
        weaknesses=narrative.experience.gaps or narrative.skills.missing[:5],
        narrative=narrative,
        scoring_method="narrative",
    )
