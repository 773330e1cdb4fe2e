"""Degree, field and certification matching."""

import datetime
import logging
import re

from models.schemas.education import (
    CertificationMatch,
    EducationAnalysis,
    EducationGaps,
    EducationMatch,
    EducationRequirements,
)
from models.schemas.profile import Certification, Education
from services.text_similarity import jaro_winkler

logger = logging.getLogger(__name__)

# Checked in order; the first key contained in the degree string wins,
# so "bac" must stay after "bachelor".
DEGREE_HIERARCHY: list[tuple[str, int]] = [
    ("doctor", 5), ("phd", 5), ("ph.d", 5),
    ("master", 4), ("mba", 4), ("msc", 4), ("m.sc", 4), ("m.s.", 4),
    ("engineering degree", 4), ("ingénieur", 4),
    ("bachelor", 3), ("licence", 3), ("bsc", 3), ("b.sc", 3), ("b.s.", 3), ("b.a.", 3),
    ("associate", 2), ("dut", 2), ("bts", 2),
    ("high school", 1), ("baccalauréat", 1), ("bac", 1),
]

INSTITUTION_PRESTIGE: dict[str, float] = {
    "massachusetts institute of technology": 1.0,
    "mit": 1.0,
    "stanford": 1.0,
    "harvard": 1.0,
    "oxford": 1.0,
    "cambridge": 1.0,
    "carnegie mellon": 0.95,
    "berkeley": 0.95,
    "eth zurich": 0.95,
    "imperial college": 0.95,
    "polytechnique": 1.0,
    "hec": 1.0,
    "centrale": 0.95,
    "mines": 0.95,
    "essec": 0.95,
    "dauphine": 0.9,
    "sorbonne": 0.9,
    "insa": 0.85,
    "ensimag": 0.85,
}
DEFAULT_INSTITUTION_RANKING = 0.7

_FIELD_SPLIT_RE = re.compile(r"[\s,]+")
FIELD_FUZZY_THRESHOLD = 0.85

W_LEVEL = 0.4
W_FIELD = 0.4
W_INSTITUTION = 0.2
MIN_DEGREE_RELEVANCE = 0.6

MIN_CERT_RELEVANCE = 0.7
EXPIRED_PENALTY = 0.5
MAX_SCORE_BONUS = 0.2

W_EDUCATION = 0.7
W_CERTIFICATION = 0.3


def degree_level(degree: str) -> int:
    """Hierarchy level of a degree title, 0 if unrecognized."""
    normalized = degree.lower()
    for key, level in DEGREE_HIERARCHY:
        if key in normalized:
            return level
    return 0


def _field_words(field: str) -> list[str]:
    return [w for w in _FIELD_SPLIT_RE.split(field.lower()) if len(w) > 2]


def field_match(required_field: str, actual_field: str) -> float:
    """Token overlap between two fields of study, with a fuzzy fallback per word."""
    required_words = set(_field_words(required_field))
    actual_words = _field_words(actual_field)
    if not required_words:
        return 1.0  # no field constraint
    if not actual_words:
        return 0.0

    matches = 0.0
    for word in actual_words:
        if word in required_words:
            matches += 1
            continue
        for required_word in required_words:
            similarity = jaro_winkler(word, required_word)
            if similarity > FIELD_FUZZY_THRESHOLD:
                matches += similarity
                break
    return min(1.0, matches / max(len(required_words), len(actual_words)))


def institution_ranking(institution: str) -> float:
    normalized = institution.lower()
    for key, ranking in INSTITUTION_PRESTIGE.items():
        if re.search(rf"\b{re.escape(key)}\b", normalized):
            return ranking
    return DEFAULT_INSTITUTION_RANKING


class EducationAnalyzer:
    def certification_relevance(
        self, required: str, certification: Certification, today: datetime.date | None = None
    ) -> float:
        similarity = jaro_winkler(required.lower(), certification.name.lower())
        penalty = EXPIRED_PENALTY if certification.is_expired(today) else 1.0
        bonus = min(certification.score / 100 * MAX_SCORE_BONUS, MAX_SCORE_BONUS) if certification.score else 0.0
        return min(1.0, similarity * penalty + bonus)

    def _match_degree(
        self, degree: str, field: str, education: list[Education], minimum_level: int | None
    ) -> EducationMatch | None:
        required_level = degree_level(degree)
        best: EducationMatch | None = None
        for entry in education:
            level = degree_level(entry.degree)
            if minimum_level and level < minimum_level:
                continue
            level_match = 1.0 if level >= required_level else level / required_level
            field_score = field_match(field, entry.field)
            ranking = institution_ranking(entry.institution)
            relevance = level_match * W_LEVEL + field_score * W_FIELD + ranking * W_INSTITUTION
            if best is None or relevance > best.relevance:
                best = EducationMatch(
                    required_degree=degree,
                    required_field=field,
                    matched_education=entry,
                    relevance=min(1.0, relevance),
                    level_match=level_match,
                    field_match=field_score,
                    institution_ranking=ranking,
                )
        return best

    def analyze_education(
        self,
        education: list[Education],
        certifications: list[Certification],
        requirements: EducationRequirements,
        today: datetime.date | None = None,
    ) -> EducationAnalysis:
        gaps = EducationGaps()
        matches: list[EducationMatch] = []
        for required in requirements.degrees:
            best = self._match_degree(
                required.degree, required.field, education, requirements.minimum_degree_level
            )
            if best is not None and best.relevance >= MIN_DEGREE_RELEVANCE:
                matches.append(best)
            else:
                gaps.degrees.append(required.degree)
                gaps.fields.append(required.field)

        cert_matches: list[CertificationMatch] = []
        expired: list[str] = []
        for required_cert in requirements.required_certifications:
            best_cert: CertificationMatch | None = None
            for cert in certifications:
                relevance = self.certification_relevance(required_cert, cert, today)
                if best_cert is None or relevance > best_cert.relevance:
                    best_cert = CertificationMatch(
                        required_certification=required_cert,
                        matched_certification=cert,
                        relevance=relevance,
                        is_expired=cert.is_expired(today),
                    )
            if best_cert is not None and best_cert.relevance >= MIN_CERT_RELEVANCE and not best_cert.is_expired:
                cert_matches.append(best_cert)
                continue
            gaps.certifications.append(required_cert)
            if best_cert is not None and best_cert.is_expired and (
                jaro_winkler(required_cert.lower(), best_cert.matched_certification.name.lower())
                >= MIN_CERT_RELEVANCE
            ):
                expired.append(best_cert.matched_certification.name)

        if requirements.degrees:
            education_score = sum(m.relevance for m in matches) / len(requirements.degrees)
        else:
            education_score = 1.0
        if requirements.required_certifications:
            certification_score = len(cert_matches) / len(requirements.required_certifications)
        else:
            certification_score = 1.0

        analysis = EducationAnalysis(
            matches=matches,
            certification_matches=cert_matches,
            education_score=min(1.0, education_score),
            certification_score=certification_score,
            score=round((min(1.0, education_score) * W_EDUCATION + certification_score * W_CERTIFICATION) * 100),
            gaps=gaps,
            expired_certifications=expired,
        )
        analysis.recommendations = self._recommendations(analysis)
        logger.debug("Education score %d (%d degree gaps)", analysis.score, len(gaps.degrees))
        return analysis

    @staticmethod
    def _recommendations(analysis: EducationAnalysis) -> list[str]:
        recommendations: list[str] = []
        if analysis.gaps.degrees:
            recommendations.append(
                f"Missing or insufficient degree level: {', '.join(analysis.gaps.degrees)}"
            )
        fields = [f for f in analysis.gaps.fields if f]
        if fields:
            recommendations.append(f"Missing field of study: {', '.join(fields)}")
        if analysis.gaps.certifications:
            recommendations.append(
                f"Recommended certifications: {', '.join(analysis.gaps.certifications)}"
            )
        if analysis.expired_certifications:
            recommendations.append(
                f"Certifications to renew: {', '.join(analysis.expired_certifications)}"
            )

        if analysis.score < 50:
            recommendations.append("Education does not meet the position's requirements.")
        elif analysis.score < 70:
            recommendations.append("Additional training recommended to fit the position.")
        return recommendations
