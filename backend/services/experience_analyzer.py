"""Work-history matching: role relevance, duration coverage, skill coverage."""

import datetime
import logging

from models.schemas.experience import (
    CareerProgression,
    ExperienceAnalysis,
    ExperienceGaps,
    ExperienceMatch,
    ExperienceRequirements,
)
from models.schemas.profile import Experience, months_between
from services.skills_analyzer import SkillsAnalyzer
from services.text_similarity import jaro_winkler, tokenize

logger = logging.getLogger(__name__)

ROLE_TITLE_WEIGHT = 0.6
ROLE_KEYWORD_WEIGHT = 0.4
MIN_ROLE_RELEVANCE = 0.6

W_DURATION = 0.3
W_ROLES = 0.4
W_SKILLS = 0.3

SHORT_TENURE_MONTHS = 12
PROMOTION_WINDOW_MONTHS = 24
PROMOTION_KEYWORDS = ("senior", "lead", "principal", "head", "manager", "director", "chief")


def role_relevance(required_role: str, experience: Experience) -> float:
    """0.6 x title similarity + 0.4 x share of role words found in the description."""
    title_similarity = jaro_winkler(required_role.lower(), experience.role.lower())
    keywords = tokenize(required_role)
    description_words = set(tokenize(experience.description))
    if keywords:
        keyword_score = sum(1 for w in keywords if w in description_words) / len(keywords)
    else:
        keyword_score = 0.0
    return min(1.0, title_similarity * ROLE_TITLE_WEIGHT + keyword_score * ROLE_KEYWORD_WEIGHT)


def _newest_first_key(experience: Experience, today: datetime.date) -> datetime.date:
    return experience.end_date or today


def _oldest_first_key(experience: Experience) -> datetime.date:
    return experience.start_date or datetime.date.min


class ExperienceAnalyzer:
    def __init__(self, skills_analyzer: SkillsAnalyzer) -> None:
        self.skills_analyzer = skills_analyzer

    def analyze_experience(
        self,
        experiences: list[Experience],
        requirements: ExperienceRequirements,
        today: datetime.date | None = None,
    ) -> ExperienceAnalysis:
        today = today or datetime.date.today()
        ordered = sorted(experiences, key=lambda e: _newest_first_key(e, today), reverse=True)
        required_months = requirements.min_years_total * 12

        # Skill coverage depends only on the experience, not on the role
        coverage = {
            id(exp): self.skills_analyzer.analyze_skills(
                exp.description, requirements.required_skills, exp.skills
            )
            for exp in ordered
        }

        matches: list[ExperienceMatch] = []
        role_gaps: list[str] = []
        for required_role in requirements.roles:
            best: ExperienceMatch | None = None
            for exp in ordered:
                relevance = role_relevance(required_role, exp)
                if best is not None and relevance <= best.relevance:
                    continue
                skills = coverage[id(exp)]
                duration_match = min(1.0, exp.duration_months / required_months) if required_months else 1.0
                best = ExperienceMatch(
                    required_role=required_role,
                    matched_experience=exp,
                    relevance=relevance,
                    matching_skills=[m.skill for m in skills.matches],
                    missing_skills=skills.missing,
                    duration_match=duration_match,
                )
            if best is not None and best.relevance >= MIN_ROLE_RELEVANCE:
                matches.append(best)
            else:
                role_gaps.append(required_role)

        if requirements.roles:
            # Overlapping positions are counted twice
            total_months = sum(m.matched_experience.duration_months for m in matches)
            covered_skills = {skill for m in matches for skill in m.matching_skills}
        else:
            total_months = sum(exp.duration_months for exp in ordered)
            covered_skills = {m.skill for exp in ordered for m in coverage[id(exp)].matches}

        skill_gaps = [s for s in requirements.required_skills if s not in covered_skills]

        duration_score = min(1.0, total_months / required_months) if required_months else 1.0
        role_score = len(matches) / len(requirements.roles) if requirements.roles else 1.0
        if requirements.required_skills:
            skill_score = 1 - len(skill_gaps) / len(requirements.required_skills)
        else:
            skill_score = 1.0

        analysis = ExperienceAnalysis(
            matches=matches,
            total_relevant_experience=total_months,
            score=round((duration_score * W_DURATION + role_score * W_ROLES + skill_score * W_SKILLS) * 100),
            gaps=ExperienceGaps(
                duration=total_months < required_months,
                skills=skill_gaps,
                roles=role_gaps,
            ),
            industry_matches=self._industry_matches(experiences, requirements.preferred_industries),
        )
        analysis.recommendations = self._recommendations(analysis, requirements)
        logger.debug(
            "Experience: %d/%d roles matched, %d relevant months, score %d",
            len(matches), len(requirements.roles), total_months, analysis.score,
        )
        return analysis

    @staticmethod
    def _industry_matches(experiences: list[Experience], industries: list[str]) -> list[str]:
        found = []
        for industry in industries:
            needle = industry.lower()
            if any(
                needle in f"{e.role} {e.company or ''} {e.description}".lower()
                for e in experiences
            ):
                found.append(industry)
        return found

    @staticmethod
    def _recommendations(analysis: ExperienceAnalysis, requirements: ExperienceRequirements) -> list[str]:
        recommendations: list[str] = []
        if analysis.gaps.duration:
            recommendations.append(
                "The candidate does not reach the minimum years of relevant experience."
            )
        if analysis.gaps.roles:
            recommendations.append(f"No matching experience for roles: {', '.join(analysis.gaps.roles)}")
        if analysis.gaps.skills:
            recommendations.append(
                f"Skills not demonstrated in past positions: {', '.join(analysis.gaps.skills)}"
            )
        if requirements.preferred_industries and not analysis.industry_matches:
            recommendations.append(
                f"No experience in preferred industries: {', '.join(requirements.preferred_industries)}"
            )

        if analysis.score < 50:
            recommendations.append("The work history does not fit the position well enough.")
        elif analysis.score < 70:
            recommendations.append("Partial fit; plan for additional onboarding or training.")
        return recommendations

    def detect_career_progression(self, experiences: list[Experience]) -> CareerProgression:
        """Classify the career trend as positive, stable or irregular."""
        ordered = sorted(experiences, key=_oldest_first_key)

        short_term = sum(
            1 for e in ordered if 0 < e.duration_months < SHORT_TENURE_MONTHS
        )
        promotions = 0
        role_changes = 0
        for previous, current in zip(ordered, ordered[1:]):
            previous_role = previous.role.lower()
            current_role = current.role.lower()

            promoted = any(kw in current_role and kw not in previous_role for kw in PROMOTION_KEYWORDS)
            if promoted and previous.start_date and current.start_date:
                promoted = months_between(previous.start_date, current.start_date) <= PROMOTION_WINDOW_MONTHS
            if promoted:
                promotions += 1

            if previous_role not in current_role and current_role not in previous_role:
                role_changes += 1

        observations: list[str] = []
        if promotions > 0 and short_term <= 1:
            progression = "positive"
            observations.append("Positive career progression with growing responsibilities")
        elif role_changes > len(experiences) / 2:
            progression = "irregular"
            observations.append("Frequent changes of career direction")
        else:
            progression = "stable"
        if short_term > 1:
            observations.append(f"{short_term} short-term positions detected")

        return CareerProgression(
            progression=progression,
            observations=observations,
            short_term_positions=short_term,
            promotions=promotions,
            role_changes=role_changes,
        )
