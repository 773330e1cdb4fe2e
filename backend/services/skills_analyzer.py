"""Required-skill matching against résumé text.

Each required skill is expanded into its synonym variants; every variant
found in the text is scored (exact 1.0, known synonym 0.9, fuzzy
0.8 x Jaro-Winkler) with a small bonus when the surrounding text signals
hands-on experience. The best variant per skill wins.
"""

import logging
import re

from models.schemas.skills import CategoryScore, SkillAnalysis, SkillGap, SkillMatch
from services.skills_catalog import SkillsCatalog
from services.text_similarity import context_at, jaro_winkler, tokenize

logger = logging.getLogger(__name__)

EXACT_CONFIDENCE = 1.0
SYNONYM_CONFIDENCE = 0.9
FUZZY_FACTOR = 0.8
CONTEXT_BONUS = 0.1
FUZZY_SKILL_THRESHOLD = 0.85  # for structured skill lists only
SHORT_VARIANT_LENGTH = 2  # "go", "js", "ml": whole words only
GAP_THRESHOLD = 70  # category score below this is a gap
MAX_SUGGESTIONS = 3
OTHER_CATEGORY = "Other"

POSITIVE_CONTEXT_KEYWORDS: frozenset[str] = frozenset({
    "expert", "experience", "experienced", "proficient", "proficiency",
    "expertise", "certified", "certification", "developed", "delivered",
    "built", "project", "projects",
})


def find_variant(text_lower: str, variant: str) -> int:
    """Index of ``variant`` in ``text_lower`` (case-insensitive substring), or -1.

    A standalone occurrence is preferred so the context comes from the actual
    mention ("Java" rather than the "Java" inside "JavaScript"). Variants of at
    most ``SHORT_VARIANT_LENGTH`` characters only match standalone.
    """
    variant = variant.lower()
    standalone = re.search(rf"(?<!\w){re.escape(variant)}(?!\w)", text_lower)
    if standalone is not None:
        return standalone.start()
    if len(variant) <= SHORT_VARIANT_LENGTH:
        return -1
    return text_lower.find(variant)


class SkillsAnalyzer:
    def __init__(self, catalog: SkillsCatalog) -> None:
        self.catalog = catalog

    def skill_confidence(self, required_skill: str, found_skill: str, context: str = "") -> float:
        if required_skill.lower() == found_skill.lower():
            confidence = EXACT_CONFIDENCE
        elif self.catalog.is_equivalent(required_skill, found_skill):
            confidence = SYNONYM_CONFIDENCE
        else:
            confidence = jaro_winkler(required_skill.lower(), found_skill.lower()) * FUZZY_FACTOR

        if context and POSITIVE_CONTEXT_KEYWORDS.intersection(tokenize(context)):
            confidence += CONTEXT_BONUS
        return min(1.0, confidence)

    def _best_match(
        self, required_skill: str, text: str, candidate_skills: list[str]
    ) -> SkillMatch | None:
        text_lower = text.lower()
        variants = [required_skill, *self.catalog.find_synonyms(required_skill)]
        category = self.catalog.category_for(required_skill) or OTHER_CATEGORY
        best: SkillMatch | None = None

        def consider(found: str, context: str) -> None:
            nonlocal best
            confidence = self.skill_confidence(required_skill, found, context)
            if best is None or confidence > best.confidence:
                best = SkillMatch(
                    skill=required_skill,
                    found=found,
                    category=category,
                    confidence=confidence,
                    context=context,
                )

        for variant in variants:
            index = find_variant(text_lower, variant)
            if index >= 0:
                consider(variant, context_at(text, index, len(variant)))

        # Structured skill list: exact/synonym first, then close spellings
        for listed in candidate_skills:
            if self.catalog.is_equivalent(required_skill, listed) or any(
                v.lower() == listed.lower() for v in variants
            ):
                consider(listed, "")
            elif jaro_winkler(required_skill.lower(), listed.lower()) > FUZZY_SKILL_THRESHOLD:
                consider(listed, "")

        return best

    def analyze_skills(
        self,
        text: str,
        required_skills: list[str],
        candidate_skills: list[str] | None = None,
    ) -> SkillAnalysis:
        """Match ``required_skills`` against ``text`` and an optional skill list."""
        candidate_skills = candidate_skills or []
        matches: list[SkillMatch] = []
        missing: list[str] = []
        by_category: dict[str, tuple[list[SkillMatch], list[str]]] = {}

        for skill in required_skills:
            match = self._best_match(skill, text, candidate_skills)
            if match is not None:
                matches.append(match)
                by_category.setdefault(match.category, ([], []))[0].append(match)
            else:
                missing.append(skill)
                category = self.catalog.category_for(skill) or OTHER_CATEGORY
                by_category.setdefault(category, ([], []))[1].append(skill)

        categories: dict[str, CategoryScore] = {}
        for name, (cat_matches, cat_missing) in by_category.items():
            total = len(cat_matches) + len(cat_missing)
            categories[name] = CategoryScore(
                score=round(sum(m.confidence for m in cat_matches) / total * 100),
                matches=[m.skill for m in cat_matches],
                missing=cat_missing,
            )

        if required_skills:
            score = round(sum(m.confidence for m in matches) / len(required_skills) * 100)
        else:
            score = 0

        analysis = SkillAnalysis(
            matches=matches,
            missing=missing,
            score=min(100, score),
            categories=categories,
            suggestions=self.suggest_alternative_skills(missing),
        )
        analysis.recommendations = self._recommendations(analysis)
        logger.debug("Skills matched %d/%d, score %d", len(matches), len(required_skills), analysis.score)
        return analysis

    def suggest_alternative_skills(self, missing_skills: list[str]) -> dict[str, list[str]]:
        """Up to three other skills from each missing skill's category."""
        suggestions: dict[str, list[str]] = {}
        for skill in missing_skills:
            category = self.catalog.category_for(skill)
            if category is None:
                continue
            related = [
                s for s in self.catalog.skills_in_category(category)
                if not self.catalog.is_equivalent(s, skill)
            ][:MAX_SUGGESTIONS]
            if related:
                suggestions[skill] = related
        return suggestions

    def identify_skill_gaps(self, analysis: SkillAnalysis) -> list[SkillGap]:
        return [
            SkillGap(category=name, score=data.score, missing=data.missing)
            for name, data in analysis.categories.items()
            if data.score < GAP_THRESHOLD
        ]

    def _recommendations(self, analysis: SkillAnalysis) -> list[str]:
        recommendations: list[str] = []
        if analysis.missing:
            recommendations.append(
                f"Check the candidate's exposure to missing skills: {', '.join(analysis.missing)}"
            )
        for gap in self.identify_skill_gaps(analysis):
            if gap.missing:
                recommendations.append(f"Dig into the {gap.category} skill set in a technical interview")
        for skill, related in analysis.suggestions.items():
            recommendations.append(f"Related experience that could offset {skill}: {', '.join(related)}")
        return recommendations
