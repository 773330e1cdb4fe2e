"""Recruiter-defined criteria evaluated against résumé text."""

import logging
import re

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from models.schemas.criteria import (
    BooleanCriterion,
    CriteriaCategoryScore,
    CriterionMatch,
    CustomCriteriaAnalysis,
    CustomCriterion,
    KeywordCriterion,
    NumericCriterion,
    RegexCriterion,
    SemanticCriterion,
)
from services.text_similarity import (
    best_token_similarity,
    extract_context,
    jaro_winkler,
    split_sentences,
    tokenize,
)

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD = 0.85
SEMANTIC_THRESHOLD = 0.3
WEAK_CONFIDENCE = 0.7
IMPORTANT_WEIGHT = 0.5
DEFAULT_CATEGORY = "General"

_NUMBER_RE = re.compile(r"\b\d+(?:\.\d+)?\b")


def _best_context(text: str, words: list[str]) -> str:
    """Sentence containing the most of ``words``."""
    best, best_score = "", 0
    for sentence in split_sentences(text):
        lowered = sentence.lower()
        score = sum(1 for w in words if w in lowered)
        if score > best_score:
            best, best_score = sentence, score
    return best


class CustomCriteriaAnalyzer:
    def evaluate_keyword(self, criterion: KeywordCriterion | BooleanCriterion, text: str) -> CriterionMatch:
        value = criterion.value
        if value.lower() in text.lower():
            return CriterionMatch(
                criterion=criterion,
                found=True,
                value=value,
                confidence=1.0,
                context=extract_context(text, value),
            )

        target = value.lower()
        best_word, best_similarity = "", 0.0
        for word in tokenize(text):
            similarity = jaro_winkler(word, target)
            if similarity > FUZZY_THRESHOLD and similarity > best_similarity:
                best_word, best_similarity = word, similarity
        if best_word:
            return CriterionMatch(
                criterion=criterion,
                found=True,
                value=best_word,
                confidence=best_similarity,
                context=extract_context(text, best_word),
            )
        return CriterionMatch(criterion=criterion)

    def evaluate_regex(self, criterion: RegexCriterion, text: str) -> CriterionMatch:
        match = re.search(criterion.value, text, re.IGNORECASE)
        if match is None:
            return CriterionMatch(criterion=criterion)
        return CriterionMatch(
            criterion=criterion,
            found=True,
            value=match.group(0),
            confidence=1.0,
            context=extract_context(text, match.group(0)),
        )

    def evaluate_numeric(self, criterion: NumericCriterion, text: str) -> CriterionMatch:
        """Best number in range, scored by its closeness to the target value."""
        target = criterion.value
        rules = criterion.validation_rules
        upper = rules.max if rules.max is not None else target * 2
        lower = rules.min if rules.min is not None else 0
        max_diff = upper - lower

        best_value, best_confidence, best_raw = None, 0.0, ""
        for raw in _NUMBER_RE.findall(text):
            number = float(raw)
            if rules.min is not None and number < rules.min:
                continue
            if rules.max is not None and number > rules.max:
                continue
            if max_diff > 0:
                confidence = max(0.0, 1 - abs(number - target) / max_diff)
            else:
                confidence = 1.0 if number == target else 0.0
            if confidence > best_confidence:
                best_value, best_confidence, best_raw = number, confidence, raw

        if best_value is None:
            return CriterionMatch(criterion=criterion)
        return CriterionMatch(
            criterion=criterion,
            found=True,
            value=best_value,
            confidence=best_confidence,
            context=extract_context(text, best_raw),
        )

    def evaluate_semantic(self, criterion: SemanticCriterion, text: str) -> CriterionMatch:
        """Average per-word evidence for the criterion's content words."""
        words = [w for w in tokenize(criterion.value) if w not in ENGLISH_STOP_WORDS]
        if not words:
            return CriterionMatch(criterion=criterion)

        text_tokens = set(tokenize(text))
        total = 0.0
        for word in words:
            if word in text_tokens:
                total += 1.0
                continue
            similarity = best_token_similarity(word, text_tokens)
            if similarity > FUZZY_THRESHOLD:
                total += similarity
        confidence = total / len(words)

        if confidence <= SEMANTIC_THRESHOLD:
            return CriterionMatch(criterion=criterion)
        return CriterionMatch(
            criterion=criterion,
            found=True,
            confidence=min(1.0, confidence),
            context=_best_context(text, words),
        )

    def evaluate(self, criterion: CustomCriterion, text: str) -> CriterionMatch:
        if isinstance(criterion, (KeywordCriterion, BooleanCriterion)):
            return self.evaluate_keyword(criterion, text)
        if isinstance(criterion, RegexCriterion):
            return self.evaluate_regex(criterion, text)
        if isinstance(criterion, NumericCriterion):
            return self.evaluate_numeric(criterion, text)
        if isinstance(criterion, SemanticCriterion):
            return self.evaluate_semantic(criterion, text)
        raise TypeError(f"Unsupported criterion type: {type(criterion).__name__}")

    def analyze_criteria(self, text: str, criteria: list[CustomCriterion]) -> CustomCriteriaAnalysis:
        matches: list[CriterionMatch] = []
        missing_required: list[str] = []
        by_category: dict[str, list[CriterionMatch]] = {}

        for criterion in criteria:
            match = self.evaluate(criterion, text)
            matches.append(match)
            if criterion.required and not match.found:
                missing_required.append(criterion.name)
            by_category.setdefault(criterion.category or DEFAULT_CATEGORY, []).append(match)

        details = {
            category: CriteriaCategoryScore(
                score=self._weighted_score(cat_matches),
                matches=[m.criterion.name for m in cat_matches if m.found],
                missing=[m.criterion.name for m in cat_matches if not m.found],
            )
            for category, cat_matches in by_category.items()
        }

        analysis = CustomCriteriaAnalysis(
            matches=matches,
            score=self._weighted_score(matches),
            missing_required=missing_required,
            details=details,
        )
        analysis.recommendations = self._recommendations(analysis)
        logger.debug("Custom criteria score %d, %d required missing", analysis.score, len(missing_required))
        return analysis

    @staticmethod
    def _weighted_score(matches: list[CriterionMatch]) -> int:
        total_weight = sum(m.criterion.weight for m in matches)
        if total_weight == 0:
            return 0
        weighted = sum(m.confidence * m.criterion.weight for m in matches)
        return min(100, round(weighted / total_weight * 100))

    @staticmethod
    def _recommendations(analysis: CustomCriteriaAnalysis) -> list[str]:
        recommendations: list[str] = []
        missing = [m.criterion for m in analysis.matches if m.criterion.required and not m.found]
        if missing:
            recommendations.append(
                "Missing required criteria: "
                + ", ".join(f"{c.name} ({c.description})" if c.description else c.name for c in missing)
            )
        weak = [
            m for m in analysis.matches
            if m.found and m.confidence < WEAK_CONFIDENCE and m.criterion.weight > IMPORTANT_WEIGHT
        ]
        if weak:
            recommendations.append(
                "Criteria to verify: "
                + ", ".join(f"{m.criterion.name} (confidence: {round(m.confidence * 100)}%)" for m in weak)
            )
        return recommendations
