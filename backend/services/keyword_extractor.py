"""Keyword extraction and matching for the quick résumé/job analysis.

Job keywords come from two sources: skills of the catalog that the job
description mentions, and distinctive TF-IDF terms. Matching against the
résumé resolves catalog synonyms first, then falls back to fuzzy
spelling matches.
"""

import logging
import re
from collections import Counter

from nltk.stem import PorterStemmer
from rapidfuzz import fuzz

from services.similarity import extract_tfidf_keywords
from services.skills_catalog import SkillsCatalog

logger = logging.getLogger(__name__)

_stemmer = PorterStemmer()

# Words TF-IDF tends to rank high in job postings that are not requirements
JD_STOPWORDS: frozenset[str] = frozenset({
    "opportunity", "position", "role", "roles", "candidate", "candidates",
    "company", "organization", "team", "teams", "department",
    "compensation", "salary", "benefits", "bonus", "equity", "insurance",
    "vacation", "retirement", "equal", "discrimination", "disability",
    "veteran", "gender", "orientation", "protected", "status",
    "based", "preferred", "required", "minimum", "experience",
    "qualifications", "responsibilities", "requirements", "description",
    "passionate", "exciting", "innovative", "dynamic", "competitive",
    "flexible", "remote", "hybrid", "onsite", "location", "office",
    "deliver", "manage", "create", "build", "develop", "ensure", "support",
    "job", "work", "working", "career", "people", "years", "year",
    "great", "strong", "good", "new", "senior", "junior", "level",
})

# Headings after which a job posting is usually boilerplate
_JD_BOILERPLATE_RE = re.compile(
    r"(?:^|\n)\s*(?:what\s+we\s+offer|(?:our|the)\s+(?:benefits|perks)|"
    r"(?:salary|pay)\s+range|equal\s+(?:opportunity|employment)|"
    r"about\s+(?:us|the\s+company)|who\s+we\s+are)",
    re.IGNORECASE,
)

# Fuzzy match threshold (0-100) for close spellings like "Postgre SQL"
FUZZY_THRESHOLD = 80
MAX_KEYWORDS = 25


def _normalize(text: str, stem: bool = False) -> str:
    # Drop sentence periods but keep dots inside terms like "node.js"
    text = re.sub(r"\.(\s|$)", " ", text.lower())
    normalized = re.sub(r"[^a-z0-9.#+/ -]", " ", text)
    if stem:
        normalized = " ".join(_stemmer.stem(w) for w in normalized.split())
    return normalized


def _extract_terms(text: str) -> set[str]:
    """Single words plus two- and three-word phrases, raw and stemmed."""
    terms: set[str] = set()
    for variant in (_normalize(text), _normalize(text, stem=True)):
        words = variant.split()
        terms.update(words)
        terms.update(" ".join(words[i:i + 2]) for i in range(len(words) - 1))
        terms.update(" ".join(words[i:i + 3]) for i in range(len(words) - 2))
    return terms


def _relevant_jd_text(job_description: str) -> str:
    """Cut the posting at the first boilerplate heading, if any content precedes it."""
    match = _JD_BOILERPLATE_RE.search(job_description)
    if match and match.start() > 50:
        return job_description[:match.start()].strip()
    return job_description.strip()


def _is_technical_term(term: str) -> bool:
    words = term.lower().split()
    if len(words) == 1:
        return words[0] not in JD_STOPWORDS and len(words[0]) > 1
    return not all(w in JD_STOPWORDS for w in words)


def _catalog_vocabulary(catalog: SkillsCatalog) -> set[str]:
    vocabulary: set[str] = set()
    for category in catalog.categories:
        vocabulary.update(s.lower() for s in catalog.skills_in_category(category))
    return vocabulary


def extract_keywords(job_description: str, catalog: SkillsCatalog, top_n: int = MAX_KEYWORDS) -> list[str]:
    """Catalog skills mentioned in the posting first, then TF-IDF terms."""
    relevant = _relevant_jd_text(job_description) or job_description
    jd_terms = _extract_terms(relevant)

    catalog_hits: list[str] = []
    for skill in sorted(_catalog_vocabulary(catalog)):
        if skill not in jd_terms:
            continue
        # Keep one spelling per synonym group
        if not any(catalog.is_equivalent(skill, kept) for kept in catalog_hits):
            catalog_hits.append(skill)

    tfidf_terms = [
        kw for kw in extract_tfidf_keywords(relevant, top_n=top_n * 2)
        if _is_technical_term(kw)
        and not any(catalog.is_equivalent(kw, kept) for kept in catalog_hits)
    ]
    return (catalog_hits + tfidf_terms)[:top_n]


def _keyword_present(keyword: str, resume_terms: set[str], resume_lower: str, catalog: SkillsCatalog) -> bool:
    if keyword in resume_terms or keyword in resume_lower:
        return True
    for synonym in catalog.find_synonyms(keyword):
        if synonym in resume_terms:
            return True
    if len(keyword) >= 3:
        return any(
            len(term) >= 3 and fuzz.ratio(keyword, term) >= FUZZY_THRESHOLD
            for term in resume_terms
        )
    return False


def match_keywords(
    resume_text: str, job_keywords: list[str] | set[str], catalog: SkillsCatalog
) -> tuple[list[str], list[str]]:
    """Split job keywords into (matched, missing) for a résumé."""
    resume_terms = _extract_terms(resume_text)
    resume_lower = resume_text.lower()

    matched: list[str] = []
    missing: list[str] = []
    for keyword in sorted({k.lower() for k in job_keywords}):
        if _keyword_present(keyword, resume_terms, resume_lower, catalog):
            matched.append(keyword)
        else:
            missing.append(keyword)
    return matched, missing


def compute_keyword_density(resume_text: str, keywords: list[str]) -> dict[str, float]:
    """Occurrences of each keyword as a percentage of the résumé's words."""
    words = resume_text.lower().split()
    if not words:
        return {}

    counts = Counter(words)
    densities = {}
    for kw in keywords:
        kw_lower = kw.lower()
        count = resume_text.lower().count(kw_lower) if " " in kw_lower else counts.get(kw_lower, 0)
        densities[kw] = round(count / len(words) * 100, 2)
    return densities
