"""Skills catalog: skill categories and synonym equivalence.

The catalog is loaded once at startup (built-in defaults, or a JSON file
with the same shape) and never mutated afterwards. Synonyms are authored
one-directionally (``kubernetes: [k8s, kube]``); at load time every
authored group is expanded into a symmetric index so that
``is_equivalent(a, b) == is_equivalent(b, a)`` always holds.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class SkillCategory(BaseModel):
    name: str
    keywords: list[str] = []
    synonyms: dict[str, list[str]] = {}


DEFAULT_CATEGORIES: list[SkillCategory] = [
    SkillCategory(
        name="Programming Languages",
        keywords=["java", "python", "javascript", "typescript", "c++", "c#", "go", "rust", "kotlin", "php"],
        synonyms={
            "javascript": ["js", "ecmascript"],
            "python": ["py", "python3"],
            "typescript": ["ts"],
            "c++": ["cpp"],
            "c#": ["csharp"],
            "go": ["golang"],
        },
    ),
    SkillCategory(
        name="Web Development",
        keywords=["react", "angular", "vue", "html", "css", "sass", "node.js", "django", "fastapi", "rest"],
        synonyms={
            "react": ["reactjs", "react.js"],
            "angular": ["angularjs"],
            "vue": ["vuejs", "vue.js"],
            "node.js": ["nodejs", "node"],
            "rest": ["restful", "rest api"],
        },
    ),
    SkillCategory(
        name="DevOps",
        keywords=["docker", "kubernetes", "aws", "azure", "gcp", "ci/cd", "terraform", "linux"],
        synonyms={
            "kubernetes": ["k8s", "kube"],
            "ci/cd": ["continuous integration", "continuous deployment", "cicd"],
            "aws": ["amazon web services"],
            "gcp": ["google cloud", "google cloud platform"],
        },
    ),
    SkillCategory(
        name="Databases",
        keywords=["sql", "postgresql", "mysql", "mongodb", "redis", "elasticsearch"],
        synonyms={
            "postgresql": ["postgres"],
            "mongodb": ["mongo"],
        },
    ),
    SkillCategory(
        name="Data & Machine Learning",
        keywords=["machine learning", "deep learning", "pandas", "numpy", "scikit-learn", "tensorflow", "pytorch", "nlp"],
        synonyms={
            "machine learning": ["ml"],
            "scikit-learn": ["sklearn"],
            "nlp": ["natural language processing"],
            "pytorch": ["torch"],
        },
    ),
    SkillCategory(
        name="Methodologies",
        keywords=["agile", "scrum", "kanban", "tdd", "project management"],
        synonyms={
            "tdd": ["test-driven development", "test driven development"],
            "project management": ["project mgmt"],
        },
    ),
]


class SkillsCatalog:
    """Read-only view over skill categories and synonym groups."""

    def __init__(self, categories: list[SkillCategory] | None = None) -> None:
        self._categories: tuple[SkillCategory, ...] = tuple(
            DEFAULT_CATEGORIES if categories is None else categories
        )
        self._synonyms = MappingProxyType(self._build_synonym_index(self._categories))
        self._category_by_skill = MappingProxyType(self._build_category_index(self._categories))

    @classmethod
    def from_file(cls, path: str | Path) -> "SkillsCatalog":
        """Load categories from JSON, falling back to the built-in defaults."""
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            categories = [SkillCategory.model_validate(c) for c in raw["categories"]]
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
            logger.warning("Could not load skills catalog from %s, using defaults: %s", path, e)
            return cls()
        logger.info("Loaded %d skill categories from %s", len(categories), path)
        return cls(categories)

    @staticmethod
    def _build_synonym_index(categories: tuple[SkillCategory, ...]) -> dict[str, frozenset[str]]:
        index: dict[str, set[str]] = {}
        for category in categories:
            for key, synonyms in category.synonyms.items():
                group = {key.lower(), *(s.lower() for s in synonyms)}
                for member in group:
                    index.setdefault(member, set()).update(group - {member})
        return {skill: frozenset(others) for skill, others in index.items()}

    @staticmethod
    def _build_category_index(categories: tuple[SkillCategory, ...]) -> dict[str, str]:
        index: dict[str, str] = {}
        for category in categories:
            names = [*category.keywords]
            for key, synonyms in category.synonyms.items():
                names.append(key)
                names.extend(synonyms)
            for name in names:
                # First category wins when a skill is listed twice
                index.setdefault(name.lower(), category.name)
        return index

    @property
    def categories(self) -> list[str]:
        return [c.name for c in self._categories]

    def find_synonyms(self, skill: str) -> list[str]:
        return sorted(self._synonyms.get(skill.lower(), frozenset()))

    def is_equivalent(self, skill_a: str, skill_b: str) -> bool:
        a, b = skill_a.lower(), skill_b.lower()
        if a == b:
            return True
        synonyms_a = self._synonyms.get(a, frozenset())
        synonyms_b = self._synonyms.get(b, frozenset())
        return b in synonyms_a or a in synonyms_b or bool(synonyms_a & synonyms_b)

    def category_for(self, skill: str) -> str | None:
        return self._category_by_skill.get(skill.lower())

    def skills_in_category(self, name: str) -> list[str]:
        """Keywords of a category followed by its synonym groups, without duplicates."""
        for category in self._categories:
            if category.name == name:
                skills: list[str] = []
                for skill in category.keywords:
                    if skill not in skills:
                        skills.append(skill)
                for key, synonyms in category.synonyms.items():
                    for skill in (key, *synonyms):
                        if skill not in skills:
                            skills.append(skill)
                return skills
        return []
