"""User-defined scoring criteria.

A criterion is a tagged union keyed on ``type``; the shape of ``value``
depends on the tag, so a regex criterion always carries a compilable
pattern and a numeric one always carries a number.
"""

import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator


class _CriterionBase(BaseModel):
    id: str
    name: str
    weight: float = Field(1.0, ge=0.0, le=1.0)
    required: bool = False
    category: str | None = None
    description: str | None = None


class KeywordCriterion(_CriterionBase):
    type: Literal["keyword"] = "keyword"
    value: str


class BooleanCriterion(_CriterionBase):
    """True when ``value`` (a term) is present; matched like a keyword."""
    type: Literal["boolean"] = "boolean"
    value: str


class SemanticCriterion(_CriterionBase):
    type: Literal["semantic"] = "semantic"
    value: str


class RegexCriterion(_CriterionBase):
    type: Literal["regex"] = "regex"
    value: str

    @field_validator("value")
    @classmethod
    def _check_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}") from e
        return v


class NumericRules(BaseModel):
    min: float | None = None
    max: float | None = None


class NumericCriterion(_CriterionBase):
    type: Literal["numeric"] = "numeric"
    value: float
    validation_rules: NumericRules = NumericRules()


CustomCriterion = Annotated[
    Union[KeywordCriterion, RegexCriterion, SemanticCriterion, NumericCriterion, BooleanCriterion],
    Field(discriminator="type"),
]


class CriterionMatch(BaseModel):
    criterion: CustomCriterion
    found: bool = False
    value: str | float | None = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    context: str | None = None


class CriteriaCategoryScore(BaseModel):
    score: int = Field(0, ge=0, le=100)
    matches: list[str] = []
    missing: list[str] = []


class CustomCriteriaAnalysis(BaseModel):
    matches: list[CriterionMatch] = []
    score: int = Field(0, ge=0, le=100)
    missing_required: list[str] = []
    recommendations: list[str] = []
    details: dict[str, CriteriaCategoryScore] = {}
