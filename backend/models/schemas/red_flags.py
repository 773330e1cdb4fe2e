"""Red-flag and consistency analysis output."""

import datetime
from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["critical", "warning", "info"]
FlagCategory = Literal["experience", "education", "skills", "general"]
IssueType = Literal["timeline", "skills", "roles", "education"]
IssueSeverity = Literal["high", "medium", "low"]


class TimeGap(BaseModel):
    start_date: datetime.date
    end_date: datetime.date
    duration_months: int


class RedFlag(BaseModel):
    severity: Severity
    category: FlagCategory
    description: str
    details: str | None = None
    impact: int = Field(0, ge=0, le=100)


class ConsistencyIssue(BaseModel):
    type: IssueType
    description: str
    elements: list[str] = []
    severity: IssueSeverity


class RedFlagAnalysis(BaseModel):
    flags: list[RedFlag] = []
    consistency_issues: list[ConsistencyIssue] = []
    time_gaps: list[TimeGap] = []
    overall_risk: int = Field(0, ge=0, le=100)
    recommendations: list[str] = []
