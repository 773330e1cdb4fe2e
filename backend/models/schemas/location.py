"""Location viability output and job-side requirements."""

from typing import Literal

from pydantic import BaseModel, Field

from models.schemas.profile import Location

MatchType = Literal["exact", "same_city", "commutable", "requires_relocation"]
WorkArrangement = Literal["remote", "on_site", "hybrid", "not_viable"]


class JobLocationRequirements(BaseModel):
    is_remote_allowed: bool = False
    is_hybrid_allowed: bool = False
    required_on_site_days: int | None = None
    max_allowed_commute_distance: float | None = None  # km


class LocationMatch(BaseModel):
    candidate_location: Location
    job_location: Location
    distance_km: float = 0.0
    is_within_commuting_distance: bool = False
    match_type: MatchType = "requires_relocation"


class LocationAnalysis(BaseModel):
    match: LocationMatch
    score: int = Field(0, ge=0, le=100)
    is_viable: bool = False
    work_arrangement: WorkArrangement = "not_viable"
    recommendations: list[str] = []
    alternative_arrangements: list[str] = []
