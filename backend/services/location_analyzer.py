"""Commute distance and work-arrangement viability."""

import logging
import math

from models.schemas.location import (
    JobLocationRequirements,
    LocationAnalysis,
    LocationMatch,
    MatchType,
)
from models.schemas.profile import Location, MobilityPreferences

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

# Estimated distances when coordinates are missing
SAME_CITY_KM = 0.0
SAME_REGION_KM = 30.0
SAME_COUNTRY_KM = 300.0
ABROAD_KM = 1000.0

DEFAULT_MAX_COMMUTE_KM = 50.0
SAME_CITY_RADIUS_KM = 5.0
LONG_COMMUTE_KM = 30.0

REMOTE_SCORE = 100
RELOCATION_SCORE = 70
HYBRID_SCORE = 90
ON_SITE_SCORE = 85
EXACT_BONUS = 10
SAME_CITY_BONUS = 5
MAX_COMMUTE_PENALTY = 20
NOT_PREFERRED_PENALTY = 10


def _same(a: str | None, b: str | None) -> bool:
    return a is not None and b is not None and a.strip().lower() == b.strip().lower()


def calculate_distance(a: Location, b: Location) -> float:
    """Haversine distance in km, or a tiered estimate without coordinates."""
    if a.coordinates and b.coordinates:
        lat1 = math.radians(a.coordinates.latitude)
        lat2 = math.radians(b.coordinates.latitude)
        d_lat = lat2 - lat1
        d_lon = math.radians(b.coordinates.longitude - a.coordinates.longitude)
        h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
        return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    if _same(a.city, b.city):
        return SAME_CITY_KM
    if _same(a.region, b.region):
        return SAME_REGION_KM
    if a.country is None or b.country is None or _same(a.country, b.country):
        return SAME_COUNTRY_KM
    return ABROAD_KM


def match_type(distance: float, max_commute: float) -> MatchType:
    if distance == 0:
        return "exact"
    if distance < SAME_CITY_RADIUS_KM:
        return "same_city"
    if distance <= max_commute:
        return "commutable"
    return "requires_relocation"


class LocationAnalyzer:
    def analyze_location(
        self,
        candidate_location: Location,
        candidate_mobility: MobilityPreferences,
        job_location: Location,
        job_requirements: JobLocationRequirements,
    ) -> LocationAnalysis:
        distance = calculate_distance(candidate_location, job_location)
        max_commute = min(
            candidate_mobility.max_commute_distance or DEFAULT_MAX_COMMUTE_KM,
            job_requirements.max_allowed_commute_distance or DEFAULT_MAX_COMMUTE_KM,
        )
        match = LocationMatch(
            candidate_location=candidate_location,
            job_location=job_location,
            distance_km=round(distance, 1),
            is_within_commuting_distance=distance <= max_commute,
            match_type=match_type(distance, max_commute),
        )

        score = 0.0
        arrangement = "not_viable"
        recommendations: list[str] = []

        if candidate_mobility.is_remote_only:
            if job_requirements.is_remote_allowed:
                arrangement = "remote"
                score = REMOTE_SCORE
            else:
                recommendations.append(
                    "The candidate only wants to work remotely but the position requires on-site presence."
                )
        elif match.match_type == "requires_relocation":
            if candidate_mobility.is_relocation_accepted:
                arrangement = "on_site"
                score = RELOCATION_SCORE
                recommendations.append(
                    "Relocation is required. Discuss relocation terms and mobility support."
                )
            else:
                recommendations.append(
                    "The position requires relocation but the candidate is not willing to move."
                )
        else:
            if job_requirements.is_hybrid_allowed and candidate_mobility.is_hybrid_accepted:
                arrangement = "hybrid"
                score = HYBRID_SCORE
            else:
                arrangement = "on_site"
                score = ON_SITE_SCORE
            if distance > LONG_COMMUTE_KM:
                recommendations.append(
                    "Commute time may be significant. Consider flexible working arrangements."
                )

        # Distance and preference adjustments only refine a viable arrangement
        if score > 0:
            if match.match_type == "exact":
                score = min(score + EXACT_BONUS, 100)
            elif match.match_type == "same_city":
                score = min(score + SAME_CITY_BONUS, 100)
            elif match.match_type == "commutable":
                score = max(score - distance / max_commute * MAX_COMMUTE_PENALTY, 0)

            preferred = candidate_mobility.preferred_locations
            if preferred and not any(_same(loc.city, job_location.city) for loc in preferred):
                score = max(score - NOT_PREFERRED_PENALTY, 0)
                recommendations.append("The job location is not among the candidate's preferred locations.")

        score = round(score)
        analysis = LocationAnalysis(
            match=match,
            score=score,
            is_viable=score > 0,
            work_arrangement=arrangement if score > 0 else "not_viable",
            recommendations=recommendations,
        )
        analysis.alternative_arrangements = self.suggest_alternative_arrangements(analysis, job_requirements)
        logger.debug("Location: %.1f km (%s), score %d", distance, match.match_type, score)
        return analysis

    def suggest_alternative_arrangements(
        self, analysis: LocationAnalysis, job_requirements: JobLocationRequirements
    ) -> list[str]:
        suggestions: list[str] = []
        if not analysis.is_viable:
            if job_requirements.is_remote_allowed:
                suggestions.append("Offer a fully remote arrangement")
            if job_requirements.is_hybrid_allowed:
                days = (
                    f"{job_requirements.required_on_site_days} days a week"
                    if job_requirements.required_on_site_days
                    else "a few days a week"
                )
                suggestions.append(f"Offer a hybrid arrangement with on-site presence {days}")
            suggestions.append("Discuss relocation assistance")
        elif analysis.match.distance_km > LONG_COMMUTE_KM:
            suggestions.append("Consider flexible hours to avoid rush-hour commuting")
            if job_requirements.is_hybrid_allowed:
                suggestions.append("Plan on-site days to limit commuting")
        return suggestions
