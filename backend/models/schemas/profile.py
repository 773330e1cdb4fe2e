"""Candidate profile: the structured content extracted from a résumé."""

import datetime
import math

from pydantic import BaseModel, model_validator

from services.text_similarity import split_sentences, tokenize

DAYS_PER_MONTH = 30.44

ACHIEVEMENT_VERBS: frozenset[str] = frozenset({
    "achieved", "built", "created", "delivered", "designed", "developed",
    "improved", "increased", "implemented", "launched", "led", "managed",
    "optimized", "reduced", "won", "saved", "grew", "automated",
})


def months_between(start: datetime.date, end: datetime.date) -> int:
    """Whole months between two dates, rounded up (ceil of days / 30.44)."""
    days = abs((end - start).days)
    return math.ceil(days / DAYS_PER_MONTH)


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class Location(BaseModel):
    city: str
    region: str | None = None
    country: str | None = None
    coordinates: Coordinates | None = None


class MobilityPreferences(BaseModel):
    is_remote_only: bool = False
    is_hybrid_accepted: bool = True
    is_relocation_accepted: bool = False
    max_commute_distance: float | None = None  # km
    preferred_locations: list[Location] = []


class Experience(BaseModel):
    """One position in the candidate's work history.

    ``duration_months`` is derived from the dates when both are known;
    otherwise whatever the caller supplied is kept (0 meaning unknown).
    """
    role: str
    company: str | None = None
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None
    duration_months: int = 0
    description: str = ""
    location: str | None = None
    skills: list[str] = []
    achievements: list[str] = []

    @model_validator(mode="after")
    def _derive_fields(self) -> "Experience":
        if self.start_date and self.end_date:
            self.duration_months = months_between(self.start_date, self.end_date)
        if not self.achievements and self.description:
            self.achievements = [
                sentence
                for sentence in split_sentences(self.description)
                if ACHIEVEMENT_VERBS.intersection(tokenize(sentence))
            ]
        return self


class Education(BaseModel):
    degree: str
    field: str = ""
    institution: str = ""
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None
    gpa: float | None = None
    achievements: list[str] = []


class Certification(BaseModel):
    name: str
    issuer: str = ""
    date: datetime.date | None = None
    expiry_date: datetime.date | None = None
    score: float | None = None

    def is_expired(self, today: datetime.date | None = None) -> bool:
        if self.expiry_date is None:
            return False
        return (today or datetime.date.today()) > self.expiry_date


class ContactInfo(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None


class StructuredContent(BaseModel):
    """Best-effort structured view of a résumé; every section may be empty."""
    contact: ContactInfo = ContactInfo()
    skills: list[str] = []
    experience: list[Experience] = []
    education: list[Education] = []
    certifications: list[Certification] = []
    location: Location | None = None
    mobility: MobilityPreferences = MobilityPreferences()
