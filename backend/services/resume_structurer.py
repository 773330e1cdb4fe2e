"""Best-effort structuring of raw résumé text.

Splits the text into sections by their headings, then reads contact
details, skills, dated positions, degrees and certifications out of the
matching sections. Anything that cannot be recognized is simply left out:
an empty section yields an empty list, never an error.
"""

import datetime
import logging
import re

from models.schemas.profile import (
    Certification,
    ContactInfo,
    Education,
    Experience,
    Location,
    StructuredContent,
    months_between,
)
from services.education_analyzer import degree_level

logger = logging.getLogger(__name__)

SECTION_PATTERNS: dict[str, list[str]] = {
    "experience": [
        r"(?:work|professional|employment)\s*(?:experience|history)",
        r"experience",
        r"career\s*history",
    ],
    "education": [
        r"education(?:al)?\s*(?:background)?",
        r"academic\s*background",
    ],
    "skills": [
        r"(?:technical|core|key)?\s*skills",
        r"(?:technical\s+)?(?:competencies|expertise)",
        r"technologies",
    ],
    "certifications": [
        r"certific(?:ations?|ates?)",
        r"licen[sc]es?\s*(?:&|and)?\s*certifications?",
    ],
    "summary": [
        r"(?:professional|career)?\s*summary",
        r"profile",
        r"about\s*me",
    ],
    "projects": [
        r"(?:personal|selected)?\s*projects",
    ],
}

_SECTION_RES: dict[str, re.Pattern] = {
    name: re.compile(rf"^\s*(?:{'|'.join(patterns)})\s*:?\s*$", re.IGNORECASE)
    for name, patterns in SECTION_PATTERNS.items()
}

EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
PHONE_RE = re.compile(r"\+?\(?\d[\d\s\-().]{6,14}\d")
LOCATION_RE = re.compile(
    r"(?:based in|located in|remote from)\s+([^,\n|]+)(?:,\s*([^,\n|]+))?", re.IGNORECASE
)

_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|"
    r"Jul(?:y)?|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
_DATE = rf"(?:{_MONTHS}\.?\s*\d{{4}}|\d{{4}})"
DATE_RANGE_RE = re.compile(
    rf"({_DATE})\s*(?:-|–|—|to)\s*({_DATE}|present|current|now)",
    re.IGNORECASE,
)
SINGLE_DATE_RE = re.compile(_DATE, re.IGNORECASE)

_MONTH_NUMBERS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

BULLET_MARKERS = "•-–—►▪✓*○◆→▸■●"
_FIELD_SEPARATOR_RE = re.compile(r"\s*(?:\||,|\s[-–—]\s|\sat\s)\s*")
_SKILL_SEPARATOR_RE = re.compile(r"[,;|•\n]")
_INSTITUTION_HINTS = ("university", "college", "school", "institute", "école", "ecole", "academy")
_ONGOING = ("present", "current", "now")


def parse_date(value: str) -> datetime.date | None:
    """'Mar 2019' or '2019' to the first day of that month; None if unreadable."""
    value = value.strip().rstrip(".")
    match = re.match(rf"^({_MONTHS})\.?\s*(\d{{4}})$", value, re.IGNORECASE)
    if match:
        return datetime.date(int(match.group(2)), _MONTH_NUMBERS[match.group(1)[:3].lower()], 1)
    if re.fullmatch(r"\d{4}", value) and 1950 <= int(value) <= 2100:
        return datetime.date(int(value), 1, 1)
    return None


def parse_sections(text: str) -> dict[str, str]:
    """Split résumé text into named sections; text before any heading is 'header'."""
    sections: dict[str, list[str]] = {}
    current = "header"
    for line in text.split("\n"):
        stripped = line.strip()
        heading = next(
            (name for name, pattern in _SECTION_RES.items() if stripped and pattern.match(stripped)),
            None,
        )
        if heading:
            current = heading
            sections.setdefault(current, [])
        else:
            sections.setdefault(current, []).append(line)
    return {name: "\n".join(lines).strip() for name, lines in sections.items()}


def _strip_bullet(line: str) -> str:
    return line.strip().lstrip(BULLET_MARKERS).strip()


def _segments(line: str) -> list[str]:
    return [s.strip() for s in _FIELD_SEPARATOR_RE.split(line) if s.strip()]


def extract_contact(header: str, full_text: str) -> tuple[ContactInfo, Location | None]:
    email = EMAIL_RE.search(full_text)
    phone = PHONE_RE.search(header or full_text)
    place = LOCATION_RE.search(full_text)

    name = None
    for line in header.split("\n"):
        stripped = line.strip()
        if stripped and not EMAIL_RE.search(stripped) and not re.search(r"\d", stripped):
            name = stripped
            break

    location = None
    if place:
        location = Location(
            city=place.group(1).strip(),
            country=place.group(2).strip() if place.group(2) else None,
        )
    contact = ContactInfo(
        name=name,
        email=email.group() if email else None,
        phone=phone.group().strip() if phone else None,
        location=location.city if location else None,
    )
    return contact, location


def extract_skills(section: str) -> list[str]:
    skills: list[str] = []
    for chunk in _SKILL_SEPARATOR_RE.split(section):
        # "Languages: Python" -> "Python"
        item = _strip_bullet(chunk.split(":", 1)[-1])
        if item and len(item) <= 40 and item.lower() not in (s.lower() for s in skills):
            skills.append(item)
    return skills


def _mentioned_skills(description: str, skills: list[str]) -> list[str]:
    lowered = description.lower()
    return [s for s in skills if re.search(rf"(?<!\w){re.escape(s.lower())}(?!\w)", lowered)]


def extract_experience(
    section: str, skills: list[str], today: datetime.date | None = None
) -> list[Experience]:
    """One position per line carrying a date range; following lines describe it."""
    today = today or datetime.date.today()
    entries: list[dict] = []
    pending: list[str] = []  # lines not yet attached to a position

    for line in section.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        match = DATE_RANGE_RE.search(stripped)
        if match is None:
            pending.append(_strip_bullet(stripped))
            continue

        header = (stripped[:match.start()] + stripped[match.end():]).strip(" |,-–—")
        if not header and pending:
            # Title on its own line just above the dates
            header = pending.pop()
        if entries:
            entries[-1]["description"].extend(pending)
        pending = []

        parts = _segments(header)
        start = parse_date(match.group(1))
        end_raw = match.group(2).strip().lower()
        end = None if end_raw in _ONGOING else parse_date(match.group(2))
        entries.append({
            "role": parts[0] if parts else header,
            "company": parts[1] if len(parts) > 1 else None,
            "start": start,
            "end": end,
            "ongoing": end_raw in _ONGOING,
            "description": [],
        })
    if entries:
        entries[-1]["description"].extend(pending)

    experiences: list[Experience] = []
    for entry in entries:
        if not entry["role"]:
            continue
        description = ". ".join(d.rstrip(".") for d in entry["description"] if d)
        duration = 0
        if entry["ongoing"] and entry["start"]:
            duration = months_between(entry["start"], today)
        experiences.append(Experience(
            role=entry["role"],
            company=entry["company"],
            start_date=entry["start"],
            end_date=entry["end"],
            duration_months=duration,
            description=description,
            skills=_mentioned_skills(f"{entry['role']} {description}", skills),
        ))
    return experiences


def _split_degree(text: str) -> tuple[str, str]:
    """'Master of Science in Physics' -> ('Master of Science', 'Physics')."""
    if " in " in text:
        degree, field = text.split(" in ", 1)
        return degree.strip(), field.strip()
    first, _, rest = text.partition(" ")
    if rest and degree_level(first) > 0:
        return first, rest.strip()
    return text.strip(), ""


def extract_education(section: str) -> list[Education]:
    education: list[Education] = []
    for line in section.split("\n"):
        stripped = _strip_bullet(line)
        if not stripped:
            continue
        date_range = DATE_RANGE_RE.search(stripped)
        single = SINGLE_DATE_RE.search(stripped)
        without_dates = DATE_RANGE_RE.sub("", stripped) if date_range else SINGLE_DATE_RE.sub("", stripped)
        parts = [p.strip() for p in re.split(r"\s*[|,]\s*", without_dates) if p.strip()]

        degree_part = next((p for p in parts if degree_level(p) > 0), None)
        if degree_part is None:
            continue
        degree, field = _split_degree(degree_part)
        institution = next(
            (p for p in parts if p is not degree_part and any(h in p.lower() for h in _INSTITUTION_HINTS)),
            next((p for p in parts if p is not degree_part), ""),
        )

        start = end = None
        if date_range:
            start = parse_date(date_range.group(1))
            end = parse_date(date_range.group(2))
        elif single:
            end = parse_date(single.group())
        education.append(Education(
            degree=degree, field=field, institution=institution, start_date=start, end_date=end,
        ))
    return education


def extract_certifications(section: str) -> list[Certification]:
    certifications: list[Certification] = []
    for line in section.split("\n"):
        stripped = _strip_bullet(line)
        if not stripped:
            continue
        found = SINGLE_DATE_RE.search(stripped)
        without_date = SINGLE_DATE_RE.sub("", stripped) if found else stripped
        parts = [p.strip(" -–—()") for p in re.split(r"\s*[|,]\s*", without_date)]
        parts = [p for p in parts if p]
        if not parts:
            continue
        certifications.append(Certification(
            name=parts[0],
            issuer=parts[1] if len(parts) > 1 else "",
            date=parse_date(found.group()) if found else None,
        ))
    return certifications


def structure_resume(text: str, today: datetime.date | None = None) -> StructuredContent:
    """Build a ``StructuredContent`` from raw résumé text."""
    sections = parse_sections(text)
    contact, location = extract_contact(sections.get("header", ""), text)
    skills = extract_skills(sections.get("skills", ""))
    content = StructuredContent(
        contact=contact,
        skills=skills,
        experience=extract_experience(sections.get("experience", ""), skills, today),
        education=extract_education(sections.get("education", "")),
        certifications=extract_certifications(sections.get("certifications", "")),
        location=location,
    )
    logger.debug(
        "Structured resume: %d skills, %d positions, %d degrees, %d certifications",
        len(content.skills), len(content.experience), len(content.education), len(content.certifications),
    )
    return content
