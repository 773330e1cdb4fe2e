from datetime import date

import pytest

from services.resume_structurer import (
    extract_education,
    extract_experience,
    extract_skills,
    parse_date,
    parse_sections,
    structure_resume,
)

SAMPLE_RESUME = """Jane Doe
jane.doe@email.com | (555) 123-4567
Based in Paris, France

Summary
Backend engineer focused on APIs.

Experience
Senior Software Engineer | TechCorp | Jan 2021 - Present
• Led migration of Python services to Kubernetes
• Reduced latency by 30%

Software Engineer | StartupXYZ | Mar 2018 - Dec 2020
• Developed React frontend components

Education
B.S. Computer Science | State University | 2014 - 2018

Skills
Languages: Python, JavaScript
Tools: Docker, Kubernetes, React

Certifications
AWS Certified Solutions Architect | Amazon | 2022
"""

TODAY = date(2024, 1, 1)


@pytest.mark.parametrize("value,expected", [
    ("Mar 2019", date(2019, 3, 1)),
    ("September 2020", date(2020, 9, 1)),
    ("Sept. 2020", date(2020, 9, 1)),
    ("2019", date(2019, 1, 1)),
    ("present", None),
    ("1900", None),
])
def test_parse_date(value, expected):
    assert parse_date(value) == expected


def test_parse_sections_detects_all():
    sections = parse_sections(SAMPLE_RESUME)
    for name in ("header", "summary", "experience", "education", "skills", "certifications"):
        assert name in sections
    assert sections["header"].startswith("Jane Doe")


def test_contact_and_location():
    content = structure_resume(SAMPLE_RESUME, TODAY)
    assert content.contact.name == "Jane Doe"
    assert content.contact.email == "jane.doe@email.com"
    assert content.contact.phone == "(555) 123-4567"
    assert content.location.city == "Paris"
    assert content.location.country == "France"
    assert content.contact.location == "Paris"


def test_skills_strip_labels():
    content = structure_resume(SAMPLE_RESUME, TODAY)
    assert content.skills == ["Python", "JavaScript", "Docker", "Kubernetes", "React"]


def test_experience_entries():
    content = structure_resume(SAMPLE_RESUME, TODAY)
    current, previous = content.experience
    assert current.role == "Senior Software Engineer"
    assert current.company == "TechCorp"
    assert current.start_date == date(2021, 1, 1)
    assert current.end_date is None
    assert current.duration_months == 36
    assert current.skills == ["Python", "Kubernetes"]
    assert len(current.achievements) == 2

    assert previous.company == "StartupXYZ"
    assert previous.end_date == date(2020, 12, 1)
    assert previous.duration_months == 34
    assert previous.skills == ["React"]


def test_experience_title_on_previous_line():
    section = "Data Engineer at Acme\n2019 - 2021\n- Built pipelines"
    [experience] = extract_experience(section, [], TODAY)
    assert experience.role == "Data Engineer"
    assert experience.company == "Acme"
    assert experience.description == "Built pipelines"


def test_education_entries():
    content = structure_resume(SAMPLE_RESUME, TODAY)
    [edu] = content.education
    assert edu.degree == "B.S."
    assert edu.field == "Computer Science"
    assert edu.institution == "State University"
    assert edu.start_date == date(2014, 1, 1)
    assert edu.end_date == date(2018, 1, 1)


def test_education_degree_in_field():
    [edu] = extract_education("Bachelor of Science in Physics, MIT, 2016")
    assert edu.degree == "Bachelor of Science"
    assert edu.field == "Physics"
    assert edu.institution == "MIT"
    assert edu.end_date == date(2016, 1, 1)


def test_education_ignores_unrecognized_lines():
    assert extract_education("Relevant coursework: algorithms") == []


def test_certifications():
    content = structure_resume(SAMPLE_RESUME, TODAY)
    [cert] = content.certifications
    assert cert.name == "AWS Certified Solutions Architect"
    assert cert.issuer == "Amazon"
    assert cert.date == date(2022, 1, 1)


def test_empty_text_gives_empty_sections():
    content = structure_resume("", TODAY)
    assert content.skills == []
    assert content.experience == []
    assert content.education == []
    assert content.certifications == []
    assert content.location is None


def test_extract_skills_deduplicates():
    assert extract_skills("Python, python; Go\n• Docker") == ["Python", "Go", "Docker"]
