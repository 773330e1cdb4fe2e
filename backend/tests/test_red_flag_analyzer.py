from datetime import date, timedelta

import pytest

from models.schemas.profile import Certification, Education, Experience
from services.red_flag_analyzer import RedFlagAnalyzer


@pytest.fixture
def analyzer():
    return RedFlagAnalyzer()


def _with_gap(months: int) -> list[Experience]:
    first_end = date(2020, 1, 1)
    return [
        Experience(role="Developer", start_date=date(2017, 1, 1), end_date=first_end),
        Experience(
            role="Developer",
            start_date=first_end + timedelta(days=int(30.44 * months)),
            end_date=date(2024, 1, 1),
        ),
    ]


class TestTimeGaps:
    @pytest.mark.parametrize("months,gap_found,severity", [
        (3, False, None),
        (4, True, None),
        (6, True, None),
        (7, True, "warning"),
        (12, True, "warning"),
        (13, True, "critical"),
    ])
    def test_gap_boundaries(self, analyzer, months, gap_found, severity):
        analysis = analyzer.analyze_profile(_with_gap(months), [], [])
        assert bool(analysis.time_gaps) is gap_found
        if gap_found:
            assert analysis.time_gaps[0].duration_months == months
        gap_flags = [f for f in analysis.flags if "gap" in f.description]
        if severity is None:
            assert gap_flags == []
        else:
            assert [f.severity for f in gap_flags] == [severity]

    def test_overlapping_positions_have_no_gap(self, analyzer):
        experiences = [
            Experience(role="A", start_date=date(2018, 1, 1), end_date=date(2021, 1, 1)),
            Experience(role="B", start_date=date(2020, 1, 1), end_date=date(2022, 1, 1)),
        ]
        assert analyzer.find_time_gaps(experiences) == []

    def test_missing_dates_are_ignored(self, analyzer):
        experiences = [Experience(role="A", duration_months=24), Experience(role="B", duration_months=24)]
        assert analyzer.find_time_gaps(experiences) == []


def test_critical_gap_between_two_roles(analyzer):
    experiences = [
        Experience(role="Developer", start_date=date(2019, 1, 1), end_date=date(2019, 12, 1)),
        Experience(role="Senior Developer", start_date=date(2021, 1, 1), end_date=date(2022, 12, 1)),
    ]
    analysis = analyzer.analyze_profile(experiences, [], [])
    assert len(analysis.time_gaps) == 1
    assert analysis.time_gaps[0].duration_months > 12
    assert len(analysis.flags) == 1
    assert analysis.flags[0].severity == "critical"
    assert analysis.flags[0].impact == 80
    # a single short position is not job hopping
    assert analysis.consistency_issues == []
    assert analysis.overall_risk == 80


def test_no_flags_means_zero_risk(analyzer):
    analysis = analyzer.analyze_profile([], [], [])
    assert analysis.flags == []
    assert analysis.overall_risk == 0


class TestConsistency:
    def test_job_hopping(self, analyzer):
        experiences = [
            Experience(role="A", duration_months=6),
            Experience(role="B", duration_months=8),
        ]
        analysis = analyzer.analyze_profile(experiences, [], [])
        issue = analysis.consistency_issues[0]
        assert issue.type == "roles"
        assert issue.severity == "medium"
        assert analysis.flags[0].severity == "warning"
        assert analysis.flags[0].impact == 40

    def test_job_hopping_high_severity(self, analyzer):
        experiences = [Experience(role=r, duration_months=6) for r in ("A", "B", "C")]
        analysis = analyzer.analyze_profile(experiences, [], [])
        assert analysis.consistency_issues[0].severity == "high"
        assert analysis.flags[0].severity == "critical"
        assert analysis.overall_risk == 70

    def test_rapid_promotion(self, analyzer):
        experiences = [
            Experience(role="Developer", start_date=date(2020, 1, 1), end_date=date(2020, 12, 15)),
            Experience(role="Lead Developer", start_date=date(2021, 1, 1), end_date=date(2023, 1, 1)),
        ]
        analysis = analyzer.analyze_profile(experiences, [], [])
        assert any(i.description == "Unusually fast career progression" for i in analysis.consistency_issues)

    def test_one_time_skills(self, analyzer):
        experiences = [
            Experience(role="A", duration_months=24, skills=["Python", "Go", "Rust", "Java"]),
        ]
        analysis = analyzer.analyze_profile(experiences, [], [])
        issue = analysis.consistency_issues[0]
        assert issue.type == "skills"
        assert issue.severity == "low"
        assert analysis.flags[0].category == "skills"
        assert analysis.flags[0].impact == 20

    def test_certification_with_little_practice(self, analyzer):
        experiences = [
            Experience(role="Dev", start_date=date(2022, 1, 1), end_date=date(2024, 1, 1), skills=["Kubernetes"]),
        ]
        certifications = [Certification(name="Certified Kubernetes Administrator", date=date(2022, 3, 1))]
        analysis = analyzer.analyze_profile(experiences, [], certifications)
        issue = next(i for i in analysis.consistency_issues if i.type == "skills")
        assert issue.severity == "medium"
        assert issue.elements == ["Kubernetes", "Certified Kubernetes Administrator"]

    def test_certification_after_enough_practice(self, analyzer):
        experiences = [
            Experience(role="Dev", start_date=date(2020, 1, 1), end_date=date(2024, 1, 1), skills=["Kubernetes"]),
        ]
        certifications = [Certification(name="Certified Kubernetes Administrator", date=date(2022, 3, 1))]
        analysis = analyzer.analyze_profile(experiences, [], certifications)
        assert analysis.consistency_issues == []

    def test_heavy_work_during_studies(self, analyzer):
        education = [Education(degree="Master", start_date=date(2017, 9, 1), end_date=date(2020, 6, 1))]
        experiences = [Experience(role="Developer", start_date=date(2017, 9, 1), end_date=date(2020, 6, 1))]
        analysis = analyzer.analyze_profile(experiences, education, [])
        issue = analysis.consistency_issues[0]
        assert issue.type == "education"
        assert analysis.flags[0].category == "education"

    def test_recommendations(self, analyzer):
        analysis = analyzer.analyze_profile(_with_gap(13), [], [])
        assert "Clarify during the interview: Significant gap in work history" in analysis.recommendations
        assert any(r.startswith("Ask about the inactivity period") for r in analysis.recommendations)
