from datetime import date

import pytest

from models.schemas.experience import ExperienceRequirements
from models.schemas.profile import Experience
from services.experience_analyzer import ExperienceAnalyzer, role_relevance
from services.skills_analyzer import SkillsAnalyzer
from services.skills_catalog import SkillsCatalog

TODAY = date(2024, 6, 1)


@pytest.fixture
def analyzer():
    return ExperienceAnalyzer(SkillsAnalyzer(SkillsCatalog()))


def _exp(role, months=0, description="", **kwargs):
    return Experience(role=role, duration_months=months, description=description, **kwargs)


class TestRoleRelevance:
    def test_identical_title_and_keywords(self):
        exp = _exp("Backend Developer", 12, "Backend developer building Python APIs")
        assert role_relevance("Backend Developer", exp) == pytest.approx(1.0)

    def test_unrelated_role(self):
        exp = _exp("Pastry Chef", 12, "Baked bread")
        assert role_relevance("Backend Developer", exp) < 0.6


class TestAnalyzeExperience:
    def test_full_match(self, analyzer):
        experiences = [
            _exp("Backend Developer", 36, "Backend developer building Python APIs", skills=["Docker"]),
        ]
        requirements = ExperienceRequirements(
            roles=["Backend Developer"], min_years_total=2, required_skills=["Python", "Docker"]
        )
        analysis = analyzer.analyze_experience(experiences, requirements, TODAY)
        assert analysis.score == 100
        assert analysis.total_relevant_experience == 36
        assert analysis.matches[0].matching_skills == ["Python", "Docker"]
        assert analysis.matches[0].duration_match == 1.0
        assert not analysis.gaps.duration
        assert analysis.gaps.skills == []

    def test_unmatched_role_is_a_gap(self, analyzer):
        experiences = [_exp("Backend Developer", 36, "APIs")]
        requirements = ExperienceRequirements(roles=["Data Scientist"], min_years_total=1)
        analysis = analyzer.analyze_experience(experiences, requirements, TODAY)
        assert analysis.matches == []
        assert analysis.gaps.roles == ["Data Scientist"]
        assert analysis.gaps.duration
        assert analysis.total_relevant_experience == 0
        # duration 0, roles 0, skills (none required) 1
        assert analysis.score == 30
        assert any("Data Scientist" in r for r in analysis.recommendations)

    def test_without_roles_all_experience_counts(self, analyzer):
        experiences = [_exp("Developer", 12), _exp("Analyst", 12)]
        requirements = ExperienceRequirements(min_years_total=3)
        analysis = analyzer.analyze_experience(experiences, requirements, TODAY)
        assert analysis.total_relevant_experience == 24
        assert analysis.score == 90
        assert analysis.gaps.duration

    def test_no_requirements(self, analyzer):
        analysis = analyzer.analyze_experience([], ExperienceRequirements(), TODAY)
        assert analysis.score == 100
        assert analysis.matches == []

    def test_missing_required_skills(self, analyzer):
        experiences = [_exp("Developer", 24, "Developer writing Python")]
        requirements = ExperienceRequirements(roles=["Developer"], required_skills=["Python", "Rust"])
        analysis = analyzer.analyze_experience(experiences, requirements, TODAY)
        assert analysis.gaps.skills == ["Rust"]
        assert analysis.matches[0].missing_skills == ["Rust"]

    def test_tie_keeps_most_recent_experience(self, analyzer):
        experiences = [
            _exp("Developer", company="OldCo", start_date=date(2015, 1, 1), end_date=date(2019, 1, 1)),
            _exp("Developer", company="NewCo", start_date=date(2019, 2, 1), end_date=date(2023, 1, 1)),
        ]
        analysis = analyzer.analyze_experience(
            experiences, ExperienceRequirements(roles=["Developer"]), TODAY
        )
        assert analysis.matches[0].matched_experience.company == "NewCo"

    def test_preferred_industries(self, analyzer):
        experiences = [_exp("Developer", 24, "Payments platform for a fintech scale-up")]
        requirements = ExperienceRequirements(preferred_industries=["Fintech", "Healthcare"])
        analysis = analyzer.analyze_experience(experiences, requirements, TODAY)
        assert analysis.industry_matches == ["Fintech"]


class TestCareerProgression:
    def test_positive(self, analyzer):
        experiences = [
            _exp("Senior Developer", start_date=date(2020, 1, 1), end_date=date(2022, 1, 1)),
            _exp("Developer", start_date=date(2018, 1, 1), end_date=date(2020, 1, 1)),
        ]
        progression = analyzer.detect_career_progression(experiences)
        assert progression.progression == "positive"
        assert progression.promotions == 1
        assert progression.role_changes == 0

    def test_irregular(self, analyzer):
        experiences = [
            _exp("Chef", start_date=date(2014, 1, 1), end_date=date(2016, 1, 1)),
            _exp("Pilot", start_date=date(2016, 1, 1), end_date=date(2018, 1, 1)),
            _exp("Teacher", start_date=date(2018, 1, 1), end_date=date(2020, 1, 1)),
        ]
        progression = analyzer.detect_career_progression(experiences)
        assert progression.progression == "irregular"
        assert progression.role_changes == 2

    def test_stable(self, analyzer):
        progression = analyzer.detect_career_progression([_exp("Developer", 48)])
        assert progression.progression == "stable"
        assert progression.promotions == 0

    def test_slow_promotion_is_not_counted(self, analyzer):
        experiences = [
            _exp("Developer", start_date=date(2010, 1, 1), end_date=date(2016, 1, 1)),
            _exp("Lead Developer", start_date=date(2016, 1, 1), end_date=date(2020, 1, 1)),
        ]
        progression = analyzer.detect_career_progression(experiences)
        assert progression.promotions == 0

    def test_short_tenures(self, analyzer):
        experiences = [_exp("Developer", 6), _exp("Developer", 8), _exp("Developer", 30)]
        progression = analyzer.detect_career_progression(experiences)
        assert progression.short_term_positions == 2
        assert any("short-term" in o for o in progression.observations)
