import pytest

from models.schemas.education import EducationAnalysis
from models.schemas.experience import ExperienceAnalysis
from models.schemas.red_flags import RedFlagAnalysis
from models.schemas.report import CategoryScores, DetailedAnalysisReport
from models.schemas.skills import SkillAnalysis
from services.report_store import ReportStore


@pytest.fixture
def store():
    store = ReportStore(":memory:")
    yield store
    store.close()


def _report(score=72):
    return DetailedAnalysisReport(
        overall_score=score,
        category_scores=CategoryScores(skills=80, experience=70, education=60),
        skills_analysis=SkillAnalysis(missing=["Rust"]),
        experience_analysis=ExperienceAnalysis(),
        education_analysis=EducationAnalysis(),
        red_flags=RedFlagAnalysis(),
        warnings=["No education could be extracted"],
    )


def test_save_and_get(store):
    report_id = store.save(_report(), candidate_name="Jane")
    stored = store.get(report_id)
    assert stored["overall_score"] == 72
    assert stored["skills_analysis"]["missing"] == ["Rust"]
    assert stored["warnings"] == ["No education could be extracted"]
    assert DetailedAnalysisReport.model_validate(stored) == _report()


def test_ids_are_unique(store):
    assert store.save(_report()) != store.save(_report())


def test_unknown_id(store):
    assert store.get("does-not-exist") is None


def test_file_database_persists(tmp_path):
    path = str(tmp_path / "reports.db")
    first = ReportStore(path)
    report_id = first.save(_report(55))
    first.close()

    second = ReportStore(path)
    assert second.get(report_id)["overall_score"] == 55
    second.close()
