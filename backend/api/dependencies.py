"""Shared dependencies for API routes.

The catalog, aggregator and report store are built once per process and
handed to routes through ``Depends`` so tests can override them.
"""

from functools import lru_cache

from config import settings
from services.analysis_manager import AnalysisAggregator
from services.report_store import ReportStore
from services.skills_catalog import SkillsCatalog


@lru_cache
def get_catalog() -> SkillsCatalog:
    if settings.skills_catalog_path:
        return SkillsCatalog.from_file(settings.skills_catalog_path)
    return SkillsCatalog()


@lru_cache
def get_aggregator() -> AnalysisAggregator:
    return AnalysisAggregator(catalog=get_catalog())


@lru_cache
def get_report_store() -> ReportStore:
    return ReportStore(settings.report_store_path)
