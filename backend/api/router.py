import asyncio
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import ValidationError
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_aggregator, get_catalog, get_report_store
from config import settings
from errors import AppError, InputValidationError
from models.requests import BatchAnalyzeRequest, CandidateAnalyzeRequest, QuickAnalyzeRequest
from models.responses import AnalysisResponse, CandidateReportResponse
from models.schemas.report import AnalysisConfig, BatchAnalysisResult, CandidateFailure, CandidateInput
from services import document_parser, resume_analyzer
from services.analysis_manager import AnalysisAggregator
from services.report_store import ReportStore
from services.skills_catalog import SkillsCatalog

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


async def _read_upload(upload: UploadFile) -> str:
    content = await upload.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise InputValidationError(
            f"File too large. Max size: {settings.max_upload_size_mb}MB",
            details={"filename": upload.filename},
        )
    return await asyncio.to_thread(document_parser.extract_text, content, upload.filename or "")


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
    }


@router.post("/analyze", response_model=AnalysisResponse)
@limiter.limit("10/minute")
async def analyze(
    request: Request,
    resume_file: UploadFile = File(...),
    job_description: str = Form(...),
    catalog: SkillsCatalog = Depends(get_catalog),
):
    if len(job_description) > 10000:
        raise InputValidationError("Job description too long (max 10000 chars)")
    if not job_description.strip():
        raise InputValidationError("Job description is required")

    resume_text = await _read_upload(resume_file)
    return await resume_analyzer.analyze(resume_text, job_description, catalog)


@router.post("/analyze/quick", response_model=AnalysisResponse)
@limiter.limit("10/minute")
async def analyze_quick(
    request: Request,
    body: QuickAnalyzeRequest,
    catalog: SkillsCatalog = Depends(get_catalog),
):
    if not body.resume_text.strip() or not body.job_description.strip():
        raise InputValidationError("Both resume text and job description are required")
    return await resume_analyzer.analyze(body.resume_text, body.job_description, catalog)


@router.post("/candidates/analyze", response_model=CandidateReportResponse)
@limiter.limit("10/minute")
async def analyze_candidate(
    request: Request,
    body: CandidateAnalyzeRequest,
    aggregator: AnalysisAggregator = Depends(get_aggregator),
    store: ReportStore = Depends(get_report_store),
):
    report = await aggregator.analyze(body.candidate, body.config, body.job_description)
    report_id = await asyncio.to_thread(store.save, report, body.candidate.name)
    return CandidateReportResponse(report_id=report_id, report=report)


@router.post("/candidates/analyze-batch", response_model=BatchAnalysisResult)
@limiter.limit("5/minute")
async def analyze_batch(
    request: Request,
    body: BatchAnalyzeRequest,
    aggregator: AnalysisAggregator = Depends(get_aggregator),
):
    if len(body.candidates) > settings.max_batch_files:
        raise InputValidationError(f"Too many candidates (max {settings.max_batch_files})")
    return await aggregator.analyze_multiple(body.candidates, body.config, body.job_description)


@router.post("/candidates/analyze-files", response_model=BatchAnalysisResult)
@limiter.limit("5/minute")
async def analyze_files(
    request: Request,
    files: list[UploadFile] = File(...),
    config: str = Form("{}"),
    job_description: str = Form(""),
    aggregator: AnalysisAggregator = Depends(get_aggregator),
):
    if len(files) > settings.max_batch_files:
        raise InputValidationError(f"Too many files (max {settings.max_batch_files})")
    try:
        analysis_config = AnalysisConfig.model_validate_json(config)
    except ValidationError as e:
        raise InputValidationError(
            "Malformed analysis config", details={"errors": e.errors(include_url=False, include_context=False)}
        ) from e

    # Unreadable documents are reported per file, the rest still get analyzed
    candidates: list[CandidateInput] = []
    failures: list[CandidateFailure] = []
    for upload in files:
        name = PurePath(upload.filename or "").stem or f"candidate-{len(candidates) + len(failures) + 1}"
        try:
            text = await _read_upload(upload)
        except AppError as e:
            failures.append(CandidateFailure(name=name, error_code=e.error_code, message=e.message))
            continue
        candidates.append(CandidateInput(name=name, text=text))

    if not candidates:
        return BatchAnalysisResult(failures=failures)
    result = await aggregator.analyze_multiple(candidates, analysis_config, job_description)
    return result.model_copy(update={"failures": failures + result.failures})


@router.get("/reports/{report_id}")
async def get_report(report_id: str, store: ReportStore = Depends(get_report_store)):
    report = await asyncio.to_thread(store.get, report_id)
    if report is None:
        raise AppError("Report not found", status_code=404, error_code="NOT_FOUND",
                       details={"report_id": report_id})
    return report
