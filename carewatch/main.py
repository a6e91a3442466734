"""
CareWatch API - FastAPI Application

Main application entry point with API endpoints for:
- Risk scoring of carer observations
- Visit entry submission and history
- Manager alert dashboard and review
- Visit summary PDF reports
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from typing import Dict, List
from datetime import datetime
import math
import os

from carewatch import config
from carewatch.core.scoring import RiskScoringEngine, load_catalog
from carewatch.core.visits import AlertFilter, VisitService
from carewatch.core.reports import VisitReportGenerator
from carewatch.utils import get_logger
from carewatch.utils.exceptions import (
    CareWatchError,
    InvalidInputError,
    NotFoundError,
    ReportGenerationError,
)
from carewatch.models import (
    ScoreRequest,
    ScoreResponse,
    VisitEntryRequest,
    VisitEntryResponse,
    VisitCreatedResponse,
    CorrectionNoteRequest,
    CorrectionNoteResponse,
    AlertResponse,
    AlertReviewRequest,
    UnreviewedCountResponse,
    ReportResponse,
    HealthResponse,
    WarningResponse,
)

logger = get_logger(__name__)


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.visit_service = _visit_service
    logger.info(
        f"CareWatch API ready ({len(_catalog)} symptoms, "
        f"reject_implausible_vitals={config.REJECT_IMPLAUSIBLE_VITALS})"
    )
    yield
    logger.info("CareWatch API shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title="CareWatch API",
    description="Visit risk scoring and manager alerts for care agencies",
    version=config.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Services ----
_catalog = load_catalog(config.SYMPTOM_CATALOG_PATH)
_engine = RiskScoringEngine(_catalog)
_visit_service = VisitService(
    engine=_engine,
    reject_implausible_vitals=config.REJECT_IMPLAUSIBLE_VITALS,
)
_report_gen = VisitReportGenerator(output_dir=config.REPORTS_DIR)

# ---- In-memory report index (replace with object storage in production) ----
# Insertion ordered; capped at config.REPORTS_MAX_KEPT, see _remember_report
_reports: Dict[str, str] = {}
START_TIME = datetime.now()


def _remember_report(report_id: str, pdf_path: str) -> None:
    """Index a generated PDF, deleting the oldest ones beyond the cap."""
    _reports[report_id] = pdf_path
    while len(_reports) > max(config.REPORTS_MAX_KEPT, 1):
        old_id = next(iter(_reports))
        old_path = _reports.pop(old_id)
        if old_path and os.path.exists(old_path):
            os.remove(old_path)
        logger.info(f"Evicted report {old_id}")


# ---- Error Handling ----

def _status_for(exc: CareWatchError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, InvalidInputError):
        return 422
    if isinstance(exc, ReportGenerationError):
        return 500
    return 400


@app.exception_handler(CareWatchError)
async def carewatch_error_handler(request: Request, exc: CareWatchError):
    status = _status_for(exc)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status}: {exc.message}")
    return JSONResponse(status_code=status, content=exc.to_dict())


def _json_safe(value):
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Rejected NaN / Infinity inputs are echoed back as strings
    errors = [
        {**err, "input": _json_safe(err["input"])} if "input" in err else err
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


# ---- API Endpoints ----

def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=config.API_VERSION,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
        catalog_size=len(_catalog),
    )


@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return _health()


@app.get("/api/v1/symptoms", tags=["Reference"])
async def list_symptoms():
    """Symptom checklist in form order."""
    return _catalog.to_dict()


@app.post("/api/v1/risk/score", response_model=ScoreResponse, tags=["Scoring"])
async def score_observation(request: ScoreRequest):
    """
    Score an observation without storing it.

    Symptom ids are scored exactly as sent, repeats included.
    """
    result = _engine.score(request.selected_symptom_ids, request.vitals.to_vitals())
    return ScoreResponse(**RiskScoringEngine.summarise(result))


@app.post(
    "/api/v1/visits",
    response_model=VisitCreatedResponse,
    status_code=201,
    tags=["Visits"],
)
async def create_visit(request: VisitEntryRequest):
    """
    Submit a visit entry. Amber and red entries raise an alert.
    """
    outcome = _visit_service.create_visit_entry(
        client_id=request.client_id,
        carer_id=request.carer_id,
        agency_id=request.agency_id,
        selected_symptom_ids=request.selected_symptom_ids,
        vitals=request.vitals.to_vitals(),
        note=request.note,
    )
    return VisitCreatedResponse(
        entry=VisitEntryResponse(**outcome.entry.to_dict()),
        alert=AlertResponse(**outcome.alert.to_dict()) if outcome.alert else None,
        warnings=[WarningResponse(**w.to_dict()) for w in outcome.warnings],
    )


@app.get("/api/v1/visits/{entry_id}", response_model=VisitEntryResponse, tags=["Visits"])
async def get_visit(entry_id: str):
    entry = _visit_service.get_visit_entry(entry_id)
    return VisitEntryResponse(**entry.to_dict())


@app.get(
    "/api/v1/clients/{client_id}/visits",
    response_model=List[VisitEntryResponse],
    tags=["Visits"],
)
async def list_client_visits(client_id: str):
    """Visit history for a client, newest first."""
    return [
        VisitEntryResponse(**e.to_dict())
        for e in _visit_service.get_visit_entries_for_client(client_id)
    ]


@app.post(
    "/api/v1/visits/{entry_id}/corrections",
    response_model=CorrectionNoteResponse,
    status_code=201,
    tags=["Visits"],
)
async def add_correction(entry_id: str, request: CorrectionNoteRequest):
    note = _visit_service.add_correction_note(entry_id, request.carer_id, request.text)
    return CorrectionNoteResponse(**note.to_dict())


@app.get("/api/v1/alerts", response_model=List[AlertResponse], tags=["Alerts"])
async def list_alerts(
    agency_id: str = Query(..., min_length=1),
    alert_filter: AlertFilter = Query(AlertFilter.ALL, alias="filter"),
):
    """Agency alerts, newest first."""
    alerts = _visit_service.get_alerts(agency_id, alert_filter)
    return [AlertResponse(**a.to_dict()) for a in alerts]


@app.get(
    "/api/v1/alerts/unreviewed-count",
    response_model=UnreviewedCountResponse,
    tags=["Alerts"],
)
async def unreviewed_count(agency_id: str = Query(..., min_length=1)):
    return UnreviewedCountResponse(
        agency_id=agency_id,
        unreviewed=_visit_service.unreviewed_count(agency_id),
    )


@app.get("/api/v1/alerts/{alert_id}", response_model=AlertResponse, tags=["Alerts"])
async def get_alert(alert_id: str):
    return AlertResponse(**_visit_service.get_alert(alert_id).to_dict())


@app.post("/api/v1/alerts/{alert_id}/review", response_model=AlertResponse, tags=["Alerts"])
async def review_alert(alert_id: str, request: AlertReviewRequest):
    alert = _visit_service.review_alert(
        alert_id,
        manager_id=request.manager_id,
        action_taken=request.action_taken,
        note=request.note,
    )
    return AlertResponse(**alert.to_dict())


@app.post(
    "/api/v1/visits/{entry_id}/report",
    response_model=ReportResponse,
    tags=["Reports"],
)
async def generate_visit_report(entry_id: str):
    """Generate a PDF summary for a stored visit entry."""
    entry = _visit_service.get_visit_entry(entry_id)
    report = _report_gen.generate(entry, _catalog)
    _remember_report(report.report_id, report.pdf_path)

    return ReportResponse(**report.to_dict())


@app.get("/api/v1/reports/{report_id}/download", tags=["Reports"])
async def download_report(report_id: str):
    """
    Download a generated PDF report.
    """
    if report_id not in _reports:
        raise HTTPException(status_code=404, detail="Report not found")

    pdf_path = _reports[report_id]

    if not pdf_path or not os.path.exists(pdf_path):
        raise HTTPException(status_code=404, detail="PDF file not found")

    return FileResponse(
        path=pdf_path,
        media_type="application/pdf",
        filename=f"{report_id}.pdf"
    )


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
