import os

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from floodscout.dependencies import get_report_store
from floodscout.services.report_store import ReportStore
from floodscout.services.report_view import build_report_view

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

templates = Jinja2Templates(directory=TEMPLATES_DIR)

router = APIRouter(tags=["pages"], include_in_schema=False)


@router.get("/", response_class=HTMLResponse)
async def landing_page(request: Request):
    return templates.TemplateResponse(request, "index.html")


@router.get("/analyze", response_class=HTMLResponse)
async def analyze_page(request: Request):
    max_size_mb = request.app.state.settings.max_upload_size_bytes // (1024 * 1024)
    return templates.TemplateResponse(request, "analyze.html", {"max_size_mb": max_size_mb})


@router.get("/report/{report_id}", response_class=HTMLResponse)
async def report_page(
    request: Request,
    report_id: str,
    report_store: ReportStore = Depends(get_report_store),
):
    report = await report_store.get_report(report_id)
    if report is None:
        return templates.TemplateResponse(
            request, "not_found.html", {"report_id": report_id}, status_code=404
        )
    return templates.TemplateResponse(request, "report.html", {"report": build_report_view(report)})
