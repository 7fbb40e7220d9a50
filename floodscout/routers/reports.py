from fastapi import APIRouter, Depends

from floodscout.dependencies import get_report_store
from floodscout.services.report_store import ReportStore
from floodscout.utils.exceptions import NotFoundError

router = APIRouter(prefix="/report", tags=["reports"])


@router.get("/{report_id}")
async def get_report(report_id: str, report_store: ReportStore = Depends(get_report_store)):
    report = await report_store.get_report(report_id)
    if report is None:
        raise NotFoundError("Report not found")
    return report.model_dump(by_alias=True)
