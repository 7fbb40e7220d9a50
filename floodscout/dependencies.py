from fastapi import Request

from floodscout.services.ai_service import OpenAIVisionAssessor
from floodscout.services.analysis_service import AnalysisService
from floodscout.services.report_store import ReportStore
from floodscout.services.upload_service import UploadService


def get_report_store(request: Request) -> ReportStore:
    return request.app.state.report_store


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def get_analysis_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service


def get_assessor(request: Request) -> OpenAIVisionAssessor:
    return request.app.state.assessor
