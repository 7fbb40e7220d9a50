from fastapi import APIRouter, Depends

from floodscout.dependencies import get_analysis_service, get_assessor
from floodscout.schemas.report import AnalyzeRequest
from floodscout.services.ai_service import OpenAIVisionAssessor
from floodscout.services.analysis_service import AnalysisService

router = APIRouter(tags=["analysis"])


@router.post("/analyze")
async def analyze_image(
    payload: AnalyzeRequest,
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    if not payload.persist:
        analysis = await analysis_service.analyze(payload.image_url)
        return {"analysis": analysis.model_dump()}

    report = await analysis_service.analyze_and_store(payload.image_url)
    return {"reportId": report.id, "analysis": report.analysis.model_dump()}


@router.get("/models")
async def list_models(assessor: OpenAIVisionAssessor = Depends(get_assessor)):
    models = await assessor.list_models()
    return {"model": assessor.model, "available_models": models}
