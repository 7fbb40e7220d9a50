from pydantic import BaseModel, Field

from floodscout.schemas.analysis import AnalysisResult


class StoredReport(BaseModel):
    id: str
    image_url: str = Field(alias="imageUrl")
    analysis: AnalysisResult
    timestamp: str

    model_config = {"populate_by_name": True, "frozen": True}


class AnalyzeRequest(BaseModel):
    image_url: str | None = Field(default=None, alias="imageUrl")
    persist: bool = True

    model_config = {"populate_by_name": True}
