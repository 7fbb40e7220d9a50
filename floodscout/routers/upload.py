from fastapi import APIRouter, Depends, File, UploadFile

from floodscout.dependencies import get_upload_service
from floodscout.services.upload_service import UploadService

router = APIRouter(tags=["upload"])


@router.post("/upload")
async def upload_image(
    file: UploadFile | None = File(default=None),
    upload_service: UploadService = Depends(get_upload_service),
):
    image_url = await upload_service.upload(file)
    return {"imageUrl": image_url}
