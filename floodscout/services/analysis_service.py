"""Turn an uploaded image reference into a stored flood damage report.

received -> image resolved -> model invoked -> parsed/validated -> stored.
Any step may raise; nothing is stored unless every step succeeded.
"""
import base64
import binascii
import logging
import re
import uuid
from datetime import datetime, timezone

import httpx

from floodscout.schemas.analysis import AnalysisResult
from floodscout.schemas.report import StoredReport
from floodscout.services.report_store import ReportStore
from floodscout.utils.exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

_DATA_URL_PATTERN = re.compile(r"^data:([^;,]+);base64,(.+)$", re.DOTALL)
DEFAULT_MIME_TYPE = "image/jpeg"


def decode_data_url(image_url: str) -> tuple[bytes, str]:
    match = _DATA_URL_PATTERN.match(image_url)
    if not match:
        raise ValidationError("Invalid data URL format")
    mime_type, payload = match.groups()
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except binascii.Error as e:
        raise ValidationError("Invalid data URL format") from e


async def fetch_image(image_url: str, client: httpx.AsyncClient) -> tuple[bytes, str]:
    try:
        response = await client.get(image_url, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.exception("Failed to fetch image %s", image_url)
        raise UpstreamError("Failed to fetch image") from e

    content_type = response.headers.get("content-type") or DEFAULT_MIME_TYPE
    mime_type = content_type.split(";")[0].strip() or DEFAULT_MIME_TYPE
    return response.content, mime_type


class AnalysisService:
    def __init__(self, assessor, report_store: ReportStore, http_client: httpx.AsyncClient):
        self.assessor = assessor
        self.report_store = report_store
        self.http_client = http_client

    async def resolve_image(self, image_url: str) -> tuple[bytes, str]:
        if image_url.startswith("data:"):
            return decode_data_url(image_url)
        return await fetch_image(image_url, self.http_client)

    async def analyze(self, image_url: str | None) -> AnalysisResult:
        """Run one assessment without storing anything."""
        if not image_url:
            raise ValidationError("No image URL provided")

        image_bytes, mime_type = await self.resolve_image(image_url)
        return await self.assessor.assess(image_bytes, mime_type)

    async def analyze_and_store(self, image_url: str | None) -> StoredReport:
        analysis = await self.analyze(image_url)

        report = StoredReport(
            id=str(uuid.uuid4()),
            image_url=image_url,
            analysis=analysis,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        await self.report_store.store_report(report)
        logger.info("Analysis stored as report %s (severity=%s, %d hazards)",
                    report.id, analysis.severity, len(analysis.hazards))
        return report
