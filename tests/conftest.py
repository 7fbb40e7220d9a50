import json
from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from floodscout.config import Settings
from floodscout.main import create_app
from floodscout.services.ai_service import OpenAIVisionAssessor
from floodscout.services.image_store import InlineImageStore
from floodscout.services.report_store import InMemoryReportStore

SAMPLE_ANALYSIS = {
    "severity": "critical",
    "summary": "Ground floor walls show heavy water damage up to one metre.",
    "structural_findings": [
        {"component": "walls", "status": "damaged", "evidence": "Cracked plaster below the water line", "risk_level": "high"},
        {"component": "roof", "status": "unknown", "evidence": "Not visible in the photo"},
    ],
    "flood_indicators": {
        "water_line_visible": True,
        "estimated_depth_meters": 1.2,
        "debris_level": "moderate",
        "mud_staining": True,
    },
    "hazards": [
        {"type": "Debris instability", "risk": "medium", "evidence": "Loose timber against the door"},
        {"type": "Wall collapse risk", "risk": "critical", "evidence": "Bulging load-bearing wall"},
    ],
    "repair_estimates": [
        {"material": "Cement", "estimated_quantity": "40 bags"},
        {"material": "Steel Rods", "estimated_quantity": "20 pieces", "notes": "Foundation reinforcement"},
        {"material": "Labor", "estimated_quantity": "16 hours"},
    ],
    "confidence_score": 0.78,
    "disclaimer": "Assessment based solely on visible damage in the provided image.",
}

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


class FakeCompletions:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


class FakeModels:
    def __init__(self, model_ids):
        self.model_ids = list(model_ids)

    async def _iterate(self):
        for model_id in self.model_ids:
            yield SimpleNamespace(id=model_id)

    def list(self):
        return self._iterate()


class FakeOpenAI:
    """Stands in for AsyncOpenAI: chat.completions.create and models.list."""

    def __init__(self, *replies, models=("gpt-4o-mini", "gpt-4o")):
        self.chat = SimpleNamespace(completions=FakeCompletions(replies))
        self.models = FakeModels(models)

    @property
    def calls(self):
        return self.chat.completions.calls

    def queue(self, *replies):
        self.chat.completions.replies.extend(replies)


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, openai_api_key="", s3_bucket="", report_store="memory")


@pytest.fixture
def fake_openai():
    return FakeOpenAI(json.dumps(SAMPLE_ANALYSIS))


@pytest.fixture
def assessor(fake_openai):
    return OpenAIVisionAssessor(fake_openai, "gpt-4o-mini", prompt="Assess this building.")


@pytest.fixture
def report_store():
    return InMemoryReportStore()


@pytest.fixture
def image_requests():
    """Requests seen by the outbound image fetcher."""
    return []


@pytest.fixture
def http_client(image_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        image_requests.append(request)
        if request.url.path.endswith("missing.jpg"):
            return httpx.Response(404)
        return httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def app(test_settings, report_store, assessor, http_client):
    return create_app(
        test_settings,
        report_store=report_store,
        image_store=InlineImageStore(),
        assessor=assessor,
        http_client=http_client,
    )


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
