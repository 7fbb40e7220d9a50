import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from floodscout.utils.exceptions import (
    NotFoundError,
    UpstreamError,
    ValidationError,
    register_exception_handlers,
)
from floodscout.utils.response import error_response, mask_secrets


def test_error_response():
    assert error_response("File must be an image") == {"error": "File must be an image"}


def test_mask_secrets():
    assert mask_secrets("Incorrect API key provided: sk-proj-abc_123") == "Incorrect API key provided: sk-***"
    assert mask_secrets("no secrets here") == "no secrets here"


def test_error_status_codes():
    assert ValidationError("bad").status_code == 400
    assert UpstreamError("down").status_code == 502
    assert NotFoundError("gone").status_code == 404


def _error_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/validation")
    async def validation():
        raise ValidationError("File must be an image")

    @app.get("/upstream")
    async def upstream():
        raise UpstreamError("Invalid AI response format")

    @app.get("/crash")
    async def crash():
        raise RuntimeError("boom")

    return app


@pytest.mark.asyncio
async def test_handlers_map_errors_to_json():
    transport = ASGITransport(app=_error_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        validation = await client.get("/validation")
        upstream = await client.get("/upstream")
        crash = await client.get("/crash")

    assert (validation.status_code, validation.json()) == (400, {"error": "File must be an image"})
    assert (upstream.status_code, upstream.json()) == (502, {"error": "Invalid AI response format"})
    assert (crash.status_code, crash.json()) == (500, {"error": "Internal server error"})
