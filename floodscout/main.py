from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from floodscout.config import Settings, settings as default_settings
from floodscout.routers.analysis import router as analysis_router
from floodscout.routers.pages import router as pages_router
from floodscout.routers.reports import router as reports_router
from floodscout.routers.upload import router as upload_router
from floodscout.services.ai_service import OpenAIVisionAssessor
from floodscout.services.analysis_service import AnalysisService
from floodscout.services.image_store import ImageStore, build_image_store
from floodscout.services.report_store import ReportStore, build_report_store
from floodscout.services.upload_service import UploadService
from floodscout.utils.exceptions import register_exception_handlers

SERVICE_NAME = "floodscout-api"
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await app.state.report_store.startup()
    yield
    await app.state.http_client.aclose()
    await app.state.report_store.shutdown()


def create_app(
    settings: Settings | None = None,
    *,
    report_store: ReportStore | None = None,
    image_store: ImageStore | None = None,
    assessor=None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the app and wire its collaborators.

    Anything not passed in is built from `settings`; tests pass fakes.
    """
    if settings is None:
        settings = default_settings

    app = FastAPI(
        title="FloodScout API",
        description="Flood damage assessment of building photos via a vision model",
        version=VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.report_store = report_store or build_report_store(settings.report_store, settings.database_url)
    app.state.assessor = assessor or OpenAIVisionAssessor.from_settings(settings)
    app.state.http_client = http_client or httpx.AsyncClient(timeout=settings.image_fetch_timeout_seconds)
    app.state.upload_service = UploadService(
        image_store or build_image_store(settings),
        max_size_bytes=settings.max_upload_size_bytes,
    )
    app.state.analysis_service = AnalysisService(
        app.state.assessor,
        app.state.report_store,
        app.state.http_client,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(upload_router, prefix="/api")
    app.include_router(analysis_router, prefix="/api")
    app.include_router(reports_router, prefix="/api")
    app.include_router(pages_router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": SERVICE_NAME, "version": VERSION}

    return app


app = create_app()
