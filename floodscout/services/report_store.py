"""Keyed storage for finished reports.

Reports are written once after a successful analysis and only read afterwards.
InMemoryReportStore is the default. It lives as long as the process and has no
locking: it relies on the single-threaded event loop, so do not share one
instance across threads. SqlReportStore keeps reports in a real database.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine

from floodscout.database import create_engine, create_session_maker, create_tables
from floodscout.models.report import Report
from floodscout.schemas.analysis import AnalysisResult
from floodscout.schemas.report import StoredReport

logger = logging.getLogger(__name__)


class InMemoryReportStore:
    def __init__(self) -> None:
        self._reports: dict[str, StoredReport] = {}

    async def startup(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    async def store_report(self, report: StoredReport) -> None:
        self._reports[report.id] = report
        logger.info("Stored report %s (%d in memory)", report.id, len(self._reports))

    async def get_report(self, report_id: str) -> StoredReport | None:
        report = self._reports.get(report_id)
        logger.info("Report lookup %s: %s", report_id, "hit" if report else "miss")
        return report

    async def count(self) -> int:
        return len(self._reports)


class SqlReportStore:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_maker = create_session_maker(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlReportStore":
        return cls(create_engine(database_url))

    async def startup(self) -> None:
        await create_tables(self._engine)

    async def shutdown(self) -> None:
        await self._engine.dispose()

    async def store_report(self, report: StoredReport) -> None:
        async with self._session_maker() as session:
            # merge = insert or overwrite on id collision
            await session.merge(Report(
                id=report.id,
                image_url=report.image_url,
                analysis=report.analysis.model_dump_json(),
                timestamp=report.timestamp,
            ))
            await session.commit()
        logger.info("Stored report %s", report.id)

    async def get_report(self, report_id: str) -> StoredReport | None:
        async with self._session_maker() as session:
            row = await session.get(Report, report_id)
        logger.info("Report lookup %s: %s", report_id, "hit" if row else "miss")
        if row is None:
            return None
        return StoredReport(
            id=row.id,
            image_url=row.image_url,
            analysis=AnalysisResult.model_validate_json(row.analysis),
            timestamp=row.timestamp,
        )

    async def count(self) -> int:
        async with self._session_maker() as session:
            result = await session.execute(select(func.count()).select_from(Report))
            return result.scalar_one()


ReportStore = InMemoryReportStore | SqlReportStore


def build_report_store(backend: str, database_url: str) -> ReportStore:
    if backend == "memory":
        return InMemoryReportStore()
    if backend == "database":
        return SqlReportStore.from_url(database_url)
    raise ValueError(f"Unknown report store backend: {backend!r}")
