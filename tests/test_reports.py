import pytest

from floodscout.schemas.analysis import AnalysisResult
from floodscout.schemas.report import StoredReport

from conftest import SAMPLE_ANALYSIS


async def _seed_report(report_store, report_id="r-100") -> StoredReport:
    report = StoredReport(
        id=report_id,
        image_url="https://blob.example.com/house.png",
        analysis=AnalysisResult.model_validate(SAMPLE_ANALYSIS),
        timestamp="2026-03-01T10:00:00+00:00",
    )
    await report_store.store_report(report)
    return report


@pytest.mark.asyncio
async def test_fetch_report_json(client, report_store):
    report = await _seed_report(report_store)

    response = await client.get(f"/api/report/{report.id}")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"id", "imageUrl", "analysis", "timestamp"}
    assert body["id"] == "r-100"
    assert body["imageUrl"] == "https://blob.example.com/house.png"
    assert body["timestamp"] == "2026-03-01T10:00:00+00:00"
    assert body["analysis"]["repair_estimates"][0]["material"] == "Cement"


@pytest.mark.asyncio
async def test_fetch_unknown_report(client):
    response = await client.get("/api/report/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Report not found"}


@pytest.mark.asyncio
async def test_analyze_then_fetch_round_trip(client):
    import base64
    from conftest import PNG_BYTES

    data_url = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
    analyzed = (await client.post("/api/analyze", json={"imageUrl": data_url})).json()

    fetched = (await client.get(f"/api/report/{analyzed['reportId']}")).json()

    assert fetched["id"] == analyzed["reportId"]
    assert fetched["analysis"] == analyzed["analysis"]
    assert fetched["imageUrl"] == data_url


@pytest.mark.asyncio
async def test_report_page_renders_costs_and_hazards(client, report_store):
    report = await _seed_report(report_store)

    response = await client.get(f"/report/{report.id}")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    html = response.text
    assert "Flood Damage Assessment Report" in html
    # 40 bags cement + 20 steel rods + 16h labor
    assert "$480" in html
    assert "$500" in html
    assert "$1,920" in html
    assert "$2,900" in html
    assert "78%" in html
    assert "1.2m" in html
    assert html.index("Wall collapse risk") < html.index("Debris instability")


@pytest.mark.asyncio
async def test_report_page_unknown_id(client):
    response = await client.get("/report/nope")

    assert response.status_code == 404
    assert "Report not found" in response.text


@pytest.mark.asyncio
async def test_report_page_escapes_model_text(client, report_store):
    analysis = dict(SAMPLE_ANALYSIS, summary="<script>alert(1)</script>")
    await report_store.store_report(StoredReport(
        id="r-xss",
        image_url="https://blob.example.com/house.png",
        analysis=AnalysisResult.model_validate(analysis),
        timestamp="2026-03-01T10:00:00+00:00",
    ))

    response = await client.get("/report/r-xss")

    assert "<script>alert(1)</script>" not in response.text
    assert "&lt;script&gt;" in response.text


@pytest.mark.asyncio
async def test_landing_and_analyze_pages(client):
    landing = await client.get("/")
    analyze = await client.get("/analyze")

    assert landing.status_code == 200
    assert 'href="/analyze"' in landing.text
    assert analyze.status_code == 200
    assert "/api/upload" in analyze.text
    assert "up to 10MB" in analyze.text
