"""Display data for the HTML report page.

Everything the template shows is derived here so the template itself stays
free of logic: hazard ordering, indicator labels, style classes and the
repair cost table with its total.
"""
from datetime import datetime

from floodscout.schemas.analysis import Hazard
from floodscout.schemas.report import StoredReport
from floodscout.services.cost_estimator import estimate_cost, round_half_up, total_cost

RISK_ORDER = {"critical": 4, "high": 3, "medium": 2, "low": 1}


def sort_hazards(hazards: list[Hazard]) -> list[Hazard]:
    """Most dangerous first; ties keep the model's order."""
    return sorted(hazards, key=lambda h: RISK_ORDER[h.risk], reverse=True)


def format_money(amount: int) -> str:
    return f"${amount:,}"


def format_depth(depth: float | None) -> str:
    # 0 renders as Unknown too
    if not depth:
        return "Unknown"
    return f"{depth:g}m"


def format_timestamp(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime("%d %b %Y, %H:%M UTC")
    except ValueError:
        return timestamp


def build_report_view(report: StoredReport) -> dict:
    analysis = report.analysis
    indicators = analysis.flood_indicators

    repair_rows = []
    for estimate in analysis.repair_estimates:
        cost = estimate_cost(estimate.material, estimate.estimated_quantity)
        repair_rows.append({
            "material": estimate.material,
            "quantity": estimate.estimated_quantity,
            "cost": cost,
            "cost_label": format_money(cost),
            "notes": estimate.notes or "—",
        })

    total = total_cost(analysis.repair_estimates)

    return {
        "id": report.id,
        "image_url": report.image_url,
        "generated_on": format_timestamp(report.timestamp),
        "severity": analysis.severity,
        "summary": analysis.summary,
        "confidence_percent": round_half_up(analysis.confidence_score * 100),
        "findings": [
            {
                "component": f.component,
                "status": f.status,
                "evidence": f.evidence,
                "risk_level": f.risk_level,
            }
            for f in analysis.structural_findings
        ],
        "indicators": [
            {
                "label": "Water Line Visible",
                "value": "Yes" if indicators.water_line_visible else "No",
                "highlight": indicators.water_line_visible,
            },
            {
                "label": "Estimated Depth",
                "value": format_depth(indicators.estimated_depth_meters),
                "highlight": bool(indicators.estimated_depth_meters),
            },
            {
                "label": "Debris Level",
                "value": indicators.debris_level,
                "highlight": indicators.debris_level != "none",
            },
            {
                "label": "Mud Staining",
                "value": "Present" if indicators.mud_staining else "Absent",
                "highlight": indicators.mud_staining,
            },
        ],
        "hazards": sort_hazards(analysis.hazards),
        "repair_rows": repair_rows,
        "total_cost": total,
        "total_cost_label": format_money(total),
        "disclaimer": analysis.disclaimer,
    }
