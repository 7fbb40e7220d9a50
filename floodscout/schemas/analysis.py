from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, Field, field_validator

Severity = Literal["low", "medium", "critical"]
ComponentStatus = Literal["intact", "damaged", "critical", "unknown"]
RiskLevel = Literal["low", "medium", "high", "critical"]
DebrisLevel = Literal["none", "light", "moderate", "heavy"]

DEFAULT_DISCLAIMER = (
    "Assessment based solely on visible damage in the provided image. "
    "Professional on-site inspection required for accurate structural evaluation."
)

REQUIRED_FIELDS = ("severity", "structural_findings", "hazards")


def _text(value):
    """Model output for free-text fields: null becomes "", numbers become strings."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _false_if_none(value):
    return False if value is None else value


Text = Annotated[str, BeforeValidator(_text)]
Flag = Annotated[bool, BeforeValidator(_false_if_none)]


class StructuralFinding(BaseModel):
    component: Text
    status: ComponentStatus
    evidence: Text = ""
    risk_level: RiskLevel | None = None


class FloodIndicators(BaseModel):
    water_line_visible: Flag = False
    estimated_depth_meters: float | None = None
    debris_level: DebrisLevel = "none"
    mud_staining: Flag = False

    @field_validator("debris_level", mode="before")
    @classmethod
    def _default_debris(cls, value):
        return "none" if value is None else value


class Hazard(BaseModel):
    type: Text
    risk: RiskLevel
    evidence: Text = ""


class RepairEstimate(BaseModel):
    material: Text
    estimated_quantity: Text = ""
    notes: str | None = None


class AnalysisResult(BaseModel):
    severity: Severity
    summary: Text = ""
    structural_findings: list[StructuralFinding]
    flood_indicators: FloodIndicators = Field(default_factory=FloodIndicators)
    hazards: list[Hazard]
    repair_estimates: list[RepairEstimate] = Field(default_factory=list)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    disclaimer: str = DEFAULT_DISCLAIMER

    # Optional sections the model sent as null fall back to their defaults
    @field_validator("flood_indicators", mode="before")
    @classmethod
    def _default_indicators(cls, value):
        return FloodIndicators() if value is None else value

    @field_validator("repair_estimates", mode="before")
    @classmethod
    def _default_estimates(cls, value):
        return [] if value is None else value

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _default_confidence(cls, value):
        return 0.0 if value is None else value

    @field_validator("disclaimer", mode="before")
    @classmethod
    def _default_disclaimer(cls, value):
        return value or DEFAULT_DISCLAIMER
