from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator
from typing import Any, Dict, List, Optional
from enum import Enum

from lava.core.errors import InvalidSeverity
from lava.core.types import Severity, parse_severity, severity_from_score
from lava.services.configuration import Configuration, Exclusion

class FindingStatus(str, Enum):
    REPORTABLE = "reportable"
    SUPPRESSED = "suppressed"
    BELOW_THRESHOLD = "below_threshold"

class Finding(BaseModel):
    """A single issue returned by the check runner."""
    target: str = ""
    resource: str = ""
    fingerprint: str = ""
    # Checktype image that produced the finding.
    checktype: str = ""
    severity: Severity
    score: Optional[float] = None
    summary: str = ""
    payload: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _severity_from_score(cls, data: Any) -> Any:
        # Runners may only report a score.
        if isinstance(data, dict) and data.get("severity") is None and data.get("score") is not None:
            data = dict(data)
            data["severity"] = severity_from_score(float(data["score"]))
        return data

    @field_validator("severity", mode="before")
    @classmethod
    def _decode_severity(cls, v: Any) -> Severity:
        if isinstance(v, Severity):
            return v
        try:
            return parse_severity(v)
        except InvalidSeverity as e:
            raise ValueError(str(e))

    @field_serializer("severity")
    def _encode_severity(self, severity: Severity) -> str:
        return str(severity)

class Classification(BaseModel):
    finding: Finding
    status: FindingStatus
    reportable: bool
    suppressed: bool
    exclusion: Optional[Exclusion] = None

class SeverityCounts(BaseModel):
    CRITICAL: int = 0
    HIGH: int = 0
    MEDIUM: int = 0
    LOW: int = 0
    INFO: int = 0

class ReportSummary(BaseModel):
    reportable: SeverityCounts = Field(default_factory=SeverityCounts)
    suppressed: int = 0
    below_threshold: int = 0
    highest_severity: Optional[str] = None

class Report(BaseModel):
    summary: ReportSummary = Field(default_factory=ReportSummary)
    findings: List[Classification] = Field(default_factory=list)
    excluded: List[Classification] = Field(default_factory=list)

class ConfigRequest(BaseModel):
    content: str

class ConfigResponse(BaseModel):
    config: Configuration
    compatible: bool

class ClassifyRequest(BaseModel):
    config: str
    findings: List[Finding] = Field(default_factory=list)

class ErrorDetail(BaseModel):
    kind: str
    message: str
    value: Optional[str] = None
