from typing import Any
from pydantic import (
    BaseModel,
    Field,
    ConfigDict,
    field_serializer,
    model_validator
)
from .enums import ExitCode, Metric, VerdictStatus
from .exceptions import CheckError, ProbeTransportError
from healthprobe.utils.time import get_current_timestamp


class Reading(BaseModel):
    """
    A single measured value for one metric at one point in time.

    Readings are produced once per check cycle and never mutated. A failed
    endpoint probe is still a reading: its value is None and the transport
    failure is kept in ``cause``.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        json_schema_extra={
            "example": {
                "metric": "cpu_usage",
                "value": 45.2,
                "timestamp": 1792300800000,
                "details": {"window_seconds": 1.0}
            }
        }
    )

    metric: Metric = Field(
        ...,
        description="Metric this reading measures"
    )

    value: int | float | None = Field(
        None,
        description="Percentage, process count or HTTP status code",
        examples=[45.2, 312, 200]
    )

    timestamp: int = Field(
        default_factory=get_current_timestamp,
        description="Unix timestamp in milliseconds"
    )

    cause: ProbeTransportError | None = Field(
        None,
        description="Transport failure for an endpoint probe that got no response"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Auxiliary context gathered with the value, never evaluated"
    )

    @property
    def failed(self) -> bool:
        """True when the check produced no value"""
        return self.value is None

    @field_serializer('cause')
    def serialize_cause(self, cause: ProbeTransportError | None) -> str | None:
        return cause.cause if cause is not None else None

    @model_validator(mode='after')
    def validate_value(self) -> 'Reading':
        """Only endpoint probes may lack a value"""
        if self.value is None and self.metric != Metric.ENDPOINT_STATUS:
            raise ValueError(f"{self.metric.label} reading requires a value")
        if self.metric.is_percentage and not 0 <= self.value <= 100:
            raise ValueError(f"{self.metric.label} must be within 0-100, got {self.value}")
        return self


class Verdict(BaseModel):
    """OK/ALERT classification of a reading against its threshold"""

    model_config = ConfigDict(frozen=True)

    metric: Metric
    reading: Reading
    status: VerdictStatus
    message: str = ""

    @property
    def is_alert(self) -> bool:
        return self.status == VerdictStatus.ALERT

    @model_validator(mode='after')
    def validate_metric(self) -> 'Verdict':
        if self.reading.metric != self.metric:
            raise ValueError(
                f"Verdict metric {self.metric.value} does not match reading metric {self.reading.metric.value}"
            )
        return self


class CycleResult(BaseModel):
    """Verdicts and errors collected by one check cycle"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    verdicts: list[Verdict] = Field(default_factory=list)
    errors: list[CheckError] = Field(default_factory=list)
    aborted: bool = Field(
        False,
        description="Set when strict mode stopped the cycle at the first error"
    )
    started_at: int = Field(default_factory=get_current_timestamp)
    finished_at: int | None = None

    @field_serializer('errors')
    def serialize_errors(self, errors: list[CheckError]) -> list[dict[str, str]]:
        return [{'metric': e.metric.value, 'cause': e.cause} for e in errors]


class RenderedOutput(BaseModel):
    """Report text together with the exit code it implies"""

    model_config = ConfigDict(frozen=True)

    text: str
    exit_code: ExitCode
