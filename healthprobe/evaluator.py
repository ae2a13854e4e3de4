from .core.config import ThresholdConfig
from .core.enums import Metric, VerdictStatus
from .core.models import Reading, Verdict

HEALTHY_STATUS = 200


def format_percent(value: float) -> str:
    """Percentage with the two decimals readings are rounded to"""
    return f"{value:.2f}%"


def evaluate(reading: Reading, thresholds: ThresholdConfig) -> Verdict:
    """
    Classify a reading as OK or ALERT.

    Resource percentages alert only when strictly above their limit, the
    endpoint is healthy only on HTTP 200 and the process count is
    informational. Pure function: no I/O, no state.
    """
    if reading.metric.has_threshold:
        return _evaluate_threshold(reading, thresholds.limit_for(reading.metric))
    if reading.metric == Metric.ENDPOINT_STATUS:
        return _evaluate_endpoint(reading)
    return Verdict(metric=reading.metric, reading=reading, status=VerdictStatus.OK)


def evaluate_all(readings: list[Reading], thresholds: ThresholdConfig) -> list[Verdict]:
    return [evaluate(reading, thresholds) for reading in readings]


def _evaluate_threshold(reading: Reading, limit: float) -> Verdict:
    if reading.value > limit:
        return Verdict(
            metric=reading.metric,
            reading=reading,
            status=VerdictStatus.ALERT,
            message=f"High {reading.metric.label.lower()}: {format_percent(reading.value)} exceeds {limit:g}%"
        )
    return Verdict(metric=reading.metric, reading=reading, status=VerdictStatus.OK)


def _evaluate_endpoint(reading: Reading) -> Verdict:
    if reading.value == HEALTHY_STATUS:
        return Verdict(
            metric=reading.metric,
            reading=reading,
            status=VerdictStatus.OK,
            message="Application is UP"
        )

    if reading.value is None:
        cause = reading.cause.cause if reading.cause is not None else "no response"
        message = f"Application is DOWN. Probe failed: {cause}"
    else:
        message = f"Application is DOWN. HTTP Status: {reading.value}"

    return Verdict(
        metric=reading.metric,
        reading=reading,
        status=VerdictStatus.ALERT,
        message=message
    )
