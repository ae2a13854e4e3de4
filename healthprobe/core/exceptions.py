# healthprobe/core/exceptions.py

from typing import Optional

from .enums import Metric


class HealthProbeError(Exception):
    """Base exception for all health probe errors"""
    pass

class ConfigurationError(HealthProbeError):
    """Base exception for configuration errors"""
    pass

class CheckError(HealthProbeError):
    """
    Base exception for a failed check.

    Carries the metric the check was producing and the underlying cause so
    reports can name both.
    """

    def __init__(self, metric: Metric, cause: str, original: Optional[BaseException] = None):
        self.metric = metric
        self.cause = cause
        self.original = original
        super().__init__(f"{metric.label}: {cause}")

class SamplingError(CheckError):
    """A host resource counter could not be read"""

    def __init__(self, metric: Metric, cause: str, original: Optional[BaseException] = None):
        super().__init__(metric, cause, original)

class ProbeTransportError(CheckError):
    """The endpoint could not be reached (connection refused, DNS, timeout)"""

    def __init__(self, url: str, cause: str, original: Optional[BaseException] = None):
        self.url = url
        super().__init__(Metric.ENDPOINT_STATUS, cause, original)
