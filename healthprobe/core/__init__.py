# healthprobe/core/__init__.py

from .enums import ExitCode, Metric, OutputFormat, VerdictStatus
from .exceptions import (
    CheckError,
    ConfigurationError,
    HealthProbeError,
    ProbeTransportError,
    SamplingError
)
from .models import CycleResult, Reading, RenderedOutput, Verdict
from .config import ProbeConfig, ThresholdConfig

__all__ = [
    'ExitCode',
    'Metric',
    'OutputFormat',
    'VerdictStatus',
    'CheckError',
    'ConfigurationError',
    'HealthProbeError',
    'ProbeTransportError',
    'SamplingError',
    'CycleResult',
    'Reading',
    'RenderedOutput',
    'Verdict',
    'ProbeConfig',
    'ThresholdConfig'
]
