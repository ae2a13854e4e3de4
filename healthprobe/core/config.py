from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from urllib.parse import urlparse

from .enums import Metric, OutputFormat
from .exceptions import ConfigurationError


DEFAULT_THRESHOLD = 80.0
DEFAULT_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 5.0
DEFAULT_CPU_INTERVAL = 1.0


@dataclass(frozen=True)
class ThresholdConfig:
    """Alert limits for resource metrics, in percent"""
    cpu: float = DEFAULT_THRESHOLD
    memory: float = DEFAULT_THRESHOLD
    disk: float = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        """Validate threshold configuration"""
        for name in ('cpu', 'memory', 'disk'):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ConfigurationError(f"{name} threshold must be a number")
            if not 0 <= value <= 100:
                raise ConfigurationError(f"{name} threshold must be between 0 and 100, got {value}")

    def limit_for(self, metric: Metric) -> float:
        """Get the limit for a threshold metric"""
        limits = {
            Metric.CPU_USAGE: self.cpu,
            Metric.MEMORY_USAGE: self.memory,
            Metric.DISK_USAGE: self.disk
        }
        if metric not in limits:
            raise KeyError(f"No threshold defined for {metric.value}")
        return limits[metric]

    def as_dict(self) -> Dict[Metric, float]:
        return {
            Metric.CPU_USAGE: self.cpu,
            Metric.MEMORY_USAGE: self.memory,
            Metric.DISK_USAGE: self.disk
        }


@dataclass(frozen=True)
class ProbeConfig:
    """Configuration for one health probe run"""
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    disk_path: str = "/"
    url: str = DEFAULT_URL
    timeout: float = DEFAULT_TIMEOUT
    cpu_interval: float = DEFAULT_CPU_INTERVAL
    strict: bool = False
    check_resources: bool = True
    check_endpoint: bool = True
    output_format: OutputFormat = OutputFormat.TEXT
    interval: Optional[float] = None  # seconds between cycles, None for one-shot
    count: Optional[int] = None       # number of cycles in loop mode, None for unbounded

    def __post_init__(self) -> None:
        """Validate probe configuration"""
        if self.timeout <= 0:
            raise ConfigurationError("Probe timeout must be positive")
        if self.cpu_interval <= 0:
            raise ConfigurationError("CPU sampling interval must be positive")
        if not self.disk_path:
            raise ConfigurationError("Disk path must be specified")
        if not (self.check_resources or self.check_endpoint):
            raise ConfigurationError("At least one of resource checks or endpoint probe must be enabled")
        if self.check_endpoint:
            parsed = urlparse(self.url)
            if parsed.scheme not in ('http', 'https') or not parsed.netloc:
                raise ConfigurationError(f"Invalid endpoint URL '{self.url}'")
        if self.interval is not None and self.interval <= 0:
            raise ConfigurationError("Loop interval must be positive")
        if self.count is not None:
            if self.count <= 0:
                raise ConfigurationError("Cycle count must be positive")
            if self.interval is None:
                raise ConfigurationError("Cycle count requires a loop interval")

    @property
    def loop(self) -> bool:
        """Check if the probe runs repeatedly"""
        return self.interval is not None

    @classmethod
    def from_args(cls, args: Any) -> 'ProbeConfig':
        """Build configuration from parsed command line arguments"""
        try:
            thresholds = ThresholdConfig(
                cpu=float(args.cpu_threshold),
                memory=float(args.memory_threshold),
                disk=float(args.disk_threshold)
            )
            return cls(
                thresholds=thresholds,
                disk_path=args.disk_path,
                url=args.url,
                timeout=float(args.timeout),
                cpu_interval=float(args.cpu_interval),
                strict=bool(args.strict),
                check_resources=not args.no_resources,
                check_endpoint=not args.no_probe,
                output_format=OutputFormat(args.format),
                interval=float(args.interval) if args.interval is not None else None,
                count=int(args.count) if args.count is not None else None
            )
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid probe configuration: {e}")
