from enum import Enum, IntEnum


class Metric(str, Enum):
    """
    Kinds of health checks a probe run can produce readings for.

    Resource metrics (CPU, memory, disk) are percentages evaluated against
    a threshold, the process count is informational and the endpoint status
    carries an HTTP status code.
    """
    CPU_USAGE = "cpu_usage"
    MEMORY_USAGE = "memory_usage"
    DISK_USAGE = "disk_usage"
    PROCESS_COUNT = "process_count"
    ENDPOINT_STATUS = "endpoint_status"

    @property
    def label(self) -> str:
        """Human readable label used in text reports"""
        labels = {
            Metric.CPU_USAGE: "CPU Usage",
            Metric.MEMORY_USAGE: "Memory Usage",
            Metric.DISK_USAGE: "Disk Usage",
            Metric.PROCESS_COUNT: "Running Processes",
            Metric.ENDPOINT_STATUS: "Application"
        }
        return labels[self]

    @property
    def is_percentage(self) -> bool:
        """Check if readings of this metric are percentages"""
        return self in (Metric.CPU_USAGE, Metric.MEMORY_USAGE, Metric.DISK_USAGE)

    @property
    def has_threshold(self) -> bool:
        """Check if this metric is compared against a configured limit"""
        return self.is_percentage

    @classmethod
    def resource_metrics(cls) -> list['Metric']:
        """Host resource metrics in sampling order"""
        return [cls.CPU_USAGE, cls.MEMORY_USAGE, cls.DISK_USAGE, cls.PROCESS_COUNT]


class VerdictStatus(str, Enum):
    """Outcome of evaluating a reading"""
    OK = "ok"
    ALERT = "alert"


class ExitCode(IntEnum):
    """Process exit codes, ordered by severity"""
    OK = 0
    ALERT = 1
    ERROR = 2


class OutputFormat(str, Enum):
    """Report renderings supported by the CLI"""
    TEXT = "text"
    JSON = "json"
    PROMETHEUS = "prometheus"
