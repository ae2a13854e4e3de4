from prometheus_client import CollectorRegistry, Gauge, generate_latest

from .core.enums import ExitCode, Metric
from .core.models import CycleResult


class ProbeMetrics:
    """
    Prometheus metrics for one check cycle.

    Metrics:
    - Resource usage (CPU, memory, disk) and process count
    - Endpoint status code, availability and latency
    - Alert and error state per metric
    - Overall exit code

    Each instance owns its registry, so rendering a cycle never leaks values
    from a previous one.
    """

    def __init__(self):
        self.registry = CollectorRegistry()

        # Resource metrics
        self.cpu_usage = Gauge(
            'healthprobe_cpu_usage_percent',
            'Host CPU usage percentage',
            registry=self.registry
        )

        self.memory_usage = Gauge(
            'healthprobe_memory_usage_percent',
            'Host memory usage percentage',
            registry=self.registry
        )

        self.disk_usage = Gauge(
            'healthprobe_disk_usage_percent',
            'Disk usage percentage of the monitored mount',
            ['path'],
            registry=self.registry
        )

        self.process_count = Gauge(
            'healthprobe_process_count',
            'Number of running processes',
            registry=self.registry
        )

        # Endpoint metrics
        self.endpoint_up = Gauge(
            'healthprobe_endpoint_up',
            'Endpoint availability (1 = HTTP 200, 0 = otherwise)',
            ['url'],
            registry=self.registry
        )

        self.endpoint_status = Gauge(
            'healthprobe_endpoint_status_code',
            'HTTP status code returned by the endpoint',
            ['url'],
            registry=self.registry
        )

        self.endpoint_latency = Gauge(
            'healthprobe_endpoint_latency_seconds',
            'Endpoint response latency in seconds',
            ['url'],
            registry=self.registry
        )

        # Verdict metrics
        self.check_alert = Gauge(
            'healthprobe_check_alert',
            'Check verdict (1 = ALERT, 0 = OK)',
            ['metric'],
            registry=self.registry
        )

        self.check_error = Gauge(
            'healthprobe_check_error',
            'Check could not be performed (1 = error)',
            ['metric'],
            registry=self.registry
        )

        self.exit_code = Gauge(
            'healthprobe_exit_code',
            'Exit code of the check cycle',
            registry=self.registry
        )

    def update(self, result: CycleResult, exit_code: ExitCode) -> None:
        """Record a cycle's readings and verdicts"""
        for verdict in result.verdicts:
            reading = verdict.reading
            self.check_alert.labels(metric=verdict.metric.value).set(1 if verdict.is_alert else 0)

            if verdict.metric == Metric.CPU_USAGE:
                self.cpu_usage.set(reading.value)
            elif verdict.metric == Metric.MEMORY_USAGE:
                self.memory_usage.set(reading.value)
            elif verdict.metric == Metric.DISK_USAGE:
                self.disk_usage.labels(path=reading.details.get('path', '/')).set(reading.value)
            elif verdict.metric == Metric.PROCESS_COUNT:
                self.process_count.set(reading.value)
            elif verdict.metric == Metric.ENDPOINT_STATUS:
                url = reading.details.get('url', '')
                self.endpoint_up.labels(url=url).set(0 if verdict.is_alert else 1)
                if reading.value is not None:
                    self.endpoint_status.labels(url=url).set(reading.value)
                    self.endpoint_latency.labels(url=url).set(reading.details.get('latency_ms', 0) / 1000)

        for error in result.errors:
            self.check_error.labels(metric=error.metric.value).set(1)

        self.exit_code.set(int(exit_code))

    def render(self) -> str:
        """Prometheus text exposition of the registry"""
        return generate_latest(self.registry).decode('utf-8')
