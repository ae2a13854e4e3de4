# healthprobe/sampler.py

import asyncio
import psutil
from pydantic import ValidationError

from .core.enums import Metric
from .core.exceptions import SamplingError
from .core.models import Reading
from .utils.logger import LoggerSetup

logger = LoggerSetup.setup(__name__)


class ResourceSampler:
    """
    Reads host resource utilization.

    Features:
    - CPU usage as 100 - idle%, measured from the delta of aggregate CPU
      times over a fixed window
    - Memory usage as used / total
    - Disk usage of the filesystem mounted at a configurable path
    - Count of visible OS processes

    Every unreadable counter raises SamplingError; whether to skip the metric
    or abort is left to the caller.
    """

    def __init__(self, disk_path: str = '/', cpu_interval: float = 1.0):
        self.disk_path = disk_path
        self.cpu_interval = cpu_interval

    async def sample(self) -> list[Reading]:
        """Sample every resource metric in order, raising on the first failure"""
        return [await self.sample_metric(metric) for metric in Metric.resource_metrics()]

    async def sample_metric(self, metric: Metric) -> Reading:
        """Sample a single resource metric"""
        samplers = {
            Metric.CPU_USAGE: self._sample_cpu,
            Metric.MEMORY_USAGE: self._sample_memory,
            Metric.DISK_USAGE: self._sample_disk,
            Metric.PROCESS_COUNT: self._sample_processes
        }
        if metric not in samplers:
            raise ValueError(f"{metric.value} is not a resource metric")

        try:
            reading = await samplers[metric]()
        except SamplingError as e:
            logger.error(f"Error collecting {metric.label}: {e.cause}")
            raise
        except (psutil.Error, OSError) as e:
            logger.error(f"Error collecting {metric.label}: {e}")
            raise SamplingError(metric, self._describe(e), e) from e
        except ValueError as e:
            # Counter read fine but the value is out of range
            logger.error(f"Invalid {metric.label} reading: {e}")
            raise SamplingError(metric, f"invalid reading: {self._describe(e)}", e) from e

        logger.debug(f"{metric.label}: {reading.value}")
        return reading

    async def _sample_cpu(self) -> Reading:
        before = psutil.cpu_times()
        # Cancelling the cycle interrupts the window
        await asyncio.sleep(self.cpu_interval)
        after = psutil.cpu_times()

        return Reading(
            metric=Metric.CPU_USAGE,
            value=self.cpu_usage_between(before, after),
            details={'window_seconds': self.cpu_interval}
        )

    async def _sample_memory(self) -> Reading:
        memory = psutil.virtual_memory()
        if memory.total <= 0:
            raise SamplingError(Metric.MEMORY_USAGE, "total memory reported as zero")

        return Reading(
            metric=Metric.MEMORY_USAGE,
            value=round(memory.used / memory.total * 100, 2),
            details={
                'used_bytes': memory.used,
                'available_bytes': memory.available,
                'total_bytes': memory.total
            }
        )

    async def _sample_disk(self) -> Reading:
        disk = psutil.disk_usage(self.disk_path)

        return Reading(
            metric=Metric.DISK_USAGE,
            value=float(disk.percent),
            details={
                'path': self.disk_path,
                'free_bytes': disk.free,
                'total_bytes': disk.total
            }
        )

    async def _sample_processes(self) -> Reading:
        return Reading(
            metric=Metric.PROCESS_COUNT,
            value=len(psutil.pids())
        )

    @staticmethod
    def cpu_usage_between(before, after) -> float:
        """
        Compute CPU usage between two psutil.cpu_times() snapshots.

        Guest time is already accounted in user/nice time on Linux and is
        excluded from the total, as psutil does for cpu_percent().

        Raises:
            SamplingError: If the counters did not advance
        """
        total = ResourceSampler._total_time(after) - ResourceSampler._total_time(before)
        if total <= 0:
            raise SamplingError(Metric.CPU_USAGE, "CPU time counters did not advance")

        idle = after.idle - before.idle
        usage = 100.0 - (idle / total * 100.0)
        return round(min(100.0, max(0.0, usage)), 2)

    @staticmethod
    def _total_time(times) -> float:
        total = sum(times)
        total -= getattr(times, 'guest', 0)
        total -= getattr(times, 'guest_nice', 0)
        return total

    @staticmethod
    def _describe(error: BaseException) -> str:
        if isinstance(error, psutil.AccessDenied):
            return "access denied"
        if isinstance(error, ValidationError) and error.errors():
            return error.errors()[0]['msg']
        return str(error) or error.__class__.__name__
