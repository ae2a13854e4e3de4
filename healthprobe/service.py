import asyncio
from typing import Callable

from .core.config import ProbeConfig
from .core.enums import ExitCode, Metric
from .core.exceptions import SamplingError
from .core.models import CycleResult, RenderedOutput
from .evaluator import evaluate
from .prober import EndpointProber
from .reporter import Reporter
from .sampler import ResourceSampler
from .utils.logger import LoggerSetup
from .utils.time import get_current_timestamp


class HealthProbeService:
    """
    Runs health check cycles.

    A cycle samples CPU, memory, disk and process count, then probes the
    endpoint, strictly in that order. Each cycle builds its readings, verdicts
    and HTTP session from scratch; nothing carries over between cycles except
    the worst exit code seen so far.

    In strict mode the first sampling error aborts the cycle; otherwise the
    failed metric is skipped and reported.
    """

    def __init__(self,
                 config: ProbeConfig,
                 sampler: ResourceSampler | None = None):
        self.config = config
        self.sampler = sampler or ResourceSampler(
            disk_path=config.disk_path,
            cpu_interval=config.cpu_interval
        )
        self.reporter = Reporter(strict=config.strict)
        self.logger = LoggerSetup.setup(__class__.__name__)

    async def run_cycle(self) -> CycleResult:
        """Perform one check cycle"""
        result = CycleResult()
        thresholds = self.config.thresholds

        if self.config.check_resources:
            for metric in Metric.resource_metrics():
                try:
                    reading = await self.sampler.sample_metric(metric)
                except SamplingError as e:
                    result.errors.append(e)
                    if self.config.strict:
                        self.logger.error(f"Strict mode: aborting cycle after {metric.label} failure")
                        result.aborted = True
                        break
                    self.logger.warning(f"Skipping {metric.label}: {e.cause}")
                    continue
                result.verdicts.append(evaluate(reading, thresholds))

        if self.config.check_endpoint and not result.aborted:
            async with EndpointProber() as prober:
                reading = await prober.probe(self.config.url, self.config.timeout)
            if reading.cause is not None:
                result.errors.append(reading.cause)
            result.verdicts.append(evaluate(reading, thresholds))

        result.finished_at = get_current_timestamp()
        self.logger.debug(
            f"Cycle finished in {result.finished_at - result.started_at}ms: "
            f"{len(result.verdicts)} verdicts, {len(result.errors)} errors"
        )
        return result

    async def run(self, emit: Callable[[RenderedOutput], None]) -> ExitCode:
        """
        Run one cycle, or cycles every ``interval`` seconds in loop mode.

        Args:
            emit: Called with the rendered report of each completed cycle

        Returns:
            ExitCode: Worst exit code across completed cycles. Cancellation
                stops the loop immediately, including an in-flight probe, and
                returns the worst code seen so far, or ERROR when no cycle
                completed.
        """
        worst = ExitCode.OK
        cycles = 0

        try:
            while True:
                result = await self.run_cycle()
                rendered = self.reporter.render(result, self.config.output_format)
                emit(rendered)

                worst = max(worst, rendered.exit_code)
                cycles += 1

                if not self.config.loop:
                    break
                if self.config.count is not None and cycles >= self.config.count:
                    break

                self.logger.info(f"Cycle {cycles} exit code {int(rendered.exit_code)}, next in {self.config.interval:g}s")
                await asyncio.sleep(self.config.interval)

        except asyncio.CancelledError:
            self.logger.warning(f"Health probe cancelled after {cycles} completed cycle(s)")
            # Nothing was checked, so health cannot be reported as OK
            if cycles == 0:
                return ExitCode.ERROR

        return ExitCode(worst)
