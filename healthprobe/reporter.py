import json

from .core.enums import ExitCode, Metric, OutputFormat
from .core.exceptions import CheckError
from .core.models import CycleResult, RenderedOutput, Verdict
from .evaluator import format_percent
from .metrics import ProbeMetrics
from .utils.time import format_timestamp


class Reporter:
    """
    Renders verdicts and computes the exit code of a check cycle.

    Text layout:
    - one "<label>: <value>" line per check, in check order
    - "ALERT: <message>" for every check in ALERT state
    - "ERROR: <label>: <cause>" for every check that could not run
    - a final "Running Processes: <count>" line when the count was sampled

    Exit codes: 0 when every verdict is OK, 1 when any is ALERT, 2 when a
    sampling or probe error occurred in strict mode.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def exit_code(self, verdicts: list[Verdict], errors: list[CheckError] | None = None) -> ExitCode:
        """Worst outcome among verdicts and errors"""
        if self.strict and errors:
            return ExitCode.ERROR
        if any(verdict.is_alert for verdict in verdicts):
            return ExitCode.ALERT
        return ExitCode.OK

    def report(self, verdicts: list[Verdict], errors: list[CheckError] | None = None) -> RenderedOutput:
        """Render verdicts as text"""
        errors = errors or []
        return RenderedOutput(
            text=self.render_text(verdicts, errors),
            exit_code=self.exit_code(verdicts, errors)
        )

    def render(self, result: CycleResult, output_format: OutputFormat = OutputFormat.TEXT) -> RenderedOutput:
        """Render a cycle in the requested format"""
        exit_code = self.exit_code(result.verdicts, result.errors)

        if output_format == OutputFormat.JSON:
            text = self.render_json(result, exit_code)
        elif output_format == OutputFormat.PROMETHEUS:
            metrics = ProbeMetrics()
            metrics.update(result, exit_code)
            text = metrics.render().rstrip('\n')
        else:
            text = self.render_text(result.verdicts, result.errors)

        return RenderedOutput(text=text, exit_code=exit_code)

    def render_text(self, verdicts: list[Verdict], errors: list[CheckError]) -> str:
        lines = []
        process_line = None

        for verdict in verdicts:
            if verdict.metric == Metric.PROCESS_COUNT:
                process_line = f"{verdict.metric.label}: {verdict.reading.value}"
                continue
            lines.append(f"{verdict.metric.label}: {self.format_value(verdict)}")

        lines.extend(f"ALERT: {verdict.message}" for verdict in verdicts if verdict.is_alert)

        # Failed probes already explain themselves through their ALERT verdict
        reported = {verdict.metric for verdict in verdicts}
        lines.extend(
            f"ERROR: {error.metric.label}: {error.cause}"
            for error in errors
            if error.metric not in reported
        )

        if process_line is not None:
            lines.append(process_line)

        return "\n".join(lines)

    def render_json(self, result: CycleResult, exit_code: ExitCode) -> str:
        document = result.model_dump(mode='json')
        document['started_at'] = format_timestamp(result.started_at)
        if result.finished_at is not None:
            document['finished_at'] = format_timestamp(result.finished_at)
        document['strict'] = self.strict
        document['exit_code'] = int(exit_code)
        return json.dumps(document, indent=2)

    @staticmethod
    def format_value(verdict: Verdict) -> str:
        """Format a reading value for its metric"""
        value = verdict.reading.value

        if verdict.metric == Metric.ENDPOINT_STATUS:
            state = "DOWN" if verdict.is_alert else "UP"
            if value is None:
                return f"{state} (unreachable)"
            return f"{state} (HTTP {value})"

        if verdict.metric.is_percentage:
            return format_percent(value)

        return str(value)


def report(verdicts: list[Verdict], errors: list[CheckError] | None = None, strict: bool = False) -> RenderedOutput:
    """Render verdicts as text together with the exit code they imply"""
    return Reporter(strict=strict).report(verdicts, errors)
