import argparse
import asyncio
import signal
import sys

from .core.config import (
    DEFAULT_CPU_INTERVAL,
    DEFAULT_THRESHOLD,
    DEFAULT_TIMEOUT,
    DEFAULT_URL,
    ProbeConfig
)
from .core.enums import ExitCode, OutputFormat
from .core.exceptions import ConfigurationError
from .core.models import RenderedOutput
from .service import HealthProbeService
from .utils.logger import LoggerSetup


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='healthprobe',
        description='Check host resources and an HTTP endpoint, exit 0 (ok), 1 (alert) or 2 (error)'
    )

    resources = parser.add_argument_group('resource checks')
    resources.add_argument('--cpu-threshold', type=float, default=DEFAULT_THRESHOLD,
                           help='CPU usage alert limit in percent (default: %(default)s)')
    resources.add_argument('--memory-threshold', type=float, default=DEFAULT_THRESHOLD,
                           help='Memory usage alert limit in percent (default: %(default)s)')
    resources.add_argument('--disk-threshold', type=float, default=DEFAULT_THRESHOLD,
                           help='Disk usage alert limit in percent (default: %(default)s)')
    resources.add_argument('--disk-path', default='/',
                           help='Mount path to measure disk usage for (default: %(default)s)')
    resources.add_argument('--cpu-interval', type=float, default=DEFAULT_CPU_INTERVAL,
                           help='CPU sampling window in seconds (default: %(default)s)')
    resources.add_argument('--no-resources', action='store_true',
                           help='Skip host resource checks')

    endpoint = parser.add_argument_group('endpoint probe')
    endpoint.add_argument('--url', default=DEFAULT_URL,
                          help='Endpoint to probe (default: %(default)s)')
    endpoint.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT,
                          help='Probe timeout in seconds (default: %(default)s)')
    endpoint.add_argument('--no-probe', action='store_true',
                          help='Skip the endpoint probe')

    parser.add_argument('--strict', action='store_true',
                        help='Abort with exit code 2 on sampling or probe errors')
    parser.add_argument('--format', choices=[f.value for f in OutputFormat], default=OutputFormat.TEXT.value,
                        help='Report format (default: %(default)s)')
    parser.add_argument('--interval', type=float, default=None,
                        help='Repeat checks every INTERVAL seconds until interrupted')
    parser.add_argument('--count', type=int, default=None,
                        help='Stop after COUNT cycles (requires --interval)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log diagnostics to stderr (-v info, -vv debug)')
    parser.add_argument('--log-file', default=None,
                        help='Also write debug logs to a rotating file')
    return parser


def _emit(rendered: RenderedOutput, separate: bool) -> None:
    print(rendered.text, flush=True)
    if separate:
        print(flush=True)


async def _run(config: ProbeConfig) -> ExitCode:
    service = HealthProbeService(config)
    separate = config.loop and config.output_format == OutputFormat.TEXT

    # Interrupting cancels the running cycle, in-flight probe included
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
        except (NotImplementedError, RuntimeError):
            pass

    try:
        return await service.run(lambda rendered: _emit(rendered, separate))
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                pass


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    LoggerSetup.configure(
        console_level=LoggerSetup.level_from_verbosity(args.verbose),
        log_file=args.log_file
    )
    logger = LoggerSetup.setup(__name__)

    try:
        config = ProbeConfig.from_args(args)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return int(ExitCode.ERROR)

    return int(asyncio.run(_run(config)))


def run() -> None:
    """Console script entry point"""
    sys.exit(main())


if __name__ == "__main__":
    run()
