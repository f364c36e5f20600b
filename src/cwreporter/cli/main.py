"""
Command-line interface for the cwreporter package.

Reports the runtime statistics of this process (memory, threads, gc) to
CloudWatch using the options in a TOML file, either once or periodically
until interrupted. Useful for checking a configuration and credentials
before wiring the reporter into an application.
"""

import argparse
import logging
import signal
import sys
import threading

from ..adapters import CloudWatchIngestionClient, InMemoryRegistry
from ..config.builder import ReporterBuilder
from ..validation import ValidationError, handle_cli_error, validate_positive_float

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cwreporter",
        description="Report process runtime statistics to Amazon CloudWatch.",
    )
    parser.add_argument(
        "-c",
        "--config",
        required=True,
        help="TOML file with a [reporter] table.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log data points instead of sending them to CloudWatch.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single report cycle and exit.",
    )
    parser.add_argument(
        "--period",
        type=str,
        help="Seconds between report cycles. Defaults to period_seconds from the config.",
    )
    parser.add_argument(
        "--region",
        type=str,
        help="AWS region for the CloudWatch client. Defaults to the AWS environment.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )
    return parser


def main_cli(argv=None) -> None:
    """
    Main command-line interface for cwreporter.

    Raises:
        SystemExit: With code 1 on configuration errors.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    # The batch never calls the client in dry-run mode, so don't require AWS settings.
    client = None if args.dry_run else CloudWatchIngestionClient(region_name=args.region)

    try:
        builder = ReporterBuilder.from_toml(args.config, client)
        if args.dry_run:
            builder.with_cloudwatch_enabled(False)
        if args.period is not None:
            builder.with_delay(
                validate_positive_float(args.period, min_value=0.001, field_name="--period argument")
            )
        reporter = builder.with_registry(InMemoryRegistry()).build()
    except (FileNotFoundError, ValidationError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )
        return

    if args.once:
        reporter.report()
        reporter.close()
        logger.info("Report cycle finished")
        return

    shutdown_requested = threading.Event()

    def signal_handler(signum, frame):
        logger.info(f"Signal {signal.strsignal(signum)} received. Shutting down...")
        shutdown_requested.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    reporter.start()
    try:
        while not shutdown_requested.wait(1.0):
            pass
    finally:
        reporter.close()
        logger.info(
            f"Reporter stopped after {reporter.cycles_completed} cycles "
            f"({reporter.cycles_failed} failed)"
        )


if __name__ == "__main__":
    main_cli()
