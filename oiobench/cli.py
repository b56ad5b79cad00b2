"""
Command line entry point for the object storage benchmark.
"""

import sys
import logging
import argparse

import uvloop

from oiobench import __version__
from oiobench.config import ConfigError, load_config
from oiobench.configuration import DEFAULT_REPORT_FORMAT, REPORT_FORMATS
from oiobench.common.errors import JobError
from oiobench.report import Report

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging once, unless the host already did."""
    if not logging.root.handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s',
            stream=sys.stderr,
        )
    elif verbose:
        logging.root.setLevel(logging.DEBUG)


class BenchmarkCLI:
    """CLI interface for the object storage benchmark."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            prog='oio-bench',
            description='Object storage read/write micro-benchmark',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Read back a staged 4 MiB object with 8 workers, as described in job.yaml
  oio-bench run job.yaml

  # Same, printing the report as JSON
  oio-bench run job.yaml --format json

  # One row per quantity, one column per statistic
  oio-bench run job.yaml --format table

  # Only check the job file
  oio-bench validate job.yaml
            """
        )
        parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
        parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        run_parser = subparsers.add_parser('run', help='Run the benchmark described by a job file')
        run_parser.add_argument('config_file', help='Path to the YAML job file')
        run_parser.add_argument('--format', choices=REPORT_FORMATS, default=DEFAULT_REPORT_FORMAT,
                                help=f'Report format (default: {DEFAULT_REPORT_FORMAT})')

        validate_parser = subparsers.add_parser('validate', help='Validate a job file without running it')
        validate_parser.add_argument('config_file', help='Path to the YAML job file')

        return parser

    def run_benchmark(self, args) -> int:
        """Run the benchmark phase."""
        from oiobench.benchmark import BenchmarkRunner

        try:
            config = load_config(args.config_file)
        except ConfigError as e:
            logger.error(f"Invalid job file: {e}")
            return 1

        runner = BenchmarkRunner(config)
        try:
            measurement = uvloop.run(runner.run_benchmark())
        except JobError as e:
            cause = f" ({e.__cause__})" if e.__cause__ else ""
            logger.error(f"Benchmark failed: {e}{cause}")
            return 1

        report = Report.from_measurement(config, measurement)
        if args.format == 'json':
            print(report.to_json())
        elif args.format == 'table':
            print(report.to_table())
        else:
            print(report)
        return 0

    def run_validate(self, args) -> int:
        try:
            config = load_config(args.config_file)
        except ConfigError as e:
            logger.error(f"Invalid job file: {e}")
            return 1
        logger.info(f"Job file is valid: {config.to_dict()}")
        return 0

    def run(self, args=None) -> int:
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)
        setup_logging(parsed_args.verbose)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            if parsed_args.command == 'run':
                return self.run_benchmark(parsed_args)
            elif parsed_args.command == 'validate':
                return self.run_validate(parsed_args)
            else:
                logger.error(f"Unknown command: {parsed_args.command}")
                return 1

        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1


def main():
    """Main entry point."""
    cli = BenchmarkCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
