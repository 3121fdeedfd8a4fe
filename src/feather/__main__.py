import argparse
import logging
import sys
from pathlib import Path

from rich.logging import RichHandler  # Add rich log formatting

from feather.cli.clean_app import CleanApp
from feather.cli.job_app import JobApp
from feather.errors import FeatherError, UnitPreconditionViolation
from feather.models.scenario import Scenario

logger = logging.getLogger(__name__)


def setup_logging(log_file="feather.log", level=logging.INFO):
    logging.basicConfig(handlers=[RichHandler(rich_tracebacks=True)], level=level)
    if log_file:
        # File handler for the job log
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logging.getLogger("feather").addHandler(file_handler)


def build_parser():
    parser = argparse.ArgumentParser(description="Feather analysis job CLI")
    parser.add_argument(
        "--log-file", default="feather.log", help="Log file, empty to disable"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    helps = {
        Scenario.LIGHTEN: "Lighten a piece under point loads",
        Scenario.PRINTABLE: "Check layer by layer printability",
        Scenario.HOLLOW: "Hollow a piece to a wall thickness",
    }
    for scenario, help_text in helps.items():
        job_parser = subparsers.add_parser(scenario.value, help=help_text)
        job_parser.add_argument("yml", type=Path, help="Path to YAML job request")
        job_parser.add_argument(
            "-w", "--worker", default=None, help="Worker executable"
        )
        job_parser.add_argument(
            "-l",
            "--log",
            action="store_true",
            default=None,
            dest="with_log",
            help="Tee worker output to a log file",
        )
        job_parser.add_argument(
            "-t", "--timeout", type=float, default=None, help="Worker timeout (s)"
        )
        job_parser.add_argument(
            "--no-wait",
            action="store_false",
            dest="wait",
            help="Return right after the worker started, skipping post processing",
        )

    clean_parser = subparsers.add_parser("clean", help="Remove job artifacts")
    clean_parser.add_argument("yml", type=Path, help="Path to YAML job request")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_file, logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.command == "clean":
            CleanApp(args.yml).clean()
        else:
            context = JobApp(args.yml).run(
                Scenario(args.command),
                wait=args.wait,
                worker=args.worker,
                with_log=args.with_log,
                timeout=args.timeout,
            )
            if args.wait and context.handle.wait().returncode != 0:
                return 1
    except UnitPreconditionViolation as e:
        logger.critical(f"Error on run command: {e}", exc_info=True)
        return 1
    except (FeatherError, ValueError, OSError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
