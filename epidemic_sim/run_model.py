"""
This is the main module used to run simulations of the place-based epidemic model
"""
import argparse
import logging
import logging.config
from pathlib import Path
import sys
import time
from typing import Optional

from . import common, distributions, loaders, simulation

# Default logger, used if module not called as __main__
logger = logging.getLogger(__name__)


def main(argv):
    """
    Main function to run the epidemic simulation. Writes one line per day to stdout.

    Exits with status 1, before writing anything to stdout, if the configuration cannot be read or no population can be
    built from it.
    """
    t0 = time.time()

    args = build_args(argv)
    setup_logger(args)
    logger.info("Parameters\n%s", "\n".join(f"\t{key}={value}" for key, value in args._get_kwargs()))  # pylint: disable=protected-access

    try:
        model, issues = loaders.readModelFile(args.config)
    except (OSError, UnicodeDecodeError):
        logger.error("could not open file: %s", args.config)
        raise SystemExit(1)
    for extra in args.extra:
        common.log_issue(logger, f"too many arguments: {extra}", common.IssueSeverity.MEDIUM, issues)

    if args.strict:
        common.exit_if_issues(issues, "warnings found in the configuration")

    try:
        results = simulation.basicSimulation(model, distributions.createGenerator(args.seed))
    except ValueError as e:
        logger.error("Epidemic: %s", e)
        raise SystemExit(1)

    for line in simulation.formatSummary(results):
        print(line)

    if args.output is not None:
        logger.info("Writing output to %s", args.output)
        results.to_csv(args.output, index=False)
    if args.plot is not None:
        from . import visualisation  # pylint: disable=import-outside-toplevel
        visualisation.plot_compartments(results).savefig(args.plot)

    logger.info("Took %.2fs to run the simulation (%s warnings).", time.time() - t0, common.count_warnings(issues))


def setup_logger(args: Optional[argparse.Namespace] = None) -> None:
    """
    Configure package-level logger instance.

    :param args: argparse.Namespace
        args.logfile (pathlib.Path) is used to create a logfile if present
        args.quiet and args.debug control logging level to sys.stderr

    This function can be called without args, in which case it configures the
    package logger to write WARNING and above to STDERR.

    When called with args, it uses args.logfile to determine if logs (by
    default, INFO and above) should be written to a file, and the path of
    that file. args.quiet and args.debug are used to control reporting
    level.
    """
    # Dictionary to define logging configuration
    logconf = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s",
            },
        },
        "handlers": {
            "stderr": {
                "level": "WARNING" if args is None else "INFO",
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {__package__: {"handlers": ["stderr"], "level": "DEBUG"}},
    }

    # If args.logpath is specified, add logfile
    if args is not None and args.logfile is not None:
        logdir = args.logfile.parents[0]
        # If the logfile is going in another directory, we must
        # create/check if the directory is there
        try:
            if not logdir == Path.cwd():
                logdir.mkdir(exist_ok=True)
        except OSError:
            logger.error("Could not create %s for logging", logdir, exc_info=True)
            raise SystemExit(1)
        # Add logfile configuration
        logconf["handlers"]["logfile"] = {  # type: ignore
            "class": "logging.FileHandler",
            "level": "INFO",
            "formatter": "standard",
            "filename": str(args.logfile),
            "encoding": "utf8",
        }
        logconf["loggers"][__package__]["handlers"].append("logfile")  # type: ignore

    # Set STDERR/logfile levels if args.quiet/args.debug specified
    if args is not None and args.quiet:
        logconf["handlers"]["stderr"]["level"] = "WARNING"  # type: ignore
    elif args is not None and args.debug:
        logconf["handlers"]["stderr"]["level"] = "DEBUG"  # type: ignore
        if "logfile" in logconf["handlers"]:  # type: ignore
            logconf["handlers"]["logfile"]["level"] = "DEBUG"  # type: ignore

    # Configure logger
    logging.config.dictConfig(logconf)


def build_args(argv):
    """Return parsed CLI arguments as argparse.Namespace.

    :param argv: CLI arguments
    :type argv: list
    """

    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Simulates an epidemic spreading through the places shared by a synthetic population",
    )
    parser.add_argument("config", type=Path, help="Model configuration file")
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random number generator. A fresh seed is used if not provided",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Also write the daily counts to this CSV file",
    )
    parser.add_argument(
        "--plot",
        type=Path,
        default=None,
        help="Save a plot of the daily counts to this file",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error if the configuration produced any warnings",
    )
    parser.add_argument(
        "-l",
        "--logfile",
        dest="logfile",
        default=None,
        type=Path,
        help="Path for logging output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="store_true",
        help="Prints only warnings to stderr",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Provide debug output to STDERR"
    )

    return parser.parse_args(argv)


def cli():
    main(sys.argv[1:])


if __name__ == "__main__":
    # The logger name inherits from the package, if called as __main__
    logger = logging.getLogger(f"{__package__}.{__name__}")
    main(sys.argv[1:])
