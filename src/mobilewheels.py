"""Mobile wheels checker - Android/iOS wheel availability for Python packages

    Raises:
        ConfigError: If the configuration is invalid (exits with FILE_ERROR)

    Returns:
        int: Exit code
"""
import asyncio
import logging
import os
import sys

from constants import ExitCodes, Constants
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from config import CheckerConfig, ConfigError
from checker import check_packages
from analysis.categories import lacks_mobile_support
from analysis.exclusions import partition_packages
from reporting.console import print_report, render_report
from reporting.export import export_csv, export_json, export_json_chunks
from resolution.progress import LoggingProgressObserver, TerminalProgressObserver
from wheels.naming import normalize_name


def load_pkgs_file(file_name):
    """Loads the packages from a file.

    Blank lines and lines starting with ``#`` are skipped.

    Args:
        file_name (str): File path containing the list of packages.

    Returns:
        list: List of packages
    """
    try:
        with open(file_name, encoding='utf-8') as file:
            lines = [line.strip() for line in file]
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except IOError as e:
        logging.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    return [line for line in lines if line and not line.startswith("#")]


def dedupe_names(names):
    """Drop repeats by normalized name, keeping the first spelling and order."""
    seen = set()
    unique = []
    for name in names:
        key = normalize_name(name)
        if key in seen:
            continue
        seen.add(key)
        unique.append(name)
    return unique


def build_pkglist(args, limit=0):
    """Build the package list from CLI inputs."""
    names = []
    if args.LIST_FROM_FILE:
        for path in args.LIST_FROM_FILE:
            names.extend(load_pkgs_file(path))
    elif args.SINGLE:
        names = [tok.strip() for tok in args.SINGLE if tok and tok.strip()]
    names = dedupe_names(names)
    if limit and limit > 0:
        names = names[:limit]
    return names


def select_observer(args, config):
    if config.progress and not args.QUIET and sys.stderr.isatty():
        return TerminalProgressObserver(sys.stderr)
    return LoggingProgressObserver()


def export_results(records, config):
    fmt = config.resolved_output_format()
    if fmt == "json-chunks":
        export_json_chunks(records, config.output or ".", config.chunk_size)
    elif fmt == "csv":
        export_csv(records, config.output)
    else:
        export_json(records, config.output)


def main():
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args()
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()
    if getattr(args, "LOG_FILE", None):
        file_handler = logging.FileHandler(args.LOG_FILE, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        config = CheckerConfig.from_args(args)
    except ConfigError as e:
        logging.error("Invalid configuration: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    logging.info("Arguments parsed.")

    pkglist = build_pkglist(args, config.limit)
    if not pkglist:
        logging.warning("No packages found in the input list.")
        sys.exit(ExitCodes.SUCCESS.value)

    candidates, excluded = partition_packages(pkglist)
    logging.info(
        "Package list imported: %d packages, %d excluded before lookup",
        len(pkglist),
        len(excluded),
    )
    if is_debug_enabled(logger):
        for name, reason in excluded:
            logger.debug(
                "Excluded %s",
                name,
                extra=extra_context(event="decision", component="cli", package=name, outcome=reason.value),
            )

    result = asyncio.run(check_packages(candidates, config, observer=select_observer(args, config)))

    if result.all_failed:
        logging.error("No package could be resolved; check network access to the indexes.")
        sys.exit(ExitCodes.CONNECTION_ERROR.value)

    if not args.QUIET:
        print_report(render_report(
            result.records,
            total_checked=len(candidates),
            with_dependencies=config.check_dependencies,
            excluded=excluded,
        ))

    # OUTPUT
    if config.output or config.output_format == "json-chunks":
        export_results(result.records, config)

    if any(lacks_mobile_support(r) for r in result.records):
        logging.warning("One or more packages lack Android or iOS wheels.")
        if args.ERROR_ON_WARNINGS:
            logging.error("Warnings present, exiting with non-zero status code.")
            sys.exit(ExitCodes.EXIT_WARNINGS.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
