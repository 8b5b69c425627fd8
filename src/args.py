"""Argument parsing functionality for the mobile wheels checker."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Numeric and URL options default to None so that values from a
    ``--config`` file are only overridden when the flag is given.
    """
    parser = argparse.ArgumentParser(
        prog="mobile-wheels-checker",
        description=(
            "Check which Python packages ship wheels for Android and iOS"
        ),
        add_help=True,
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("-l", "--load_list",
                        dest="LIST_FROM_FILE",
                        help="Load list of packages from a file (one per line, # comments allowed)",
                        action="append", type=str,
                        default=[])
    input_group.add_argument("-p", "--package",
                            dest="SINGLE",
                            help="Name a single package (repeatable).",
                            action="append", type=str)

    parser.add_argument("--limit",
                        dest="LIMIT",
                        help="Check at most this many packages from the input (0 = all)",
                        action="store", type=int)
    parser.add_argument("--concurrent",
                        dest="CONCURRENCY",
                        help=(
                            f"Packages resolved concurrently ({Constants.MIN_CONCURRENCY}-"
                            f"{Constants.MAX_CONCURRENCY}, default: {Constants.DEFAULT_CONCURRENCY})"
                        ),
                        action="store", type=int)
    parser.add_argument("-d", "--deps",
                        dest="CHECK_DEPS",
                        help="Also check each package's dependencies",
                        action="store_true",
                        default=None)
    parser.add_argument("--depth",
                        dest="DEPTH",
                        help=f"Dependency levels to walk, counting the package itself (default: {Constants.DEFAULT_DEPTH})",
                        action="store", type=int)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help=f"HTTP timeout in seconds (default: {Constants.REQUEST_TIMEOUT})",
                        action="store", type=int)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV), or directory for json-chunks",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json, csv or json-chunks). If not specified, inferred from --output extension; defaults to json.",
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_FORMATS)
    parser.add_argument("--chunk-size",
                        dest="CHUNK_SIZE",
                        help=f"Records per file for json-chunks (default: {Constants.DEFAULT_CHUNK_SIZE})",
                        action="store", type=int)

    parser.add_argument("--pypi-url",
                        dest="PYPI_URL",
                        help=f"PyPI JSON API base URL (default: {Constants.REGISTRY_URL_PYPI})",
                        action="store", type=str)
    parser.add_argument("--pyswift-url",
                        dest="PYSWIFT_URL",
                        help=f"PySwift simple index URL (default: {Constants.SIMPLE_URL_PYSWIFT})",
                        action="store", type=str)
    parser.add_argument("--kivyschool-url",
                        dest="KIVYSCHOOL_URL",
                        help=f"KivySchool simple index URL (default: {Constants.SIMPLE_URL_KIVYSCHOOL})",
                        action="store", type=str)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=Constants.LOG_LEVELS,
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if any package lacks mobile support.",
                        action="store_true")
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output the report to console.",
                        action="store_true")
    parser.add_argument("--no-progress",
                        dest="NO_PROGRESS",
                        help="Do not draw the progress line.",
                        action="store_true")

    # Config file (general)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
