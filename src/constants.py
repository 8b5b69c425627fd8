"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    CONNECTION_ERROR = 2
    FILE_ERROR = 1
    EXIT_WARNINGS = 3


class PlatformTags:  # pylint: disable=too-few-public-methods
    """Wheel platform tag prefixes the checker cares about."""

    ANY = "any"
    ANDROID = "android"
    IOS = "ios"
    MOBILE = (ANDROID, IOS)


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_PYPI = "https://pypi.org/pypi"
    SIMPLE_URL_PYSWIFT = "https://pypi.anaconda.org/pyswift/simple"
    SIMPLE_URL_KIVYSCHOOL = "https://pypi.anaconda.org/kivyschool/simple"

    WHEEL_EXTENSION = ".whl"
    WHEEL_PACKAGE_TYPE = "bdist_wheel"
    RUNTIME_TAG_PREFIX = "cp"

    OUTPUT_FORMATS = ["json", "csv", "json-chunks"]
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "MOBILEWHEELS_LOG_LEVEL"

    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    DEFAULT_CONCURRENCY = 10
    MIN_CONCURRENCY = 1
    MAX_CONCURRENCY = 50
    DEFAULT_DEPTH = 2
    DEFAULT_CHUNK_SIZE = 1000
    CONNECTION_LIMIT = 100
    USER_AGENT = "mobile-wheels-checker/1.0"

    MAX_REPORT_ROWS = 100
