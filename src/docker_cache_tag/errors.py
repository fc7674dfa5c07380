"""Custom exceptions for cache tag computation."""

EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_UNEXPECTED_ERROR = 2
EXIT_DEPENDENCY_ERROR = 3
EXIT_INTERRUPTED = 130


class CacheTagError(Exception):
    """Base exception for all cache tag errors.

    Every error carries the process exit code the CLI reports for it.
    """

    exit_code = EXIT_CONFIG_ERROR

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(CacheTagError):
    """Raised when a required input is missing or invalid.

    Raised before any hashing happens, e.g. when the Dockerfile does not
    exist or a build argument is not of the form KEY or KEY=VALUE.
    """

    exit_code = EXIT_CONFIG_ERROR


class DependencyReadError(CacheTagError):
    """Raised when a hashed dependency cannot be read.

    This covers files that became unreadable between glob expansion and
    reading, malformed JSON behind a key-expression pattern, and
    key-expressions that fail to evaluate. A tag computed from partial
    data is never produced.
    """

    exit_code = EXIT_DEPENDENCY_ERROR
