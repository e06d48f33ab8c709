class SarifError(Exception):
    """Base exception for all SARIF handling errors."""


class NoSarifFilesError(SarifError):
    """Raised when a results directory holds no SARIF files."""


class MalformedDocumentError(SarifError):
    """Raised when a results file cannot be parsed as a SARIF document."""


class VersionMismatchError(SarifError):
    """Raised when merged results files declare different SARIF versions."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            f"Different SARIF versions encountered: {expected} and {actual}"
        )
        self.expected = expected
        self.actual = actual


class SchemaValidationError(SarifError):
    """Raised when a document violates the SARIF schema.

    Carries every violation found, not only the first.
    """

    def __init__(self, message: str, violations: list[object]) -> None:
        super().__init__(message)
        self.violations = violations
