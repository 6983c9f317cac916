"""
Exception hierarchy for comp_outlook.

Only contractual violations at the API boundary are surfaced to callers.
Malformed numbers, empty data and enrichment failures are recovered locally.
"""


class CompOutlookError(Exception):
    """Base exception for all comp_outlook errors."""

    pass


class MissingUserIdError(CompOutlookError):
    """Raised when a request has no resolvable user identity."""

    def __init__(self, message: str = "Missing user id"):
        super().__init__(message)


class RepositoryError(CompOutlookError):
    """Raised by job repositories when the persistence layer fails."""

    pass


class ConfigLoadError(CompOutlookError):
    """Raised for errors during config loading or validation."""

    pass


class EnrichmentError(CompOutlookError):
    """Raised inside the enrichment adapter; always converted to a fallback."""

    pass
