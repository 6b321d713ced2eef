"""
Exception hierarchy for the radio catalog pipelines.

Only configuration errors and "no sessions found" escalate past a single
item. Everything else is caught per clip or per driver, logged, and
reported in the run summary.
"""


class RadioCatalogError(Exception):
    """Base class for all catalog pipeline errors."""


class ConfigurationError(RadioCatalogError):
    """A required setting (API key, database URL) is missing or invalid."""


class DataSourceError(RadioCatalogError):
    """The OpenF1 API answered with a non-2xx status or could not be reached."""

    def __init__(self, status: int, status_text: str):
        self.status = status
        self.status_text = status_text
        super().__init__(f"OpenF1 API error: {status} {status_text}")


class NoSessionsFound(RadioCatalogError):
    """The session query returned an empty result set."""


class AudioDownloadError(RadioCatalogError):
    """Audio could not be fetched or the payload was empty."""


class TranscriptionServiceError(RadioCatalogError):
    """The speech-to-text model call failed."""


class CategoryParseError(RadioCatalogError):
    """The classification model did not return a JSON array of strings."""

    def __init__(self, message: str, raw_response: str = ""):
        self.raw_response = raw_response
        super().__init__(message)


class EmptyTaxonomyError(RadioCatalogError):
    """No categories are seeded, so tagging cannot run."""


class DuplicateTagError(RadioCatalogError):
    """A (clip, category) pair already exists."""
