"""Error taxonomy for the lexicon client.

UpstreamError covers everything the resource API reports or fails to deliver.
SchemaResolutionError is raised when a fetched ontology does not describe the
class or property a caller asked for. ConfigurationError and QueryTemplateError
signal contract violations on our side and are meant to be fatal.
"""

from typing import Any, Optional


class LexiconError(Exception):
    """Base class for all lexicon client errors."""
    pass


class UpstreamError(LexiconError):
    """The resource API call failed or answered with an error envelope."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload if payload is not None else message


class SchemaResolutionError(LexiconError):
    """A class or property is absent from the fetched ontology."""
    pass


class ConfigurationError(LexiconError):
    """Connection settings are malformed."""
    pass


class QueryTemplateError(LexiconError):
    """Unknown query template or missing template parameter."""
    pass
