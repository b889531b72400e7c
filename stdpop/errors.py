from __future__ import annotations


class StdpopError(Exception):
    """Base class for all collector errors."""


class ServiceUnavailableError(StdpopError):
    """The package index failed the availability check before the batch."""


class TargetSourceError(StdpopError):
    """The standard-library package list could not be obtained."""


class ExtractionError(StdpopError):
    """A response body did not yield a count."""


class StorageError(StdpopError):
    """The result artifact could not be serialized or written."""
