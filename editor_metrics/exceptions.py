"""Exceptions raised by editor-metrics."""


class EditorMetricsError(Exception):
    """Base class for editor-metrics errors."""
    pass


class UnknownProviderError(EditorMetricsError, ValueError):
    """Raised when an analytics provider name is not recognised."""
    pass


class MissingTrackingIdError(EditorMetricsError):
    """Raised when a tracker is created without the id its provider requires."""
    pass
