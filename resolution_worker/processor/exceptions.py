class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class FatalDiscoveryError(ProcessorError):
    """Raised when the listing page cannot be fetched or parsed. Aborts the batch."""


class DocumentFetchError(ProcessorError):
    """Raised when a document cannot be downloaded."""


class ExtractionError(ProcessorError):
    """Raised when a document has no usable text layer or cannot be parsed."""


class PersistenceError(ProcessorError):
    """Raised when a store operation fails for a single case."""


class DuplicateCaseError(PersistenceError):
    """Raised when an insert collides with an existing case code."""
