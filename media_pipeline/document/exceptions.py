class DocumentError(Exception):
    """Base exception for document model errors."""


class SchemaError(DocumentError):
    """Raised when a node violates the document schema."""


class PositionError(DocumentError):
    """Raised when a position does not resolve to a valid location."""


class StaleTransactionError(DocumentError):
    """Raised when dispatching a transaction built against an older document version."""
