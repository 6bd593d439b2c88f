"""
Common exceptions for kg-dashboard.
"""


class KGDashError(Exception):
    """Base exception for all kg-dashboard errors."""
    pass


class ConfigurationError(KGDashError):
    """Raised when there are configuration issues."""
    pass


class DatabaseError(KGDashError):
    """Raised when graph database operations fail."""
    pass


class CacheError(KGDashError):
    """Raised when cache operations fail."""
    pass


class ValidationError(KGDashError):
    """Raised when data validation fails."""
    pass


class SnapshotError(KGDashError):
    """Raised when a graph snapshot cannot be read or written."""
    pass
