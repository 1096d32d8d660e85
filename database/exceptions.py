"""Database exceptions."""

class DatabaseError(Exception):
    """Raised when the connection pool cannot be created or used."""
    pass
