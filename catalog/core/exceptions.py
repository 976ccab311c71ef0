import uuid


class CatalogError(Exception):
    """Base class for catalog domain errors."""


class AuthorNotFound(CatalogError):
    def __init__(self, author_id: uuid.UUID):
        super().__init__(f"Author {author_id} not found")
        self.author_id: uuid.UUID = author_id


class NotImplementedOperation(CatalogError):
    """
    Raised by placeholder operations so callers can tell "not supported yet"
    apart from a genuine failure.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message
