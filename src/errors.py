"""Exceptions raised by the book catalog."""


class CatalogError(Exception):
    """Base exception for book catalog errors."""


class RecordParseError(CatalogError, ValueError):
    """Text could not be parsed as a book record."""

    def __init__(self, message: str, position: int = 0, text: str = "", incomplete: bool = False):
        super().__init__(f"{message} (at offset {position})")
        self.position = position
        self.text = text
        # Input ended before the record did
        self.incomplete = incomplete


class BookIndexError(CatalogError, IndexError):
    """Positional access outside the logical size of a book list."""

    def __init__(self, index, size: int):
        super().__init__(f"index {index} out of range for book list of size {size}")
        self.index = index
        self.size = size
