"""Data models for books."""
from dataclasses import dataclass, replace
from typing import Optional

from src.config import Config

PRICE_EPSILON = Config.PRICE_EPSILON

QUOTE = '"'
ESCAPE = "\\"
OUTPUT_DELIMITER = ", "


@dataclass(eq=False)
class Book:
    """A single catalog record: isbn, title, author and price."""
    isbn: str = ""
    title: str = ""
    author: str = ""
    price: float = 0.0
    
    def get_isbn(self) -> str:
        return self.isbn
    
    def get_title(self) -> str:
        return self.title
    
    def get_author(self) -> str:
        return self.author
    
    def get_price(self) -> float:
        return self.price
    
    def set_isbn(self, isbn: str) -> None:
        self.isbn = isbn
    
    def set_title(self, title: str) -> None:
        self.title = title
    
    def set_author(self, author: str) -> None:
        self.author = author
    
    def set_price(self, price: float) -> None:
        self.price = price
    
    def matches(self, other: "Book", epsilon: Optional[float] = None) -> bool:
        """
        Compare all four fields.
        
        Args:
            other: Book to compare against
            epsilon: Price tolerance (defaults to PRICE_EPSILON)
            
        Returns:
            True if the text fields are identical and the prices
            differ by less than epsilon
        """
        if epsilon is None:
            epsilon = PRICE_EPSILON
        return (
            self.isbn == other.isbn
            and self.title == other.title
            and self.author == other.author
            and abs(self.price - other.price) < epsilon
        )
    
    def __eq__(self, other):
        if not isinstance(other, Book):
            return NotImplemented
        return self.matches(other)
    
    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result
    
    # Mutable record
    __hash__ = None
    
    def copy(self) -> "Book":
        """Return an independent copy of this book."""
        return replace(self)
    
    def __str__(self) -> str:
        return format_book(self)


def quote(value: str) -> str:
    """Wrap a field in double quotes, escaping quotes and backslashes."""
    escaped = value.replace(ESCAPE, ESCAPE * 2).replace(QUOTE, ESCAPE + QUOTE)
    return f"{QUOTE}{escaped}{QUOTE}"


def format_price(price: float) -> str:
    """Format a price in its natural form (9.0 -> '9', 19.99 -> '19.99')."""
    return f"{price:.15g}"


def format_book(book: Book) -> str:
    """Format a book as a single quoted record."""
    return OUTPUT_DELIMITER.join([
        quote(book.isbn),
        quote(book.title),
        quote(book.author),
        format_price(book.price),
    ])
