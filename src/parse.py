"""Parse the quoted text form of book records.

A record looks like::

    "9789998287532", "Over in the Meadow", "Ezra Jack Keats", 91.11

String fields are enclosed in double quotes, with backslash escaping any
embedded quote or backslash. Whitespace, newlines included, may appear
between tokens.
"""
import re
import logging
from typing import Optional, TextIO

from src.errors import RecordParseError
from src.models import ESCAPE, QUOTE, Book, format_book

logger = logging.getLogger(__name__)

FIELD_DELIMITER = ","

_PRICE_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class RecordScanner:
    """Read book records one at a time from a text buffer."""
    
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
    
    def at_end(self) -> bool:
        """True when only whitespace remains."""
        return not self.text[self.pos:].strip()
    
    def next_book(self) -> Optional[Book]:
        """
        Parse the next record.
        
        Returns:
            Book, or None if the input is exhausted
            
        Raises:
            RecordParseError: if the next record is malformed; the scanner
                stays at the start of that record
        """
        start = self.pos
        self._skip_whitespace()
        if self.pos >= len(self.text):
            return None
        
        try:
            isbn = self._read_quoted()
            self._read_delimiter()
            title = self._read_quoted()
            self._read_delimiter()
            author = self._read_quoted()
            self._read_delimiter()
            price = self._read_price()
        except RecordParseError:
            self.pos = start
            raise
        
        return Book(isbn=isbn, title=title, author=author, price=price)
    
    def _error(self, message: str) -> RecordParseError:
        return RecordParseError(
            message, self.pos, self.text, incomplete=self.pos >= len(self.text)
        )
    
    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1
    
    def _read_quoted(self) -> str:
        self._skip_whitespace()
        if self.pos >= len(self.text):
            raise self._error("Expected quoted field, found end of input")
        if self.text[self.pos] != QUOTE:
            raise self._error(f"Expected '{QUOTE}', found {self.text[self.pos]!r}")
        
        self.pos += 1
        chars = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == ESCAPE and self.pos + 1 < len(self.text):
                chars.append(self.text[self.pos + 1])
                self.pos += 2
                continue
            if char == QUOTE:
                self.pos += 1
                return "".join(chars)
            chars.append(char)
            self.pos += 1
        
        raise self._error("Unterminated quoted field")
    
    def _read_delimiter(self) -> None:
        self._skip_whitespace()
        if self.pos >= len(self.text):
            raise self._error("Expected ',', found end of input")
        if self.text[self.pos] != FIELD_DELIMITER:
            raise self._error(f"Expected ',', found {self.text[self.pos]!r}")
        self.pos += 1
    
    def _read_price(self) -> float:
        self._skip_whitespace()
        match = _PRICE_RE.match(self.text, self.pos)
        if not match:
            if self.pos >= len(self.text):
                raise self._error("Expected price, found end of input")
            raise self._error(f"Expected price, found {self.text[self.pos]!r}")
        self.pos = match.end()
        return float(match.group())




class RecordReader:
    """
    Read book records from a text stream, one line at a time.
    
    Lines are consumed only as far as the records asked for need them.
    Text read past the last record is handed back to a seekable stream by
    release(), so a later reader picks up where this one stopped.
    """
    
    def __init__(self, stream: TextIO):
        self.stream = stream
        self._seekable = stream.seekable()
        self._buffer = ""
        self._pos = 0
        # Stream position of the first character in the buffer
        self._mark = None
    
    def next_book(self) -> Optional[Book]:
        """
        Read the next record.
        
        Returns:
            Book, or None at end of stream
            
        Raises:
            RecordParseError: on malformed input or a stream ending
                mid-record; the broken record stays unread
        """
        while True:
            scanner = RecordScanner(self._buffer)
            scanner.pos = self._pos
            try:
                book = scanner.next_book()
            except RecordParseError as e:
                if e.incomplete and self._fill():
                    continue
                raise
            
            if book is not None:
                self._pos = scanner.pos
                if scanner.at_end():
                    self._discard()
                return book
            
            self._discard()
            if not self._fill():
                return None
    
    def at_end(self) -> bool:
        """True if nothing but whitespace is left in the stream."""
        while not self._buffer[self._pos:].strip():
            self._discard()
            if not self._fill():
                return True
        return False
    
    def release(self) -> None:
        """Hand unread text back to the stream."""
        if self._buffer[self._pos:].strip():
            if self._seekable:
                self.stream.seek(self._mark)
                self.stream.read(self._pos)
            else:
                logger.warning(
                    f"Dropping {len(self._buffer) - self._pos} unread characters from a non-seekable stream"
                )
        self._discard()
    
    def _fill(self) -> bool:
        if not self._buffer and self._seekable:
            self._mark = self.stream.tell()
        line = self.stream.readline()
        if not line:
            return False
        self._buffer += line
        return True
    
    def _discard(self) -> None:
        self._buffer = ""
        self._pos = 0
        self._mark = None


def parse_book(text: str) -> Book:
    """
    Parse exactly one record.
    
    Args:
        text: Record text
        
    Returns:
        Parsed Book
        
    Raises:
        RecordParseError: if the text is empty, malformed, or has
            anything but whitespace after the record
    """
    scanner = RecordScanner(text)
    book = scanner.next_book()
    if book is None:
        raise RecordParseError("No record found", 0, text)
    if not scanner.at_end():
        raise RecordParseError("Unexpected text after record", scanner.pos, text)
    return book


def read_book(stream: TextIO) -> Optional[Book]:
    """
    Read the next record from a text stream.
    
    A record may span several lines, and a line may hold several records;
    on seekable streams the text after the record is left for the next
    call.
    
    Args:
        stream: Readable text stream
        
    Returns:
        Book, or None at end of stream
        
    Raises:
        RecordParseError: on malformed or truncated input
    """
    reader = RecordReader(stream)
    try:
        return reader.next_book()
    finally:
        reader.release()


def write_book(stream: TextIO, book: Book) -> None:
    """Write a book's record text to a stream."""
    stream.write(format_book(book))
