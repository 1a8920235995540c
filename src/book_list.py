"""Fixed-capacity list of book records."""
import enum
import io
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, TextIO, Tuple

from src.config import Config
from src.errors import BookIndexError, RecordParseError
from src.models import Book, format_book
from src.parse import RecordReader

logger = logging.getLogger(__name__)

INDEX_WIDTH = 5
INDEX_SEPARATOR = ":  "


class ReadStatus(enum.Enum):
    """How a bulk read ended."""
    COMPLETE = "complete"
    TRUNCATED = "truncated"
    PARSE_ERROR = "parse_error"
    FILE_NOT_FOUND = "file_not_found"


@dataclass
class ReadResult:
    """Outcome of a bulk read into a book list."""
    status: ReadStatus
    count: int
    remaining: int
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        """True if every record read was well formed."""
        return self.status in (ReadStatus.COMPLETE, ReadStatus.TRUNCATED)


@dataclass
class AppendResult:
    """Outcome of concatenating one book list onto another."""
    appended: int
    dropped: int
    remaining: int


class BookList:
    """
    Ordered list of books with a capacity fixed at construction.

    Slots past the logical size are allocated but unused. Reads and
    concatenation stop at capacity instead of growing the list.
    """

    def __init__(self, capacity: int = Config.DEFAULT_CAPACITY):
        """
        Allocate an empty list.

        Args:
            capacity: Maximum number of books the list can hold
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise TypeError(f"capacity must be an int, not {type(capacity).__name__}")
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")

        self._capacity = capacity
        self._books: List[Book] = [Book() for _ in range(capacity)]
        self._size = 0

    @property
    def capacity(self) -> int:
        """Maximum number of books, fixed at construction."""
        return self._capacity

    def size(self) -> int:
        """Number of books currently held."""
        return self._size

    def __len__(self) -> int:
        """Same as size()."""
        return self._size

    def remaining(self) -> int:
        """Free slots left before the list is full."""
        return self._capacity - self._size

    def is_full(self) -> bool:
        """True once no free slots are left."""
        return self._size >= self._capacity

    # ------------------------------------------------------------------
    # Bulk reads
    # ------------------------------------------------------------------

    def read_from(self, stream: TextIO) -> ReadResult:
        """
        Replace the contents of this list with records read from a text stream.

        Records are stored from slot 0 until the stream runs out, a record
        fails to parse, or the list is full. Records past capacity are left
        unread in seekable streams.

        Args:
            stream: Readable text stream

        Returns:
            ReadResult describing how the read ended
        """
        reader = RecordReader(stream)
        count = 0
        status = ReadStatus.COMPLETE
        error = None

        try:
            while count < self._capacity:
                book = reader.next_book()
                if book is None:
                    break
                self._books[count] = book
                count += 1
            else:
                if not reader.at_end():
                    logger.warning(f"Book list full at {self._capacity} records, ignoring the rest of the input")
                    status = ReadStatus.TRUNCATED
        except (RecordParseError, UnicodeDecodeError) as e:
            logger.warning(f"Stopped reading after {count} records: {e}")
            status = ReadStatus.PARSE_ERROR
            error = e
        finally:
            reader.release()

        self._size = count
        logger.debug(f"Read {count} records ({status.value})")
        return ReadResult(status=status, count=count, remaining=self.remaining(), error=error)

    def read_text(self, text: str) -> ReadResult:
        """Replace the contents of this list with records parsed from text."""
        return self.read_from(io.StringIO(text))

    def read_in_file(self, path, encoding: str = Config.FILE_ENCODING) -> ReadResult:
        """
        Replace the contents of this list with records read from a file.

        Args:
            path: File to read
            encoding: Text encoding of the file

        Returns:
            ReadResult; if the file cannot be opened the list is left empty
            and the status is FILE_NOT_FOUND, and text that cannot be
            decoded is a PARSE_ERROR
        """
        try:
            f = open(path, "r", encoding=encoding)
        except OSError as e:
            logger.warning(f"Could not open {path}: {e}")
            self._size = 0
            return ReadResult(
                status=ReadStatus.FILE_NOT_FOUND,
                count=0,
                remaining=self.remaining(),
                error=e,
            )

        with f:
            logger.info(f"Reading books from {path}")
            return self.read_from(f)

    # ------------------------------------------------------------------
    # Concatenation
    # ------------------------------------------------------------------

    def extend(self, other: "BookList") -> AppendResult:
        """
        Append copies of other's books until this list is full.

        Args:
            other: List to copy from; it is not modified

        Returns:
            AppendResult with counts of appended and dropped books
        """
        if not isinstance(other, BookList):
            raise TypeError(f"can only concatenate BookList, not {type(other).__name__}")

        # Snapshot so that extending a list with itself terminates
        source_size = other._size
        appended = 0
        while self._size < self._capacity and appended < source_size:
            self._books[self._size] = other._books[appended].copy()
            self._size += 1
            appended += 1

        dropped = source_size - appended
        if dropped:
            logger.warning(f"Book list full at {self._capacity} records, dropped {dropped}")
        return AppendResult(appended=appended, dropped=dropped, remaining=self.remaining())

    def __iadd__(self, other: "BookList") -> "BookList":
        if not isinstance(other, BookList):
            return NotImplemented
        self.extend(other)
        return self

    # ------------------------------------------------------------------
    # Access and search
    # ------------------------------------------------------------------

    def __getitem__(self, index: int) -> Book:
        """Return a copy of the book at a zero-based index."""
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"book list indices must be integers, not {type(index).__name__}")
        if not 0 <= index < self._size:
            raise BookIndexError(index, self._size)
        return self._books[index].copy()

    def __iter__(self) -> Iterator[Book]:
        for i in range(self._size):
            yield self._books[i].copy()

    def find(self, book: Book) -> int:
        """
        Locate a book by comparing all four fields.

        Prices match within the same tolerance Book equality uses.

        Args:
            book: Book to look for

        Returns:
            Index of the first match, or size() if there is none
        """
        for i in range(self._size):
            if self._books[i] == book:
                return i
        return self._size

    def __contains__(self, book) -> bool:
        if not isinstance(book, Book):
            return False
        return self.find(book) < self._size

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def write_to(self, stream: TextIO) -> None:
        """Write each book on its own line, prefixed by its index."""
        stream.write(str(self))

    def __str__(self) -> str:
        return "".join(
            f"\n{i:>{INDEX_WIDTH}}{INDEX_SEPARATOR}{format_book(self._books[i])}"
            for i in range(self._size)
        )

    def __repr__(self) -> str:
        return f"BookList(capacity={self._capacity}, size={self._size})"

    def to_rows(self) -> List[Tuple[int, str, str, str, float]]:
        """Rows of (index, isbn, title, author, price) for tabular display."""
        return [
            (i, book.isbn, book.title, book.author, book.price)
            for i, book in enumerate(self._books[:self._size])
        ]
