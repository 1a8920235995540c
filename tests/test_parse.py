"""Tests for parsing functions."""
import io

import pytest

from src.errors import RecordParseError
from src.models import Book, format_book, quote
from src.parse import RecordReader, RecordScanner, parse_book, read_book, write_book


def test_parse_book_complete():
    """Test parsing a record with all four fields."""
    book = parse_book('"9789998287532", "Over in the Meadow", "Ezra Jack Keats", 91.11')
    
    assert book.isbn == "9789998287532"
    assert book.title == "Over in the Meadow"
    assert book.author == "Ezra Jack Keats"
    assert book.price == pytest.approx(91.11)


def test_parse_book_without_spaces():
    """Test that spacing around delimiters is optional."""
    book = parse_book('"111","A","X",9.99')
    
    assert book == Book("111", "A", "X", 9.99)


def test_parse_book_embedded_comma_and_quote():
    """Test quoted fields holding commas and escaped quotes."""
    book = parse_book(r'"1", "Eats, Shoots \"and\" Leaves", "Truss\\Lynne", 12')
    
    assert book.title == 'Eats, Shoots "and" Leaves'
    assert book.author == "Truss\\Lynne"
    assert book.price == 12.0


def test_parse_book_exponent_price():
    """Test price literals in exponent form."""
    assert parse_book('"1", "A", "X", 1.5e2').price == 150.0


def test_parse_book_missing_quote():
    """Test that an unquoted string field is rejected."""
    with pytest.raises(RecordParseError):
        parse_book('111, "A", "X", 9.99')


def test_parse_book_wrong_delimiter():
    """Test that fields must be separated by commas."""
    with pytest.raises(RecordParseError):
        parse_book('"111"; "A"; "X"; 9.99')


def test_parse_book_bad_price():
    """Test that a non-numeric price is rejected."""
    with pytest.raises(RecordParseError):
        parse_book('"111", "A", "X", free')


def test_parse_book_trailing_text():
    """Test that parse_book accepts exactly one record."""
    with pytest.raises(RecordParseError):
        parse_book('"111", "A", "X", 9.99 "222"')


def test_parse_book_empty():
    """Test that empty text is not a record."""
    with pytest.raises(RecordParseError):
        parse_book("   \n")


def test_format_book():
    """Test formatting with comma-space delimiters."""
    assert format_book(Book("111", "A", "X", 9.99)) == '"111", "A", "X", 9.99'


def test_format_book_whole_price():
    """Test that whole prices print without a decimal part."""
    assert format_book(Book("1", "T", "A", 9.0)) == '"1", "T", "A", 9'


def test_quote_escapes():
    """Test escaping of quotes and backslashes."""
    assert quote('say "hi"') == r'"say \"hi\""'
    assert quote("a\\b") == r'"a\\b"'


def test_format_then_parse():
    """Test that a formatted record parses back to an equal book."""
    book = Book('978-0"1', 'Title, with "quotes"', "Back\\slash", 1234567.89)
    
    assert parse_book(format_book(book)) == book


def test_write_book():
    """Test writing a record to a stream."""
    stream = io.StringIO()
    write_book(stream, Book("111", "A", "X", 9.99))
    
    assert stream.getvalue() == '"111", "A", "X", 9.99'


def test_read_book_multiline_record():
    """Test reading records that span lines."""
    stream = io.StringIO('"1",\n"A", "X",\n 2.5\n\n"2", "B", "Y", 3\n')
    
    assert read_book(stream) == Book("1", "A", "X", 2.5)
    assert read_book(stream) == Book("2", "B", "Y", 3.0)
    assert read_book(stream) is None


def test_read_book_malformed():
    """Test that a malformed line raises."""
    stream = io.StringIO('"1" "A", "X", 2.5\n')
    
    with pytest.raises(RecordParseError) as exc_info:
        read_book(stream)
    assert not exc_info.value.incomplete


def test_read_book_truncated_stream():
    """Test that a stream ending mid-record raises."""
    stream = io.StringIO('"1", "A"')
    
    with pytest.raises(RecordParseError) as exc_info:
        read_book(stream)
    assert exc_info.value.incomplete


def test_scanner_reads_in_order():
    """Test scanning several records from one buffer."""
    scanner = RecordScanner('"1", "A", "X", 1  "2", "B", "Y", 2\n')
    
    assert scanner.next_book().isbn == "1"
    assert scanner.next_book().isbn == "2"
    assert scanner.next_book() is None
    assert scanner.at_end()


def test_scanner_failure_keeps_position():
    """Test that a failed record leaves the scanner where it started."""
    scanner = RecordScanner('"1", "A", "X", 1\n"2", "B" oops')
    scanner.next_book()
    position = scanner.pos
    
    with pytest.raises(RecordParseError):
        scanner.next_book()
    assert scanner.pos == position


def test_read_book_several_records_on_a_line():
    """Test that read_book leaves the rest of a line for the next call."""
    stream = io.StringIO('"1","A","X",1 "2","B","Y",2\n"3","C","Z",3\n')
    
    assert read_book(stream) == Book("1", "A", "X", 1.0)
    assert read_book(stream) == Book("2", "B", "Y", 2.0)
    assert read_book(stream) == Book("3", "C", "Z", 3.0)
    assert read_book(stream) is None


def test_read_book_agrees_with_scanner():
    """Test that reading a stream and scanning its text give the same books."""
    text = '"1", "A", "X", 1 "2",\n"B", "Y", 2\n\n"3", "C", "Z", 3'
    
    scanner = RecordScanner(text)
    scanned = [scanner.next_book() for _ in range(3)]
    
    stream = io.StringIO(text)
    streamed = [read_book(stream) for _ in range(3)]
    
    assert scanned[2] == Book("3", "C", "Z", 3.0)
    assert streamed == scanned
    assert scanner.next_book() is None
    assert read_book(stream) is None


def test_read_book_failure_leaves_record_unread():
    """Test that a malformed record is still in the stream afterwards."""
    stream = io.StringIO('"1","A","X",1\n"2" "B"\n')
    read_book(stream)
    
    with pytest.raises(RecordParseError):
        read_book(stream)
    assert stream.read() == '"2" "B"\n'


def test_reader_release_returns_unread_text():
    """Test that a released reader hands back text it buffered."""
    stream = io.StringIO('"1","A","X",1\n"2","B","Y",2\n')
    reader = RecordReader(stream)
    
    assert reader.next_book().isbn == "1"
    assert not reader.at_end()
    reader.release()
    
    assert stream.read() == '"2","B","Y",2\n'
