#!/usr/bin/env python3
"""Book Catalog CLI - fixed-capacity book lists from text files."""
import argparse
import sys
import json
from tabulate import tabulate
from src.book_list import BookList, ReadStatus
from src.models import Book
from src.config import Config
import logging

logger = logging.getLogger(__name__)

EXIT_FILE_NOT_FOUND = 2


def load_list(path: str, capacity: int) -> BookList:
    """Read a book list from a file, exiting if the file cannot be opened."""
    book_list = BookList(capacity)
    result = book_list.read_in_file(path)

    if result.status == ReadStatus.FILE_NOT_FOUND:
        logger.error(f"❌ Cannot open {path}")
        sys.exit(EXIT_FILE_NOT_FOUND)

    if result.status == ReadStatus.TRUNCATED:
        logger.warning(f"⚠️  {path} holds more than {capacity} books, extra records ignored")
    elif result.status == ReadStatus.PARSE_ERROR:
        logger.warning(f"⚠️  {path}: {result.error}")

    logger.info(f"Loaded {result.count} books from {path}")
    return book_list


def display_books(book_list: BookList, format_type: str):
    """Display books in specified format."""
    if format_type == "table":
        headers = ["#", "ISBN", "Title", "Author", "Price"]
        rows = [
            [
                index,
                isbn,
                title[:50] + "..." if len(title) > 50 else title,
                author[:30] + "..." if len(author) > 30 else author,
                f"{price:.2f}"
            ]
            for index, isbn, title, author, price in book_list.to_rows()
        ]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        books_dict = [
            {
                "isbn": book.isbn,
                "title": book.title,
                "author": book.author,
                "price": book.price
            }
            for book in book_list
        ]
        print(json.dumps(books_dict, indent=2))

    elif format_type == "text":
        book_list.write_to(sys.stdout)
        print()


def show_books(args):
    """Show the books stored in a file."""
    book_list = load_list(args.file, args.capacity)
    display_books(book_list, args.format)


def find_book(args):
    """Look up a book in a file by all four fields."""
    book_list = load_list(args.file, args.capacity)
    target = Book(isbn=args.isbn, title=args.title, author=args.author, price=args.price)

    index = book_list.find(target)
    if index < book_list.size():
        print(f"Found at index {index}: {book_list[index]}")
    else:
        print(f"Not found (returned {index}, the list size)")


def merge_lists(args):
    """Concatenate several files into one list."""
    merged = BookList(args.capacity)

    for path in args.files:
        result = merged.extend(load_list(path, args.capacity))
        if result.dropped:
            logger.warning(f"⚠️  List full, dropped {result.dropped} books from {path}")

    print("\n" + "=" * 50)
    print(f"Merged {merged.size()} of {merged.capacity} slots")
    print("=" * 50)
    display_books(merged, args.format)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Book Catalog - fixed-capacity book lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show a file as a table
  %(prog)s show books.txt --capacity 50

  # Find a book by all four fields
  %(prog)s find books.txt --isbn 9789998287532 --title "Over in the Meadow" \\
      --author "Ezra Jack Keats" --price 91.11

  # Merge lists into one of limited capacity
  %(prog)s merge a.txt b.txt --capacity 10 --format text
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Show command
    show_parser = subparsers.add_parser("show", help="Show books in a file")
    show_parser.add_argument("file", help="Book list file")
    show_parser.add_argument("--capacity", type=int, default=Config.DEFAULT_CAPACITY,
                             help=f"List capacity (default: {Config.DEFAULT_CAPACITY})")
    show_parser.add_argument("--format", choices=["table", "text", "json"], default="table", help="Output format")

    # Find command
    find_parser = subparsers.add_parser("find", help="Find a book in a file")
    find_parser.add_argument("file", help="Book list file")
    find_parser.add_argument("--isbn", required=True, help="ISBN")
    find_parser.add_argument("--title", required=True, help="Title")
    find_parser.add_argument("--author", required=True, help="Author")
    find_parser.add_argument("--price", type=float, required=True, help="Price")
    find_parser.add_argument("--capacity", type=int, default=Config.DEFAULT_CAPACITY,
                             help=f"List capacity (default: {Config.DEFAULT_CAPACITY})")

    # Merge command
    merge_parser = subparsers.add_parser("merge", help="Concatenate book list files")
    merge_parser.add_argument("files", nargs="+", help="Book list files, in order")
    merge_parser.add_argument("--capacity", type=int, default=Config.DEFAULT_CAPACITY,
                              help=f"Capacity of the merged list (default: {Config.DEFAULT_CAPACITY})")
    merge_parser.add_argument("--format", choices=["table", "text", "json"], default="table", help="Output format")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Configure logging
    logging.basicConfig(
        level=Config.LOG_LEVEL.upper(),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        if args.command == "show":
            show_books(args)

        elif args.command == "find":
            find_book(args)

        elif args.command == "merge":
            merge_lists(args)

    except KeyboardInterrupt:
        logger.info("\n⚠️  Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"❌ Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
