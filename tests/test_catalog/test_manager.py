"""Tests for Catalog."""

import pytest

from librarydesk.catalog.manager import Catalog
from librarydesk.catalog.schemas import BookCreate


@pytest.fixture
def catalog(db):
    """Create a Catalog with test database."""
    return Catalog(db, first_id=1001)


@pytest.fixture
def books(catalog):
    """Add a handful of books."""
    data = [
        BookCreate(title="The Great Gatsby", author="F. Scott Fitzgerald", isbn="9780743273565"),
        BookCreate(title="Great Expectations", author="Charles Dickens", isbn="9780141439563"),
        BookCreate(title="Emma", author="Jane Austen", isbn="9780141439587"),
    ]
    return [catalog.add_book(d) for d in data]


class TestAddBook:
    """Tests for registering books."""

    def test_add_book(self, catalog):
        """Test adding a book."""
        book = catalog.add_book(
            BookCreate(title="Dune", author="Frank Herbert", isbn="9780441172719")
        )

        assert book.id == 1001
        assert book.title == "Dune"
        assert book.author == "Frank Herbert"
        assert book.isbn == "9780441172719"
        assert book.is_available is True
        assert book.borrowed_by is None

    def test_ids_are_sequential(self, catalog):
        """Test ids increase by one from the first id."""
        ids = [catalog.add_book(BookCreate(title=f"Book {i}")).id for i in range(4)]
        assert ids == [1001, 1002, 1003, 1004]

    def test_accepts_empty_strings(self, catalog):
        """Test that blank fields are accepted as-is."""
        book = catalog.add_book(BookCreate(title="", author="", isbn=""))
        assert book.id == 1001
        assert book.title == ""

    def test_duplicate_isbn_allowed(self, catalog):
        """Test that ISBNs are not checked for uniqueness."""
        first = catalog.add_book(BookCreate(title="Copy 1", isbn="123"))
        second = catalog.add_book(BookCreate(title="Copy 2", isbn="123"))
        assert first.id != second.id

    def test_custom_first_id(self, db):
        """Test a catalog starting somewhere else."""
        catalog = Catalog(db, first_id=1)
        assert catalog.add_book(BookCreate(title="One")).id == 1

    def test_count(self, catalog, books):
        """Test counting books."""
        assert catalog.count() == 3


class TestFind:
    """Tests for book lookup and listing."""

    def test_find(self, catalog, books):
        """Test getting a book by ID."""
        book = catalog.find(books[1].id)
        assert book is not None
        assert book.title == "Great Expectations"

    def test_find_not_found(self, catalog):
        """Test getting a non-existent book."""
        assert catalog.find(9999) is None

    def test_list_books_in_id_order(self, catalog, books):
        """Test listing returns ascending ids."""
        listed = catalog.list_books()
        assert [b.id for b in listed] == [1001, 1002, 1003]

    def test_list_books_empty(self, catalog):
        """Test listing an empty catalog."""
        assert catalog.list_books() == []


class TestSearch:
    """Tests for title/author search."""

    @pytest.mark.parametrize("query", ["great", "GATSBY", "Great Gatsby", "gAtS"])
    def test_search_case_insensitive(self, catalog, books, query):
        """Test search ignores case."""
        ids = [b.id for b in catalog.search(query)]
        assert books[0].id in ids

    def test_search_by_author(self, catalog, books):
        """Test search matches the author."""
        results = catalog.search("austen")
        assert [b.title for b in results] == ["Emma"]

    def test_search_multiple_matches_keep_catalog_order(self, catalog, books):
        """Test several matches come back in ascending id order."""
        results = catalog.search("great")
        assert [b.id for b in results] == [1001, 1002]

    def test_search_no_match(self, catalog, books):
        """Test a query with no match returns an empty list."""
        assert catalog.search("xyz") == []

    def test_search_substring_inside_word(self, catalog, books):
        """Test that matching is plain substring, not word based."""
        results = catalog.search("ickens")
        assert [b.title for b in results] == ["Great Expectations"]

    def test_search_wildcard_characters_are_literal(self, catalog):
        """Test SQL wildcard characters have no special meaning."""
        catalog.add_book(BookCreate(title="100% Cotton", author="A"))
        catalog.add_book(BookCreate(title="Plain", author="B"))
        assert [b.title for b in catalog.search("%")] == ["100% Cotton"]
        assert catalog.search("_") == []


class TestSetAvailability:
    """Tests for availability changes."""

    def test_mark_borrowed(self, catalog, books):
        """Test marking a book as borrowed."""
        book = catalog.set_availability(books[0].id, False, 7)
        assert book.is_available is False
        assert book.borrowed_by == 7

        stored = catalog.find(books[0].id)
        assert stored.is_available is False
        assert stored.borrowed_by == 7

    def test_mark_available(self, catalog, books):
        """Test returning a book to the shelf."""
        catalog.set_availability(books[0].id, False, 7)
        book = catalog.set_availability(books[0].id, True, None)
        assert book.is_available is True
        assert book.borrowed_by is None

    def test_borrower_must_match_availability(self, catalog, books):
        """Test inconsistent combinations are rejected."""
        with pytest.raises(ValueError):
            catalog.set_availability(books[0].id, False, None)
        with pytest.raises(ValueError):
            catalog.set_availability(books[0].id, True, 7)

    def test_unknown_book(self, catalog):
        """Test changing a non-existent book."""
        with pytest.raises(ValueError, match="not found"):
            catalog.set_availability(4242, False, 1)
