"""Tests for the demo catalog."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from docextract.catalog import BookDatabase, CatalogBook, find_book, load_catalog


class TestLoadCatalog:
    def test_books_loaded(self) -> None:
        books = load_catalog().books

        assert len(books) >= 4
        assert all(book.id for book in books)
        assert len({book.id for book in books}) == len(books)

    def test_cached(self) -> None:
        assert load_catalog() is load_catalog()

    def test_find_book(self) -> None:
        book = find_book("gutenberg-84")

        assert book is not None
        assert book.published_year == 1818
        assert book.publisher.location == "London, UK"

    def test_find_missing(self) -> None:
        assert find_book("nope") is None


class TestCatalogBook:
    def test_defaults(self) -> None:
        book = CatalogBook()

        assert book.title == ""
        assert book.pages == 1
        assert book.availability.stock == 0
        assert book.rating.average == 0
        assert book.pdf_url is None

    def test_aliases(self) -> None:
        book = CatalogBook.model_validate({"publishedYear": 2001, "pdfUrl": "http://x"})

        assert book.published_year == 2001
        assert book.model_dump(by_alias=True)["pdfUrl"] == "http://x"

    @pytest.mark.parametrize(
        "payload",
        [{"pages": 0}, {"availability": {"stock": -1}}, {"rating": {"average": 6}}],
    )
    def test_invalid_values(self, payload: dict) -> None:
        with pytest.raises(ValidationError):
            CatalogBook.model_validate(payload)

    def test_empty_database(self) -> None:
        assert BookDatabase.model_validate({}).books == []
