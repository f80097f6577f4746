"""Static demo catalog of public-domain books."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib.resources import files
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogPublisher(BaseModel):
    name: str = Field(default="", description="Publisher company name")
    location: str = Field(default="", description="Publisher location (city, country)")


class Availability(BaseModel):
    format: str = Field(default="", description="Book format (hardcover, paperback, ebook, etc.)")
    stock: int = Field(default=0, ge=0, description="Number of copies in stock")


class Rating(BaseModel):
    average: float = Field(default=0, ge=0, le=5, description="Average rating score (0-5)")
    count: int = Field(default=0, ge=0, description="Total number of ratings")


class CatalogBook(BaseModel):
    """Catalog entry; a superset of the extracted metadata."""

    id: str = ""
    title: str = ""
    authors: List[str] = Field(default_factory=list)
    published_year: int = Field(default=0, alias="publishedYear")
    genres: List[str] = Field(default_factory=list)
    isbn: str = ""
    pages: int = Field(default=1, gt=0)
    language: str = Field(default="", description="Language code (e.g., en, es, fr)")
    publisher: CatalogPublisher = Field(default_factory=CatalogPublisher)
    availability: Availability = Field(default_factory=Availability)
    rating: Rating = Field(default_factory=Rating)
    pdf_url: Optional[str] = Field(
        default=None,
        alias="pdfUrl",
        description="URL to downloadable PDF version for testing ADE parse functionality",
    )

    model_config = ConfigDict(populate_by_name=True)


class BookDatabase(BaseModel):
    books: List[CatalogBook] = Field(default_factory=list)


def _load_raw() -> str:
    return files("docextract").joinpath("data", "books.json").read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def load_catalog() -> BookDatabase:
    """Load and validate the packaged catalog once."""
    return BookDatabase.model_validate(json.loads(_load_raw()))


def find_book(book_id: str) -> CatalogBook | None:
    for book in load_catalog().books:
        if book.id == book_id:
            return book
    return None
