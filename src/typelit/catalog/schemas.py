"""Pydantic models for catalog API payloads.

The catalog (Gutendex) returns pages of the form::

    {"count": 70000, "next": "https://...?page=2", "previous": null,
     "results": [{"id": 1342, "title": "...", "authors": [{"name": "..."}],
                  "subjects": [...], "bookshelves": [...],
                  "formats": {"text/plain; charset=us-ascii": "https://..."}}]}

Unknown fields are ignored so the client keeps working when the API grows.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from typelit.models import RawBook


class CatalogAuthor(BaseModel):
    """One author entry of a catalog book."""

    model_config = ConfigDict(extra="ignore")

    name: str
    birth_year: int | None = None
    death_year: int | None = None


class CatalogBook(BaseModel):
    """One book record as returned by the catalog."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    authors: list[CatalogAuthor] = Field(default_factory=list)
    subjects: list[str] = Field(default_factory=list)
    bookshelves: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    formats: dict[str, str] = Field(default_factory=dict)

    def to_raw_book(self) -> RawBook:
        """Convert to the pipeline's catalog record."""
        return RawBook(
            id=self.id,
            title=self.title,
            authors=[a.name for a in self.authors],
            subjects=list(self.subjects),
            bookshelves=list(self.bookshelves),
            formats=dict(self.formats),
        )


class CatalogPage(BaseModel):
    """One page of the paginated book listing."""

    model_config = ConfigDict(extra="ignore")

    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: list[CatalogBook] = Field(default_factory=list)
