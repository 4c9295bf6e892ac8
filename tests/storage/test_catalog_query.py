from __future__ import annotations

from pathlib import Path

import pytest

from opac.catalog.identity import resolve_batch
from opac.catalog.models import AuthorAttribution, NormalizedBook, ResolvedAuthor, Role
from opac.storage.query import BookAuthorHit, build_filter, search_books
from opac.storage.repository import CatalogRepository

KAFKA = ResolvedAuthor(full_name="フランツ・カフカ")
YAMADA = ResolvedAuthor(full_name="山田太郎", first_name="太郎", last_name="山田")


def _seed(repo: CatalogRepository) -> None:
    books = [
        NormalizedBook(
            title="変身",
            holding_location_name="Tokyo Main",
            holding_record_id="HR-1",
            authors=[AuthorAttribution(KAFKA), AuthorAttribution(YAMADA, Role.TRANSLATOR)],
            publisher_location="東京",
            publisher="新潮社",
            year=2004,
            month=8,
            page_count=253,
            isbn="4-10-207101-X",
            notes=["原タイトル: Die Verwandlung"],
        ),
        NormalizedBook(
            title="Python入門 100%",
            holding_location_name="Annex",
            holding_record_id="HR-2",
            authors=[AuthorAttribution(YAMADA, Role.EDITOR)],
            publisher="岩波書店",
            year=1999,
        ),
        NormalizedBook(
            title="城",
            holding_location_name="Tokyo Main",
            holding_record_id="HR-3",
            authors=[AuthorAttribution(KAFKA)],
            publisher="新潮社",
            year=2005,
        ),
    ]
    repo.write_batch(resolve_batch(books))


@pytest.fixture
def repo(tmp_path: Path):
    with CatalogRepository(tmp_path / "catalog.db") as repository:
        _seed(repository)
        yield repository


def test_title_search_is_substring(repo: CatalogRepository) -> None:
    hits = search_books(repo.connection, query="入門", field_name="title")

    assert [hit.title for hit in hits] == ["Python入門 100%"]


def test_percent_in_query_is_literal(repo: CatalogRepository) -> None:
    assert [hit.title for hit in search_books(repo.connection, query="100%", field_name="title")] == [
        "Python入門 100%"
    ]
    assert search_books(repo.connection, query="%", field_name="publisher") == []


def test_author_search_matches_any_linked_author(repo: CatalogRepository) -> None:
    hits = search_books(repo.connection, query="山田", field_name="author")

    assert [hit.title for hit in hits] == ["変身", "Python入門 100%"]


def test_publisher_and_year_search(repo: CatalogRepository) -> None:
    assert [hit.title for hit in search_books(repo.connection, query="新潮", field_name="publisher")] == [
        "変身",
        "城",
    ]
    assert [hit.title for hit in search_books(repo.connection, query="1999", field_name="year")] == [
        "Python入門 100%"
    ]
    assert search_books(repo.connection, query="unknown", field_name="year") == []


def test_keyword_search_ors_every_field(repo: CatalogRepository) -> None:
    assert [hit.title for hit in search_books(repo.connection, query="カフカ")] == ["変身", "城"]
    assert [hit.title for hit in search_books(repo.connection, query="2005")] == ["城"]
    assert [hit.title for hit in search_books(repo.connection, query="4-10-207101-X")] == ["変身"]
    assert [hit.title for hit in search_books(repo.connection, query="岩波")] == ["Python入門 100%"]


def test_hit_exposes_display_fields(repo: CatalogRepository) -> None:
    hit = search_books(repo.connection, query="変身", field_name="title")[0]

    assert [author.formatted for author in hit.authors] == ["フランツ・カフカ", "山田太郎訳"]
    assert hit.publication_date == "2004-8"
    assert hit.size == ""
    assert hit.holding_location_name == "Tokyo Main"
    assert hit.notes == ["原タイトル: Die Verwandlung"]
    payload = hit.to_dict()
    assert payload["authors"] == ["フランツ・カフカ", "山田太郎訳"]
    assert payload["page_count"] == 253


def test_limit_and_blank_query(repo: CatalogRepository) -> None:
    assert len(search_books(repo.connection, query="新潮社", limit=1)) == 1
    assert search_books(repo.connection, query="   ") == []


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_filter("x", "subject")


def test_formatted_role_suffixes() -> None:
    assert BookAuthorHit(full_name="山田太郎", role="editor").formatted == "山田太郎編著"
    assert BookAuthorHit(full_name="山田太郎", role="director").formatted == "山田太郎監修"
    assert BookAuthorHit(full_name="山田太郎", role="illustrator").formatted == "山田太郎絵"
    assert BookAuthorHit(full_name="山田太郎", role="author").formatted == "山田太郎"
