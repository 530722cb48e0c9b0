"""
Unit tests for the SELECT statements built by the repositories.

No database is needed: statements are compiled to SQL text and inspected.
"""

import pytest
from unittest.mock import MagicMock

from generic_repository import GenericRepository, InvalidIncludePathError
from generic_repository.exceptions import InvalidArgumentError, RepositoryError
from tests.fixtures.models import Author, Edition

def _sql(statement) -> str:
    return " ".join(str(statement.compile()).split())

@pytest.fixture
def authors() -> GenericRepository:
    return GenericRepository(MagicMock(), Author)

def test_no_order_by_when_not_requested(authors):
    assert "ORDER BY" not in _sql(authors._build_select())

def test_ascending_order(authors):
    assert _sql(authors._build_select(order_by=Author.born)).endswith("ORDER BY authors.born ASC")

def test_descending_order(authors):
    assert _sql(authors._build_select(order_by=Author.born, descending=True)).endswith("ORDER BY authors.born DESC")

def test_descending_without_order_key_sorts_by_primary_key():
    editions = GenericRepository(MagicMock(), Edition)
    sql = _sql(editions._build_select(descending=True))
    assert sql.endswith("ORDER BY editions.book_id DESC, editions.number DESC")

def test_filter_is_applied(authors):
    assert "WHERE authors.born > :born_1" in _sql(authors._build_select(where=Author.born > 1850))

def test_include_paths_become_loader_options(authors):
    assert len(authors._include_options(["books.reviews", "books.editions"])) == 2

def test_single_string_include_is_one_path(authors):
    assert len(authors._include_options("books")) == 1

def test_invalid_include_path_message(authors):
    with pytest.raises(InvalidIncludePathError) as exc_info:
        authors._build_select(include=["born"])

    assert "'born' on Author is not a relationship" in str(exc_info.value)
    assert exc_info.value.argument == "include"

def test_unknown_include_path_message(authors):
    with pytest.raises(InvalidIncludePathError, match="Book has no attribute 'publisher'"):
        authors._build_select(include=["books.publisher"])

def test_exception_hierarchy():
    assert issubclass(InvalidIncludePathError, InvalidArgumentError)
    assert issubclass(InvalidArgumentError, RepositoryError)
    assert issubclass(InvalidArgumentError, ValueError)

def test_get_first_or_default_never_touches_session_without_filter(authors):
    with pytest.raises(InvalidArgumentError, match="'where' is required"):
        authors.get_first_or_default(None)

    authors.session.scalars.assert_not_called()

def test_mutations_only_stage_changes(authors):
    entity = Author(name="Le Guin")
    authors.create(entity)
    authors.create_all([Author(name="Lem")])

    authors.session.add.assert_called_once_with(entity)
    authors.session.add_all.assert_called_once()
    authors.session.commit.assert_not_called()
    authors.session.flush.assert_not_called()

def test_repr(authors):
    assert repr(authors) == "<GenericRepository Author>"
