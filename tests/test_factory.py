"""
Tests for ModelFactory and LazyModel.
"""

from itertools import count

import pytest

from activemodels import (
    InMemoryRepository,
    LazyModel,
    MissingCapabilityError,
    Model,
    PersistableModel,
    relationship_loader,
)
from activemodels.testing import ModelFactory


class Author(PersistableModel, repository=InMemoryRepository()):
    """Stored author."""

    properties = {
        "id": "int",
        "name": "string",
        "email": "string",
    }


class Book(PersistableModel, repository=InMemoryRepository()):
    """Stored book referencing an author."""

    properties = {
        "id": "int",
        "title": "string",
        "author_id": "int",
        "kind": "object",
    }


sequence = count(1)


class AuthorFactory(ModelFactory[Author]):
    """Authors with unique emails."""

    def definition(self):
        return {
            "name": "Ada",
            "email": lambda: f"author{next(sequence)}@example.com",
        }


class BookFactory(ModelFactory[Book]):
    """Books with a freshly created author."""

    def definition(self):
        return {
            "title": "Notes",
            "author_id": AuthorFactory(Author).create_and_resolve_to("id"),
            "kind": Author,
        }


class LazyAuthor(LazyModel, model_class=Author):
    """Lazy reference to a stored author."""


class Shelf(Model):
    """Model whose relationship loader returns lazy references."""

    properties = {
        "author_ids": "array",
    }

    relationships = {
        "authors": "has_many",
    }

    @relationship_loader("authors")
    def load_authors(self):
        return [LazyAuthor(author_id) for author_id in self.author_ids]


@pytest.fixture(autouse=True)
def clear_repositories():
    """Start each test with empty repositories."""
    Author.repository.clear()
    Book.repository.clear()
    yield


class TestModelFactory:
    """Test building models from factories."""

    def test_make_single(self):
        """make() builds one unsaved model by default."""
        author = AuthorFactory(Author).make()

        assert isinstance(author, Author)
        assert author.name == "Ada"
        assert not author.is_persisted()
        assert Author.repository.records() == []

    def test_make_many(self):
        """count() builds a list with fresh callable values."""
        authors = AuthorFactory(Author).count(3).make()

        assert len(authors) == 3
        assert len({author.email for author in authors}) == 3

    def test_attribute_overrides(self):
        """Given attributes override the definition."""
        author = AuthorFactory(Author).make({"name": "Grace"})

        assert author.name == "Grace"

    def test_create(self):
        """create() saves the built models."""
        authors = AuthorFactory(Author).count(2).create()

        assert all(author.is_persisted() for author in authors)
        assert len(Author.repository.records()) == 2

    def test_create_and_resolve_to(self):
        """A related model is created and its attribute used as the value."""
        book = BookFactory(Book).create()

        assert Author.find(book.author_id).name == "Ada"

    def test_make_and_resolve_to(self):
        """make_and_resolve_to() builds without saving."""
        resolve = AuthorFactory(Author).count(2).make_and_resolve_to("name")

        assert resolve() == ["Ada", "Ada"]
        assert Author.repository.records() == []

    def test_classes_are_not_called(self):
        """Class values are used as they are."""
        book = BookFactory(Book).make()

        assert book.kind is Author

    def test_configure(self):
        """configure() returns the factory."""
        factory = AuthorFactory(Author)

        assert factory.configure() is factory


class TestLazyModel:
    """Test lazy model references."""

    def test_identity(self):
        """A lazy model wraps an id."""
        lazy = LazyAuthor(7)

        assert lazy.get_id() == 7
        assert str(lazy) == "7"
        assert repr(lazy) == "LazyAuthor(7)"
        assert LazyAuthor.get_model_class() is Author

    def test_resolve(self):
        """resolve() finds the stored model."""
        author = AuthorFactory(Author).create()

        assert LazyAuthor(author.id).resolve().to_dict() == author.to_dict()

    def test_resolve_missing(self):
        """Missing models resolve to None."""
        assert LazyAuthor(404).resolve() is None

    def test_missing_model_class(self):
        """Lazy models need a model class."""
        class Unbound(LazyModel):
            pass

        with pytest.raises(MissingCapabilityError, match="Unbound must declare the model class"):
            Unbound(1).resolve()

    def test_hydrated_relationship(self):
        """Lazy references in relationships resolve to stored models, skipping missing ones."""
        first, second = AuthorFactory(Author).count(2).create()

        shelf = Shelf(author_ids=[first.id, 404, second.id])

        assert [author.id for author in shelf.authors] == [first.id, second.id]
