"""
Example demonstrating activemodels with the in-memory repository.

This example shows how to:
1. Declare properties with shorthands and PropertyDefinition
2. Track, commit and revert changes
3. Normalize data with before_save hooks
4. Load relationships lazily
"""

from datetime import datetime, timezone

from activemodels import (
    InMemoryRepository,
    PersistableModel,
    PropertyDefinition,
    before_save,
    relationship_loader,
)


class TimestampMixin:
    """Sets updated_at on every save."""

    @before_save
    def touch(self):
        self.updated_at = datetime.now(timezone.utc).isoformat()


class Author(TimestampMixin, PersistableModel, repository=InMemoryRepository()):
    """Author of posts."""

    properties = {
        "id": "int",
        "name": "string",
        "updated_at": "string",
    }

    relationships = {
        "posts": "has_many",
    }

    @relationship_loader("posts")
    def load_posts(self):
        return Post.query().where(author_id=self.id).order_by("title")


class Post(TimestampMixin, PersistableModel, repository=InMemoryRepository()):
    """Post written by an author."""

    properties = {
        "id": "int",
        "author_id": "int",
        "title": "string",
        "published": ("bool", False),
        "updated_at": "string",
    }

    relationships = {
        "author": "belongs_to",
    }

    @classmethod
    def define_properties(cls):
        return {
            "title": PropertyDefinition().type("string").required_on_save(),
        }

    @before_save
    def strip_title(self):
        if self.title:
            self.title = self.title.strip()

    @relationship_loader("author")
    def load_author(self):
        return Author.query().where(id=self.author_id)


def main():
    ada = Author.create(name="Ada")
    Post.create(author_id=ada.id, title="  Notes on the Analytical Engine ")
    Post.create(author_id=ada.id, title="Bernoulli numbers", published=True)

    post = Post.find(1)
    print(f"Loaded {post!r}")
    print(f"Written by {post.author.name}")

    post.title = "Sketch of the Analytical Engine"
    print(f"Dirty values: {post.get_dirty()}")
    post.revert_changes()
    print(f"After revert: {post.title}")

    print("Posts by Ada:")
    for item in ada.posts:
        print(f"  - {item.title} (published={item.published})")


if __name__ == "__main__":
    main()
