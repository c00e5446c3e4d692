import pytest

from saja.util import dasherize, lower_first, plural_dasherize, pluralize


@pytest.mark.parametrize("word, plural", [("User", "Users"), ("Category", "Categories"), ("", "")])
def test_pluralize(word: str, plural: str) -> None:
    assert pluralize(word) == plural


@pytest.mark.parametrize(
    "word, expected",
    [("UserProfiles", "user-profiles"), ("blog_posts", "blog-posts"), ("Users", "users"), ("user profiles", "user-profiles")],
)
def test_dasherize(word: str, expected: str) -> None:
    assert dasherize(word) == expected


def test_plural_dasherize() -> None:
    assert plural_dasherize("UserProfile") == "user-profiles"
    assert plural_dasherize("Comment") == "comments"


def test_lower_first() -> None:
    assert lower_first("Posts") == "posts"
    assert lower_first("blogPosts") == "blogPosts"
    assert lower_first("") == ""
