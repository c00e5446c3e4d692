# String helpers used to derive route and relationship names
#
import re
from functools import lru_cache
import inflect

_inflect = inflect.engine()

_DASHERIZE_RE = re.compile(r"(?<!^)(?=[A-Z])")


@lru_cache(maxsize=256)
def pluralize(word: str) -> str:
    """
    :param word: singular noun, e.g. "User"
    :return: plural noun, e.g. "Users"
    """
    if not word:
        return word
    return _inflect.plural_noun(word) or word


@lru_cache(maxsize=256)
def dasherize(word: str) -> str:
    """
    Convert a camel cased or underscored word to lower case dash separated words
    eg. "UserProfiles" => "user-profiles", "blog_posts" => "blog-posts"
    """
    word = _DASHERIZE_RE.sub("-", word)
    word = word.replace("_", "-").replace(" ", "-")
    return re.sub(r"-+", "-", word).lower()


def plural_dasherize(type_name: str) -> str:
    """
    :param type_name: resource type name, e.g. "UserProfile"
    :return: collection route name, e.g. "user-profiles"
    """
    return dasherize(pluralize(type_name))


def lower_first(word: str) -> str:
    """
    "Posts" => "posts"
    """
    if not word:
        return word
    return word[0].lower() + word[1:]
