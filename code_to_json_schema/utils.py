"""
Utility functions for the schema generator.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens) to spaces."""
    return text.replace("_", " ").replace("-", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(_normalize_separators(text))


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Words that are already capitalized keep their casing so acronyms survive.

    Examples:
        "first_name" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"
        "int" -> "Int"
    """
    if not text:
        return ""
    return "".join(word[0].upper() + word[1:] for word in _split_into_words(text) if word)


def to_camel_case(text: str) -> str:
    """Convert a member name to camelCase.

    Examples:
        "first_name" -> "firstName"
        "FirstName" -> "firstName"
        "id" -> "id"
    """
    if not text:
        return ""
    words = _split_into_words(text)
    if not words:
        return text
    head, *tail = words
    return head.lower() + "".join(word.capitalize() for word in tail)


def to_snake_case(text: str) -> str:
    """Convert a member name to snake_case.

    Examples:
        "firstName" -> "first_name"
        "FirstName" -> "first_name"
        "first_name" -> "first_name"
    """
    if not text:
        return ""
    words = _split_into_words(text)
    if not words:
        return text
    return "_".join(word.lower() for word in words)


def unique_name(name: str, existing) -> str:
    """Append a counter to ``name`` until it is not in ``existing``.

    Examples:
        "Address", {"Address"} -> "Address2"
        "Address", {"Address", "Address2"} -> "Address3"
    """
    if name not in existing:
        return name
    counter = 2
    while f"{name}{counter}" in existing:
        counter += 1
    return f"{name}{counter}"
