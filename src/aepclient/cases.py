"""Case conversions between schema names, resource names, and JSON keys.

Schema table keys are PascalCase (``BookEdition``), resource singulars and
plurals are kebab-case (``book-edition``), and list responses may use
camelCase keys (``bookEditions``).
"""

from __future__ import annotations


def pascal_case_to_kebab_case(s: str) -> str:
    """Convert a PascalCase string to kebab-case.

    An uppercase character starts a new word, except inside an acronym: a run
    of capitals is kept together and the word boundary falls before its last
    capital when a lowercase letter follows.

    Example::

        >>> pascal_case_to_kebab_case("BookEdition")
        'book-edition'
        >>> pascal_case_to_kebab_case("HTTPServer")
        'http-server'
    """
    delimiters: list[int] = []
    previous_is_upper = False
    is_acronym = False

    for i, char in enumerate(s):
        if "A" <= char <= "Z":
            if previous_is_upper and not is_acronym:
                is_acronym = True
                delimiters.append(i - 1)
            previous_is_upper = True
        else:
            if previous_is_upper:
                delimiters.append(i - 1)
            is_acronym = False
            previous_is_upper = False

    parts: list[str] = []
    previous = 0
    for index in delimiters:
        if index != previous:
            parts.append(s[previous:index])
            previous = index
    parts.append(s[previous:])
    return "-".join(parts).lower()


def kebab_to_camel_case(s: str) -> str:
    """Convert kebab-case to camelCase (``book-editions`` -> ``bookEditions``)."""
    first, *rest = s.split("-")
    return first + "".join(upper_first(part) for part in rest)


def kebab_to_pascal_case(s: str) -> str:
    """Convert kebab-case to PascalCase (``book-edition`` -> ``BookEdition``)."""
    return upper_first(kebab_to_camel_case(s))


def kebab_to_snake_case(s: str) -> str:
    return s.replace("-", "_")


def upper_first(s: str) -> str:
    return s[:1].upper() + s[1:]


def lower_first(s: str) -> str:
    return s[:1].lower() + s[1:]
