"""Helpers for comparing type names as written in source code."""

import re

_SEPARATORS = re.compile(r"[/\\]")


def normalize_type_name(type_name: str) -> str:
    """Reduce a type name to its raw dotted form.

    Generic arguments are dropped, whitespace is trimmed and path separators
    are turned into dots.

    Example:
        >>> normalize_type_name(" com.example.Repository<User> ")
        'com.example.Repository'
    """
    if not type_name:
        return ""
    generic_start = type_name.find("<")
    if generic_start != -1:
        type_name = type_name[:generic_start]
    return _SEPARATORS.sub(".", type_name.strip())


def simple_type_name(type_name: str) -> str:
    """Return the trailing component of a (possibly qualified) type name."""
    return normalize_type_name(type_name).rsplit(".", 1)[-1]


def decapitalize(simple_name: str) -> str:
    """Derive the default bean name for a class.

    Follows the JavaBeans rule: the first letter is lowered unless the first
    two letters are both upper case (``URLService`` stays ``URLService``).
    """
    if not simple_name:
        return ""
    if len(simple_name) > 1 and simple_name[0].isupper() and simple_name[1].isupper():
        return simple_name
    return simple_name[0].lower() + simple_name[1:]
