"""
Testing utilities module.

Builders and an isolated bean index for testing code that consumes the
wiring index.
"""

from .utilities import (
    TestIndex,
    bean_definition,
    create_index,
    injection_point,
    source_location,
    spring_annotation,
)

__all__ = [
    "TestIndex",
    "create_index",
    "bean_definition",
    "injection_point",
    "source_location",
    "spring_annotation",
]
